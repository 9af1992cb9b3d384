import logging
from typing import Dict, List, Optional, Sequence, Set

from commands import CycleDimension, MoveCursor, SetMarks, ToggleMark

logger = logging.getLogger(__name__)


class SelectionOverlay:
    """Per-dimension marks recording which members of each axis are active.

    Marks are list positions, not label values. Every dimension keeps its own
    mark set and its own highlighted position; moving between dimensions
    never touches the other sets.
    """

    def __init__(self, dimension_names: Sequence[str], labels: Sequence[Sequence[str]], initial_dimension: int = 0):
        self.dimension_names = list(dimension_names)
        self.labels = [list(items) for items in labels]
        self.marks: List[Set[int]] = [set() for _ in self.labels]
        self.positions: List[int] = [0 for _ in self.labels]
        self.current_dimension = 0
        if self.labels:
            self.current_dimension = initial_dimension % len(self.labels)
            self.mark_all()

    @classmethod
    def for_table(cls, table, initial_dimension: int = 0) -> "SelectionOverlay":
        return cls(table.dimension_names, table.coordinate_labels, initial_dimension)

    # ---------- current dimension ----------
    @property
    def items(self) -> List[str]:
        return self.labels[self.current_dimension] if self.labels else []

    @property
    def position(self) -> int:
        return self.positions[self.current_dimension] if self.labels else 0

    def next_dimension(self):
        if self.labels:
            self.current_dimension = (self.current_dimension + 1) % len(self.labels)

    def previous_dimension(self):
        if self.labels:
            self.current_dimension = (self.current_dimension - 1) % len(self.labels)

    def next_element(self):
        if self.items:
            self.positions[self.current_dimension] = (self.position + 1) % len(self.items)

    def previous_element(self):
        if self.items:
            self.positions[self.current_dimension] = (self.position - 1) % len(self.items)

    # ---------- marks ----------
    def _target(self, index: Optional[int]) -> Optional[int]:
        if not self.items:
            return None
        i = self.position if index is None else index
        if not 0 <= i < len(self.items):
            logger.error("Mark position %d outside %s (%d members)", i, self.dimension_names[self.current_dimension], len(self.items))
            return None
        return i

    def mark(self, index: Optional[int] = None):
        i = self._target(index)
        if i is not None:
            self.marks[self.current_dimension].add(i)

    def unmark(self, index: Optional[int] = None):
        i = self._target(index)
        if i is not None:
            self.marks[self.current_dimension].discard(i)

    def toggle(self, index: Optional[int] = None):
        i = self._target(index)
        if i is None:
            return
        marked = self.marks[self.current_dimension]
        if i in marked:
            marked.remove(i)
        else:
            marked.add(i)

    def toggle_all(self):
        # each member flips on its own, so a mixed selection stays mixed
        for i in range(len(self.items)):
            self.toggle(i)

    def mark_all(self):
        self.marks[self.current_dimension].update(range(len(self.items)))

    def unmark_all(self):
        self.marks[self.current_dimension].clear()

    def is_marked(self, index: int, dimension: Optional[int] = None) -> bool:
        dim = self.current_dimension if dimension is None else dimension
        return index in self.marks[dim]

    def has_marks(self, dimension: int) -> bool:
        return bool(self.marks[dimension])

    def selected(self, dimension: Optional[int] = None) -> List[int]:
        """Sorted marks; an empty dimension reports its first member as active."""
        dim = self.current_dimension if dimension is None else dimension
        if not self.marks[dim] and self.labels[dim]:
            self.marks[dim].add(0)
        return sorted(self.marks[dim])

    def active_members(self) -> Dict[str, List[str]]:
        return {
            name: [self.labels[dim][i] for i in self.selected(dim)]
            for dim, name in enumerate(self.dimension_names)
        }

    def apply(self, command) -> bool:
        if isinstance(command, MoveCursor):
            if command.direction == "next":
                self.next_element()
            elif command.direction == "previous":
                self.previous_element()
            else:
                return False
        elif isinstance(command, CycleDimension):
            if command.direction >= 0:
                self.next_dimension()
            else:
                self.previous_dimension()
        elif isinstance(command, ToggleMark):
            if command.every:
                self.toggle_all()
            else:
                self.toggle()
        elif isinstance(command, SetMarks):
            if command.marked:
                self.mark_all()
            else:
                self.unmark_all()
        else:
            return False
        return True
