import logging
from dataclasses import dataclass
from typing import List, Optional

from axis_projector import GridWindow, ProjectedGrid, project
from commands import CycleAxis, CycleIndex, MoveCursor, ScrollColumns, ToggleFormatting
from errors import ProjectionError, ShapeMismatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixedAxisSummary:
    axis: int
    dimension: str
    label: str
    position: int
    extent: int

    @property
    def key(self) -> str:
        return str(self.axis + 1)


class PivotViewState:
    """Cursor state of one opened table and the grid it currently shows."""

    def __init__(self, table, show_zero_as_dash: bool = True, page_size: int = 20):
        if table.ndims < 2:
            raise ShapeMismatch(f"{table.name} has {table.ndims} dimension(s); pivoting needs 2")
        self.table = table
        self.free_axis_0 = table.ndims - 1
        self.free_axis_1 = 0
        self.fixed_index: List[int] = [0] * table.ndims
        self.row_scroll = 0
        self.col_scroll = 0
        self.cursor = 0
        self.show_zero_as_dash = show_zero_as_dash
        self.page_size = max(1, page_size)

        self.grid: Optional[ProjectedGrid] = None
        self.error: Optional[str] = None
        self.refresh()

    # ---------- derived ----------
    @property
    def ndims(self) -> int:
        return self.table.ndims

    @property
    def n_rows(self) -> int:
        return self.table.shape[self.free_axis_1]

    @property
    def n_cols(self) -> int:
        return self.table.shape[self.free_axis_0]

    @property
    def row_count(self) -> int:
        """Body rows plus the Total row."""
        return self.n_rows + 1

    def refresh(self) -> None:
        try:
            self.grid = project(
                self.table,
                self.free_axis_0,
                self.free_axis_1,
                self.fixed_index,
                self.show_zero_as_dash,
            )
            self.error = None
        except ProjectionError as exc:
            # keep whatever grid was showing; the state itself stays usable
            logger.error("Projection of %s failed: %s", self.table.name, exc)
            self.error = str(exc)
        self._clamp()

    def _clamp(self) -> None:
        self.cursor = max(0, min(self.cursor, self.row_count - 1))
        self.row_scroll = max(0, min(self.row_scroll, max(0, self.n_rows - 1)))
        self.col_scroll = max(0, min(self.col_scroll, max(0, self.n_cols - 1)))

    # ---------- free axes ----------
    def _cycle_axis(self, current: int, other: int, step: int) -> int:
        n = self.ndims
        value = (current + step) % n
        if value == other:
            value = (value + step) % n
        return value

    def _set_axis(self, which: int, step: int) -> None:
        if which == 0:
            self.free_axis_0 = self._cycle_axis(self.free_axis_0, self.free_axis_1, step)
        elif which == 1:
            self.free_axis_1 = self._cycle_axis(self.free_axis_1, self.free_axis_0, step)
        else:
            logger.error("No free axis slot %r (expected 0 or 1)", which)
            return
        self.row_scroll = 0
        self.col_scroll = 0
        self.refresh()

    def increment_axis(self, which: int) -> None:
        self._set_axis(which, 1)

    def decrement_axis(self, which: int) -> None:
        self._set_axis(which, -1)

    # ---------- fixed indices ----------
    def _step_index(self, axis: int, step: int) -> None:
        if not 0 <= axis < self.ndims:
            logger.error(
                "Trying to modify index position %d in array of shape %s",
                axis, list(self.table.shape),
            )
            return
        extent = self.table.shape[axis]
        if extent == 0:
            return
        self.fixed_index[axis] = (self.fixed_index[axis] + step) % extent
        self.refresh()

    def increment_index(self, axis: int) -> None:
        self._step_index(axis, 1)

    def decrement_index(self, axis: int) -> None:
        self._step_index(axis, -1)

    # ---------- cursor ----------
    def move_next(self):
        self.cursor = (self.cursor + 1) % self.row_count

    def move_previous(self):
        self.cursor = (self.cursor - 1) % self.row_count

    def move_top(self):
        self.cursor = 0

    def move_bottom(self):
        self.cursor = self.row_count - 1

    def page_up(self):
        self.cursor = max(0, self.cursor - self.page_size)

    def page_down(self):
        self.cursor = min(self.row_count - 1, self.cursor + self.page_size)

    def ensure_cursor_visible(self, body_rows: int) -> None:
        body_rows = max(1, body_rows)
        if self.cursor < self.n_rows:
            if self.cursor < self.row_scroll:
                self.row_scroll = self.cursor
            elif self.cursor >= self.row_scroll + body_rows:
                self.row_scroll = self.cursor - body_rows + 1
        self._clamp()

    # ---------- column scroll ----------
    def move_left(self):
        self.col_scroll = max(0, self.col_scroll - 1)

    def move_right(self):
        self.col_scroll = min(max(0, self.n_cols - 1), self.col_scroll + 1)

    def move_home(self):
        self.col_scroll = 0

    def move_end(self):
        self.col_scroll = max(0, self.n_cols - 1)

    def toggle_formatting(self):
        self.show_zero_as_dash = not self.show_zero_as_dash
        self.refresh()

    # ---------- commands ----------
    def apply(self, command) -> bool:
        if isinstance(command, CycleAxis):
            if command.direction >= 0:
                self.increment_axis(command.which)
            else:
                self.decrement_axis(command.which)
        elif isinstance(command, CycleIndex):
            if command.direction >= 0:
                self.increment_index(command.axis)
            else:
                self.decrement_index(command.axis)
        elif isinstance(command, MoveCursor):
            handler = {
                "next": self.move_next,
                "previous": self.move_previous,
                "top": self.move_top,
                "bottom": self.move_bottom,
                "page_up": self.page_up,
                "page_down": self.page_down,
            }.get(command.direction)
            if handler is None:
                return False
            handler()
        elif isinstance(command, ScrollColumns):
            handler = {
                "left": self.move_left,
                "right": self.move_right,
                "home": self.move_home,
                "end": self.move_end,
            }.get(command.direction)
            if handler is None:
                return False
            handler()
        elif isinstance(command, ToggleFormatting):
            self.toggle_formatting()
        else:
            return False
        return True

    # ---------- frame data ----------
    def window(self, body_rows: Optional[int] = None, max_cols: Optional[int] = None) -> Optional[GridWindow]:
        if self.grid is None:
            return None
        if body_rows is not None:
            self.ensure_cursor_visible(body_rows)
        return self.grid.window(self.row_scroll, self.col_scroll, body_rows, max_cols)

    def summary(self) -> List[FixedAxisSummary]:
        lines = []
        for axis, dim in enumerate(self.table.dimension_names):
            if axis in (self.free_axis_0, self.free_axis_1):
                continue
            position = self.fixed_index[axis]
            labels = self.table.coordinate_labels[axis]
            label = labels[position] if position < len(labels) else ""
            lines.append(
                FixedAxisSummary(
                    axis=axis,
                    dimension=dim,
                    label=label,
                    position=position,
                    extent=self.table.shape[axis],
                )
            )
        return lines
