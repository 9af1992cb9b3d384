import logging
from typing import List, Optional

from commands import MoveCursor
from table_handle import CatalogEntry

logger = logging.getLogger(__name__)


def matches(entry: CatalogEntry, filter_text: str) -> bool:
    name = entry.name.lower()
    return all(word in name for word in filter_text.lower().split())


class CatalogPicker:
    COLUMNS = ["Name", "Dims", "Shape", "N", "Units", "Documentation"]
    WIDTHS = [0.20, 0.25, 0.15, 0.05, 0.10, 0.25]

    def __init__(self, scanner, page_height: int = 20):
        self.scanner = scanner
        self.filter_text = ""
        self.items: List[CatalogEntry] = []
        self.selected: Optional[int] = None
        self.offset = 0
        self.page_height = max(1, page_height)

    def refresh(self) -> None:
        """Re-apply the filter to the catalog, keeping the highlighted entry if it survives."""
        current = self.current()
        self.items = [e for e in self.scanner.entries if matches(e, self.filter_text)]
        if not self.items:
            self.selected = None
            self.offset = 0
            return
        if current is not None:
            for i, entry in enumerate(self.items):
                if entry.name == current.name:
                    self.selected = i
                    return
        self.selected = 0
        self.offset = 0

    def set_filter(self, text: str) -> None:
        self.filter_text = text
        self.refresh()

    def current(self) -> Optional[CatalogEntry]:
        if self.selected is None or not 0 <= self.selected < len(self.items):
            return None
        return self.items[self.selected]

    # ---------- cursor ----------
    def next(self):
        if not self.items:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % len(self.items)

    def previous(self):
        if not self.items:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected - 1) % len(self.items)

    def top(self):
        self.selected = 0 if self.items else None

    def bottom(self):
        self.selected = len(self.items) - 1 if self.items else None

    def page_up(self):
        if not self.items:
            self.selected = None
            return
        self.selected = max(0, (self.selected or 0) - self.page_height)

    def page_down(self):
        if not self.items:
            self.selected = None
            return
        if self.selected is None:
            self.selected = len(self.items) - 1
            return
        self.selected = min(len(self.items) - 1, self.selected + self.page_height)

    def apply(self, command) -> bool:
        if not isinstance(command, MoveCursor):
            return False
        handler = {
            "next": self.next,
            "previous": self.previous,
            "top": self.top,
            "bottom": self.bottom,
            "page_up": self.page_up,
            "page_down": self.page_down,
        }.get(command.direction)
        if handler is None:
            return False
        handler()
        return True

    def visible_rows(self, height: int) -> range:
        height = max(1, height)
        self.page_height = height
        if self.selected is not None:
            if self.selected < self.offset:
                self.offset = self.selected
            elif self.selected >= self.offset + height:
                self.offset = self.selected - height + 1
        self.offset = max(0, min(self.offset, max(0, len(self.items) - height)))
        return range(self.offset, min(len(self.items), self.offset + height))

    def status_text(self) -> str:
        if self.scanner.busy:
            return f"Scanning {self.scanner.completed}/{self.scanner.total}"
        position = (self.selected or 0) + 1 if self.items else 0
        return f"{position}/{len(self.items)}"
