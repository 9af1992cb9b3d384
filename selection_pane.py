import curses
from typing import List

from selection_overlay import SelectionOverlay


def tab_line(overlay: SelectionOverlay) -> str:
    tabs = []
    for dim, name in enumerate(overlay.dimension_names):
        tabs.append(f"[{name}]" if dim == overlay.current_dimension else f" {name} ")
    return " · ".join(tabs)


def item_lines(overlay: SelectionOverlay, height: int) -> List[str]:
    """Visible members of the current dimension, scrolled to keep the highlight on screen."""
    items = overlay.items
    height = max(1, height)
    start = 0
    if overlay.position >= height:
        start = overlay.position - height + 1
    lines = []
    for i in range(start, min(len(items), start + height)):
        pointer = "→ " if i == overlay.position else "  "
        check = "✔ " if overlay.is_marked(i) else "  "
        lines.append(f"{pointer}{check}{items[i]}")
    return lines


class SelectionPane:
    HINT = "◄ / ► switch axis, v toggle, V toggle all, a / u mark / unmark all, ESC close"

    def __init__(self, layout):
        self.layout = layout
        self.win = None

    def open(self):
        h = self.layout.overlay_h
        w = self.layout.overlay_w
        y = max(0, (self.layout.table_h - h) // 2)
        x = max(0, (self.layout.W - w) // 2)
        self.win = curses.newwin(h, w, y, x)
        self.win.leaveok(True)

    def close(self):
        self.win = None

    def draw(self, overlay: SelectionOverlay):
        if self.win is None:
            self.open()
        win = self.win
        win.erase()
        h, w = win.getmaxyx()
        win.box()
        try:
            win.addnstr(0, 2, f" {self.HINT} ", max(0, w - 4))
            win.addnstr(1, 2, tab_line(overlay), max(0, w - 4), curses.A_BOLD)
        except curses.error:
            pass
        for i, line in enumerate(item_lines(overlay, h - 4)):
            try:
                win.addnstr(3 + i, 2, line, max(0, w - 4))
            except curses.error:
                pass
        win.refresh()
