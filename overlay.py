import curses
from typing import List

CATALOG_HELP = [
    ("j / Down", "Move down"),
    ("k / Up", "Move up"),
    ("g / G", "Go to top / bottom"),
    ("PageUp / PageDown", "Page up / down"),
    ("/", "Enter fuzzy find"),
    ("Enter / Esc", "Finish fuzzy find"),
    ("Enter", "Open the highlighted table"),
    ("r", "Reload the catalog"),
    ("c", "Cancel a running scan"),
    ("q", "Quit"),
    ("?", "Open help"),
]

VIEWER_HELP = [
    ("h / Left", "Scroll columns left"),
    ("l / Right", "Scroll columns right"),
    ("Home / End", "First / last column"),
    ("j / Down", "Move down"),
    ("k / Up", "Move up"),
    ("g / G", "Go to top / bottom"),
    ("PageUp / PageDown", "Page up / down"),
    ("1-9 / F1-F9", "Next member of dimension 1-9"),
    ("!@#$%^&*( / Shift+F1-F9", "Previous member of dimension 1-9"),
    ("[ / ]", "Cycle the row axis"),
    ("{ / }", "Cycle the column axis"),
    (".", "Toggle formatting"),
    ("s", "Select members (v toggle, V toggle all, a / u mark / unmark all)"),
    ("e", "Export the pivot to CSV"),
    ("Esc", "Close the viewer"),
    ("q", "Quit"),
    ("?", "Open help"),
]


def help_lines(mode: str) -> List[str]:
    rows = VIEWER_HELP if mode == "viewer" else CATALOG_HELP
    key_w = max(len(k) for k, _ in rows)
    title = "Viewer keys" if mode == "viewer" else "Catalog keys"
    lines = [f" {title}", ""]
    lines.extend(f"  {k.ljust(key_w)}  {desc}" for k, desc in rows)
    lines.extend(["", "  q / Esc / ? to close"])
    return lines


class OverlayView:
    def __init__(self, layout):
        self.layout = layout
        self.visible = False
        self.lines: List[str] = []
        self.scroll = 0
        self.win = None

    def open_help(self, mode: str):
        self.lines = help_lines(mode)
        self.scroll = 0
        self.win = curses.newwin(max(3, self.layout.table_h), self.layout.W, 0, 0)
        self.win.leaveok(True)
        self.visible = True

    def close(self):
        self.visible = False
        self.lines = []
        self.scroll = 0
        self.win = None

    def _content_rows(self) -> int:
        if self.win is None:
            return 0
        h, _ = self.win.getmaxyx()
        return max(0, h)

    def handle_key(self, ch):
        if not self.visible or ch == -1:
            return

        content_rows = self._content_rows()
        max_scroll = max(0, len(self.lines) - content_rows)
        half_page = max(1, content_rows // 2)

        if ch in (27, ord("q"), ord("?")):
            self.close()
            return

        if ch in (curses.KEY_NPAGE, 10):
            self.scroll = min(max_scroll, self.scroll + half_page)
        elif ch in (curses.KEY_PPAGE, 11):
            self.scroll = max(0, self.scroll - half_page)
        elif ch == curses.KEY_HOME:
            self.scroll = 0
        elif ch == curses.KEY_END:
            self.scroll = max_scroll
        elif ch in (ord("j"), curses.KEY_DOWN):
            self.scroll = min(max_scroll, self.scroll + 1)
        elif ch in (ord("k"), curses.KEY_UP):
            self.scroll = max(0, self.scroll - 1)

    def draw(self):
        if not self.visible or not self.win:
            return

        win = self.win
        win.erase()
        h, w = win.getmaxyx()

        dim_attr = curses.A_DIM if hasattr(curses, "A_DIM") else 0
        blank = " " * max(1, w - 1)
        for row in range(max(0, h)):
            try:
                win.addnstr(row, 0, blank, w - 1, dim_attr)
            except curses.error:
                pass

        for idx, line in enumerate(self.lines[self.scroll : self.scroll + h]):
            try:
                win.addnstr(idx, 0, line.ljust(w - 1), w - 1)
            except curses.error:
                pass

        win.refresh()
