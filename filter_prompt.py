import curses
from typing import Callable


class FilterPrompt:
    """Single-line fuzzy-find input for the catalog; updates the filter as you type."""

    def __init__(self, on_change: Callable[[str], None]):
        self.on_change = on_change

        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def start(self, current: str = ""):
        self.active = True
        self.buffer = current or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    def handle_key(self, ch):
        if not self.active or ch == -1:
            return

        if ch in (10, 13, curses.KEY_ENTER, 27):  # Enter / Esc keep the filter
            self.active = False
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
                self.on_change(self.buffer)
            return

        if ch == curses.KEY_DC:
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
                self.on_change(self.buffer)
            return

        if ch == 21:  # Ctrl+U
            self.buffer = ""
            self.cursor = 0
            self.on_change(self.buffer)
            return

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return

        if ch == curses.KEY_HOME:
            self.cursor = 0
            return

        if ch == curses.KEY_END:
            self.cursor = len(self.buffer)
            return

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            self.on_change(self.buffer)

    def draw(self, win):
        prompt = "Fuzzy find: " if self.active else "Fuzzy find (/ to start): "
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]

        win.erase()
        try:
            win.addnstr(0, 0, prompt, len(prompt), curses.A_BOLD if self.active else curses.A_DIM)
            win.addnstr(0, len(prompt), visible, text_w)
            if self.active:
                win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()
