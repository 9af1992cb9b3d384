import curses
from typing import List

from catalog_picker import CatalogPicker
from pivot_pane import fit


def column_widths(width: int, fractions=CatalogPicker.WIDTHS) -> List[int]:
    # leave room for the highlight marker and one space between columns
    avail = max(len(fractions), width - 3 - len(fractions))
    widths = [max(1, int(avail * f)) for f in fractions]
    widths[-1] = max(1, avail - sum(widths[:-1]))
    return widths


def format_row(cells: List[str], widths: List[int]) -> str:
    return " ".join(fit(cell, cw) for cell, cw in zip(cells, widths))


class CatalogPane:
    def _put(self, win, y, x, text, width, attr=0):
        try:
            win.addnstr(y, x, text, width, attr)
        except curses.error:
            pass

    def draw(self, win, picker: CatalogPicker, active: bool = True):
        win.erase()
        h, w = win.getmaxyx()
        widths = column_widths(w)

        status = picker.status_text()
        self._put(win, 0, 0, "Catalog", w - 1, curses.A_BOLD)
        self._put(win, 0, max(0, w - len(status) - 1), status, len(status))

        self._put(win, 1, 3, format_row(picker.COLUMNS, widths), w - 4, curses.A_BOLD)

        top = 3
        height = max(1, h - top)
        for y, i in enumerate(picker.visible_rows(height), start=top):
            entry = picker.items[i]
            selected = i == picker.selected
            marker = " • " if (selected and active) else "   "
            attr = curses.A_REVERSE if selected else 0
            self._put(win, y, 0, marker, 3)
            self._put(win, y, 3, format_row(entry.as_row(), widths), w - 4, attr)

        if not picker.items:
            if picker.scanner.busy:
                msg = "Scanning..."
            elif picker.scanner.error:
                msg = picker.scanner.error
            else:
                msg = "No tables"
            self._put(win, top, 3, fit(msg, w - 4), w - 4, curses.A_DIM)

        win.refresh()
