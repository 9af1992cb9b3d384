import curses
from typing import List

from pivot_view_state import PivotViewState


def fit(text: str, width: int, right: bool = False) -> str:
    text = str(text)
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: max(0, width - 1)] + "…" if width > 1 else text[:width]
    return text.rjust(width) if right else text.ljust(width)


def visible_column_count(width: int, label_width: int, column_width: int) -> int:
    """Body columns that fit beside the label and Total columns."""
    avail = width - (label_width + 1) - (column_width + 1)
    return max(1, avail // (column_width + 1))


def summary_lines(state: PivotViewState) -> List[str]:
    table = state.table
    lines = [table.name]
    if table.documentation:
        lines.append(table.documentation)
    dims = []
    for axis, dim in enumerate(table.dimension_names):
        if axis == state.free_axis_1:
            dims.append(f"[{dim}]↓")
        elif axis == state.free_axis_0:
            dims.append(f"[{dim}]→")
        else:
            dims.append(dim)
    lines.append("  ".join(dims))
    for item in state.summary():
        lines.append(
            f" {item.dimension}: {item.label} ({item.position + 1} / {item.extent})"
            f"   ↓ {item.key}  ↑ Shift+{item.key}"
        )
    return lines


class PivotPane:
    PAIR_CORNER = 7
    LABEL_WIDTH = 20

    def __init__(self, column_width: int = 10):
        self.column_width = column_width
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CORNER, curses.COLOR_YELLOW, -1)
        except curses.error:
            pass

    def _put(self, win, y, x, text, width, attr=0):
        try:
            win.addnstr(y, x, text, width, attr)
        except curses.error:
            pass

    def draw(self, win, state: PivotViewState, active: bool = True):
        win.erase()
        h, w = win.getmaxyx()

        # fixed-axis summary
        summary = summary_lines(state)
        y = 0
        for i, line in enumerate(summary):
            if y >= h:
                break
            attr = curses.A_BOLD if i == 0 else 0
            if i == 1 and state.table.documentation:
                attr = curses.A_DIM
            self._put(win, y, 0, fit(line, w - 1), w - 1, attr)
            y += 1
        y += 1

        col_w = self.column_width
        label_w = min(self.LABEL_WIDTH, max(4, w // 4))
        max_cols = visible_column_count(w, label_w, col_w)
        # header takes one line, the Total row another
        body_rows = max(1, h - y - 2)
        window = state.window(body_rows=body_rows, max_cols=max_cols)
        if window is None:
            self._put(win, y, 0, fit(state.error or "No data", w - 1), w - 1, curses.A_DIM)
            win.refresh()
            return

        # header
        x = 0
        for i, name in enumerate(window.header):
            if i == 0:
                self._put(win, y, x, fit(name, label_w), label_w, curses.color_pair(self.PAIR_CORNER))
                x += label_w + 1
            else:
                self._put(win, y, x, fit(name, col_w, right=True), col_w, curses.A_BOLD)
                x += col_w + 1
        y += 1

        for label, cells, index in zip(window.row_labels, window.cells, window.row_indices):
            if y >= h:
                break
            highlight = active and index == state.cursor
            base = curses.A_REVERSE if highlight else 0
            self._put(win, y, 0, fit(label, label_w), label_w, base | curses.A_BOLD)
            x = label_w + 1
            for cell in cells:
                if x + col_w > w:
                    break
                self._put(win, y, x, fit(cell, col_w, right=True), col_w, base)
                x += col_w + 1
            y += 1

        win.refresh()
