"""Abstract commands and the key bindings that produce them."""
import curses
from dataclasses import dataclass


@dataclass(frozen=True)
class CycleAxis:
    which: int  # 0 = column axis (free_axis_0), 1 = row axis (free_axis_1)
    direction: int


@dataclass(frozen=True)
class CycleIndex:
    axis: int
    direction: int


@dataclass(frozen=True)
class MoveCursor:
    direction: str  # next | previous | top | bottom | page_up | page_down


@dataclass(frozen=True)
class ScrollColumns:
    direction: str  # left | right | home | end


@dataclass(frozen=True)
class ToggleMark:
    every: bool = False


@dataclass(frozen=True)
class SetMarks:
    marked: bool


@dataclass(frozen=True)
class CycleDimension:
    direction: int


@dataclass(frozen=True)
class ToggleFormatting:
    pass


@dataclass(frozen=True)
class StartScan:
    pass


@dataclass(frozen=True)
class CancelScan:
    pass


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Close:
    pass


@dataclass(frozen=True)
class EnterFilter:
    pass


@dataclass(frozen=True)
class OpenSelection:
    pass


@dataclass(frozen=True)
class Export:
    pass


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class Quit:
    pass


ESC = 27
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
SHIFTED_DIGITS = "!@#$%^&*("

_CURSOR_KEYS = {
    ord("j"): MoveCursor("next"),
    curses.KEY_DOWN: MoveCursor("next"),
    ord("k"): MoveCursor("previous"),
    curses.KEY_UP: MoveCursor("previous"),
    ord("g"): MoveCursor("top"),
    ord("G"): MoveCursor("bottom"),
    curses.KEY_PPAGE: MoveCursor("page_up"),
    curses.KEY_NPAGE: MoveCursor("page_down"),
}

CATALOG_KEYS = {
    **_CURSOR_KEYS,
    ord("q"): Quit(),
    ord("/"): EnterFilter(),
    ord("?"): ShowHelp(),
    ord("r"): StartScan(),
    ord("c"): CancelScan(),
    ESC: Close(),
    **{k: Submit() for k in ENTER_KEYS},
}

VIEWER_KEYS = {
    **_CURSOR_KEYS,
    ord("h"): ScrollColumns("left"),
    curses.KEY_LEFT: ScrollColumns("left"),
    ord("l"): ScrollColumns("right"),
    curses.KEY_RIGHT: ScrollColumns("right"),
    curses.KEY_HOME: ScrollColumns("home"),
    curses.KEY_END: ScrollColumns("end"),
    ord("]"): CycleAxis(1, 1),
    ord("["): CycleAxis(1, -1),
    ord("}"): CycleAxis(0, 1),
    ord("{"): CycleAxis(0, -1),
    ord("."): ToggleFormatting(),
    ord("s"): OpenSelection(),
    ord("e"): Export(),
    ord("?"): ShowHelp(),
    ord("q"): Quit(),
    ESC: Close(),
}
for _i in range(9):
    VIEWER_KEYS[ord(str(_i + 1))] = CycleIndex(_i, 1)
    VIEWER_KEYS[ord(SHIFTED_DIGITS[_i])] = CycleIndex(_i, -1)
    VIEWER_KEYS[curses.KEY_F0 + _i + 1] = CycleIndex(_i, 1)
    # terminals report Shift+F1..F9 as F13..F21
    VIEWER_KEYS[curses.KEY_F0 + _i + 13] = CycleIndex(_i, -1)

SELECTION_KEYS = {
    ord("j"): MoveCursor("next"),
    curses.KEY_DOWN: MoveCursor("next"),
    ord("k"): MoveCursor("previous"),
    curses.KEY_UP: MoveCursor("previous"),
    ord("h"): CycleDimension(-1),
    curses.KEY_LEFT: CycleDimension(-1),
    ord("l"): CycleDimension(1),
    curses.KEY_RIGHT: CycleDimension(1),
    ord("v"): ToggleMark(),
    ord(" "): ToggleMark(),
    ord("V"): ToggleMark(every=True),
    ord("a"): SetMarks(True),
    ord("u"): SetMarks(False),
    ord("?"): ShowHelp(),
    ESC: Close(),
}

KEYMAPS = {
    "catalog": CATALOG_KEYS,
    "viewer": VIEWER_KEYS,
    "selection": SELECTION_KEYS,
}


def command_for_key(mode: str, ch: int):
    if ch == 3:  # Ctrl+C
        return Quit()
    return KEYMAPS.get(mode, {}).get(ch)
