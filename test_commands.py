import curses

import pytest

from commands import (
    CycleAxis,
    CycleIndex,
    EnterFilter,
    MoveCursor,
    Quit,
    Submit,
    ToggleMark,
    command_for_key,
)


@pytest.mark.parametrize(
    "key, expected",
    [
        ("]", CycleAxis(1, 1)),
        ("[", CycleAxis(1, -1)),
        ("}", CycleAxis(0, 1)),
        ("{", CycleAxis(0, -1)),
        ("1", CycleIndex(0, 1)),
        ("9", CycleIndex(8, 1)),
        ("!", CycleIndex(0, -1)),
        ("(", CycleIndex(8, -1)),
    ],
)
def test_viewer_keys(key, expected):
    assert command_for_key("viewer", ord(key)) == expected


def test_function_keys_cycle_indices():
    assert command_for_key("viewer", curses.KEY_F0 + 3) == CycleIndex(2, 1)
    assert command_for_key("viewer", curses.KEY_F0 + 15) == CycleIndex(2, -1)


def test_modes_have_their_own_maps():
    assert command_for_key("catalog", ord("/")) == EnterFilter()
    assert command_for_key("catalog", 10) == Submit()
    assert command_for_key("catalog", ord("]")) is None
    assert command_for_key("selection", ord("V")) == ToggleMark(every=True)
    assert command_for_key("selection", ord("j")) == MoveCursor("next")
    assert command_for_key("nowhere", ord("j")) is None


def test_ctrl_c_quits_everywhere():
    for mode in ("catalog", "viewer", "selection"):
        assert command_for_key(mode, 3) == Quit()
