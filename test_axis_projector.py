import numpy as np
import pandas as pd
import pytest

from axis_projector import (
    TOTAL_LABEL,
    check_rectangular,
    format_value,
    orient,
    project,
)
from errors import ProjectionError, RaggedGrid
from table_store import ArrayTableStore


def _table(values, dims, labels=None, name="energy/demand"):
    store = ArrayTableStore()
    store.add_table(name, values, dims=dims, units="GWh", doc="", labels=labels)
    return store.open_table(name)


@pytest.fixture
def demand():
    return _table(
        [[1, 2, 3], [4, 5, 6]],
        ["region", "year"],
        {"region": ["north", "south"], "year": ["2020", "2021", "2022"]},
    )


@pytest.fixture
def cube():
    return _table(np.arange(24, dtype=float).reshape(2, 3, 4), ["a", "b", "c"], name="g/cube")


@pytest.mark.parametrize(
    "value, dash, expected",
    [
        (0.0, True, "-"),
        (1e-17, True, "-"),
        (0.0, False, "0.00"),
        (3.0, True, "3"),
        (-2.0, True, "-2"),
        (3.0, False, "3.00"),
        (1.256, True, "1.26"),
        (1.254, False, "1.25"),
    ],
)
def test_format_value(value, dash, expected):
    assert format_value(value, dash) == expected


def test_check_rectangular():
    check_rectangular([["a", "b"], ["c", "d"]])
    check_rectangular([])
    with pytest.raises(RaggedGrid):
        check_rectangular([["a", "b"], ["c"]])


def test_orient_puts_free_axis_0_first():
    raw = np.zeros((3, 2))
    data, transposed = orient(raw, 0, 1)
    assert transposed and data.shape == (2, 3)
    data, transposed = orient(raw, 1, 0)
    assert not transposed and data.shape == (3, 2)


def test_project_all_zero_table_shows_dashes():
    table = _table(np.zeros((2, 3)), ["x", "y"])
    grid = project(table, 1, 0, [0, 0])
    assert grid.data.shape == (3, 2)
    assert grid.n_rows == 2 and grid.n_cols == 3
    np.testing.assert_array_equal(grid.total_row, [0, 0, 0])
    np.testing.assert_array_equal(grid.total_column, [0, 0])
    assert grid.grand_total == 0
    assert grid.cells == [["-"] * 4] * 3


def test_project_lays_out_rows_columns_and_totals(demand):
    grid = project(demand, 1, 0, [0, 0])
    np.testing.assert_array_equal(grid.body(), [[1, 2, 3], [4, 5, 6]])
    np.testing.assert_array_equal(grid.total_column, [6, 15])
    np.testing.assert_array_equal(grid.total_row, [5, 7, 9])
    assert grid.grand_total == 21
    assert grid.cells == [
        ["6", "1", "2", "3"],
        ["15", "4", "5", "6"],
        ["21", "5", "7", "9"],
    ]
    assert grid.column_labels == ["2020", "2021", "2022"]
    assert grid.row_labels == ["north", "south"]
    assert grid.corner_label == "region＼year"
    assert grid.row_count == 3


def test_project_every_row_has_the_same_width(cube):
    for f0, f1 in [(2, 0), (0, 2), (1, 2), (0, 1)]:
        grid = project(cube, f0, f1, [1, 2, 3])
        assert {len(row) for row in grid.cells} == {cube.shape[f0] + 1}
        assert len(grid.cells) == cube.shape[f1] + 1


def test_project_picks_the_fixed_slice(cube):
    values = np.arange(24, dtype=float).reshape(2, 3, 4)
    grid = project(cube, 2, 0, [0, 1, 0])
    np.testing.assert_array_equal(grid.body(), values[:, 1, :])
    grid = project(cube, 0, 1, [0, 0, 3])
    assert grid.transposed
    np.testing.assert_array_equal(grid.body(), values[:, :, 3].T)


def test_grand_total_does_not_depend_on_orientation(cube):
    values = np.arange(24, dtype=float).reshape(2, 3, 4)
    a = project(cube, 0, 1, [0, 0, 2])
    b = project(cube, 1, 0, [0, 0, 2])
    assert a.grand_total == b.grand_total == values[:, :, 2].sum()
    np.testing.assert_array_equal(a.body(), b.body().T)
    np.testing.assert_array_equal(a.total_row, b.total_column)


def test_project_formatting_flag(demand):
    grid = project(demand, 1, 0, [0, 0], show_zero_as_dash=False)
    assert grid.cells[0] == ["6.00", "1.00", "2.00", "3.00"]


def test_project_rejects_bad_axes(demand):
    with pytest.raises(ProjectionError):
        project(demand, 1, 1, [0, 0])


def test_window_keeps_totals_while_the_body_scrolls(demand):
    grid = project(demand, 1, 0, [0, 0])
    win = grid.window(row_scroll=1, col_scroll=1, max_rows=1, max_cols=1)
    assert win.header == ["region＼year", TOTAL_LABEL, "2021"]
    assert win.row_labels == ["south", TOTAL_LABEL]
    assert win.cells == [["15", "5"], ["21", "7"]]
    assert win.row_indices == [1, 2]


def test_window_clamps_scroll(demand):
    grid = project(demand, 1, 0, [0, 0])
    win = grid.window(row_scroll=50, col_scroll=50)
    assert win.row_labels == ["south", TOTAL_LABEL]
    assert win.header[2:] == ["2022"]


def test_to_frame_recomputes_totals_over_the_selection(demand):
    grid = project(demand, 1, 0, [0, 0])
    frame = grid.to_frame(rows=[1], columns=[0, 2])
    assert list(frame.columns) == [TOTAL_LABEL, "2020", "2022"]
    assert list(frame.index) == ["south", TOTAL_LABEL]
    assert frame.loc["south", TOTAL_LABEL] == 10
    assert frame.loc[TOTAL_LABEL, "2022"] == 6
    assert frame.loc[TOTAL_LABEL, TOTAL_LABEL] == 10


def test_to_frame_defaults_to_whole_grid(demand):
    frame = project(demand, 1, 0, [0, 0]).to_frame()
    assert isinstance(frame, pd.DataFrame)
    assert frame.shape == (3, 4)
    assert frame.index.name == "region"
    assert frame.loc[TOTAL_LABEL, TOTAL_LABEL] == 21
