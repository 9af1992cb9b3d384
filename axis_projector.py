import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from errors import ProjectionError, RaggedGrid

logger = logging.getLogger(__name__)

ZERO_TOLERANCE = float(np.finfo(float).eps)
TOTAL_LABEL = "Total"


def format_value(value, show_zero_as_dash: bool) -> str:
    value = float(value)
    if show_zero_as_dash and abs(value) <= ZERO_TOLERANCE:
        return "-"
    if show_zero_as_dash and value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def check_rectangular(cells: Sequence[Sequence[str]]) -> None:
    if not cells:
        return
    width = len(cells[0])
    for i, row in enumerate(cells):
        if len(row) != width:
            raise RaggedGrid(f"row {i} has {len(row)} cells, row 0 has {width}")


@dataclass
class GridWindow:
    """What the pivot pane paints for one frame."""

    header: List[str]
    row_labels: List[str]
    cells: List[List[str]]
    row_indices: List[int]


@dataclass
class ProjectedGrid:
    """One 2-D slice of a table plus its margin totals.

    ``data`` is indexed ``[column, row]``: its first axis follows
    free_axis_0 (drawn across the screen) and its second follows
    free_axis_1 (drawn down the screen). ``total_column`` holds one sum per
    screen row, ``total_row`` one sum per screen column.
    """

    free_axis_0: int
    free_axis_1: int
    data: np.ndarray
    total_row: np.ndarray
    total_column: np.ndarray
    grand_total: float
    transposed: bool
    column_labels: List[str]
    row_labels: List[str]
    column_dimension: str
    row_dimension: str
    show_zero_as_dash: bool
    cells: List[List[str]] = field(default_factory=list)

    @property
    def n_cols(self) -> int:
        return int(self.data.shape[0])

    @property
    def n_rows(self) -> int:
        return int(self.data.shape[1])

    @property
    def row_count(self) -> int:
        return self.n_rows + 1

    @property
    def corner_label(self) -> str:
        return f"{self.row_dimension}＼{self.column_dimension}"

    def body(self) -> np.ndarray:
        """Values as drawn: one row per free_axis_1 member."""
        return self.data.T

    def window(
        self,
        row_scroll: int = 0,
        col_scroll: int = 0,
        max_rows: Optional[int] = None,
        max_cols: Optional[int] = None,
    ) -> GridWindow:
        row_scroll = max(0, min(row_scroll, max(0, self.n_rows - 1)))
        col_scroll = max(0, min(col_scroll, max(0, self.n_cols - 1)))

        col_end = self.n_cols if max_cols is None else min(self.n_cols, col_scroll + max(0, max_cols))
        row_end = self.n_rows if max_rows is None else min(self.n_rows, row_scroll + max(0, max_rows))

        # the Total column (cell 0) and the Total row stay put while the body scrolls
        header = [self.corner_label, TOTAL_LABEL] + self.column_labels[col_scroll:col_end]
        row_indices = list(range(row_scroll, row_end)) + [self.n_rows]
        labels = [self.row_labels[i] for i in row_indices[:-1]] + [TOTAL_LABEL]
        cells = []
        for i in row_indices:
            row = self.cells[i]
            cells.append([row[0]] + row[1 + col_scroll : 1 + col_end])
        check_rectangular(cells)
        return GridWindow(header=header, row_labels=labels, cells=cells, row_indices=row_indices)

    def to_frame(
        self,
        rows: Optional[Sequence[int]] = None,
        columns: Optional[Sequence[int]] = None,
    ) -> pd.DataFrame:
        """Body restricted to ``rows``/``columns`` with totals recomputed over them."""
        rows = list(range(self.n_rows)) if rows is None else list(rows)
        columns = list(range(self.n_cols)) if columns is None else list(columns)
        body = self.body()[np.ix_(rows, columns)]
        frame = pd.DataFrame(
            body,
            index=pd.Index([self.row_labels[i] for i in rows], name=self.row_dimension),
            columns=pd.Index([self.column_labels[j] for j in columns], name=self.column_dimension),
        )
        frame.insert(0, TOTAL_LABEL, body.sum(axis=1), allow_duplicates=True)
        totals = pd.DataFrame(
            [np.concatenate(([body.sum()], body.sum(axis=0)))],
            index=pd.Index([TOTAL_LABEL], name=self.row_dimension),
            columns=frame.columns,
        )
        return pd.concat([frame, totals])


def orient(raw: np.ndarray, free_axis_0: int, free_axis_1: int) -> tuple[np.ndarray, bool]:
    """Storage hands back the higher-numbered free axis first; put free_axis_0 first."""
    if free_axis_1 > free_axis_0:
        return raw.T, True
    return raw, False


def project(table, free_axis_0: int, free_axis_1: int, fixed_index, show_zero_as_dash: bool = True) -> ProjectedGrid:
    raw = np.asarray(table.project(free_axis_0, free_axis_1, fixed_index), dtype=float)
    if raw.ndim != 2:
        raise ProjectionError(f"{table.name}: store returned a {raw.ndim}-D slice")

    data, transposed = orient(raw, free_axis_0, free_axis_1)
    expected = (table.shape[free_axis_0], table.shape[free_axis_1])
    if data.shape != expected:
        raise ProjectionError(f"{table.name}: slice shape {data.shape}, expected {expected}")

    # sums come from the array as read; orientation only decides which is which
    axis_of_0 = 1 if transposed else 0
    axis_of_1 = 0 if transposed else 1
    total_column = raw.sum(axis=axis_of_0)
    total_row = raw.sum(axis=axis_of_1)
    grand_total = float(total_row.sum())

    logger.debug(
        "Projected %s axes=(%d, %d) fixed=%s shape=%s transposed=%s",
        table.name, free_axis_0, free_axis_1, list(fixed_index), data.shape, transposed,
    )

    def fmt(v):
        return format_value(v, show_zero_as_dash)

    n_cols, n_rows = data.shape
    cells = []
    for i in range(n_rows):
        cells.append([fmt(total_column[i])] + [fmt(data[j, i]) for j in range(n_cols)])
    cells.append([fmt(grand_total)] + [fmt(total_row[j]) for j in range(n_cols)])
    check_rectangular(cells)

    return ProjectedGrid(
        free_axis_0=free_axis_0,
        free_axis_1=free_axis_1,
        data=data,
        total_row=total_row,
        total_column=total_column,
        grand_total=grand_total,
        transposed=transposed,
        column_labels=table.labels_for(free_axis_0),
        row_labels=table.labels_for(free_axis_1),
        column_dimension=table.dimension_names[free_axis_0],
        row_dimension=table.dimension_names[free_axis_1],
        show_zero_as_dash=show_zero_as_dash,
        cells=cells,
    )
