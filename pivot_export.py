import logging
import os
from typing import Optional

import pandas as pd

from pivot_view_state import PivotViewState
from selection_overlay import SelectionOverlay

logger = logging.getLogger(__name__)


def export_filename(table_name: str) -> str:
    stem = "_".join(part for part in table_name.split("/") if part) or "table"
    return f"{stem}.csv"


def export_frame(state: PivotViewState, overlay: Optional[SelectionOverlay] = None) -> pd.DataFrame:
    """Current pivot as a frame, limited to marked members of the free axes that have marks."""
    if state.error:
        # the grid on screen is the last slice that projected, not the requested one
        raise ValueError(f"Nothing to export: {state.error}")
    if state.grid is None:
        raise ValueError("Nothing to export")
    grid = state.grid
    rows = None
    columns = None
    if overlay is not None:
        if overlay.has_marks(grid.free_axis_1):
            rows = overlay.selected(grid.free_axis_1)
        if overlay.has_marks(grid.free_axis_0):
            columns = overlay.selected(grid.free_axis_0)
    return grid.to_frame(rows=rows, columns=columns)


def export_pivot(state: PivotViewState, overlay: Optional[SelectionOverlay] = None, directory: str = ".") -> str:
    frame = export_frame(state, overlay)
    path = os.path.join(directory, export_filename(state.table.name))
    frame.to_csv(path)
    logger.info("Exported %s (%d x %d) to %s", state.table.name, frame.shape[0], frame.shape[1], path)
    return path
