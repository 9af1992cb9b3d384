import curses
import logging
import time

from catalog_pane import CatalogPane
from catalog_picker import CatalogPicker
from catalog_scanner import CatalogScanner
from commands import (
    CancelScan,
    Close,
    EnterFilter,
    Export,
    OpenSelection,
    Quit,
    ShowHelp,
    StartScan,
    Submit,
    command_for_key,
)
from errors import ViewerError
from filter_prompt import FilterPrompt
from overlay import OverlayView
from pivot_export import export_pivot
from pivot_pane import PivotPane
from pivot_view_state import PivotViewState
from screen_layout import ScreenLayout
from selection_overlay import SelectionOverlay
from selection_pane import SelectionPane
from status_bar import render_status

logger = logging.getLogger(__name__)

VIEWER_HINT = " ? help | [ ] row axis | { } column axis | 1-9 cycle dimension | . format | s select | e export | Esc back"


class Orchestrator:
    def __init__(self, stdscr, store, config, file_path=None, initial_table=None):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.store = store
        self.config = config
        self.file_path = file_path
        self.layout = ScreenLayout(stdscr)

        # ---- catalog ----
        self.scanner = CatalogScanner(store)
        self.picker = CatalogPicker(self.scanner, page_height=config["PAGE_SIZE"])
        self.filter_prompt = FilterPrompt(self.picker.set_filter)
        self.catalog_pane = CatalogPane()

        # ---- viewer ----
        self.pivot_pane = PivotPane(column_width=config["COLUMN_WIDTH"])
        self.selection_pane = SelectionPane(self.layout)
        self.view: PivotViewState | None = None
        self.selection: SelectionOverlay | None = None

        # ---- overlay ----
        self.overlay = OverlayView(self.layout)

        self.mode = "catalog"  # catalog | viewer | selection
        self.exit_requested = False

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        self.scanner.start()
        if initial_table is not None:
            self.open_table(initial_table)

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _relayout(self):
        self.layout = ScreenLayout(self.stdscr)
        self.overlay.layout = self.layout
        self.selection_pane.layout = self.layout
        self.selection_pane.close()
        if self.overlay.visible:
            self.overlay.open_help("catalog" if self.mode == "catalog" else "viewer")
        self.stdscr.clear()
        self.stdscr.refresh()

    def tick(self):
        if self.scanner.poll():
            self.picker.refresh()

    def open_table(self, table):
        if table.ndims < 2:
            self._set_status(f"{table.name} has {table.ndims} dimension; pick a table with 2 or more", 4)
            return False
        try:
            self.view = PivotViewState(
                table,
                show_zero_as_dash=self.config["SHOW_ZERO_AS_DASH"],
                page_size=self.config["PAGE_SIZE"],
            )
        except ViewerError as exc:
            self._set_status(f"Unable to open {table.name}: {exc}", 4)
            return False
        logger.info("Opened %s", table.name)
        self.selection = None
        self.mode = "viewer"
        return True

    def close_table(self):
        self.view = None
        self.selection = None
        self.selection_pane.close()
        self.mode = "catalog"
        self.picker.refresh()

    def _open_selected(self):
        entry = self.picker.current()
        if entry is None:
            self._set_status("Nothing selected", 3)
            return
        table = self.scanner.table(entry.name)
        if table is None:
            self._set_status(f"{entry.name} is no longer in the catalog", 3)
            return
        self.open_table(table)

    # ---------------- key handling ----------------

    def _handle_catalog(self, command):
        if isinstance(command, EnterFilter):
            self.filter_prompt.start(self.picker.filter_text)
        elif isinstance(command, StartScan):
            self.scanner.start()
            self.picker.refresh()
            self._set_status("Reloading catalog", 2)
        elif isinstance(command, CancelScan):
            if self.scanner.busy:
                self.scanner.cancel()
                self.picker.refresh()
                self._set_status(f"Scan cancelled ({self.scanner.completed} tables)", 3)
        elif isinstance(command, Submit):
            self._open_selected()
        elif isinstance(command, Close):
            if self.picker.filter_text:
                self.picker.set_filter("")
        else:
            self.picker.apply(command)

    def _handle_viewer(self, command):
        if isinstance(command, Close):
            self.close_table()
        elif isinstance(command, OpenSelection):
            if self.selection is None:
                self.selection = SelectionOverlay.for_table(
                    self.view.table, initial_dimension=self.view.free_axis_0
                )
            self.selection_pane.open()
            self.mode = "selection"
        elif isinstance(command, Export):
            try:
                path = export_pivot(self.view, self.selection)
            except (OSError, ValueError) as exc:
                msg = f"Export failed: {exc}"[: self.layout.W - 2]
                self._set_status(msg, 4)
            else:
                self._set_status(f"Exported {path}", 3)
        else:
            self.view.apply(command)

    def _handle_selection(self, command):
        if isinstance(command, Close):
            self.selection_pane.close()
            self.mode = "viewer"
        else:
            self.selection.apply(command)

    def handle_key(self, ch):
        if ch == curses.KEY_RESIZE:
            self._relayout()
            return

        if self.overlay.visible:
            self.overlay.handle_key(ch)
            return

        if self.filter_prompt.active:
            if ch == 3:
                self.exit_requested = True
                return
            self.filter_prompt.handle_key(ch)
            return

        command = command_for_key(self.mode, ch)
        if command is None:
            return
        if isinstance(command, Quit):
            self.exit_requested = True
            return
        if isinstance(command, ShowHelp):
            self.overlay.open_help("catalog" if self.mode == "catalog" else "viewer")
            return

        if self.mode == "catalog":
            self._handle_catalog(command)
        elif self.mode == "viewer":
            self._handle_viewer(command)
        elif self.mode == "selection":
            self._handle_selection(command)

    # ---------------- UI ----------------

    def _status_context(self):
        context = {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": self.mode,
            "file_path": self.file_path,
            "filtering": self.filter_prompt.active,
            "catalog_status": self.picker.status_text(),
        }
        if self.view is not None:
            context.update(
                table_name=self.view.table.name,
                shape=", ".join(str(n) for n in self.view.table.shape),
                cursor=self.view.cursor,
                row_count=self.view.row_count,
                error=self.view.error,
            )
        return context

    def redraw(self):
        try:
            curses.curs_set(1 if self.filter_prompt.active else 0)
        except curses.error:
            pass

        if not self.overlay.visible:
            if self.mode == "catalog":
                self.catalog_pane.draw(
                    self.layout.table_win, self.picker, active=not self.filter_prompt.active
                )
            else:
                self.pivot_pane.draw(self.layout.table_win, self.view, active=self.mode == "viewer")

            sw = self.layout.status_win
            sw.erase()
            _, w = sw.getmaxyx()
            try:
                sw.addnstr(0, 0, render_status(self._status_context(), w), w - 1, curses.A_REVERSE)
            except curses.error:
                pass
            sw.refresh()

            if self.mode == "catalog":
                self.filter_prompt.draw(self.layout.prompt_win)
            else:
                pw = self.layout.prompt_win
                pw.erase()
                try:
                    pw.addnstr(0, 0, VIEWER_HINT, self.layout.W - 1, curses.A_DIM)
                except curses.error:
                    pass
                pw.refresh()

            if self.mode == "selection" and self.selection is not None:
                self.selection_pane.draw(self.selection)

        if self.overlay.visible:
            self.overlay.draw()

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        try:
            while not self.exit_requested:
                ch = self.stdscr.getch()
                self.tick()
                if ch != -1:
                    self.handle_key(ch)
                self.redraw()
        finally:
            self.scanner.cancel()
