"""
Background catalog indexing.

The scan thread walks ``group/table`` names, opens each table and reports
what it finds as messages on a queue. Only ``poll()``, called from the
interactive loop, turns those messages into the visible catalog, so the
thread never writes state the UI reads.
"""
import enum
import logging
import queue
import threading
from dataclasses import dataclass
from typing import List, Optional

from errors import StoreUnavailable, ViewerError
from table_handle import CatalogEntry, TableHandle

logger = logging.getLogger(__name__)


class ScanState(enum.Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ScanProgress:
    done: int
    total: int


@dataclass(frozen=True)
class TableIndexed:
    entry: CatalogEntry
    table: TableHandle


@dataclass(frozen=True)
class ScanFinished:
    indexed: int
    cancelled: bool
    error: Optional[str] = None


class CatalogScanner:
    def __init__(self, store):
        self.store = store
        self.state = ScanState.IDLE
        self.entries: List[CatalogEntry] = []
        self.tables: List[TableHandle] = []
        self.completed = 0
        self.attempted = 0
        self.total = 0
        self.error: Optional[str] = None

        self._messages: "queue.Queue[tuple[int, object]]" = queue.Queue()
        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._generation = 0

    @property
    def busy(self) -> bool:
        return self.state is ScanState.SCANNING

    @property
    def finished(self) -> bool:
        return self._thread is None or not self._thread.is_alive()

    # ---------- control ----------
    def start(self) -> None:
        """Cancel and join any running scan, clear the catalog, scan again."""
        self.cancel()
        self._generation += 1
        self.entries = []
        self.tables = []
        self.completed = 0
        self.attempted = 0
        self.total = 0
        self.error = None
        self._cancel = threading.Event()
        self.state = ScanState.SCANNING
        logger.info("Starting catalog scan of %s", getattr(self.store, "path", self.store))
        self._thread = threading.Thread(
            target=self._run,
            args=(self._generation, self._cancel),
            name="catalog-scan",
            daemon=True,
        )
        self._thread.start()

    def request_cancel(self) -> None:
        self._cancel.set()

    def cancel(self) -> None:
        """Ask the scan to stop and block until it has."""
        if self._thread is None:
            return
        self.request_cancel()
        self.join()

    def join(self, timeout: Optional[float] = None) -> bool:
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                return False
            self._thread = None
        self.poll()
        return True

    # ---------- interactive side ----------
    def poll(self) -> int:
        applied = 0
        while True:
            try:
                generation, message = self._messages.get_nowait()
            except queue.Empty:
                break
            if generation != self._generation:
                continue
            self._apply(message)
            applied += 1
        return applied

    def _apply(self, message) -> None:
        if isinstance(message, ScanProgress):
            self.attempted = max(self.attempted, message.done)
            self.total = message.total
        elif isinstance(message, TableIndexed):
            self.entries.append(message.entry)
            self.tables.append(message.table)
            self.completed = len(self.entries)
        elif isinstance(message, ScanFinished):
            self.completed = message.indexed
            self.error = message.error
            self.state = ScanState.CANCELLED if message.cancelled else ScanState.COMPLETED

    def table(self, name: str) -> Optional[TableHandle]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    # ---------- scan thread ----------
    def _run(self, generation: int, cancel: threading.Event) -> None:
        def post(message):
            self._messages.put((generation, message))

        indexed = 0
        cancelled = False
        error = None
        try:
            names = []
            for group in self.store.list_groups():
                for table in self.store.list_tables(group):
                    names.append(f"{group}/{table}")
            total = len(names)
            post(ScanProgress(0, total))

            for done, name in enumerate(names, start=1):
                try:
                    table = self.store.open_table(name)
                    entry = table.summary()
                except ViewerError as exc:
                    logger.warning("Skipping %s: %s", name, exc)
                except Exception as exc:
                    logger.warning("Skipping %s: %s", name, exc, exc_info=True)
                else:
                    post(TableIndexed(entry, table))
                    indexed += 1
                post(ScanProgress(done, total))
                if cancel.is_set():
                    cancelled = True
                    logger.info("Catalog scan cancelled after %d/%d tables", done, total)
                    break
        except StoreUnavailable as exc:
            logger.error("Store unavailable: %s", exc)
            cancelled = True
            error = str(exc)
        except Exception as exc:
            logger.exception("Catalog scan failed")
            cancelled = True
            error = f"Scan failed: {exc}"
        finally:
            post(ScanFinished(indexed, cancelled, error))
        if not cancelled:
            logger.info("Finished catalog scan: %d table(s) indexed", indexed)
