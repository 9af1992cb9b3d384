import threading

import numpy as np
import pytest

from catalog_scanner import CatalogScanner, ScanState
from errors import StoreUnavailable
from table_store import ArrayTableStore


class GatedStore(ArrayTableStore):
    """Blocks opening one table until the test lets it through."""

    def __init__(self, gate_on=None):
        super().__init__()
        self.gate_on = gate_on
        self.reached = threading.Event()
        self.release = threading.Event()

    def open_table(self, name):
        if name == self.gate_on:
            self.reached.set()
            self.release.wait(5)
        return super().open_table(name)


def _fill(store, count=5, broken=()):
    for i in range(1, count + 1):
        name = f"g/t{i}"
        if i in broken:
            store.add_table(name, np.zeros((2, 2)), attrs={"units": "u", "dims": ["a", "b"]})
        else:
            store.add_table(name, np.zeros((2, 2)), dims=["a", "b"], units="u", doc=f"table {i}")
    return store


def test_scan_indexes_every_valid_table_in_order():
    scanner = CatalogScanner(_fill(ArrayTableStore(), broken=(3,)))
    scanner.start()
    assert scanner.join(5)
    assert scanner.state is ScanState.COMPLETED
    assert [e.name for e in scanner.entries] == ["g/t1", "g/t2", "g/t4", "g/t5"]
    assert scanner.completed == 4
    assert scanner.attempted == 5
    assert scanner.total == 5
    assert scanner.error is None
    assert scanner.table("g/t4").documentation == "table 4"
    assert scanner.table("g/t3") is None


def test_start_returns_before_anything_is_indexed():
    store = _fill(GatedStore(gate_on="g/t1"))
    scanner = CatalogScanner(store)
    scanner.start()
    try:
        assert scanner.entries == []
        assert scanner.busy
        assert store.reached.wait(5)
        scanner.poll()
        assert scanner.entries == []
    finally:
        store.release.set()
    scanner.join(5)
    assert scanner.completed == 5


def test_cancel_stops_after_the_table_in_flight():
    store = _fill(GatedStore(gate_on="g/t2"))
    scanner = CatalogScanner(store)
    scanner.start()
    assert store.reached.wait(5)
    scanner.request_cancel()
    store.release.set()
    assert scanner.join(5)
    assert scanner.state is ScanState.CANCELLED
    assert [e.name for e in scanner.entries] == ["g/t1", "g/t2"]
    assert scanner.attempted == 2

    store.gate_on = None
    scanner.start()
    assert scanner.entries == []
    assert scanner.join(5)
    assert scanner.state is ScanState.COMPLETED
    assert scanner.completed == 5


def test_cancel_blocks_until_the_thread_is_gone():
    store = _fill(GatedStore(gate_on="g/t1"))
    scanner = CatalogScanner(store)
    scanner.start()
    assert store.reached.wait(5)
    store.release.set()
    scanner.cancel()
    assert scanner.finished
    assert not scanner.busy


def test_cancel_without_a_scan_is_a_no_op():
    scanner = CatalogScanner(ArrayTableStore())
    scanner.cancel()
    assert scanner.state is ScanState.IDLE


def test_restart_discards_the_previous_catalog():
    store = _fill(ArrayTableStore(), count=2)
    scanner = CatalogScanner(store)
    scanner.start()
    scanner.join(5)
    store.add_table("g/t9", np.zeros((2, 2)), dims=["a", "b"])
    scanner.start()
    scanner.join(5)
    assert [e.name for e in scanner.entries] == ["g/t1", "g/t2", "g/t9"]


class UnavailableStore(ArrayTableStore):
    def list_groups(self):
        raise StoreUnavailable("file went away")


class ExplodingStore(ArrayTableStore):
    def list_tables(self, group):
        raise RuntimeError("boom")


@pytest.mark.parametrize(
    "store, message",
    [(UnavailableStore(), "file went away"), (_fill(ExplodingStore()), "boom")],
)
def test_store_failures_end_the_scan(store, message):
    scanner = CatalogScanner(store)
    scanner.start()
    scanner.join(5)
    assert scanner.state is ScanState.CANCELLED
    assert scanner.entries == []
    assert message in scanner.error


class FlakyStore(ArrayTableStore):
    def open_table(self, name):
        if name == "g/t3":
            raise RuntimeError("driver hiccup")
        return super().open_table(name)


def test_unexpected_error_on_one_table_skips_only_that_table(caplog):
    scanner = CatalogScanner(_fill(FlakyStore()))
    with caplog.at_level("WARNING", logger="catalog_scanner"):
        scanner.start()
        assert scanner.join(5)
    assert scanner.state is ScanState.COMPLETED
    assert [e.name for e in scanner.entries] == ["g/t1", "g/t2", "g/t4", "g/t5"]
    assert scanner.error is None
    assert "driver hiccup" in caplog.text
