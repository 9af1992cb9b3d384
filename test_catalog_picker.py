import unittest
from types import SimpleNamespace

from catalog_picker import CatalogPicker, matches
from commands import MoveCursor
from table_handle import CatalogEntry


def _entry(name):
    return CatalogEntry(name=name, dims="a, b", shape="2, 2", ndims=2, units="", documentation="")


def _scanner(names, busy=False):
    return SimpleNamespace(
        entries=[_entry(n) for n in names],
        busy=busy,
        completed=len(names),
        total=10,
        error=None,
    )


class MatchTests(unittest.TestCase):
    def test_every_word_must_appear(self):
        entry = _entry("Energy/Final_Demand")
        self.assertTrue(matches(entry, ""))
        self.assertTrue(matches(entry, "demand energy"))
        self.assertTrue(matches(entry, "FINAL"))
        self.assertFalse(matches(entry, "demand price"))


class CatalogPickerTests(unittest.TestCase):
    def setUp(self):
        self.scanner = _scanner(["energy/demand", "energy/supply", "prices/fuel"])
        self.picker = CatalogPicker(self.scanner, page_height=2)
        self.picker.refresh()

    def test_refresh_selects_the_first_entry(self):
        self.assertEqual(self.picker.selected, 0)
        self.assertEqual(self.picker.current().name, "energy/demand")

    def test_filter_narrows_and_keeps_selection(self):
        self.picker.bottom()
        self.picker.set_filter("fuel")
        self.assertEqual([e.name for e in self.picker.items], ["prices/fuel"])
        self.assertEqual(self.picker.current().name, "prices/fuel")
        self.picker.set_filter("")
        self.assertEqual(self.picker.current().name, "prices/fuel")

    def test_filter_without_hits_clears_selection(self):
        self.picker.set_filter("nothing")
        self.assertIsNone(self.picker.selected)
        self.assertIsNone(self.picker.current())
        self.picker.next()
        self.assertIsNone(self.picker.selected)

    def test_new_entries_keep_the_highlight(self):
        self.picker.next()
        self.scanner.entries.insert(0, _entry("alpha/first"))
        self.picker.refresh()
        self.assertEqual(self.picker.current().name, "energy/supply")

    def test_cursor_wraps_and_pages(self):
        self.picker.previous()
        self.assertEqual(self.picker.selected, 2)
        self.picker.next()
        self.assertEqual(self.picker.selected, 0)
        self.picker.page_down()
        self.assertEqual(self.picker.selected, 2)
        self.picker.page_up()
        self.assertEqual(self.picker.selected, 0)
        self.picker.page_up()
        self.assertEqual(self.picker.selected, 0)

    def test_apply(self):
        self.assertTrue(self.picker.apply(MoveCursor("bottom")))
        self.assertEqual(self.picker.selected, 2)
        self.assertTrue(self.picker.apply(MoveCursor("top")))
        self.assertEqual(self.picker.selected, 0)
        self.assertFalse(self.picker.apply(MoveCursor("sideways")))
        self.assertFalse(self.picker.apply(object()))

    def test_visible_rows_follow_selection(self):
        self.assertEqual(list(self.picker.visible_rows(2)), [0, 1])
        self.picker.bottom()
        self.assertEqual(list(self.picker.visible_rows(2)), [1, 2])
        self.picker.top()
        self.assertEqual(list(self.picker.visible_rows(2)), [0, 1])

    def test_status_text(self):
        self.assertEqual(self.picker.status_text(), "1/3")
        self.scanner.busy = True
        self.assertEqual(self.picker.status_text(), "Scanning 3/10")
        self.scanner.busy = False
        self.picker.set_filter("zzz")
        self.assertEqual(self.picker.status_text(), "0/0")


if __name__ == "__main__":
    unittest.main()
