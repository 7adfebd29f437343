"""
Tests for the table browser view logic (filter, sort, page, select, export).
"""
import math

import pytest

from seatfinder.modules.tables.browser import (
    BrowserState, TableBrowser, cell_text, export_csv, filter_rows, format_cell,
    natural_key, page_count, paginate, sort_rows
)


def make_rows(n):
    return [{"id": f"id-{i}", "roll_number": str(1000 + i), "name": f"Student {i}"} for i in range(n)]


class TestExportCsv:
    def test_embedded_comma_and_null(self):
        assert export_csv([{"a": "x,y", "b": None}], ["a", "b"]) == 'a,b\n"x,y",""'

    def test_embedded_quotes_are_doubled(self):
        assert export_csv([{"a": 'say "hi"'}], ["a"]) == 'a\n"say ""hi"""'

    def test_scalars(self):
        csv = export_csv([{"n": 3, "f": 2.0, "ok": True, "t": "2026-01-01T00:00:00Z"}], ["n", "f", "ok", "t"])
        assert csv == 'n,f,ok,t\n"3","2","true","2026-01-01T00:00:00Z"'

    def test_header_only_when_empty(self):
        assert export_csv([], ["a", "b"]) == "a,b"

    def test_missing_column_is_empty(self):
        assert export_csv([{"a": "1"}], ["a", "b"]) == 'a,b\n"1",""'


class TestCells:
    def test_cell_text(self):
        assert cell_text(None) == ""
        assert cell_text(False) == "false"
        assert cell_text(7.0) == "7"
        assert cell_text(7.5) == "7.5"

    def test_format_cell_timestamp(self):
        assert format_cell("created_at", "2026-10-18T08:05:09.123456+00:00") == "2026-10-18 08:05:09"
        assert format_cell("created_at", "2026-10-18T08:05:09Z") == "2026-10-18 08:05:09"

    def test_format_cell_null_and_non_timestamp(self):
        assert format_cell("name", None) == "NULL"
        assert format_cell("name", "2026-10-18T08:05:09Z") == "2026-10-18T08:05:09Z"
        assert format_cell("updated_at", "not a date") == "not a date"


class TestFilterAndSort:
    def test_filter_is_case_insensitive_over_all_columns(self):
        rows = [{"name": "Alice", "dept": "CSE"}, {"name": "Bob", "dept": "EEE"}, {"name": None, "dept": "cse"}]
        assert filter_rows(rows, "cse") == [rows[0], rows[2]]
        assert filter_rows(rows, "") == rows

    def test_filter_matches_booleans_and_numbers(self):
        rows = [{"found": True, "n": 12}, {"found": False, "n": 3}]
        assert filter_rows(rows, "true") == [rows[0]]
        assert filter_rows(rows, "12") == [rows[0]]

    def test_natural_sort(self):
        rows = [{"room": r} for r in ["Room 10", "room 2", "Room 1", None]]
        ordered = [r["room"] for r in sort_rows(rows, "room")]
        assert ordered == [None, "Room 1", "room 2", "Room 10"]

    def test_natural_key_mixed(self):
        assert natural_key("a10") > natural_key("a9")
        assert natural_key("10") < natural_key("a")

    def test_descending(self):
        rows = [{"n": 1}, {"n": 3}, {"n": 2}]
        assert [r["n"] for r in sort_rows(rows, "n", descending=True)] == [3, 2, 1]

    def test_no_sort_column_keeps_order(self):
        rows = [{"n": 2}, {"n": 1}]
        assert sort_rows(rows, None) == rows


class TestPaging:
    @pytest.mark.parametrize("n", [0, 1, 49, 50, 51, 100, 101, 237])
    def test_pages_cover_every_row_once(self, n):
        rows = make_rows(n)
        pages = page_count(n, 50)
        assert pages == math.ceil(n / 50)
        joined = [row for p in range(pages) for row in paginate(rows, p, 50)]
        assert joined == rows

    def test_browser_pages_after_filter_and_sort(self):
        browser = TableBrowser(page_size=10)
        browser.load("students", lambda table: make_rows(130))
        browser.set_search("student 1")
        browser.sort_by("roll_number", descending=True)
        expected = browser.sorted_rows
        joined = []
        for p in range(browser.total_pages):
            browser.set_page(p)
            joined.extend(browser.visible_rows)
        assert joined == expected
        assert len(expected) == 41
        assert browser.total_pages == math.ceil(len(expected) / browser.page_size)

    def test_set_page_clamps(self):
        browser = TableBrowser(page_size=50)
        browser.load("students", lambda table: make_rows(60))
        browser.set_page(99)
        assert browser.page == 1
        browser.set_page(-3)
        assert browser.page == 0


class TestTableBrowser:
    def test_sort_toggle(self):
        browser = TableBrowser()
        browser.toggle_sort("name")
        assert (browser.sort.column, browser.sort.descending) == ("name", False)
        browser.toggle_sort("name")
        assert browser.sort.descending is True
        browser.toggle_sort("roll_number")
        assert (browser.sort.column, browser.sort.descending) == ("roll_number", False)

    def test_search_does_not_reset_page(self):
        browser = TableBrowser(page_size=10)
        browser.load("students", lambda table: make_rows(50))
        browser.set_page(3)
        browser.set_search("student")
        assert browser.page == 3

    def test_table_change_resets_page_selection_and_sort(self):
        browser = TableBrowser(page_size=10)
        browser.load("students", lambda table: make_rows(50))
        browser.set_page(2)
        browser.toggle_row("id-1")
        browser.toggle_sort("name")
        browser.load("teachers", lambda table: [])
        assert browser.page == 0
        assert browser.selected == set()
        assert browser.sort.column is None
        assert browser.table == "teachers"

    def test_stale_load_is_discarded(self):
        browser = TableBrowser()
        first = browser.select_table("students")
        second = browser.select_table("teachers")
        assert browser.state == BrowserState.LOADING
        assert browser.receive(first, make_rows(3)) is False
        assert browser.rows == []
        assert browser.receive(second, [{"id": "t1", "name": "A"}]) is True
        assert browser.state == BrowserState.LOADED
        assert browser.rows == [{"id": "t1", "name": "A"}]

    def test_reset_discards_pending_load(self):
        browser = TableBrowser()
        generation = browser.select_table("students")
        browser.reset()
        assert browser.receive(generation, make_rows(2)) is False
        assert browser.state == BrowserState.IDLE

    def test_select_all_toggles_visible_page_only(self):
        browser = TableBrowser(page_size=10)
        browser.load("students", lambda table: make_rows(25))
        browser.toggle_select_all()
        assert browser.selected == {f"id-{i}" for i in range(10)}
        browser.set_page(1)
        browser.toggle_select_all()
        assert len(browser.selected) == 20
        browser.toggle_select_all()
        assert browser.selected == {f"id-{i}" for i in range(10)}

    def test_toggle_row(self):
        browser = TableBrowser()
        browser.toggle_row("a")
        browser.toggle_row("b")
        browser.toggle_row("a")
        assert browser.selected == {"b"}

    def test_columns_from_first_row(self):
        browser = TableBrowser()
        browser.load("students", lambda table: [{"id": "1", "name": "x"}, {"id": "2", "extra": "y"}])
        assert browser.columns == ["id", "name"]

    def test_export_uses_filtered_sorted_rows(self):
        browser = TableBrowser()
        browser.load("teachers", lambda table: [
            {"teacher_id": "T2", "name": "Zaman"},
            {"teacher_id": "T1", "name": "Ahmed, K."},
            {"teacher_id": "T3", "name": "Other"},
        ])
        browser.set_search("T")
        browser.sort_by("name")
        assert browser.export() == 'teacher_id,name\n"T1","Ahmed, K."\n"T3","Other"\n"T2","Zaman"'
