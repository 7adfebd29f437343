"""
Table browser view logic: filter, sort, page, select and export a fetched row set.

Everything here is derived from the rows of one fetch; nothing touches the
network. TableBrowser tracks the current selection and discards fetch results
that belong to an earlier table selection.
"""

import enum
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
CellValue = Union[None, bool, int, float, str]

DEFAULT_PAGE_SIZE = 50

_DIGITS = re.compile(r"(\d+)")


def is_timestamp_column(column: str) -> bool:
    return column.endswith("_at")


def cell_text(value: CellValue) -> str:
    """String form of a cell as used for searching, sorting and export."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_cell(column: str, value: CellValue) -> str:
    """Display form of a cell. Timestamp columns (``*_at``) are shown as date and time."""
    if value is None:
        return "NULL"
    if is_timestamp_column(column) and isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        return parsed.strftime("%Y-%m-%d %H:%M:%S")
    return cell_text(value)


def filter_rows(rows: List[Row], search: Optional[str]) -> List[Row]:
    if not search:
        return list(rows)
    needle = search.lower()
    return [r for r in rows if any(needle in cell_text(v).lower() for v in r.values())]


def natural_key(text: str) -> List[Union[str, int]]:
    # re.split with a group alternates text/digits, so positions always compare like with like
    return [int(chunk) if i % 2 else chunk.casefold() for i, chunk in enumerate(_DIGITS.split(text))]


def sort_rows(rows: List[Row], column: Optional[str], descending: bool = False) -> List[Row]:
    if not column:
        return list(rows)
    return sorted(rows, key=lambda r: natural_key(cell_text(r.get(column))), reverse=descending)


def page_count(total: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return math.ceil(total / page_size)


def paginate(rows: List[Row], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> List[Row]:
    start = page * page_size
    return rows[start:start + page_size]


def columns_of(rows: List[Row]) -> List[str]:
    """Column names from the first row; an empty result has no columns."""
    return list(rows[0].keys()) if rows else []


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_csv(rows: Iterable[Row], columns: List[str]) -> str:
    """Header is the bare column list; every data field is quoted, None becomes an empty field."""
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(_quote(cell_text(row.get(c))) for c in columns))
    return "\n".join(lines)


class BrowserState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass
class SortState:
    column: Optional[str] = None
    descending: bool = False

    def toggle(self, column: str):
        if self.column == column:
            self.descending = not self.descending
        else:
            self.column = column
            self.descending = False


@dataclass
class TableBrowser:
    page_size: int = DEFAULT_PAGE_SIZE
    state: BrowserState = BrowserState.IDLE
    table: Optional[str] = None
    rows: List[Row] = field(default_factory=list)
    search: str = ""
    sort: SortState = field(default_factory=SortState)
    page: int = 0
    selected: Set[Any] = field(default_factory=set)
    generation: int = 0

    def select_table(self, table: str) -> int:
        """Start loading a table. Returns the generation the fetch result must carry."""
        self.generation += 1
        self.table = table
        self.rows = []
        self.page = 0
        self.selected = set()
        self.sort = SortState()
        self.state = BrowserState.LOADING
        return self.generation

    def receive(self, generation: int, rows: List[Row]) -> bool:
        """Accept a fetch result; results for an older selection are dropped."""
        if generation != self.generation:
            logger.debug(f"Discarding stale rows (generation {generation}, current {self.generation})")
            return False
        self.rows = list(rows)
        self.state = BrowserState.LOADED
        return True

    def load(self, table: str, fetch: Callable[[str], List[Row]]) -> bool:
        generation = self.select_table(table)
        return self.receive(generation, fetch(table))

    def reset(self):
        self.generation += 1
        self.table = None
        self.rows = []
        self.page = 0
        self.selected = set()
        self.state = BrowserState.IDLE

    def set_search(self, text: str):
        # page index is not reset here
        self.search = text or ""

    def toggle_sort(self, column: str):
        self.sort.toggle(column)

    def sort_by(self, column: Optional[str], descending: bool = False):
        self.sort = SortState(column=column, descending=descending)

    def set_page(self, page: int):
        last = max(self.total_pages - 1, 0)
        self.page = min(max(page, 0), last)

    @property
    def filtered_rows(self) -> List[Row]:
        return filter_rows(self.rows, self.search)

    @property
    def sorted_rows(self) -> List[Row]:
        return sort_rows(self.filtered_rows, self.sort.column, self.sort.descending)

    @property
    def total_pages(self) -> int:
        return page_count(len(self.filtered_rows), self.page_size)

    @property
    def visible_rows(self) -> List[Row]:
        return paginate(self.sorted_rows, self.page, self.page_size)

    @property
    def columns(self) -> List[str]:
        return columns_of(self.rows)

    def toggle_row(self, row_id: Any):
        if row_id in self.selected:
            self.selected.discard(row_id)
        else:
            self.selected.add(row_id)

    def toggle_select_all(self):
        """Select or clear the rows on the visible page only."""
        visible_ids = {r.get("id") for r in self.visible_rows if r.get("id") is not None}
        if visible_ids and visible_ids <= self.selected:
            self.selected -= visible_ids
        else:
            self.selected |= visible_ids

    def export(self) -> str:
        return export_csv(self.sorted_rows, self.columns)
