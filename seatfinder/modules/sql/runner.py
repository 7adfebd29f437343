"""
Constrained SQL runner for the admin SQL editor.

Not a SQL parser: the text must start with SELECT, the first table after FROM
and an optional LIMIT (capped) are extracted with regular expressions, and the
rows are read through the row gateway. Every other clause is reported back as ignored.
Arbitrary statements go through the privileged execute-sql function instead.
"""

import re
import time
import logging
from dataclasses import dataclass, field
from typing import List

from seatfinder.core.exceptions import QueryValidationError
from seatfinder.modules.sql.schemas import QueryResult
from seatfinder.modules.tables.browser import columns_of
from seatfinder.modules.tables.service import RowGateway

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT = 1000

SELECT_ONLY_MESSAGE = "Only SELECT queries are allowed for safety."
NO_TABLE_MESSAGE = "Could not determine table name from query."
IGNORED_CLAUSES_NOTICE = (
    "Only the table name and LIMIT are applied. "
    "WHERE, JOIN, GROUP BY, HAVING, ORDER BY and OFFSET are not applied by the SQL editor."
)
LIMIT_CAPPED_NOTICE = "LIMIT is capped at {max_limit} rows."

_FROM_TABLE = re.compile(r"\bfrom\s+(\w+)", re.IGNORECASE)
_LIMIT = re.compile(r"\blimit\s+(\d+)", re.IGNORECASE)
_IGNORED_CLAUSES = [
    ("WHERE", re.compile(r"\bwhere\b", re.IGNORECASE)),
    ("JOIN", re.compile(r"\bjoin\b", re.IGNORECASE)),
    ("GROUP BY", re.compile(r"\bgroup\s+by\b", re.IGNORECASE)),
    ("HAVING", re.compile(r"\bhaving\b", re.IGNORECASE)),
    ("ORDER BY", re.compile(r"\border\s+by\b", re.IGNORECASE)),
    ("OFFSET", re.compile(r"\boffset\b", re.IGNORECASE)),
]


@dataclass
class ParsedSelect:
    table: str
    limit: int
    ignored_clauses: List[str] = field(default_factory=list)
    limit_capped: bool = False


def parse_select(sql: str, default_limit: int = 100, max_limit: int = DEFAULT_MAX_LIMIT) -> ParsedSelect:
    """Validate the text and pull out table name and row limit (at most max_limit)."""
    if not sql.strip().lower().startswith("select"):
        raise QueryValidationError(SELECT_ONLY_MESSAGE)
    table_match = _FROM_TABLE.search(sql)
    if not table_match:
        raise QueryValidationError(NO_TABLE_MESSAGE)
    limit_match = _LIMIT.search(sql)
    limit = int(limit_match.group(1)) if limit_match else default_limit
    limit_capped = limit > max_limit
    ignored = [name for name, pattern in _IGNORED_CLAUSES if pattern.search(sql)]
    return ParsedSelect(
        table=table_match.group(1).lower(),
        limit=min(limit, max_limit),
        ignored_clauses=ignored,
        limit_capped=limit_capped,
    )


class ConstrainedSqlRunner:
    def __init__(self, gateway: RowGateway, default_limit: int = 100, max_limit: int = DEFAULT_MAX_LIMIT):
        self.gateway = gateway
        self.default_limit = default_limit
        self.max_limit = max_limit

    def run(self, sql: str) -> QueryResult:
        parsed = parse_select(sql, self.default_limit, self.max_limit)
        if parsed.ignored_clauses:
            logger.info(f"SQL editor ignoring clauses {parsed.ignored_clauses} for table {parsed.table}")
        started = time.perf_counter()
        rows = self.gateway.list_rows(parsed.table, parsed.limit)
        exec_ms = round((time.perf_counter() - started) * 1000, 2)
        notices = []
        if parsed.ignored_clauses:
            notices.append(IGNORED_CLAUSES_NOTICE)
        if parsed.limit_capped:
            notices.append(LIMIT_CAPPED_NOTICE.format(max_limit=self.max_limit))
        return QueryResult(
            table=parsed.table,
            limit=parsed.limit,
            columns=columns_of(rows),
            rows=rows,
            row_count=len(rows),
            exec_ms=exec_ms,
            ignored_clauses=parsed.ignored_clauses,
            notice=" ".join(notices) or None,
        )
