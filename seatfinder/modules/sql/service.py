from supabase import Client
from seatfinder.core.exceptions import BackendError, FunctionError
from dataclasses import dataclass
from typing import Any
import re
import time
import logging

logger = logging.getLogger(__name__)

NOT_PERMITTED_MESSAGE = "This SQL command is not permitted"

# System-level commands blocked for every caller. Not a sandbox: destructive DML
# such as DELETE FROM / DROP TABLE / unscoped UPDATE passes this check.
DENYLIST = re.compile(
    r"\b(drop\s+database|drop\s+schema|alter\s+database|pg_read_file|pg_ls_dir"
    r"|copy\s+.*\s+to|copy\s+.*\s+from)\b",
    re.IGNORECASE | re.DOTALL,
)

# Tables the danger-zone actions may empty
CLEARABLE_TABLES = ("search_logs", "activity_logs")

_READ_ONLY_START = re.compile(r"^(select|with|explain)\b", re.IGNORECASE)
_WRITE_KEYWORDS = re.compile(
    r"\b(insert|update|delete|merge|drop|alter|truncate|create|grant|revoke|copy|call|vacuum)\b",
    re.IGNORECASE,
)
_CLEAR_LOG = re.compile(
    r"^delete\s+from\s+(" + "|".join(CLEARABLE_TABLES) + r")$",
    re.IGNORECASE,
)


def is_denied(sql: str) -> bool:
    return bool(DENYLIST.search(sql))


def is_allowed_shape(sql: str) -> bool:
    """Allowlist: one read-only statement, or emptying a log table."""
    statement = sql.strip().rstrip(";").strip()
    if not statement or ";" in statement:
        return False
    if _CLEAR_LOG.match(statement):
        return True
    return bool(_READ_ONLY_START.match(statement)) and not _WRITE_KEYWORDS.search(statement)


def check_statement(sql: str, mode: str = "denylist") -> None:
    """Raise FunctionError(403) when the statement may not run under the given policy."""
    if is_denied(sql):
        logger.warning(f"Denylisted SQL rejected: {sql[:200]}")
        raise FunctionError(NOT_PERMITTED_MESSAGE, status_code=403)
    if mode == "allowlist" and not is_allowed_shape(sql):
        logger.warning(f"SQL outside allowlist rejected: {sql[:200]}")
        raise FunctionError(NOT_PERMITTED_MESSAGE, status_code=403)


@dataclass
class ExecutionResult:
    data: Any
    exec_ms: int


class SqlExecutionService:
    """Runs raw SQL through the execute_sql RPC with the service-role client (bypasses RLS)."""

    def __init__(self, service_client: Client, mode: str = "denylist"):
        self.service_client = service_client
        self.mode = mode

    def execute(self, sql: str) -> ExecutionResult:
        check_statement(sql, self.mode)
        started = time.perf_counter()
        try:
            result = self.service_client.rpc("execute_sql", {"query": sql}).execute()
        except Exception as e:
            logger.warning(f"execute_sql failed: {e}")
            raise BackendError.from_exception(e)
        exec_ms = int(round((time.perf_counter() - started) * 1000))
        return ExecutionResult(data=result.data, exec_ms=exec_ms)

    def clear_table(self, table: str) -> ExecutionResult:
        if table not in CLEARABLE_TABLES:
            raise ValueError(f"{table} cannot be cleared")
        logger.warning(f"Clearing all rows of {table}")
        return self.execute(f"DELETE FROM {table}")
