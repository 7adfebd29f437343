from supabase import Client
from seatfinder.config.tables_config import get_table_descriptor, SYSTEM_COLUMNS
from seatfinder.core.exceptions import BackendError, UnknownTableError, ReadOnlyTableError
from seatfinder.modules.tables.schemas import BulkDeleteResponse, BulkDeleteFailure
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def editable_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Drop system columns; they are shown read-only and never written back."""
    return {k: v for k, v in fields.items() if k not in SYSTEM_COLUMNS}


class RowGateway:
    """Single point of access for reading and mutating rows of a registered table."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def describe(self, table: str) -> Dict[str, Any]:
        descriptor = get_table_descriptor(table)
        if descriptor is None:
            raise UnknownTableError(table)
        return descriptor

    def _require_editable(self, table: str) -> Dict[str, Any]:
        descriptor = self.describe(table)
        if not descriptor["editable"]:
            logger.warning(f"Rejected mutation on read-only table {table}")
            raise ReadOnlyTableError(table)
        return descriptor

    def list_rows(
        self,
        table: str,
        limit: int,
        order_column: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        self.describe(table)
        try:
            query = self.supabase.table(table).select("*")
            if order_column:
                query = query.order(order_column, desc=descending)
            result = query.limit(limit).execute()
        except Exception as e:
            logger.error(f"Error listing rows of {table}: {e}")
            raise BackendError.from_exception(e)
        return result.data or []

    def count_rows(self, table: str) -> int:
        self.describe(table)
        try:
            result = self.supabase.table(table).select("*", count="exact").limit(1).execute()
        except Exception as e:
            raise BackendError.from_exception(e)
        return result.count or 0

    def insert_row(self, table: str, fields: Dict[str, Any]) -> Row:
        self._require_editable(table)
        data = editable_fields(fields)
        try:
            result = self.supabase.table(table).insert(data).execute()
        except Exception as e:
            logger.error(f"Error inserting into {table}: {e}")
            raise BackendError.from_exception(e)
        return result.data[0] if result.data else data

    def update_row(self, table: str, row_id: str, fields: Dict[str, Any]) -> None:
        self._require_editable(table)
        try:
            self.supabase.table(table)\
                .update(editable_fields(fields))\
                .eq("id", row_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating {table} row {row_id}: {e}")
            raise BackendError.from_exception(e)

    def delete_row(self, table: str, row_id: str) -> None:
        """Delete by id. A missing id deletes nothing and still succeeds."""
        self._require_editable(table)
        try:
            self.supabase.table(table).delete().eq("id", row_id).execute()
        except Exception as e:
            logger.error(f"Error deleting {table} row {row_id}: {e}")
            raise BackendError.from_exception(e)

    def bulk_delete(self, table: str, row_ids: List[str]) -> BulkDeleteResponse:
        """Delete ids one at a time, in order. Failures are collected, not fatal."""
        self._require_editable(table)
        deleted: List[str] = []
        failed: List[BulkDeleteFailure] = []
        for row_id in row_ids:
            try:
                self.delete_row(table, row_id)
                deleted.append(row_id)
            except BackendError as e:
                failed.append(BulkDeleteFailure(id=row_id, error=e.message))
        if failed:
            logger.warning(f"Bulk delete on {table}: {len(failed)} of {len(row_ids)} failed")
        return BulkDeleteResponse(deleted=deleted, failed=failed)
