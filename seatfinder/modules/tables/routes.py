from fastapi import APIRouter, Depends, Response
from seatfinder.config.settings import settings
from seatfinder.config.tables_config import list_table_descriptors
from seatfinder.core.dependencies import require_admin
from seatfinder.core.exceptions import BackendError
from seatfinder.database.supabase_client import get_service_supabase
from seatfinder.modules.tables.browser import TableBrowser, format_cell
from seatfinder.modules.tables.schemas import (
    TableInfo, TablePage, TableControls, BulkDeleteRequest, BulkDeleteResponse
)
from seatfinder.modules.tables.service import RowGateway
from supabase import Client
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tables", tags=["tables"])


def get_row_gateway(supabase: Client = Depends(get_service_supabase)) -> RowGateway:
    return RowGateway(supabase)


def _load_browser(
    gateway: RowGateway,
    table: str,
    search: Optional[str],
    sort: Optional[str],
    descending: bool,
) -> TableBrowser:
    descriptor = gateway.describe(table)
    browser = TableBrowser(page_size=settings.table_page_size)
    browser.load(
        table,
        lambda name: gateway.list_rows(
            name,
            settings.table_fetch_limit,
            order_column=descriptor["default_order"],
            descending=True,
        ),
    )
    browser.set_search(search or "")
    if sort:
        browser.sort_by(sort, descending)
    return browser


@router.get("", response_model=List[TableInfo])
async def list_tables(
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """Registered tables with their row counts (count is null when it could not be read)"""
    tables = []
    for descriptor in list_table_descriptors():
        try:
            row_count = gateway.count_rows(descriptor["name"])
        except BackendError as e:
            logger.warning(f"Could not count rows of {descriptor['name']}: {e.message}")
            row_count = None
        tables.append(TableInfo(**descriptor, row_count=row_count))
    return tables


@router.get("/{table}/rows", response_model=TablePage)
async def list_table_rows(
    table: str,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    descending: bool = False,
    page: int = 0,
    display: bool = False,
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """One page of a table: filtered by `search`, sorted by `sort`, sliced by `page`"""
    browser = _load_browser(gateway, table, search, sort, descending)
    browser.set_page(page)
    rows = browser.visible_rows
    if display:
        rows = [{c: format_cell(c, v) for c, v in r.items()} for r in rows]
    editable = gateway.describe(table)["editable"]
    return TablePage(
        table=table,
        editable=editable,
        controls=TableControls(insert=editable, edit=editable, delete=editable),
        columns=browser.columns,
        rows=rows,
        total_rows=len(browser.rows),
        filtered_rows=len(browser.filtered_rows),
        page=browser.page,
        page_size=browser.page_size,
        total_pages=browser.total_pages,
    )


@router.post("/{table}/rows", status_code=201)
async def insert_table_row(
    table: str,
    fields: Dict[str, Any],
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """Insert a row into an editable table"""
    row = gateway.insert_row(table, fields)
    logger.info(f"User {user_data['id']} inserted a row into {table}")
    return row


@router.put("/{table}/rows/{row_id}")
async def update_table_row(
    table: str,
    row_id: str,
    fields: Dict[str, Any],
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """Update the editable columns of a row"""
    gateway.update_row(table, row_id, fields)
    logger.info(f"User {user_data['id']} updated {table} row {row_id}")
    return {"message": "Row updated"}


@router.delete("/{table}/rows/{row_id}", status_code=204)
async def delete_table_row(
    table: str,
    row_id: str,
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """Delete a row by id"""
    gateway.delete_row(table, row_id)
    logger.info(f"User {user_data['id']} deleted {table} row {row_id}")
    return None


@router.post("/{table}/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_rows(
    table: str,
    body: BulkDeleteRequest,
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """Delete the selected ids one by one; failures are reported per id"""
    result = gateway.bulk_delete(table, body.ids)
    logger.info(
        f"User {user_data['id']} bulk-deleted {len(result.deleted)} rows from {table} "
        f"({len(result.failed)} failed)"
    )
    return result


@router.get("/{table}/export")
async def export_table(
    table: str,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    descending: bool = False,
    user_data: Dict = Depends(require_admin),
    gateway: RowGateway = Depends(get_row_gateway)
):
    """Filtered and sorted rows as CSV (all pages)"""
    browser = _load_browser(gateway, table, search, sort, descending)
    return Response(
        content=browser.export(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={table}.csv"},
    )
