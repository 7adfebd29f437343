from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class TableInfo(BaseModel):
    name: str
    label: str
    editable: bool
    icon: str
    color: str
    row_count: Optional[int] = None


class TableControls(BaseModel):
    insert: bool
    edit: bool
    delete: bool


class TablePage(BaseModel):
    table: str
    editable: bool
    controls: TableControls
    columns: List[str]
    rows: List[Dict[str, Any]]
    total_rows: int
    filtered_rows: int
    page: int
    page_size: int
    total_pages: int


class BulkDeleteRequest(BaseModel):
    ids: List[str]


class BulkDeleteFailure(BaseModel):
    id: str
    error: str


class BulkDeleteResponse(BaseModel):
    deleted: List[str]
    failed: List[BulkDeleteFailure] = []
