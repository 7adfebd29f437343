from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class SqlRunRequest(BaseModel):
    sql: str


class QueryResult(BaseModel):
    table: str
    limit: int
    columns: List[str]
    rows: List[Dict[str, Any]]
    row_count: int
    exec_ms: float
    ignored_clauses: List[str] = []
    notice: Optional[str] = None


class ExecuteSqlResponse(BaseModel):
    data: Any = None
    execMs: int
