from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from seatfinder.config.settings import settings
from seatfinder.core.dependencies import get_auth_service, get_role_service, require_admin
from seatfinder.core.exceptions import BackendError, FunctionError
from seatfinder.core.rate_limit import limiter
from seatfinder.database.supabase_client import get_service_supabase
from seatfinder.modules.auth.service import AuthService, RoleService
from seatfinder.modules.sql.runner import ConstrainedSqlRunner
from seatfinder.modules.sql.schemas import SqlRunRequest, QueryResult, ExecuteSqlResponse
from seatfinder.modules.sql.service import SqlExecutionService
from seatfinder.modules.tables.service import RowGateway
from supabase import Client
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

# Admin SQL editor under /api/v1
router = APIRouter(prefix="/sql", tags=["sql"])

# Privileged execution function under /functions/v1
function_router = APIRouter(tags=["functions"])


def get_sql_runner(service_client: Client = Depends(get_service_supabase)) -> ConstrainedSqlRunner:
    return ConstrainedSqlRunner(
        RowGateway(service_client),
        default_limit=settings.sql_default_limit,
        max_limit=settings.sql_max_limit,
    )


def get_sql_execution_service(
    service_client: Client = Depends(get_service_supabase)
) -> SqlExecutionService:
    return SqlExecutionService(service_client, mode=settings.sql_gateway_mode)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@router.post("/run", response_model=QueryResult)
async def run_query(
    body: SqlRunRequest,
    user_data: Dict = Depends(require_admin),
    runner: ConstrainedSqlRunner = Depends(get_sql_runner)
):
    """Single-table SELECT with optional LIMIT; other clauses are reported as ignored"""
    return runner.run(body.sql)


@function_router.options("/execute-sql")
async def execute_sql_preflight():
    return PlainTextResponse("ok")


@function_router.post("/execute-sql", response_model=ExecuteSqlResponse)
@limiter.limit(settings.sql_rate_limit)
async def execute_sql(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    role_service: RoleService = Depends(get_role_service),
    service: SqlExecutionService = Depends(get_sql_execution_service)
):
    """
    Execute a raw SQL statement with elevated credentials.
    Gates, in order: bearer token (401), admin/super_admin role (403),
    statement present (400), statement policy (403). Backend errors are 400.
    """
    token = _bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise FunctionError("Unauthorized", status_code=401)
    try:
        user_data = auth_service.get_current_user(token)
    except HTTPException:
        raise FunctionError("Unauthorized", status_code=401)

    if not role_service.verify_elevated_role(user_data["id"]):
        raise FunctionError("Forbidden: admin access required", status_code=403)

    try:
        body = await request.json()
    except ValueError:
        body = None
    sql = body.get("sql") if isinstance(body, dict) else None
    if not sql or not isinstance(sql, str):
        raise FunctionError("Missing SQL query", status_code=400)

    logger.warning(
        f"SQL_EXECUTION_AUDIT: user={user_data['id']} length={len(sql)} first 200 chars: {sql[:200]}"
    )
    try:
        result = service.execute(sql)
    except BackendError as e:
        raise FunctionError(e.message, status_code=400)
    return ExecuteSqlResponse(data=result.data, execMs=result.exec_ms)
