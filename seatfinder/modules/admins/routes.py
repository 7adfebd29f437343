from fastapi import APIRouter, Depends, BackgroundTasks, HTTPException
from seatfinder.core.dependencies import get_role_service, require_admin
from seatfinder.modules.activity.routes import get_activity_service
from seatfinder.modules.activity.schemas import ActivityAction
from seatfinder.modules.activity.service import ActivityLogService
from seatfinder.modules.admins.schemas import ClearTableResponse
from seatfinder.modules.admins.service import AdminUserService
from seatfinder.modules.auth.schemas import RoleAssignmentResponse
from seatfinder.modules.auth.service import RoleService
from seatfinder.modules.sql.routes import get_sql_execution_service
from seatfinder.modules.sql.service import SqlExecutionService
from typing import Dict, List

router = APIRouter(prefix="/admin", tags=["admins"])


def get_admin_user_service(
    role_service: RoleService = Depends(get_role_service),
    sql_service: SqlExecutionService = Depends(get_sql_execution_service)
) -> AdminUserService:
    return AdminUserService(role_service, sql_service)


@router.get("/users", response_model=List[RoleAssignmentResponse])
async def list_admin_users(
    user_data: Dict = Depends(require_admin),
    service: AdminUserService = Depends(get_admin_user_service)
):
    """List role assignments, oldest first"""
    return service.list_admins()


@router.delete("/users/{role_id}", status_code=204)
async def remove_admin_user(
    role_id: str,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: AdminUserService = Depends(get_admin_user_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    removed = service.remove_admin(role_id, user_data["id"])
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.DELETE,
        "user_role",
        role_id,
        f"Removed {removed.role} role from user {removed.user_id}",
    )


@router.post("/danger-zone/clear/{table}", response_model=ClearTableResponse)
async def clear_log_table(
    table: str,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    role_service: RoleService = Depends(get_role_service),
    service: AdminUserService = Depends(get_admin_user_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    """Delete all rows of search_logs or activity_logs"""
    if not role_service.verify_elevated_role(user_data["id"]):
        raise HTTPException(status_code=403, detail="Forbidden: admin access required")
    exec_ms = service.clear_logs(table)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.DELETE,
        table,
        None,
        f"Cleared all {table}",
    )
    return ClearTableResponse(table=table, exec_ms=exec_ms)
