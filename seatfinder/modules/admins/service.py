from fastapi import HTTPException
from seatfinder.modules.auth.schemas import RoleAssignmentResponse
from seatfinder.modules.auth.service import RoleService
from seatfinder.modules.sql.service import SqlExecutionService, CLEARABLE_TABLES
from typing import List
import logging

logger = logging.getLogger(__name__)


class AdminUserService:
    """Admin user listing, role removal and the danger-zone log purges"""

    def __init__(self, role_service: RoleService, sql_service: SqlExecutionService):
        self.role_service = role_service
        self.sql_service = sql_service

    def list_admins(self) -> List[RoleAssignmentResponse]:
        return self.role_service.list_role_assignments()

    def remove_admin(self, role_id: str, current_user_id: str) -> RoleAssignmentResponse:
        assignment = self.role_service.get_role_assignment(role_id)
        if assignment is None:
            raise HTTPException(status_code=404, detail="Role assignment not found")
        if assignment["user_id"] == current_user_id:
            raise HTTPException(status_code=400, detail="You cannot remove your own admin role")
        self.role_service.remove_role_assignment(role_id, assignment["user_id"])
        logger.info(f"Removed role {assignment['role']} from user {assignment['user_id']}")
        return RoleAssignmentResponse(**assignment)

    def clear_logs(self, table: str) -> int:
        """Delete every row of a log table; returns execution time in ms"""
        if table not in CLEARABLE_TABLES:
            raise HTTPException(
                status_code=400,
                detail=f"Only {', '.join(CLEARABLE_TABLES)} can be cleared"
            )
        return self.sql_service.clear_table(table).exec_ms
