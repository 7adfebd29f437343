from fastapi import APIRouter, Depends, Query
from seatfinder.core.dependencies import require_admin
from seatfinder.database.supabase_client import get_service_supabase
from seatfinder.modules.activity.schemas import ActivityLogResponse, ActivityLogStats
from seatfinder.modules.activity.service import ActivityLogService, dropped_writes
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/admin/activity-logs", tags=["activity"])


def get_activity_service(supabase: Client = Depends(get_service_supabase)) -> ActivityLogService:
    return ActivityLogService(supabase)


@router.get("", response_model=List[ActivityLogResponse])
async def list_activity_logs(
    limit: int = Query(100, ge=1, le=1000),
    user_data: Dict = Depends(require_admin),
    service: ActivityLogService = Depends(get_activity_service)
):
    """Most recent activity log entries"""
    return service.list_logs(limit)


@router.get("/stats", response_model=ActivityLogStats)
async def activity_log_stats(user_data: Dict = Depends(require_admin)):
    """Activity log writes that failed since process start"""
    return ActivityLogStats(dropped_writes=dropped_writes())
