from fastapi import APIRouter, Depends
from seatfinder.database.supabase_client import get_supabase
from seatfinder.modules.status.schemas import StatusSummary
from seatfinder.modules.status.service import StatusService
from supabase import Client

router = APIRouter(prefix="/status", tags=["status"])


def get_status_service(supabase: Client = Depends(get_supabase)) -> StatusService:
    return StatusService(supabase)


@router.get("", response_model=StatusSummary)
async def get_status(service: StatusService = Depends(get_status_service)):
    """Uptime summary built from the latest keep-alive checks and incidents"""
    return service.get_status()
