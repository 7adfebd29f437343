from fastapi import APIRouter, Depends, HTTPException, Query
from seatfinder.database.supabase_client import get_supabase
from seatfinder.modules.lookup.schemas import SeatLookupResponse, TeacherLookupResponse, Unit
from seatfinder.modules.lookup.service import LookupService
from supabase import Client

router = APIRouter(prefix="/lookup", tags=["lookup"])


def get_lookup_service(supabase: Client = Depends(get_supabase)) -> LookupService:
    return LookupService(supabase)


@router.get("/students/{roll_number}", response_model=SeatLookupResponse)
async def lookup_student(
    roll_number: str,
    unit: Unit = Query(Unit.UNIT_A),
    service: LookupService = Depends(get_lookup_service)
):
    """Find the exam seat for a roll number in the selected unit"""
    seat = service.find_seat(roll_number, unit.value)
    service.log_search(roll_number, seat is not None)
    if seat is None:
        raise HTTPException(status_code=404, detail="Roll number not found. Please check and try again.")
    return seat


@router.get("/teachers", response_model=TeacherLookupResponse)
async def lookup_teacher(
    q: str = Query(""),
    service: LookupService = Depends(get_lookup_service)
):
    teacher = service.find_teacher(q)
    if teacher is None:
        raise HTTPException(
            status_code=404,
            detail="No teacher found. Please check the name or ID and try again."
        )
    return teacher
