from fastapi import HTTPException
from supabase import Client
from seatfinder.core.exceptions import BackendError
from seatfinder.modules.lookup.schemas import (
    Coordinates, SeatLookupResponse, TeacherLookupResponse, DEFAULT_UNIT
)
from datetime import date
from typing import Optional
import re
import logging

logger = logging.getLogger(__name__)

# Dhaka, used when the map link carries no coordinates
DEFAULT_COORDINATES = Coordinates(lat=23.8103, lng=90.4125)

_COORDINATE_PATTERNS = [
    re.compile(r"q=(-?\d+\.?\d*),(-?\d+\.?\d*)"),
    re.compile(r"@(-?\d+\.?\d*),(-?\d+\.?\d*)"),
    re.compile(r"ll=(-?\d+\.?\d*),(-?\d+\.?\d*)"),
]

# Characters with meaning inside a PostgREST or=() filter
_FILTER_SYNTAX = re.compile(r"[,()]")


def extract_coordinates(map_url: Optional[str]) -> Coordinates:
    for pattern in _COORDINATE_PATTERNS:
        match = pattern.search(map_url or "")
        if match:
            return Coordinates(lat=float(match.group(1)), lng=float(match.group(2)))
    return DEFAULT_COORDINATES


class LookupService:
    """Public roll-number and teacher directory searches"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_seat(self, roll_number: str, unit: str = DEFAULT_UNIT) -> Optional[SeatLookupResponse]:
        roll = roll_number.strip()
        if not roll:
            raise HTTPException(status_code=400, detail="Please enter a roll number")
        try:
            result = self.supabase.table("students")\
                .select("*")\
                .eq("roll_number", roll)\
                .execute()
        except Exception as e:
            logger.error(f"Error looking up roll {roll}: {e}")
            raise BackendError.from_exception(e)

        for row in result.data or []:
            row_unit = row.get("unit") or DEFAULT_UNIT
            if row_unit != unit:
                continue
            seat = {k: v for k, v in row.items() if k in SeatLookupResponse.model_fields}
            seat.update(
                exam_date=row.get("exam_date") or date.today().isoformat(),
                unit=row_unit,
                coordinates=extract_coordinates(row.get("map_url")),
            )
            return SeatLookupResponse(**seat)
        return None

    def log_search(self, roll_number: str, found: bool) -> None:
        """Append to search_logs; failures are logged and ignored"""
        try:
            self.supabase.table("search_logs").insert({
                "roll_number": roll_number.strip(),
                "found": found,
            }).execute()
        except Exception as e:
            logger.warning(f"Failed to record search for {roll_number}: {e}")

    def find_teacher(self, query: str) -> Optional[TeacherLookupResponse]:
        """First teacher whose id or name contains the query, case-insensitively"""
        trimmed = _FILTER_SYNTAX.sub("", query.strip())
        if not trimmed:
            raise HTTPException(status_code=400, detail="Please enter a teacher name or ID")
        try:
            result = self.supabase.table("teachers")\
                .select("*")\
                .or_(f"teacher_id.ilike.%{trimmed}%,name.ilike.%{trimmed}%")\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error searching teachers for {trimmed}: {e}")
            raise BackendError.from_exception(e)
        if not result.data:
            return None
        row = result.data[0]
        return TeacherLookupResponse(
            **{k: v for k, v in row.items() if k in TeacherLookupResponse.model_fields}
        )
