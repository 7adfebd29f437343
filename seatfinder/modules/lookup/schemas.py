from pydantic import BaseModel
from typing import Optional
from enum import Enum


class Unit(str, Enum):
    UNIT_A = "UNIT-A"
    UNIT_B = "UNIT-B"
    UNIT_C = "UNIT-C"
    UNIT_D = "UNIT-D"
    UNIT_E = "UNIT-E"


DEFAULT_UNIT = Unit.UNIT_A.value


class Coordinates(BaseModel):
    lat: float
    lng: float


class SeatLookupResponse(BaseModel):
    roll_number: str
    name: str
    institution: Optional[str] = None
    building: Optional[str] = None
    room: Optional[str] = None
    floor: Optional[str] = None
    report_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    directions: Optional[str] = None
    map_url: Optional[str] = None
    exam_date: str
    unit: str
    coordinates: Coordinates


class TeacherLookupResponse(BaseModel):
    teacher_id: str
    name: str
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    office_room: Optional[str] = None
