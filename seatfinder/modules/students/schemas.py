from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class StudentCreate(BaseModel):
    roll_number: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    institution: str = ""
    building: str = ""
    room: str = ""
    floor: str = ""
    report_time: str = ""
    start_time: str = ""
    end_time: str = ""
    directions: str = ""
    map_url: str = ""
    exam_date: Optional[str] = None
    unit: Optional[str] = None


class StudentUpdate(BaseModel):
    roll_number: Optional[str] = None
    name: Optional[str] = None
    institution: Optional[str] = None
    building: Optional[str] = None
    room: Optional[str] = None
    floor: Optional[str] = None
    report_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    directions: Optional[str] = None
    map_url: Optional[str] = None
    exam_date: Optional[str] = None
    unit: Optional[str] = None


class StudentResponse(BaseModel):
    id: str
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
    exam_date: Optional[str] = None
    unit: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
