from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class TeacherCreate(BaseModel):
    teacher_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    department: str = ""
    designation: str = ""
    phone: str = ""
    email: str = ""
    office_room: str = ""


class TeacherUpdate(BaseModel):
    teacher_id: Optional[str] = None
    name: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    office_room: Optional[str] = None


class TeacherResponse(BaseModel):
    id: str
    teacher_id: str
    name: str
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    office_room: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
