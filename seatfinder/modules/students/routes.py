from fastapi import APIRouter, Depends, BackgroundTasks, Query
from seatfinder.core.dependencies import require_admin
from seatfinder.modules.activity.routes import get_activity_service
from seatfinder.modules.activity.schemas import ActivityAction
from seatfinder.modules.activity.service import ActivityLogService
from seatfinder.modules.students.schemas import StudentCreate, StudentUpdate, StudentResponse
from seatfinder.modules.students.service import StudentService
from seatfinder.modules.tables.routes import get_row_gateway
from seatfinder.modules.tables.service import RowGateway
from typing import Dict, List, Optional

router = APIRouter(prefix="/admin/students", tags=["students"])


def get_student_service(gateway: RowGateway = Depends(get_row_gateway)) -> StudentService:
    return StudentService(gateway)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    q: Optional[str] = Query(None),
    user_data: Dict = Depends(require_admin),
    service: StudentService = Depends(get_student_service)
):
    """List students ordered by roll number"""
    return service.list_students(q)


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    student_data: StudentCreate,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: StudentService = Depends(get_student_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    student = service.create_student(student_data)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.INSERT,
        "student",
        student.id,
        f"Added student {student.roll_number} ({student.name})",
    )
    return student


@router.put("/{student_id}", status_code=204)
async def update_student(
    student_id: str,
    student_data: StudentUpdate,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: StudentService = Depends(get_student_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    service.update_student(student_id, student_data)
    label = student_data.roll_number or student_id
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.UPDATE,
        "student",
        student_id,
        f"Updated student {label}",
    )


@router.delete("/{student_id}", status_code=204)
async def delete_student(
    student_id: str,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: StudentService = Depends(get_student_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    service.delete_student(student_id)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.DELETE,
        "student",
        student_id,
        f"Deleted student {student_id}",
    )
