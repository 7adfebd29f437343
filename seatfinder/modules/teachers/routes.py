from fastapi import APIRouter, Depends, BackgroundTasks, Query
from seatfinder.core.dependencies import require_admin
from seatfinder.modules.activity.routes import get_activity_service
from seatfinder.modules.activity.schemas import ActivityAction
from seatfinder.modules.activity.service import ActivityLogService
from seatfinder.modules.tables.routes import get_row_gateway
from seatfinder.modules.tables.service import RowGateway
from seatfinder.modules.teachers.schemas import TeacherCreate, TeacherUpdate, TeacherResponse
from seatfinder.modules.teachers.service import TeacherService
from typing import Dict, List, Optional

router = APIRouter(prefix="/admin/teachers", tags=["teachers"])


def get_teacher_service(gateway: RowGateway = Depends(get_row_gateway)) -> TeacherService:
    return TeacherService(gateway)


@router.get("", response_model=List[TeacherResponse])
async def list_teachers(
    q: Optional[str] = Query(None),
    user_data: Dict = Depends(require_admin),
    service: TeacherService = Depends(get_teacher_service)
):
    """List teachers ordered by name"""
    return service.list_teachers(q)


@router.post("", response_model=TeacherResponse, status_code=201)
async def create_teacher(
    teacher_data: TeacherCreate,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: TeacherService = Depends(get_teacher_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    teacher = service.create_teacher(teacher_data)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.INSERT,
        "teacher",
        teacher.id,
        f"Added teacher {teacher.name}",
    )
    return teacher


@router.put("/{teacher_row_id}", status_code=204)
async def update_teacher(
    teacher_row_id: str,
    teacher_data: TeacherUpdate,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: TeacherService = Depends(get_teacher_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    service.update_teacher(teacher_row_id, teacher_data)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.UPDATE,
        "teacher",
        teacher_row_id,
        f"Updated teacher {teacher_data.name or teacher_row_id}",
    )


@router.delete("/{teacher_row_id}", status_code=204)
async def delete_teacher(
    teacher_row_id: str,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: TeacherService = Depends(get_teacher_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    service.delete_teacher(teacher_row_id)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.DELETE,
        "teacher",
        teacher_row_id,
        f"Deleted teacher {teacher_row_id}",
    )
