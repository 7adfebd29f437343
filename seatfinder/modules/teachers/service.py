from seatfinder.modules.teachers.schemas import TeacherCreate, TeacherUpdate, TeacherResponse
from seatfinder.modules.tables.service import RowGateway
from typing import List, Optional

TABLE = "teachers"
LIST_LIMIT = 5000


class TeacherService:
    def __init__(self, gateway: RowGateway):
        self.gateway = gateway

    def list_teachers(self, q: Optional[str] = None) -> List[TeacherResponse]:
        rows = self.gateway.list_rows(TABLE, LIST_LIMIT, order_column="name")
        teachers = [TeacherResponse(**row) for row in rows]
        if q:
            needle = q.lower()
            teachers = [
                t for t in teachers
                if needle in t.teacher_id.lower()
                or needle in t.name.lower()
                or needle in (t.department or "").lower()
            ]
        return teachers

    def create_teacher(self, teacher_data: TeacherCreate) -> TeacherResponse:
        row = self.gateway.insert_row(TABLE, teacher_data.model_dump())
        return TeacherResponse(**row)

    def update_teacher(self, teacher_id: str, teacher_data: TeacherUpdate) -> None:
        self.gateway.update_row(TABLE, teacher_id, teacher_data.model_dump(exclude_unset=True))

    def delete_teacher(self, teacher_id: str) -> None:
        self.gateway.delete_row(TABLE, teacher_id)
