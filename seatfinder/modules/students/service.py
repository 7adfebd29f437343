from seatfinder.modules.students.schemas import StudentCreate, StudentUpdate, StudentResponse
from seatfinder.modules.tables.service import RowGateway
from typing import List, Optional

TABLE = "students"
LIST_LIMIT = 5000


class StudentService:
    def __init__(self, gateway: RowGateway):
        self.gateway = gateway

    def list_students(self, q: Optional[str] = None) -> List[StudentResponse]:
        """All students ordered by roll number, optionally filtered on roll number, name or institution"""
        rows = self.gateway.list_rows(TABLE, LIST_LIMIT, order_column="roll_number")
        students = [StudentResponse(**row) for row in rows]
        if q:
            needle = q.lower()
            students = [
                s for s in students
                if needle in s.roll_number.lower()
                or needle in s.name.lower()
                or needle in (s.institution or "").lower()
            ]
        return students

    def create_student(self, student_data: StudentCreate) -> StudentResponse:
        row = self.gateway.insert_row(TABLE, student_data.model_dump())
        return StudentResponse(**row)

    def update_student(self, student_id: str, student_data: StudentUpdate) -> None:
        self.gateway.update_row(TABLE, student_id, student_data.model_dump(exclude_unset=True))

    def delete_student(self, student_id: str) -> None:
        self.gateway.delete_row(TABLE, student_id)
