from pydantic import BaseModel


class ClearTableResponse(BaseModel):
    table: str
    exec_ms: int
