from pydantic import BaseModel
from typing import Optional


class KeepAliveResult(BaseModel):
    status: str
    response_time_ms: int
    error_message: Optional[str] = None
    record_count: Optional[int] = None


class SslCheckResult(BaseModel):
    valid: bool
    hostname: str
    issuer: str
    protocol: Optional[str] = None
    checked_at: str
    error: Optional[str] = None
