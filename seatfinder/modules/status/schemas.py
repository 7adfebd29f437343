from pydantic import BaseModel
from typing import List, Optional


class KeepAliveCheck(BaseModel):
    id: Optional[str] = None
    status: str
    response_time_ms: int = 0
    error_message: Optional[str] = None
    record_count: Optional[int] = None
    pinged_at: str


class DailyBucket(BaseModel):
    date: str
    success: int
    failure: int


class ResponseTimePoint(BaseModel):
    pinged_at: str
    ms: int


class IncidentResponse(BaseModel):
    id: Optional[str] = None
    title: str
    description: Optional[str] = None
    severity: str
    status: str
    started_at: str
    resolved_at: Optional[str] = None


class StatusSummary(BaseModel):
    is_up: bool
    last_ping_at: Optional[str] = None
    uptime_percent: str
    avg_response_ms: int
    total_checks: int
    last_30_days: List[DailyBucket]
    response_times: List[ResponseTimePoint]
    recent_checks: List[KeepAliveCheck]
    active_incidents: List[IncidentResponse]
    incidents: List[IncidentResponse]
