from supabase import Client
from seatfinder.core.exceptions import BackendError
from seatfinder.modules.status.schemas import (
    KeepAliveCheck, DailyBucket, ResponseTimePoint, IncidentResponse, StatusSummary
)
from datetime import date, timedelta
from typing import List, Optional

LOG_WINDOW = 200
INCIDENT_WINDOW = 20
RECENT_CHECKS = 20
RESPONSE_TIME_POINTS = 50
DAYS = 30


def summarize(
    logs: List[KeepAliveCheck],
    incidents: List[IncidentResponse],
    today: Optional[date] = None,
) -> StatusSummary:
    """Aggregate keep-alive checks (newest first) into the status page view"""
    today = today or date.today()
    latest = logs[0] if logs else None
    total = len(logs)
    successes = sum(1 for log in logs if log.status == "ok")

    buckets = []
    for offset in range(DAYS - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        day_logs = [log for log in logs if log.pinged_at.startswith(day)]
        ok = sum(1 for log in day_logs if log.status == "ok")
        buckets.append(DailyBucket(date=day, success=ok, failure=len(day_logs) - ok))

    return StatusSummary(
        is_up=latest is not None and latest.status == "ok",
        last_ping_at=latest.pinged_at if latest else None,
        uptime_percent=f"{successes / total * 100:.2f}" if total else "100.00",
        avg_response_ms=round(sum(log.response_time_ms for log in logs) / total) if total else 0,
        total_checks=total,
        last_30_days=buckets,
        response_times=[
            ResponseTimePoint(pinged_at=log.pinged_at, ms=log.response_time_ms)
            for log in reversed(logs[:RESPONSE_TIME_POINTS])
        ],
        recent_checks=logs[:RECENT_CHECKS],
        active_incidents=[i for i in incidents if i.status != "resolved"],
        incidents=incidents,
    )


class StatusService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def recent_checks(self) -> List[KeepAliveCheck]:
        try:
            result = self.supabase.table("keep_alive_log")\
                .select("*")\
                .order("pinged_at", desc=True)\
                .limit(LOG_WINDOW)\
                .execute()
        except Exception as e:
            raise BackendError.from_exception(e)
        return [KeepAliveCheck(**row) for row in (result.data or [])]

    def recent_incidents(self) -> List[IncidentResponse]:
        try:
            result = self.supabase.table("incidents")\
                .select("*")\
                .order("started_at", desc=True)\
                .limit(INCIDENT_WINDOW)\
                .execute()
        except Exception as e:
            raise BackendError.from_exception(e)
        return [IncidentResponse(**row) for row in (result.data or [])]

    def get_status(self) -> StatusSummary:
        return summarize(self.recent_checks(), self.recent_incidents())
