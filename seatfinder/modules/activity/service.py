from supabase import Client
from seatfinder.core.exceptions import BackendError
from seatfinder.modules.activity.schemas import ActivityAction, ActivityLogResponse
from typing import List, Optional
import threading
import logging

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_dropped_writes = 0


def dropped_writes() -> int:
    with _lock:
        return _dropped_writes


def reset_dropped_writes() -> None:
    global _dropped_writes
    with _lock:
        _dropped_writes = 0


def _count_dropped_write() -> None:
    global _dropped_writes
    with _lock:
        _dropped_writes += 1


class ActivityLogService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def record(
        self,
        user_id: Optional[str],
        action: ActivityAction,
        entity_type: str,
        entity_id: Optional[str],
        details: str,
    ) -> bool:
        """Append one entry. Best-effort: a failed write is logged and counted, never raised."""
        try:
            self.supabase.table("activity_logs").insert({
                "user_id": user_id,
                "action": ActivityAction(action).value,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "details": details,
            }).execute()
            return True
        except Exception as e:
            _count_dropped_write()
            logger.warning(f"Dropped activity log write ({action} {entity_type} {entity_id}): {e}")
            return False

    def list_logs(self, limit: int = 100) -> List[ActivityLogResponse]:
        try:
            result = self.supabase.table("activity_logs")\
                .select("*")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
        except Exception as e:
            raise BackendError.from_exception(e)
        return [ActivityLogResponse(**row) for row in (result.data or [])]
