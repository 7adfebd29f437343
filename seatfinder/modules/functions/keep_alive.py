"""
Keep-alive probe
Touches the database so the hosted project is not paused for inactivity,
and records every probe in keep_alive_log for the status page.
"""

from supabase import Client
from seatfinder.modules.functions.schemas import KeepAliveResult
import asyncio
import time
import logging

logger = logging.getLogger(__name__)


def ping_database(supabase: Client) -> KeepAliveResult:
    """Count site_settings rows, then append the outcome to keep_alive_log"""
    started = time.perf_counter()
    status = "ok"
    error_message = None
    record_count = None

    try:
        result = supabase.table("site_settings").select("*", count="exact").execute()
        record_count = result.count if result.count is not None else len(result.data or [])
    except Exception as e:
        status = "error"
        error_message = getattr(e, "message", None) or str(e) or "Unknown error"
        logger.error(f"Keep-alive query failed: {error_message}")

    outcome = KeepAliveResult(
        status=status,
        response_time_ms=int(round((time.perf_counter() - started) * 1000)),
        error_message=error_message,
        record_count=record_count,
    )

    try:
        supabase.table("keep_alive_log").insert(outcome.model_dump()).execute()
    except Exception as e:
        logger.warning(f"Failed to write keep_alive_log: {e}")

    return outcome


async def keep_alive_loop(supabase: Client, interval_seconds: int):
    """Background task that pings the database every interval_seconds"""
    while True:
        try:
            outcome = await asyncio.to_thread(ping_database, supabase)
            logger.info(f"Keep-alive {outcome.status} in {outcome.response_time_ms}ms")
        except Exception as e:
            logger.error(f"Error in keep-alive loop: {str(e)}")

        await asyncio.sleep(interval_seconds)
