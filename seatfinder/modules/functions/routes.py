from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from seatfinder.config.settings import settings
from seatfinder.core.exceptions import FunctionError
from seatfinder.database.supabase_client import get_service_supabase
from seatfinder.modules.functions.keep_alive import ping_database
from seatfinder.modules.functions.schemas import KeepAliveResult, SslCheckResult
from seatfinder.modules.functions.ssl_check import SslChecker
from supabase import Client
import httpx

router = APIRouter(tags=["functions"])


def get_ssl_checker() -> SslChecker:
    return SslChecker(timeout=settings.ssl_check_timeout)


@router.options("/keep-alive")
async def keep_alive_preflight():
    return PlainTextResponse("ok")


@router.post("/keep-alive", response_model=KeepAliveResult)
async def keep_alive(supabase: Client = Depends(get_service_supabase)):
    """Ping the database and record the probe in keep_alive_log"""
    return ping_database(supabase)


@router.options("/check-ssl")
async def check_ssl_preflight():
    return PlainTextResponse("ok")


@router.post("/check-ssl", response_model=SslCheckResult)
async def check_ssl(request: Request, checker: SslChecker = Depends(get_ssl_checker)):
    try:
        body = await request.json()
    except ValueError:
        body = None
    url = body.get("url") if isinstance(body, dict) else None
    if not url or not isinstance(url, str):
        raise FunctionError("URL required", status_code=400)
    try:
        return await checker.check(url)
    except (ValueError, httpx.InvalidURL) as e:
        raise FunctionError(str(e), status_code=400)
