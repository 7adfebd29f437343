import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from seatfinder.config.settings import settings
from seatfinder.core.exceptions import (
    BackendError, UnknownTableError, ReadOnlyTableError, QueryValidationError, FunctionError
)
from seatfinder.core.rate_limit import limiter
from seatfinder.database.supabase_client import get_service_supabase
from seatfinder.modules.auth import routes as auth_routes
from seatfinder.modules.tables import routes as tables_routes
from seatfinder.modules.sql import routes as sql_routes
from seatfinder.modules.students import routes as students_routes
from seatfinder.modules.teachers import routes as teachers_routes
from seatfinder.modules.site_settings import routes as site_settings_routes
from seatfinder.modules.admins import routes as admins_routes
from seatfinder.modules.activity import routes as activity_routes
from seatfinder.modules.lookup import routes as lookup_routes
from seatfinder.modules.status import routes as status_routes
from seatfinder.modules.functions import routes as functions_routes
from seatfinder.modules.functions.keep_alive import keep_alive_loop

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(UnknownTableError)
async def unknown_table_handler(request: Request, exc: UnknownTableError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ReadOnlyTableError)
async def read_only_table_handler(request: Request, exc: ReadOnlyTableError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(QueryValidationError)
async def query_validation_handler(request: Request, exc: QueryValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(FunctionError)
async def function_error_handler(request: Request, exc: FunctionError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(tables_routes.router, prefix="/api/v1")
app.include_router(sql_routes.router, prefix="/api/v1")
app.include_router(students_routes.router, prefix="/api/v1")
app.include_router(teachers_routes.router, prefix="/api/v1")
app.include_router(site_settings_routes.router, prefix="/api/v1")
app.include_router(admins_routes.router, prefix="/api/v1")
app.include_router(activity_routes.router, prefix="/api/v1")
app.include_router(lookup_routes.router, prefix="/api/v1")
app.include_router(status_routes.router, prefix="/api/v1")

# Server functions
app.include_router(sql_routes.function_router, prefix="/functions/v1")
app.include_router(functions_routes.router, prefix="/functions/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    if settings.keep_alive_interval_seconds > 0:
        app.state.keep_alive_task = asyncio.create_task(
            keep_alive_loop(get_service_supabase(), settings.keep_alive_interval_seconds)
        )
        logger.info(f"Keep-alive started - pinging every {settings.keep_alive_interval_seconds}s")


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "keep_alive_task", None)
    if task is not None:
        task.cancel()
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe"""
    return {"status": "ready"}
