from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.routes import debug, health, substitutes, teachers
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.db.bootstrap import ensure_runtime_schema_compatibility

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema_compatibility()
    logger.info("%s ready (environment=%s)", settings.project_name, settings.environment)
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.effective_cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(teachers.router, prefix=settings.api_prefix, tags=["teachers"])
app.include_router(substitutes.router, prefix=settings.api_prefix, tags=["substitutes"])
app.include_router(debug.router, prefix=f"{settings.api_prefix}/debug", tags=["debug"])

if settings.static_dir and Path(settings.static_dir).is_dir():
    # Mounted last so the API routes take precedence over the frontend.
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
