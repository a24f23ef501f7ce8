import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.config import settings
from app.database import check_db_connection
from app.utils.exceptions import AppException
from app.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    integrity_error_handler,
    storage_error_handler,
    generic_exception_handler,
)

from app.api.v1 import auth
from app.api.v1 import drivers
from app.api.v1 import shifts
from app.api.v1 import schedules
from app.api.v1 import dayoff_patterns
from app.api.v1 import replacements
from app.api.v1 import overtime
from app.api.v1 import holidays
from app.api.v1 import reports

logging.basicConfig(
    level=logging.DEBUG if settings.APP_DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ok = check_db_connection()
    logger.info("DB connected" if ok else "DB connection FAILED")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Driver shift scheduling, replacements and overtime API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api/v1"
    app.include_router(auth.router,            prefix=PREFIX, tags=["Auth"])
    app.include_router(drivers.router,         prefix=PREFIX, tags=["Drivers"])
    app.include_router(shifts.router,          prefix=PREFIX, tags=["Shifts"])
    app.include_router(schedules.router,       prefix=PREFIX, tags=["Schedules"])
    app.include_router(dayoff_patterns.router, prefix=PREFIX, tags=["Day-off Patterns"])
    app.include_router(replacements.router,    prefix=PREFIX, tags=["Replacements"])
    app.include_router(overtime.router,        prefix=PREFIX, tags=["Overtime"])
    app.include_router(holidays.router,        prefix=PREFIX, tags=["Holidays"])
    app.include_router(reports.router,         prefix=PREFIX, tags=["Reports"])

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
