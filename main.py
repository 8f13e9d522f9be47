from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.v1.router import api_router
from core.config import AppSettings, get_settings
from db.database import close_client, create_motor_client, get_database
from repositories.appointments import AppointmentStore, InMemoryAppointmentStore, MongoAppointmentStore
from services.errors import BookingError, StorageFailure
from services.scheduling import SchedulingEngine


def configure_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "level": level,
                }
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )


logger = logging.getLogger(__name__)


def _add_cors(app: FastAPI, origins_env: str) -> None:
    origins_env = origins_env.strip()
    if origins_env in {"*", '"*"'}:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        allowed_origins = [o.strip() for o in origins_env.split(",") if o.strip()]
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookingError)
    async def _booking_error(request: Request, exc: BookingError) -> JSONResponse:
        if isinstance(exc, StorageFailure):
            logger.error("request.storage_failure", extra={"path": request.url.path})
        body = {"message": exc.message}
        if exc.errors:
            body["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
        logger.info("request.validation_failed", extra={"path": request.url.path, "error_count": len(errors)})
        return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.unhandled_error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"message": StorageFailure.default_message})


def create_app(settings: Optional[AppSettings] = None, store: Optional[AppointmentStore] = None) -> FastAPI:
    settings = settings or get_settings()
    motor_client = None

    if store is None:
        if settings.storage_backend == "memory":
            store = InMemoryAppointmentStore()
        else:
            motor_client = create_motor_client(settings)
            store = MongoAppointmentStore(
                get_database(motor_client, settings),
                collection=settings.appointments_collection,
            )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(store, MongoAppointmentStore):
            await store.ensure_indexes()
        logger.info("app.startup", extra={"storage_backend": type(store).__name__})
        try:
            yield
        finally:
            close_client(motor_client)

    app = FastAPI(title="Barbershop Booking API", version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.engine = SchedulingEngine(
        store,
        open_hour=settings.business_open_hour,
        close_hour=settings.business_close_hour,
        slot_minutes=settings.slot_duration_minutes,
        timezone_name=settings.timezone_name,
    )

    _add_cors(app, settings.allowed_origins)
    _register_error_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/")
    async def root_health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Application initialized")
    return app


def build_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:build_app", factory=True, host="0.0.0.0", port=8000, reload=True)
