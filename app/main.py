import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.router import api_router
from app.core import errors
from app.core.config import Settings, settings as default_settings
from app.core.security import IdentityProvider
from app.db.base import Base
from app.db.init_db import create_database, seed_lookups
from app.db.session import make_engine, make_session_factory
from app.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(settings: Settings, message: str, detail: Optional[str] = None) -> dict:
    # Diagnostics stay out of non-development responses
    error = detail if settings.is_development else None
    return ErrorResponse(message=message, error=error).model_dump(exclude_none=True)


def _validation_message(exc: RequestValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else None
    if not first:
        return "Invalid request"
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(errors.AppError)
    async def app_error_handler(request: Request, exc: errors.AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(settings, exc.message, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_body(settings, _validation_message(exc), str(exc.errors())),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return JSONResponse(status_code=exc.status_code, content=_error_body(settings, message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s.", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_body(settings, "Internal server error", str(exc)),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    database_url = settings.assemble_db_url()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = make_engine(database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: Ensure DB exists, create tables and seed lookup rows
        if database_url.startswith("postgresql"):
            create_database(settings)
        Base.metadata.create_all(bind=engine)
        db = app.state.SessionLocal()
        try:
            seed_lookups(db)
        finally:
            db.close()
        yield
        engine.dispose()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.SessionLocal = make_session_factory(engine)
    app.state.identity = IdentityProvider.from_settings(settings)

    # Set all CORS enabled origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def read_root():
        return {"success": True, "message": f"{settings.PROJECT_NAME} is running"}

    return app


app = create_app()
