import sqlite3
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import Database
from .errors import TaskAPIException
from .logging_config import ACCESS_LOGGER, get_logger, setup_logging
from .repositories import TaskRepository
from .routers import tasks as tasks_router
from .settings import Settings, get_settings

logger = get_logger(__name__)
access_logger = get_logger(ACCESS_LOGGER)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "CRUD operations for tasks with filtered, paginated search.",
    },
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The database is opened and the `tasks` table created during startup; a
    failure there aborts startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_file, settings.access_log_file)
        try:
            db = Database.open(settings.db_path)
        except TaskAPIException as e:
            logger.error(f"Failed to initialize services: {e.message} ({e.detail})")
            raise
        app.state.repository = TaskRepository(db)
        logger.info("Task repository initialized successfully")
        yield
        logger.info("Task API shut down")

    app = FastAPI(
        title="Task Backend",
        description="Backend API service for tracking tasks in a relational table.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=settings.cors_allow_headers or ["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        access_logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(TaskAPIException)
    async def task_api_exception_handler(request: Request, exc: TaskAPIException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error, "message": exc.message},
        )

    @app.exception_handler(sqlite3.Error)
    async def database_exception_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "DatabaseError", "message": "Database operation failed"},
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "database": settings.db_path}

    app.include_router(tasks_router.router)
    return app


app = create_app()
