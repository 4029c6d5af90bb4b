"""FastAPI application.

Built by :func:`create_app`; run it with ``python -m taskboard`` or
``uvicorn --factory taskboard.main:create_app``.
"""

import logging

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.exceptions import HTTPException
from starlette.types import Scope

from taskboard import __version__
from taskboard.config import Settings, load_settings
from taskboard.errors import TaskError, TaskNotFoundError
from taskboard.models import (
    ErrorResponse,
    HealthResponse,
    Task,
    TaskCreate,
    TaskFilter,
    TaskUpdate,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from taskboard.service import TaskService
from taskboard.store import TaskFileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
_INVALID = {status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse}}


class ClientFiles(StaticFiles):
    """Static client build that answers unknown non-API paths with index.html."""

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != status.HTTP_404_NOT_FOUND or scope["path"].startswith("/api"):
                raise
            return await super().get_response("index.html", scope)


def get_service(request: Request) -> TaskService:
    """Return the service bound to the running application."""
    return request.app.state.service


def get_filters(
    status: str | None = Query(default=None, description="todo, in_progress or done"),
    priority: str | None = Query(default=None, description="low, medium or high"),
    search: str | None = Query(default=None, description="Case-insensitive text in title or description"),
) -> TaskFilter:
    """Parse the list query; blank values mean no filter."""
    try:
        return TaskFilter(status=status, priority=priority, search=search)
    except ValidationError as exc:
        errors = [{**err, "loc": ("query", *err["loc"])} for err in exc.errors(include_url=False)]
        raise RequestValidationError(errors) from exc


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse()


@router.get(
    "/tasks",
    response_model=list[Task],
    response_model_exclude_none=True,
    responses=_INVALID,
    tags=["Tasks"],
)
def list_tasks(
    filters: TaskFilter = Depends(get_filters),
    service: TaskService = Depends(get_service),
) -> list[Task]:
    """List tasks, optionally filtered by status, priority and a search term."""
    return service.list_tasks(filters)


@router.post(
    "/tasks",
    response_model=Task,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses=_INVALID,
    tags=["Tasks"],
)
def create_task(data: TaskCreate, service: TaskService = Depends(get_service)) -> Task:
    """Create a new task."""
    return service.create_task(data)


@router.get(
    "/tasks/{task_id}",
    response_model=Task,
    response_model_exclude_none=True,
    responses=_NOT_FOUND,
    tags=["Tasks"],
)
def get_task(task_id: str, service: TaskService = Depends(get_service)) -> Task:
    """Get a specific task by ID."""
    task = service.get_task(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


@router.put(
    "/tasks/{task_id}",
    response_model=Task,
    response_model_exclude_none=True,
    responses={**_NOT_FOUND, **_INVALID},
    tags=["Tasks"],
)
def update_task(
    task_id: str,
    data: TaskUpdate,
    service: TaskService = Depends(get_service),
) -> Task:
    """Update an existing task. Send ``dueDate: null`` to clear the due date."""
    return service.update_task(task_id, data)


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
    tags=["Tasks"],
)
def delete_task(task_id: str, service: TaskService = Depends(get_service)) -> None:
    """Delete a task."""
    service.delete_task(task_id)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        ValidationErrorDetail(path=list(err["loc"][1:]), message=err["msg"])
        for err in exc.errors()
    ]
    body = ValidationErrorResponse(details=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def _task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    message = exc.message
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        message = "Internal Server Error"
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=message).model_dump())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal Server Error").model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around a store at ``settings.tasks_file``."""
    settings = settings or load_settings()

    app = FastAPI(
        title="Task Manager API",
        description="Task management backed by a JSON file.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.service = TaskService(TaskFileStore(settings.tasks_file))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(TaskError, _task_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(router)

    # Registered last so /api routes win
    if settings.client_dist is not None and settings.client_dist.is_dir():
        app.mount("/", ClientFiles(directory=settings.client_dist, html=True), name="client")
        logger.info("Serving client build from %s", settings.client_dist)

    return app
