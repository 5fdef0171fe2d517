from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..logging_config import get_logger
from ..pagination import INT64_MAX
from ..query import with_search_defaults
from ..repositories import TaskRepository
from ..schemas import TaskIn, TaskOut

logger = get_logger(__name__)

router = APIRouter(tags=["tasks"])


def _get_repo(request: Request) -> TaskRepository:
    """
    Dependency returning the repository created at startup.
    """
    return request.app.state.repository


# PUBLIC_INTERFACE
@router.get(
    "/task/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single Task by ID.",
    responses={
        200: {"description": "Task found"},
        404: {"description": "Task not found"},
    },
)
def get_task(task_id: int, repo: TaskRepository = Depends(_get_repo)) -> TaskOut:
    """
    Retrieve a single Task by its ID.
    """
    tasks = repo.get_by_id(task_id)
    if not tasks:
        logger.info(f"No task found with id: {task_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return TaskOut(**tasks[0])


# PUBLIC_INTERFACE
@router.get(
    "/tasks",
    response_model=List[TaskOut],
    summary="List Tasks",
    description=(
        "List tasks, optionally paginated.\n\n"
        "Query parameters:\n"
        "- page: zero-indexed page number\n"
        "- perPage: page size\n\n"
        "When either is -1 (the default) every task is returned."
    ),
)
def list_tasks(
    page: int = Query(-1, ge=-1, le=INT64_MAX, description="Zero-indexed page; -1 returns everything"),
    per_page: int = Query(
        -1, ge=-1, le=INT64_MAX, alias="perPage", description="Page size; -1 returns everything"
    ),
    repo: TaskRepository = Depends(_get_repo),
) -> List[TaskOut]:
    """
    List tasks with optional pagination.
    """
    tasks = repo.get_all(page, per_page)
    logger.info(f"No. of tasks fetched: {len(tasks)}")
    return [TaskOut(**t) for t in tasks]


# PUBLIC_INTERFACE
@router.get(
    "/tasks/search",
    response_model=List[TaskOut],
    summary="Search Tasks",
    description=(
        "Search tasks. Supported query parameters: id, status, addedOnFrom, addedOnTo, "
        "dueByFrom, dueByTo (epoch millis), page (default 0) and perPage (default 10). "
        "Other parameters are ignored. Results are unordered."
    ),
    responses={
        200: {"description": "Matching tasks"},
        400: {"description": "Invalid filter value"},
    },
)
def search_tasks(request: Request, repo: TaskRepository = Depends(_get_repo)) -> List[TaskOut]:
    """
    Search tasks by the filters given in the query string.
    """
    params = with_search_defaults(dict(request.query_params))
    tasks = repo.search(params)
    return [TaskOut(**t) for t in tasks]


# PUBLIC_INTERFACE
@router.post(
    "/task",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new Task and return it with its generated id.",
)
def create_task(payload: TaskIn, repo: TaskRepository = Depends(_get_repo)) -> TaskOut:
    """
    Create a new Task.
    """
    created_id = repo.create(payload)
    logger.info(f"Created task with id: {created_id}")
    return TaskOut(**payload.model_dump(exclude={"id"}), id=created_id)


# PUBLIC_INTERFACE
@router.put(
    "/task/{task_id}",
    response_model=TaskOut,
    summary="Replace Task",
    description="Replace every field of a Task. The id in the body must match the path.",
    responses={
        200: {"description": "Task updated"},
        400: {"description": "Body id differs from path id"},
    },
)
def update_task(task_id: int, payload: TaskIn, repo: TaskRepository = Depends(_get_repo)) -> TaskOut:
    """
    Full replace of a Task. The row is not checked for existence first.
    """
    if payload.id != task_id:
        logger.error("Bad data passed for update, or id in body is different from id in URL")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Body id must match path id")
    repo.update(payload, task_id)
    return TaskOut(**payload.model_dump(exclude={"id"}), id=task_id)


# PUBLIC_INTERFACE
@router.delete(
    "/task/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a Task by ID.",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found"},
    },
)
def delete_task(task_id: int, repo: TaskRepository = Depends(_get_repo)) -> Response:
    """
    Delete a Task. Returns 204 on success, 404 if not found.
    """
    rows_affected = repo.delete(task_id)
    if rows_affected == 0:
        logger.info(f"No task found with id: {task_id} for deletion")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    logger.info(f"Deleted task with id: {task_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
