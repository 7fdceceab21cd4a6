import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.database import get_db
from task_api.core.permissions import ADMIN_ROLE, AccessDecision, can_access
from task_api.routers.auth import CurrentUser, get_current_user, require_role
from task_api.schemas.task import MessageResponse, TaskCreate, TaskResponse, TaskUpdate
from task_api.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_current_user)],
    responses={
        401: {"description": "Not authenticated"},
        404: {"model": MessageResponse, "description": "Not found"},
    },
)

def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)

def task_not_found() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Task not found"})

def server_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": message})

@router.get("", response_model=List[TaskResponse])
async def get_all_tasks(
    current_user: CurrentUser = Depends(require_role(ADMIN_ROLE)),
    task_service: TaskService = Depends(get_task_service),
):
    """Get all tasks (Admin only)"""
    try:
        return await task_service.get_all()
    except Exception:
        logger.exception("Error getting all tasks")
        return server_error("An error occurred while retrieving tasks")

@router.get("/my-tasks", response_model=List[TaskResponse])
async def get_my_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
):
    """Get the caller's own tasks"""
    try:
        return await task_service.get_by_user(current_user.id)
    except Exception:
        logger.exception("Error getting user tasks")
        return server_error("An error occurred while retrieving your tasks")

@router.get("/{task_id}", response_model=TaskResponse, responses={403: {"description": "Forbidden"}})
async def get_task_by_id(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
):
    try:
        task = await task_service.get_by_id(task_id)
    except Exception:
        logger.exception("Error getting task by ID")
        return server_error("An error occurred while retrieving the task")

    if task is None:
        return task_not_found()
    if can_access(current_user.id, current_user.roles, task) is AccessDecision.FORBID:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return task

@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    request: Request,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
):
    """Create a task owned by the caller"""
    try:
        task = await task_service.create(current_user.id, task_in.title, task_in.description)
    except Exception:
        logger.exception("Error creating task")
        return server_error("An error occurred while creating the task")

    response.headers["Location"] = str(request.url_for("get_task_by_id", task_id=task.id))
    return task

@router.put("/{task_id}", response_model=TaskResponse, responses={403: {"description": "Forbidden"}})
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
):
    try:
        task = await task_service.get_by_id(task_id)
        if task is None:
            return task_not_found()
        if can_access(current_user.id, current_user.roles, task) is AccessDecision.FORBID:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

        updated = await task_service.update(task_id, task_in.title, task_in.description, task_in.status)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating task")
        return server_error("An error occurred while updating the task")

    # deleted between the read and the write
    if updated is None:
        return task_not_found()
    return updated

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    current_user: CurrentUser = Depends(require_role(ADMIN_ROLE)),
    task_service: TaskService = Depends(get_task_service),
):
    """Delete a task (Admin only)"""
    try:
        deleted = await task_service.delete(task_id)
    except Exception:
        logger.exception("Error deleting task")
        return server_error("An error occurred while deleting the task")

    if not deleted:
        return task_not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
