"""
Task CRUD over the relational store.

No authorization happens here; routers decide who may call what. Store
errors are logged and re-raised unchanged.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.models.task import Task
from task_api.models.user import User
from task_api.schemas.task import TaskResponse, TaskStatus

logger = logging.getLogger(__name__)

def _task_query():
    # Owner email comes from an explicit outer join, never a lazy relationship.
    return select(Task, User.email).outerjoin(User, User.id == Task.user_id)

def _newest_first(query):
    return query.order_by(Task.created_at.desc(), Task.id.desc())

def to_dto(task: Task, user_email: Optional[str]) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description or "",
        status=TaskStatus(task.status),
        user_id=task.user_id,
        user_email=user_email or "",
        created_at=task.created_at,
        updated_at=task.updated_at,
    )

class TaskService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, task_id: int) -> Optional[TaskResponse]:
        try:
            result = await self.db.execute(_task_query().where(Task.id == task_id))
            row = result.first()
            if row is None:
                return None
            return to_dto(*row)
        except Exception:
            logger.exception("Error retrieving task by ID")
            raise

    async def get_all(self) -> List[TaskResponse]:
        try:
            result = await self.db.execute(_newest_first(_task_query()))
            return [to_dto(*row) for row in result.all()]
        except Exception:
            logger.exception("Error retrieving all tasks")
            raise

    async def get_by_user(self, user_id: str) -> List[TaskResponse]:
        try:
            result = await self.db.execute(
                _newest_first(_task_query().where(Task.user_id == user_id))
            )
            return [to_dto(*row) for row in result.all()]
        except Exception:
            logger.exception("Error retrieving user tasks")
            raise

    async def create(self, user_id: str, title: str, description: str) -> TaskResponse:
        try:
            task = Task(
                title=title,
                description=description,
                user_id=user_id,
                status=int(TaskStatus.Pending),
                created_at=datetime.now(timezone.utc),
            )
            self.db.add(task)
            await self.db.commit()
            await self.db.refresh(task)

            result = await self.db.execute(select(User.email).where(User.id == user_id))
            return to_dto(task, result.scalar_one_or_none())
        except Exception:
            logger.exception("Error creating task")
            raise

    async def update(
        self, task_id: int, title: str, description: str, status: TaskStatus
    ) -> Optional[TaskResponse]:
        # Last write wins: there is no version check.
        try:
            result = await self.db.execute(_task_query().where(Task.id == task_id))
            row = result.first()
            if row is None:
                return None

            task, user_email = row
            task.title = title
            task.description = description
            task.status = int(status)
            task.updated_at = datetime.now(timezone.utc)
            await self.db.commit()
            await self.db.refresh(task)
            return to_dto(task, user_email)
        except Exception:
            logger.exception("Error updating task")
            raise

    async def delete(self, task_id: int) -> bool:
        try:
            result = await self.db.execute(delete(Task).where(Task.id == task_id))
            await self.db.commit()
            return result.rowcount > 0
        except Exception:
            logger.exception("Error deleting task")
            raise
