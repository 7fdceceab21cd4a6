from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from task_api.core.database import Base
from task_api.schemas.task import TaskStatus

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(Integer, nullable=False, default=int(TaskStatus.Pending))  # TaskStatus ordinal
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
