from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from enum import IntEnum

class TaskStatus(IntEnum):
    Pending = 0
    InProgress = 1
    Completed = 2
    Cancelled = 3

class CamelModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)

class TaskUpdate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    status: TaskStatus

class TaskResponse(CamelModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    user_id: str
    user_email: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class MessageResponse(BaseModel):
    message: str
