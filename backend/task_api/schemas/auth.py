from typing import List, Optional

from pydantic import EmailStr, Field

from task_api.schemas.task import CamelModel

class RegisterRequest(CamelModel):
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=256)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class UserDto(CamelModel):
    id: str
    email: str
    username: str
    roles: List[str] = []

class AuthResponse(CamelModel):
    success: bool
    message: str
    token: Optional[str] = None
    user: Optional[UserDto] = None
