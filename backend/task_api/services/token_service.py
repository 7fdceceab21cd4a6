from datetime import timedelta
from typing import List, Optional

from task_api.core.config import settings
from task_api.core.security import create_access_token
from task_api.models.user import User

class TokenService:
    def __init__(self, expire_minutes: Optional[int] = None):
        self.expire_minutes = expire_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def issue_token(self, user: User, roles: List[str]) -> str:
        return create_access_token(
            data={
                "sub": user.id,
                "email": user.email,
                "username": user.username,
                "roles": list(roles),
            },
            expires_delta=timedelta(minutes=self.expire_minutes),
        )
