from enum import Enum
from typing import Iterable

from task_api.schemas.task import TaskResponse

ADMIN_ROLE = "Admin"
USER_ROLE = "User"
DEFAULT_ROLES = (ADMIN_ROLE, USER_ROLE)

class AccessDecision(str, Enum):
    ALLOW = "allow"
    FORBID = "forbid"

def is_admin(roles: Iterable[str]) -> bool:
    return ADMIN_ROLE in roles

def can_access(caller_id: str, caller_roles: Iterable[str], task: TaskResponse) -> AccessDecision:
    """Admins reach every task; everyone else only the tasks they own."""
    if is_admin(caller_roles) or task.user_id == caller_id:
        return AccessDecision.ALLOW
    return AccessDecision.FORBID
