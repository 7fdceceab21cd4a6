"""
User records, password verification and role membership.

Passwords need at least six characters with a digit, a lowercase letter, an
uppercase letter and a symbol. Usernames may only use letters, digits and
"-._@+", and are unique regardless of case. Every broken rule is reported so
callers can show the whole list at once.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.security import get_password_hash, verify_password
from task_api.models.user import Role, User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9\-._@+]+")

@dataclass
class CreateUserResult:
    user: Optional[User] = None
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.user is not None and not self.errors

def validate_password(password: str) -> List[str]:
    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters.")
    if not any(not c.isalnum() for c in password):
        errors.append("Passwords must have at least one non alphanumeric character.")
    if not any(c.isdigit() for c in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(c.islower() for c in password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(c.isupper() for c in password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    return errors

class CredentialStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def create_user(self, email: str, username: str, password: str) -> CreateUserResult:
        """Create a user with no roles. Nothing is written when validation fails."""
        errors = []
        if not USERNAME_PATTERN.fullmatch(username):
            errors.append(f"Username '{username}' is invalid, can only contain letters or digits.")
        elif await self.find_by_username(username):
            errors.append(f"Username '{username}' is already taken.")
        if await self.find_by_email(email):
            errors.append(f"Email '{email}' is already taken.")
        errors.extend(validate_password(password))
        if errors:
            return CreateUserResult(errors=errors)

        user = User(
            email=email,
            username=username,
            hashed_password=get_password_hash(password),
            created_at=datetime.now(timezone.utc),
            roles=[],
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user, attribute_names=["roles"])
        return CreateUserResult(user=user)

    async def check_password(self, user: User, password: str) -> bool:
        return verify_password(password, user.hashed_password)

    async def get_or_create_role(self, name: str) -> Role:
        result = await self.db.execute(select(Role).where(Role.name == name))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=name)
            self.db.add(role)
            await self.db.flush()
            logger.info("Created role %s", name)
        return role

    async def add_to_role(self, user: User, role_name: str) -> None:
        role = await self.get_or_create_role(role_name)
        if role not in user.roles:
            user.roles.append(role)
        await self.db.commit()

    async def get_roles(self, user: User) -> List[str]:
        result = await self.db.execute(
            select(Role.name).join(Role.users).where(User.id == user.id).order_by(Role.name)
        )
        return list(result.scalars().all())
