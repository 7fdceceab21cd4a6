"""
Registration and login.

Both operations answer with an ``AuthResponse`` and never raise: unexpected
errors are logged and turned into a generic failure message.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.permissions import USER_ROLE
from task_api.models.user import User
from task_api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserDto
from task_api.services.credential_store import CredentialStore
from task_api.services.token_service import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

class AuthService:
    def __init__(
        self,
        db: AsyncSession,
        credentials: Optional[CredentialStore] = None,
        tokens: Optional[TokenService] = None,
    ):
        self.credentials = credentials or CredentialStore(db)
        self.tokens = tokens or TokenService()

    async def register(self, request: RegisterRequest) -> AuthResponse:
        try:
            if request.password != request.confirm_password:
                return AuthResponse(success=False, message="Passwords do not match")

            if await self.credentials.find_by_email(request.email):
                return AuthResponse(success=False, message="User with this email already exists")

            result = await self.credentials.create_user(
                email=request.email,
                username=request.username,
                password=request.password,
            )
            if not result.succeeded:
                return AuthResponse(
                    success=False,
                    message=f"User creation failed: {', '.join(result.errors)}",
                )

            user = result.user
            await self.credentials.add_to_role(user, USER_ROLE)
            logger.info("Registered user %s", user.id)
            return await self._authenticated(user, "User registered successfully")
        except Exception:
            logger.exception("Error during registration")
            return AuthResponse(success=False, message="An error occurred during registration")

    async def login(self, request: LoginRequest) -> AuthResponse:
        try:
            user = await self.credentials.find_by_email(request.email)
            if user is None:
                return AuthResponse(success=False, message=INVALID_CREDENTIALS)

            if not await self.credentials.check_password(user, request.password):
                return AuthResponse(success=False, message=INVALID_CREDENTIALS)

            return await self._authenticated(user, "Login successful")
        except Exception:
            logger.exception("Error during login")
            return AuthResponse(success=False, message="An error occurred during login")

    async def _authenticated(self, user: User, message: str) -> AuthResponse:
        roles: List[str] = await self.credentials.get_roles(user)
        return AuthResponse(
            success=True,
            message=message,
            token=self.tokens.issue_token(user, roles),
            user=UserDto(id=user.id, email=user.email, username=user.username or "", roles=roles),
        )
