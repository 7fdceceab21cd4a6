import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.database import get_db
from task_api.core.security import decode_access_token
from task_api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from task_api.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")

class CurrentUser(BaseModel):
    id: str
    email: str = ""
    username: str = ""
    roles: List[str] = []

def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)

async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.debug("JWT validation error: %s", e)
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        logger.debug("Token missing 'sub'")
        raise credentials_exception
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return CurrentUser(
        id=user_id,
        email=payload.get("email", ""),
        username=payload.get("username", ""),
        roles=roles,
    )

def require_role(role: str):
    async def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if role not in current_user.roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
        return current_user
    return checker

@router.post("/register", response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user and return a bearer token"""
    response = await auth_service.register(request)
    if not response.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode="json", by_alias=True),
        )
    return response

@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email and password"""
    response = await auth_service.login(request)
    if not response.success:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=response.model_dump(mode="json", by_alias=True),
        )
    return response
