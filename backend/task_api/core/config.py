from typing import List, Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./task_api.db"
    SQL_ECHO: bool = False
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    JWT_ISSUER: str = "task-management-api"
    JWT_AUDIENCE: str = "task-management-api"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]
    API_PORT: int = 8000

    # Optional administrator created at startup
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: Optional[str] = None

    class Config:
        env_file = ".env"

settings = Settings()
