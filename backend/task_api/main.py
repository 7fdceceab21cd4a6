import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_api.core.config import settings
from task_api.core.database import engine, Base, AsyncSessionLocal
from task_api.core.logging import setup_logging
from task_api.core.seed import seed_admin, seed_roles
from task_api.models import task, user  # noqa: F401  register tables on Base.metadata
from task_api.routers import auth, tasks

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_roles(session)
        await seed_admin(session)
    logger.info("Task Management API started")
    yield
    await engine.dispose()

app = FastAPI(title="Task Management API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(tasks.router)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Invalid input on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid input"},
    )

@app.get("/")
async def root():
    return {"message": "Task Management API is running"}

def run():
    import uvicorn
    uvicorn.run("task_api.main:app", host="0.0.0.0", port=settings.API_PORT)
