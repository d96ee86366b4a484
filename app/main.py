import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.database import engine, Base
from app.core.exceptions import AuthError, TaskAppError
from app.core.logging_setup import setup_logging
from app.routers import health, auth, tasks
from app.services.blob_store import get_blob_store

setup_logging()
logger = logging.getLogger("app.main")

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Task Manager API",
    version="1.0.0"
)


@app.exception_handler(TaskAppError)
async def task_app_error_handler(request: Request, exc: TaskAppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # never leak internals to the client, keep the traceback in the logs
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(tasks.router)

# Voice-note blobs, served from the local blob store directory
get_blob_store()
app.mount(settings.VOICE_NOTE_URL_PREFIX, StaticFiles(directory=settings.VOICE_NOTE_DIR), name="voice-notes")
