from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from app.core.config import get_settings
from app.core.logger import configure_logging
from app.routers import chat, models, rag


settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: lessons are read per request (or through the cache), so only warn here
    if not os.path.isdir(settings.content_dir):
        logger.warning(
            "[RAG] Content directory %s not found; chat requests will fail until it exists",
            os.path.abspath(settings.content_dir),
        )
    yield
    # Shutdown: cleanup if needed


app = FastAPI(
    title="Physics Tutor API",
    description="Lesson-grounded chat tutor for the A Level Physics interactive guide",
    version="1.0.0",
    lifespan=lifespan,
)
# Avoid 307 redirects for trailing slash (e.g. /api/chat/ -> /api/chat) that can cause redirect loops behind nginx
app.router.redirect_slashes = False

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
        "http://localhost",
        "http://127.0.0.1",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router, prefix="/api/chat", tags=["Chat"])
app.include_router(models.router, prefix="/models", tags=["Models"])
app.include_router(rag.router, prefix="/rag", tags=["RAG"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
