"""
CreatorOps API: campaigns, creators and tasks with CSV bulk import.

Run locally with ``uvicorn creatorops.main:app --reload`` from ``backend/``.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import init_db
from .routers import (
    auth_router,
    campaigns_router,
    creators_router,
    tasks_router,
    payments_router,
    dashboard_router,
    csv_import_router,
)

logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()
API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} {API_VERSION} starting")
    init_db()
    yield
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    description="Campaign, creator, task and payment management with CSV bulk import",
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (
    auth_router,
    campaigns_router,
    creators_router,
    tasks_router,
    payments_router,
    dashboard_router,
    csv_import_router,
):
    app.include_router(router)


@app.get("/api")
def api_root():
    return {
        "name": settings.app_name,
        "version": API_VERSION,
        "imports": ["campaigns", "creators", "tasks"],
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
