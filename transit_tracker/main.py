# path: transit-tracker/transit_tracker/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI

from transit_tracker.api.routes.projects import router as projects_router
from transit_tracker.config import log_store_config, settings
from transit_tracker.logging_config import setup_logging
from transit_tracker.services.sources.remote_store import close_project_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    log_store_config(settings)
    yield
    await close_project_store()


app = FastAPI(title="transit-tracker", lifespan=lifespan)

app.include_router(projects_router)
