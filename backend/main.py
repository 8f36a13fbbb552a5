"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import preferences
from database import Base, get_engine
from logging_config import setup_logging
from models import Preference, get_qualified_table_name

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Make sure the schema exists on startup."""
    try:
        Base.metadata.create_all(bind=get_engine())
        logger.info("Preferences stored in table %s", get_qualified_table_name())
    except Exception:
        logger.warning("Schema check failed on startup", exc_info=True)
    yield


app = FastAPI(
    title="Model Preferences",
    description="Typed key/value preferences attached to application records",
    version="0.1.0",
    lifespan=lifespan,
)

# Include API routers
app.include_router(preferences.router)


@app.get("/health")
def health_check():
    """Health check endpoint, naming the table preferences are stored in."""
    return {"status": "ok", "preference_table": Preference.__tablename__}
