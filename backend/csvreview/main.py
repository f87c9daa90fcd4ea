"""FastAPI application entry point"""
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from csvreview.api.v1 import api_router
from csvreview.config import API_PREFIX, CORS_ORIGINS
from csvreview.database import Database
from csvreview.errors import register_exception_handlers
from csvreview.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database: Database = app.state.database
    if not database.connect():
        # Keep serving; /health reports the outage and requests get 503
        logger.warning("Starting without a database connection")
    yield
    database.dispose()


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the application around an explicitly provided database"""
    app = FastAPI(title="CSV Review API", version="1.0.0", lifespan=lifespan)
    app.state.database = database or Database()
    app.state.started_at = time.monotonic()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    return app


configure_logging()
app = create_app()
