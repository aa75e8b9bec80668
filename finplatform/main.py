# main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from . import __version__
from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .config import Settings
from .db import Database
from .errors import register_exception_handlers
from .schemas import HealthOut
from .transaction_routes import router as transaction_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application. Settings and the database handle are created once
    here and shared with handlers through app.state.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    db = database or Database(settings.database_url)
    db.init_db()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        db.dispose()

    app = FastAPI(
        lifespan=lifespan,
        title="Financial Platform API",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.db = db

    # -----------------------------------------------------------------------
    # CORS
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Root & health
    # -----------------------------------------------------------------------
    @app.get("/", include_in_schema=False)
    def index():
        return RedirectResponse(url="/docs")

    @app.get("/health", response_model=HealthOut)
    def health(request: Request):
        connected = request.app.state.db.ping()
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc),
            "database": "connected" if connected else "disconnected",
            "message": "Financial Platform Backend is running",
        }

    app.include_router(auth_router)
    app.include_router(transaction_router)
    app.include_router(admin_router)

    logger.info("Financial Platform API ready (strict transitions: %s)", settings.strict_transaction_transitions)
    return app
