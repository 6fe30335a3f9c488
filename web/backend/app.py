#!/usr/bin/env python3
"""
Matchrimoney API - FastAPI Application

REST backend for couples looking to split wedding vendor costs.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:5000/api/health - Health check (port configurable in config.yaml)
    - http://localhost:5000/docs - API Documentation (Swagger UI)
    - http://localhost:5000/redoc - Alternative API Documentation
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from core.config_loader import AppConfig, get_config
from core.security import TokenService
from database.database import DatabaseManager
from notification import NotificationService
from .exceptions import (
    ServiceException,
    service_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import (
    auth_router,
    users_router,
    matches_router,
    messages_router
)
from .routers.auth import add_rate_limit_handlers
from .services.storage_service import StorageService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    db_manager: Optional[DatabaseManager] = None,
    notification_service: Optional[NotificationService] = None
) -> FastAPI:
    """
    Build the application around explicit collaborators.

    Args:
        config: Application config (defaults to config.yaml + environment).
        db_manager: Database manager (defaults to one built from config.database).
        notification_service: Email sender (defaults to SMTP from config.email).
    """
    config = config or get_config()
    db_manager = db_manager or DatabaseManager(config.database)

    if config.database.create_tables:
        db_manager.create_tables()

    app = FastAPI(
        title="Matchrimoney API",
        description="Find couples with nearby weddings and split vendor costs",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.config = config
    app.state.db_manager = db_manager
    app.state.token_service = TokenService(config.auth)
    app.state.notification_service = notification_service or NotificationService(config)
    app.state.storage_service = StorageService(config.storage)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    # Configure rate limiting
    add_rate_limit_handlers(app)

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(matches_router)
    app.include_router(messages_router)

    # Uploaded profile pictures
    upload_dir = Path(config.storage.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(config.storage.url_prefix, StaticFiles(directory=str(upload_dir)), name="uploads")

    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "matchrimoney-api"}

    return app


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()

    logger.info(f"Starting Matchrimoney API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:create_app",
        factory=True,
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
