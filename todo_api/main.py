"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_api.api import auth, todos
from todo_api.api.responses import register_exception_handlers
from todo_api.config import Settings, get_settings
from todo_api.database import Database, init_db
from todo_api.logging_config import configure_logging
from todo_api.schemas.common import DataResponse, HealthData
from todo_api.services.tokens import TokenService
from todo_api.services.users import build_password_context

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an application bound to the given settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the shared storage handle and token service for the process."""
        configure_logging(settings.log_level)
        database = Database(settings.database_url, echo=settings.database_echo)
        await init_db(database)

        app.state.settings = settings
        app.state.database = database
        app.state.token_service = TokenService.from_settings(settings)
        app.state.pwd_context = build_password_context(settings.bcrypt_rounds)
        logger.info("Todo API started (%s)", settings.environment)
        yield
        await database.dispose()

    app = FastAPI(
        title="Todo List API",
        description="Multi-user todo list with token authentication",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(todos.router)

    @app.get("/health", response_model=DataResponse[HealthData])
    async def health_check():
        """Health check endpoint."""
        return DataResponse(
            message="Service is healthy",
            data=HealthData(status="healthy", environment=settings.environment),
        )

    return app


app = create_app()
