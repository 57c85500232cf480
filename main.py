import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session, sessionmaker

from townhall.config import get_settings
from townhall.infrastructure.database import SessionLocal, initialize_database
from townhall.interfaces.api.container import NotificationServices
from townhall.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def create_app(session_factory: sessionmaker[Session] | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``session_factory`` is the store handle shared by every notification
    component; the configured database is used when it is omitted.
    """

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    factory = session_factory or SessionLocal

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the tables on startup and release the engine on shutdown."""

        bind = factory.kw["bind"]
        initialize_database(bind)
        logger.info("Town Hall notification service started")
        yield
        bind.dispose()

    app = FastAPI(title="Town Hall Notifications", lifespan=lifespan)
    app.state.notifications = NotificationServices.build(factory)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_routes(app)
    return app


app = create_app()
