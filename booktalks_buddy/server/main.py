"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers exception handlers and includes all API routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booktalks_buddy.core.database.session import init_db
from booktalks_buddy.core.logging_config import get_logger, setup_logging
from booktalks_buddy.core.monitoring import initialize_logfire

from .api.v1 import (
    analytics,
    books,
    clubs,
    collections,
    discussions,
    events,
    health,
    me,
    moderation,
    nominations,
    notifications,
    progress,
    questions,
    reading_lists,
    store,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import close_book_search_client

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Initializes the database on startup and closes the shared book search
    client on shutdown.
    """
    try:
        logger.info("Starting up BookTalks Buddy Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down BookTalks Buddy Server...")
    await close_book_search_client()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    BookTalks Buddy Server API

    Backend services for bookstore-hosted reading communities: book clubs with
    join questions, discussions, reading progress and nominations; store events,
    carousels and in-store memberships; personal reading lists and collections;
    moderation, notifications and analytics.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

CLUBS = f"{constant.API_V1_STR}/clubs"

app.include_router(health.router, prefix=constant.API_V1_STR, tags=["health"])
app.include_router(me.router, prefix=f"{constant.API_V1_STR}/me")
app.include_router(clubs.router, prefix=CLUBS)
app.include_router(questions.router, prefix=CLUBS)
app.include_router(progress.router, prefix=CLUBS)
app.include_router(nominations.router, prefix=CLUBS)
app.include_router(discussions.router, prefix=constant.API_V1_STR)
app.include_router(events.router, prefix=f"{constant.API_V1_STR}/events")
app.include_router(books.router, prefix=f"{constant.API_V1_STR}/books")
app.include_router(reading_lists.router, prefix=f"{constant.API_V1_STR}/reading-list")
app.include_router(collections.router, prefix=f"{constant.API_V1_STR}/collections")
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications")
app.include_router(moderation.router, prefix=f"{constant.API_V1_STR}/moderation")
app.include_router(store.router, prefix=f"{constant.API_V1_STR}/stores")
app.include_router(analytics.router, prefix=f"{constant.API_V1_STR}/analytics")
