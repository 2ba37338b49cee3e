"""
Zoo Management Backend - FastAPI Application

REST API for animals, habitats, staff and visitor records.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from zoo_api.config import get_settings
from zoo_api.core.error_handlers import register_error_handlers
from zoo_api.core.logging import configure_logging
from zoo_api.database.connections import close_connections, get_mongo_client
from zoo_api.database.indexes import create_indexes
from zoo_api.routers import animals, auth, habitats, health, staff, visitors
from zoo_api.services.google_oauth import close_google_oauth_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Create indexes

    Shutdown:
    - Close HTTP and database connections
    """
    configure_logging(get_settings().log_level)
    logger.info("Starting up Zoo Management Backend...")

    try:
        client = await get_mongo_client()
        await create_indexes(client)
        logger.info("Database indexes created")
    except PyMongoError as e:
        logger.warning(f"Database initialization warning: {e}")

    yield

    logger.info("Shutting down Zoo Management Backend...")
    await close_google_oauth_client()
    await close_connections()
    logger.info("Database connections closed")


app = FastAPI(
    title="Zoo Management API",
    description="""
## Zoo Management API

Record keeping for a zoo's animals, habitats, staff and visitors.

### Features
- **Authentication**: Password and Google sign-in, JWT bearer tokens, staff roles
- **Animals**: Animal records with habitat and keeper assignments
- **Habitats**: Capacity and live occupancy, kept in step with animal moves
- **Staff**: Staff accounts (admin, keeper, veterinarian)
- **Visitors**: Daily visitor and revenue records

### Authentication
All resource endpoints require a bearer token:
```
Authorization: Bearer your_jwt_token
```

Obtain a token via `POST /auth/login` or `POST /auth/register`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(animals.router)
app.include_router(habitats.router)
app.include_router(staff.router)
app.include_router(visitors.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Zoo Management API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
