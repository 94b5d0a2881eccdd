"""
User API Server
CRUD over the users collection with request validation and JSON error responses
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS
from database.connection import init_database, close_database, get_users_collection
from database.users_gateway import UsersGateway
from api.routes import health, users
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager; a database failure here aborts startup"""
    client = await init_database()
    app.state.mongo_client = client
    app.state.users_collection = get_users_collection(client)
    await UsersGateway(app.state.users_collection).ensure_indexes()
    yield
    await close_database(client)

def create_app() -> FastAPI:
    app = FastAPI(
        title="User API",
        description="CRUD API for users backed by a document store",
        version="1.0.0",
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Setup centralized error handling, including the catch-all 404
    setup_error_handling(app)

    # Include API routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix="/user", tags=["User"])

    return app

# FastAPI app instance is exported for use by uvicorn
app = create_app()
