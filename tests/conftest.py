"""
pytest configuration and fixtures for the User API test suite
In-memory users collection, deterministic clock, and an HTTP client bound to the app
"""

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import httpx
from mongomock_motor import AsyncMongoMockClient

# Settings refuse to load without a connection string
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/user_api_test")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from app import create_app
from api.routes.users import get_users_service
from database.users_gateway import UsersGateway
from services.users_service import UsersService


class SteppingClock:
    """Returns a strictly increasing naive UTC time on every call"""

    def __init__(self, start: datetime = datetime(2025, 1, 20, 9, 0, 0), step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def clock():
    return SteppingClock()


@pytest_asyncio.fixture
async def users_collection():
    client = AsyncMongoMockClient()
    collection = client["user_api_test"]["users"]
    await UsersGateway(collection).ensure_indexes()
    return collection


@pytest.fixture
def gateway(users_collection, clock):
    return UsersGateway(users_collection, clock=clock)


@pytest.fixture
def app(gateway, users_collection):
    application = create_app()
    mongo_client = MagicMock()
    mongo_client.admin.command = AsyncMock(return_value={"ok": 1.0})
    application.state.mongo_client = mongo_client
    application.state.users_collection = users_collection
    application.dependency_overrides[get_users_service] = lambda: UsersService(gateway)
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


def make_user(**overrides):
    """Valid create body; overrides replace or add fields"""
    body = {
        "name": "John Doe",
        "email": "john.doe@example.com",
        "age": 30,
        "phone": "1234567890",
        "address": "1234 Main St"
    }
    body.update(overrides)
    return body
