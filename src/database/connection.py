"""
Database client lifecycle for the document store
"""

import logging
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from config.settings import MONGO_URI, MONGO_DB_NAME, USERS_COLLECTION

logger = logging.getLogger(__name__)

async def init_database(uri: str = MONGO_URI) -> AsyncMongoClient:
    """Open the process-wide client and verify the server answers"""
    client = AsyncMongoClient(uri, serverSelectionTimeoutMS=5000)

    # Test connection; failure here aborts startup
    await client.admin.command("ping")

    logger.info("Database initialized successfully")
    return client


async def close_database(client: AsyncMongoClient):
    """Close the client and its connection pool"""
    if client is not None:
        await client.close()
    logger.info("Database connections closed")


def get_users_collection(client: AsyncMongoClient) -> AsyncCollection:
    """Resolve the users collection, preferring the database named in the URI"""
    database = client.get_default_database(default=MONGO_DB_NAME)
    return database[USERS_COLLECTION]
