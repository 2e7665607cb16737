from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from src.config import DB_NAME, MONGODB_URI, MONGO_TIMEOUT_MS
from src.exceptions import DependencyUnavailable
from src.utils.logging import setup_logging

logger = setup_logging()


def create_client(uri: str = MONGODB_URI) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
        serverSelectionTimeoutMS=MONGO_TIMEOUT_MS,
        tz_aware=True,
    )


async def ping(client: AsyncIOMotorClient) -> bool:
    try:
        await client.admin.command("ping")
        logger.info("🌿 Successfully connected to MongoDB!")
        return True
    except PyMongoError as e:
        logger.error(f"MongoDB connection error: {e}")
        return False


# Dependency
def get_db(request: Request) -> AsyncIOMotorDatabase:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise DependencyUnavailable()
    return db


def connect(app, db_name: str = DB_NAME) -> AsyncIOMotorDatabase:
    """Attach one long-lived client and database handle to the application."""
    client = create_client()
    app.state.mongo_client = client
    app.state.db = client[db_name]
    return app.state.db


def disconnect(app):
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()
    app.state.mongo_client = None
    app.state.db = None
