"""
Async MongoDB connection holder built on Motor.

Owns one AsyncIOMotorClient for the lifetime of an application and hands
out the configured database. Services take the database object and work
with raw collections.

Example:
    from common.database import MongoDB

    mongo = MongoDB()
    await mongo.connect(uri="mongodb://localhost:27017", database_name="hydauction")
    items = mongo.get_collection("items")
    ...
    await mongo.disconnect()
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


def _mask_uri(uri: str) -> str:
    # Drop "user:password@" so credentials never reach the logs
    return uri.split("@")[-1] if "@" in uri else uri


class MongoDB:
    """Connection lifecycle for one MongoDB database."""

    def __init__(self, server_selection_timeout_ms: int = 5000):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._connected: bool = False
        self._timeout_ms = server_selection_timeout_ms

    async def connect(self, uri: str, database_name: str) -> None:
        """
        Open the client and make sure the server answers a ping.

        Args:
            uri: MongoDB connection string
            database_name: Database to hand out through `db`

        Raises:
            PyMongoError: Server unreachable or authentication failed
        """
        logger.info(f"Connecting to MongoDB at {_mask_uri(uri)} (database {database_name})")

        client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=self._timeout_ms)
        try:
            await client.admin.command("ping")
        except Exception as e:
            logger.error(f"MongoDB connection failed: {e}")
            client.close()
            raise

        self._client = client
        self._database_name = database_name
        self._connected = True
        logger.info(f"Connected to MongoDB database {database_name}")

    async def disconnect(self) -> None:
        """Close the client. Safe to call when not connected."""
        if not self._client:
            return
        logger.info(f"Closing MongoDB connection ({self._database_name})")
        self._client.close()
        self._client = None
        self._database_name = None
        self._connected = False

    async def ping(self) -> bool:
        """Return True if the server currently answers."""
        if not self._client:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def client(self) -> Optional[AsyncIOMotorClient]:
        return self._client

    @property
    def database_name(self) -> Optional[str]:
        return self._database_name

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """
        The configured Motor database.

        Raises:
            RuntimeError: connect() has not succeeded yet
        """
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]

    def get_collection(self, name: str):
        """Raw Motor collection from the configured database."""
        return self.db[name]
