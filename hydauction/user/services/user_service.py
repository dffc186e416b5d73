"""
User service for account records.

Handles user creation and lookup. Users are immutable after signup.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from common.utils.exceptions import ConflictException, StorageException
from hydauction.database import USERS_COLLECTION

logger = logging.getLogger(__name__)


class UserService:
    """
    Manages user records in the users collection.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db[USERS_COLLECTION]

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
    ) -> dict:
        """
        Create a new user record.

        Args:
            username: Unique username
            email: Unique email address
            password_hash: bcrypt digest of the password

        Returns:
            Created user document

        Raises:
            ConflictException: username or email taken (unique index hit)
            StorageException: Database failure
        """
        user_doc = {
            "username": username,
            "email": email,
            "password": password_hash,
            "createdAt": datetime.now(timezone.utc),
        }

        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.info(f"Signup raced on duplicate username/email: {username}")
            raise ConflictException()
        except PyMongoError as e:
            logger.error(f"Failed to create user {username}: {e}")
            raise StorageException()

        user_doc["_id"] = result.inserted_id
        logger.info(f"User created: {result.inserted_id}")
        return user_doc

    async def find_by_username_or_email(
        self,
        username: str,
        email: str,
    ) -> Optional[dict]:
        """Single combined existence check used by signup."""
        try:
            return await self._users_collection.find_one(
                {"$or": [{"username": username}, {"email": email}]}
            )
        except PyMongoError as e:
            logger.error(f"User lookup failed: {e}")
            raise StorageException()

    async def get_user_by_username(self, username: str) -> Optional[dict]:
        try:
            return await self._users_collection.find_one({"username": username})
        except PyMongoError as e:
            logger.error(f"User lookup failed: {e}")
            raise StorageException()

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        try:
            return await self._users_collection.find_one({"email": email})
        except PyMongoError as e:
            logger.error(f"User lookup failed: {e}")
            raise StorageException()
