"""
HydAuction collection names and index bootstrap.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
ITEMS_COLLECTION = "items"
IMAGES_COLLECTION = "images"


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the application relies on.

    Usernames and emails are unique; the signup existence check covers the
    common case and these indexes close the race between two signups.
    """
    users = db[USERS_COLLECTION]
    await users.create_index("username", unique=True)
    await users.create_index("email", unique=True)
    await db[ITEMS_COLLECTION].create_index("addedBy")
    logger.info("Database indexes ensured")
