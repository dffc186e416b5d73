"""
Item listing service.

Items own their images through the item's imageIds list; an image is never
shared between items. Deleting an item deletes its images first, then the
item, so an interrupted delete can leave an imageless item but never an
item pointing at images that were kept.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from common.utils.exceptions import ForbiddenException, NotFoundException, StorageException
from hydauction.auth.services.session_store import SessionUser
from hydauction.database import IMAGES_COLLECTION, ITEMS_COLLECTION
from hydauction.media.services.upload_storage import StoredFile

logger = logging.getLogger(__name__)


def _to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class ListingService:
    """
    Create, list and delete items together with their images.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        public_url_prefix: str = "/public",
        use_transaction: bool = False,
    ):
        """
        Initialize ListingService.

        Args:
            db: MongoDB database connection
            public_url_prefix: URL prefix under which image paths are served
            use_transaction: Delete images and item in one transaction
                (requires a replica set)
        """
        self._db = db
        self._items_collection = db[ITEMS_COLLECTION]
        self._images_collection = db[IMAGES_COLLECTION]
        self._public_url_prefix = public_url_prefix.rstrip("/")
        self._use_transaction = use_transaction

    async def list_items(self, viewer: Optional[SessionUser] = None) -> List[Dict[str, Any]]:
        """
        List all items with their image URLs.

        Args:
            viewer: Identity of the caller, if any

        Returns:
            Item views. An image id without a matching image document
            yields None in the images list.
        """
        try:
            items = await self._items_collection.find({}).to_list(length=None)

            image_ids = {
                oid
                for item in items
                for oid in (_to_object_id(i) for i in item.get("imageIds") or [])
                if oid is not None
            }
            images = []
            if image_ids:
                images = await self._images_collection.find(
                    {"_id": {"$in": list(image_ids)}}
                ).to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list items: {e}")
            raise StorageException()

        paths = {str(image["_id"]): image.get("imagePath") for image in images}
        return [self._format_item(item, paths, viewer) for item in items]

    async def add_item(
        self,
        identity: SessionUser,
        name: str,
        price: float,
        stored_files: Iterable[StoredFile],
    ) -> str:
        """
        Create an item owned by identity.

        One image document is inserted per stored file, in upload order,
        before the item that references them.

        Returns:
            New item id
        """
        now = datetime.now(timezone.utc)
        image_docs = [
            {"imagePath": stored.image_path, "createdAt": now}
            for stored in stored_files
        ]

        try:
            image_ids: List[ObjectId] = []
            if image_docs:
                result = await self._images_collection.insert_many(image_docs, ordered=True)
                image_ids = list(result.inserted_ids)

            result = await self._items_collection.insert_one({
                "name": name,
                "price": price,
                "addedBy": ObjectId(identity.user_id),
                "imageIds": image_ids,
                "createdAt": now,
            })
        except PyMongoError as e:
            logger.error(f"Failed to add item for user {identity.user_id}: {e}")
            raise StorageException()

        logger.info(
            f"Item {result.inserted_id} added by user {identity.user_id} "
            f"with {len(image_ids)} images"
        )
        return str(result.inserted_id)

    async def delete_item(self, identity: SessionUser, item_id: str) -> None:
        """
        Delete an item and every image it references.

        Raises:
            NotFoundException: No item with that id
            ForbiddenException: identity is not the item's owner
            StorageException: Database failure
        """
        item_oid = _to_object_id(item_id)
        if item_oid is None:
            raise NotFoundException(message="Item not found", code="ITEM_NOT_FOUND")

        try:
            item = await self._items_collection.find_one({"_id": item_oid})
        except PyMongoError as e:
            logger.error(f"Failed to load item {item_id}: {e}")
            raise StorageException()

        if not item:
            raise NotFoundException(message="Item not found", code="ITEM_NOT_FOUND")

        if str(item.get("addedBy")) != identity.user_id:
            logger.warning(f"User {identity.user_id} tried to delete item {item_id} they do not own")
            raise ForbiddenException(
                message="You do not have permission to delete this item",
                code="NOT_ITEM_OWNER",
            )

        image_ids = [
            oid for oid in (_to_object_id(i) for i in item.get("imageIds") or [])
            if oid is not None
        ]

        try:
            if self._use_transaction:
                await self._delete_in_transaction(item_oid, image_ids)
            else:
                await self._delete_documents(item_oid, image_ids)
        except PyMongoError as e:
            logger.error(f"Failed to delete item {item_id}: {e}")
            raise StorageException()

        logger.info(f"Item {item_id} deleted by user {identity.user_id} ({len(image_ids)} images)")

    async def _delete_documents(
        self,
        item_oid: ObjectId,
        image_ids: List[ObjectId],
        session=None,
    ) -> None:
        if image_ids:
            await self._images_collection.delete_many(
                {"_id": {"$in": image_ids}}, session=session
            )
        await self._items_collection.delete_one({"_id": item_oid}, session=session)

    async def _delete_in_transaction(self, item_oid: ObjectId, image_ids: List[ObjectId]) -> None:
        async with await self._db.client.start_session() as session:
            async with session.start_transaction():
                await self._delete_documents(item_oid, image_ids, session=session)

    def _format_item(
        self,
        item: dict,
        paths: Dict[str, Optional[str]],
        viewer: Optional[SessionUser],
    ) -> Dict[str, Any]:
        images = []
        for image_id in item.get("imageIds") or []:
            path = paths.get(str(image_id))
            images.append(f"{self._public_url_prefix}/{path}" if path else None)

        return {
            "id": str(item["_id"]),
            "name": item.get("name"),
            "price": item.get("price"),
            "images": images,
            "isAuthoredByCurrentUser": (
                viewer is not None and str(item.get("addedBy")) == viewer.user_id
            ),
        }
