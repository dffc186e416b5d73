"""
FastAPI router for item listings.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from common.utils import success_response
from hydauction.auth.services.session_store import SessionUser
from hydauction.dependencies import (
    get_listing_service,
    get_upload_storage,
    optional_user,
    require_user,
)
from hydauction.items.services.listing_service import ListingService
from hydauction.media.services.upload_storage import UploadStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"])


@router.get("")
async def list_items(
    user: Annotated[Optional[SessionUser], Depends(optional_user)],
    listing_service: Annotated[ListingService, Depends(get_listing_service)],
):
    """
    List items available for auction.

    Each item is flagged with whether the caller listed it.
    """
    items = await listing_service.list_items(viewer=user)
    return success_response(items)


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_item(
    name: Annotated[str, Form(min_length=1)],
    price: Annotated[float, Form(ge=0, allow_inf_nan=False)],
    user: Annotated[SessionUser, Depends(require_user)],
    listing_service: Annotated[ListingService, Depends(get_listing_service)],
    upload_storage: Annotated[UploadStorage, Depends(get_upload_storage)],
    images: Optional[List[UploadFile]] = File(None),
):
    """Add an item with its photos."""
    stored = await upload_storage.save_all(images or [])
    item_id = await listing_service.add_item(
        identity=user,
        name=name,
        price=price,
        stored_files=stored,
    )
    return success_response({"itemId": item_id}, message="Item added successfully")


@router.delete("/{item_id}")
async def delete_item(
    item_id: str,
    user: Annotated[SessionUser, Depends(require_user)],
    listing_service: Annotated[ListingService, Depends(get_listing_service)],
):
    """
    Delete one of your items.

    Its images are deleted with it.
    """
    await listing_service.delete_item(identity=user, item_id=item_id)
    return success_response(message="Item deleted successfully")
