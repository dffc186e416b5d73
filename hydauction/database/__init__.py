"""
HydAuction database utilities.
"""

from hydauction.database.collections import (
    USERS_COLLECTION,
    ITEMS_COLLECTION,
    IMAGES_COLLECTION,
    ensure_indexes,
)

__all__ = [
    "USERS_COLLECTION",
    "ITEMS_COLLECTION",
    "IMAGES_COLLECTION",
    "ensure_indexes",
]
