"""
HydAuction API Routers.

All routers are imported here for easy access.
"""

from hydauction.routers.auth import router as auth_router
from hydauction.routers.items import router as items_router

__all__ = [
    "auth_router",
    "items_router",
]
