"""
Items System Services
"""

from hydauction.items.services.listing_service import ListingService

__all__ = [
    "ListingService",
]
