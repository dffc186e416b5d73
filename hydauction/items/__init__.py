"""
Items System

Auction listings and the images attached to them.
"""

from hydauction.items.services.listing_service import ListingService

__all__ = [
    "ListingService",
]
