"""
HydAuction - auction listing backend.

Users sign up, log in with a cookie session, list items with photos and
remove their own listings.
"""

__version__ = "1.0.0"
