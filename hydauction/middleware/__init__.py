"""
HydAuction Middleware.

All middleware components are imported here.
"""

from hydauction.middleware.auth import Access, AuthorizationGate, RoutePolicy

__all__ = [
    "Access",
    "AuthorizationGate",
    "RoutePolicy",
]
