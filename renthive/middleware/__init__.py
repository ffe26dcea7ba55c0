"""
Middleware package for RentHive.
"""

from .request_logging import RequestLoggingMiddleware
from .route_guard import RouteGuardMiddleware, is_protected_path

__all__ = [
    "RequestLoggingMiddleware",
    "RouteGuardMiddleware",
    "is_protected_path",
]
