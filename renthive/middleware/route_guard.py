"""
Route guard middleware.
Redirects unauthenticated navigation to protected pages to the sign-in page.
"""

from typing import Callable, Iterable, Optional
from urllib.parse import urlencode
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse
from starlette.types import ASGIApp
import logging

from renthive.config import settings
from renthive.utils.auth import decode_session_token

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def is_protected_path(path: str, method: str, protected_paths: Iterable[str]) -> bool:
    """
    A path is protected when it equals or lies under one of
    ``protected_paths``, or when it is a non-GET request to the root.
    """
    for prefix in protected_paths:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return path == "/" and method.upper() not in SAFE_METHODS


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """
    Checks the session cookie on protected paths.

    The check only decodes the token; it never touches the database, so it
    runs once per request with no retry. API endpoints are not redirected:
    they answer 401 through their own dependencies.
    """

    def __init__(
        self,
        app: ASGIApp,
        protected_paths: Optional[Iterable[str]] = None,
        login_path: Optional[str] = None,
        cookie_name: Optional[str] = None
    ):
        super().__init__(app)
        self.protected_paths = tuple(protected_paths if protected_paths is not None else settings.protected_paths)
        self.login_path = login_path or settings.login_path
        self.cookie_name = cookie_name or settings.session_cookie_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if is_protected_path(path, request.method, self.protected_paths):
            token = request.cookies.get(self.cookie_name)
            if decode_session_token(token) is None:
                logger.info(
                    f"Redirecting unauthenticated {request.method} {path} to {self.login_path}",
                    extra={"path": path, "method": request.method}
                )
                return self.redirect_to_login(path)

        return await call_next(request)

    def redirect_to_login(self, path: str) -> RedirectResponse:
        query = urlencode({"redirectedFrom": path})
        return RedirectResponse(url=f"{self.login_path}?{query}", status_code=307)
