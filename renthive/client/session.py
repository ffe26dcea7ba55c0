"""
Client-side session state.

``SessionManager`` mirrors the server session: it holds the signed-in user,
tracks loading and error state for the auth forms, and notifies listeners
when the auth state changes. None of its operations raise; failures end up
in ``error`` as a display-ready string.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional
import enum
import logging

from renthive.client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
LOGIN_PATH = "/login"


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


AuthListener = Callable[[AuthEvent, Optional[Dict[str, Any]]], Awaitable[None]]


class SessionManager:
    """
    Session state for one client.

    Attributes:
        user: The signed-in user as returned by the API, or None
        loading: True while an auth call is in flight
        error: Message of the last failed call, cleared when a new one starts
        redirect_to: Where the UI should navigate after the last successful call
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.user: Optional[Dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None
        self.redirect_to: Optional[str] = None
        self._listeners: List[AuthListener] = []

    @property
    def token(self) -> Optional[str]:
        return self.api.token

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self, event: AuthEvent) -> None:
        logger.debug(f"Auth state change: {event.value}")
        for listener in list(self._listeners):
            await listener(event, self.user)

    def _start(self) -> None:
        self.loading = True
        self.error = None
        self.redirect_to = None

    def _fail(self, operation: str, exc: ApiError) -> bool:
        logger.info(f"{operation} failed: {exc.message}")
        self.error = exc.message
        return False

    async def load(self, notify: bool = True) -> None:
        """
        Read the current session from the server.
        Listeners hear about it only when the signed-in user changed.
        """
        self._start()
        previous_id = self.user["id"] if self.user else None
        try:
            session = await self.api.get_session()
        except ApiError as exc:
            self._fail("Session load", exc)
            return
        finally:
            self.loading = False

        self.user = session.get("user")
        current_id = self.user["id"] if self.user else None
        if notify and current_id != previous_id:
            await self._notify(AuthEvent.SIGNED_IN if self.user else AuthEvent.SIGNED_OUT)

    async def sign_in(self, email: str, password: str) -> bool:
        self._start()
        try:
            session = await self.api.sign_in(email, password)
        except ApiError as exc:
            return self._fail("Sign-in", exc)
        finally:
            self.loading = False

        self.user = session.get("user")
        self.redirect_to = DASHBOARD_PATH
        await self._notify(AuthEvent.SIGNED_IN)
        return True

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> bool:
        self._start()
        try:
            session = await self.api.sign_up(email, password, full_name)
        except ApiError as exc:
            return self._fail("Sign-up", exc)
        finally:
            self.loading = False

        self.user = session.get("user")
        self.redirect_to = DASHBOARD_PATH
        await self._notify(AuthEvent.SIGNED_IN)
        return True

    async def sign_out(self) -> bool:
        self._start()
        try:
            await self.api.sign_out()
        except ApiError as exc:
            return self._fail("Sign-out", exc)
        finally:
            self.loading = False

        self.user = None
        self.redirect_to = LOGIN_PATH
        await self._notify(AuthEvent.SIGNED_OUT)
        return True

    async def reset_password(self, email: str) -> bool:
        """Ask the server to send a reset token. Session state is unchanged."""
        self._start()
        try:
            await self.api.request_password_reset(email)
        except ApiError as exc:
            return self._fail("Password reset", exc)
        finally:
            self.loading = False
        return True

    async def update_password(self, password: str, reset_token: Optional[str] = None) -> bool:
        self._start()
        try:
            await self.api.update_password(password, reset_token)
        except ApiError as exc:
            return self._fail("Password update", exc)
        finally:
            self.loading = False

        await self._notify(AuthEvent.PASSWORD_RECOVERY if reset_token else AuthEvent.USER_UPDATED)
        return True
