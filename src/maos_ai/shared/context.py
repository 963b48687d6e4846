"""Request context carrying the caller's session."""

from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Session of the current request, as forwarded by the dashboard."""

    access_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


_session_context: ContextVar[SessionContext | None] = ContextVar(
    "session_context", default=None
)


def set_session_context(ctx: SessionContext) -> None:
    """Set the session context for the current request."""
    _session_context.set(ctx)


def get_session_token() -> str | None:
    """Return the caller's access token, or None for anonymous sessions."""
    ctx = _session_context.get()
    if ctx is None:
        return None
    return ctx.access_token or None


def clear_session_context() -> None:
    """Clear the session context."""
    _session_context.set(None)
