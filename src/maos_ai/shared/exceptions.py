"""Custom exception hierarchy for the MAOS AI gateway."""

from typing import Any


class MaosError(Exception):
    """Base exception for all gateway errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ----- Validation Errors -----


class ValidationError(MaosError):
    """Input validation failed."""

    pass


# ----- Provider Errors (recoverable: advance to the next provider) -----


class ProviderError(MaosError):
    """A single provider attempt failed and the next one may be tried."""

    def __init__(
        self,
        provider: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.provider = provider
        super().__init__(message, {"provider": provider, **(details or {})})


class CredentialMissing(ProviderError):
    """Provider has no credential configured (or the caller has no session)."""

    def __init__(self, provider: str) -> None:
        super().__init__(provider, f"{provider}: credential missing")


class ProviderRejected(ProviderError):
    """Provider answered with a non-2xx status."""

    def __init__(self, provider: str, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        super().__init__(
            provider,
            f"{provider}: rejected with HTTP {status_code}",
            {"status_code": status_code, "body": body[:500]},
        )


class ProviderUnavailable(ProviderError):
    """Provider could not be reached (transport error, timeout, 5xx)."""

    pass


class BackendUnavailable(ProviderUnavailable):
    """Orchestration backend is unreachable or failing server-side."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__("orchestrator", message, {"status_code": status_code})


# ----- Caller-visible Errors -----


class BackendLogicError(MaosError):
    """Orchestration backend was reachable but refused or failed the request.

    The cause is kept for logging only; users get a fixed message.
    """

    def __init__(self, cause: str, status_code: int | None = None) -> None:
        self.cause = cause
        self.status_code = status_code
        super().__init__(
            "Orchestration backend reported a failure",
            {"cause": cause, "status_code": status_code},
        )


class FallbackProviderError(MaosError):
    """Degraded-mode language model failed. No further fallback exists."""

    def __init__(self, reason: str, cause: str = "") -> None:
        self.reason = reason
        super().__init__(
            "Fallback language model failed",
            {"reason": reason, "cause": cause},
        )


class SynthesisUnavailable(MaosError):
    """Every speech provider in the chain failed."""

    def __init__(self, attempts: list[ProviderError] | None = None) -> None:
        self.attempts = attempts or []
        super().__init__(
            "synthesis failed",
            {"attempts": [f"{a.provider}: {a.message}" for a in self.attempts]},
        )


class TranscriptionError(MaosError):
    """Speech-to-text provider failed."""

    pass
