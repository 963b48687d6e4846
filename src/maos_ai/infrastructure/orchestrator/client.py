"""Client for the internal orchestration backend.

The backend has access to the tenant's business data and runs the
multi-agent reasoning. Its chat endpoint answers with an envelope:

    {"success": true, "data": {"response": "...", "lang": "fr", ...}}
    {"success": false, "error": "..."}
"""

from dataclasses import dataclass
from typing import Any

import httpx

from maos_ai.config import Settings, get_settings
from maos_ai.shared.exceptions import BackendLogicError, BackendUnavailable
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

CHAT_PATH = "/api/orchestrator/chat"


@dataclass
class OrchestratorReply:
    """``data`` part of a successful envelope. Absent fields stay None."""

    response: str
    pdf: dict[str, Any] | None = None
    lang: str | None = None
    lang_name: str | None = None
    direction: str | None = None
    has_tts: bool | None = None
    agent: str | None = None
    pack: str | None = None
    metier: str | None = None

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "OrchestratorReply":
        def _str(key: str) -> str | None:
            value = data.get(key)
            return value if isinstance(value, str) and value else None

        pdf = data.get("pdf")
        has_tts = data.get("hasTTS")
        response = data.get("response")
        return cls(
            response=response if isinstance(response, str) else "",
            pdf=pdf if isinstance(pdf, dict) else None,
            lang=_str("lang"),
            lang_name=_str("langName"),
            direction=_str("direction"),
            has_tts=has_tts if isinstance(has_tts, bool) else None,
            agent=_str("agent"),
            pack=_str("pack"),
            metier=_str("metier"),
        )


class OrchestratorClient:
    """HTTP client for ``POST {base}/api/orchestrator/chat``."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = settings.orchestrator_base_url.rstrip("/")
        self.timeout = settings.orchestrator_timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def chat(
        self,
        access_token: str,
        message: str,
        context: dict[str, Any],
        images: list[str],
        files: list[dict[str, Any]],
        forced_lang: str | None = None,
    ) -> OrchestratorReply:
        """Send one utterance to the orchestrator. Exactly one HTTP attempt.

        Raises:
            BackendUnavailable: Transport failure, timeout or 5xx
            BackendLogicError: Any other non-2xx, malformed body, or success=false
        """
        payload = {
            "message": message,
            "context": context,
            "images": images,
            "files": files,
            "forcedLang": forced_lang,
        }

        try:
            response = await self._get_client().post(
                f"{self.base_url}{CHAT_PATH}",
                json=payload,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.TimeoutException as e:
            logger.warning("orchestrator_timeout", error=str(e))
            raise BackendUnavailable(f"Orchestrator timed out: {e}")
        except httpx.RequestError as e:
            logger.warning("orchestrator_request_error", error=str(e))
            raise BackendUnavailable(f"Orchestrator unreachable: {e}")

        if response.status_code >= 500:
            logger.warning("orchestrator_server_error", status=response.status_code)
            raise BackendUnavailable(
                f"Orchestrator HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if not response.is_success:
            raise BackendLogicError(
                f"HTTP {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise BackendLogicError(f"Invalid JSON from orchestrator: {e}")

        if not isinstance(envelope, dict):
            raise BackendLogicError("Orchestrator envelope is not an object")

        if envelope.get("success") is not True:
            raise BackendLogicError(str(envelope.get("error") or "success=false without error"))

        data = envelope.get("data")
        if not isinstance(data, dict):
            raise BackendLogicError("Orchestrator envelope has no data object")

        return OrchestratorReply.from_data(data)
