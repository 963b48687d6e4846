"""Unit tests for the ordered provider fallback chain."""

from unittest.mock import AsyncMock

import pytest

from maos_ai.shared.exceptions import (
    CredentialMissing,
    ProviderError,
    ProviderUnavailable,
    ValidationError,
)
from maos_ai.shared.fallback import FallbackStep, run_fallback_chain


class ChainExhausted(Exception):
    def __init__(self, failures: list[ProviderError]) -> None:
        self.failures = failures
        super().__init__("exhausted")


class TestRunFallbackChain:
    """Test step ordering and error classification."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        """Test that later steps are not invoked after a success."""
        first = AsyncMock(return_value="a")
        second = AsyncMock(return_value="b")

        result = await run_fallback_chain(
            [FallbackStep("first", first), FallbackStep("second", second)],
            ChainExhausted,
        )

        assert result.provider == "first"
        assert result.value == "a"
        assert result.failures == ()
        second.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_error_advances(self):
        """Test that a ProviderError moves to the next step."""
        first = AsyncMock(side_effect=ProviderUnavailable("first", "down"))
        second = AsyncMock(return_value="b")

        result = await run_fallback_chain(
            [FallbackStep("first", first), FallbackStep("second", second)],
            ChainExhausted,
        )

        assert result.provider == "second"
        assert result.value == "b"
        assert [f.provider for f in result.failures] == ["first"]
        first.assert_awaited_once()
        second.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_all_failed_raises_terminal_error(self):
        """Test that the terminal exception carries every failure."""
        steps = [
            FallbackStep("first", AsyncMock(side_effect=CredentialMissing("first"))),
            FallbackStep("second", AsyncMock(side_effect=ProviderUnavailable("second", "down"))),
        ]

        with pytest.raises(ChainExhausted) as exc_info:
            await run_fallback_chain(steps, ChainExhausted)

        assert [f.provider for f in exc_info.value.failures] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        """Test that non-provider errors stop the chain."""
        second = AsyncMock(return_value="b")
        steps = [
            FallbackStep("first", AsyncMock(side_effect=ValidationError("bad"))),
            FallbackStep("second", second),
        ]

        with pytest.raises(ValidationError):
            await run_fallback_chain(steps, ChainExhausted)

        second.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_policy_raises(self):
        """Test that an empty step list is rejected."""
        with pytest.raises(ValueError):
            await run_fallback_chain([], ChainExhausted)
