"""Ordered provider fallback chain.

Both the chat gateway and the speech router describe their fallback policy as
an explicit list of steps. Steps run one after the other, never concurrently:
the next step is only invoked once the previous one has definitively failed
with a ``ProviderError``. Any other exception propagates unchanged.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from maos_ai.shared.exceptions import ProviderError
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

_T = TypeVar("_T")


@dataclass(frozen=True)
class FallbackStep(Generic[_T]):
    """One provider in a fallback policy."""

    name: str
    invoke: Callable[[], Awaitable[_T]]


@dataclass(frozen=True)
class ChainResult(Generic[_T]):
    """Value produced by the first step that succeeded."""

    provider: str
    value: _T
    failures: tuple[ProviderError, ...] = ()


async def run_fallback_chain(
    steps: Sequence[FallbackStep[_T]],
    on_exhausted: Callable[[list[ProviderError]], Exception],
    *,
    chain: str = "fallback",
) -> ChainResult[_T]:
    """Run ``steps`` in order until one succeeds.

    Args:
        steps: Non-empty ordered policy; the last entry is the lowest-capability option
        on_exhausted: Builds the terminal exception once every step failed
        chain: Name used in log events

    Returns:
        ChainResult with the winning provider name and its value

    Raises:
        The exception built by ``on_exhausted`` when all steps fail, or any
        non-recoverable exception raised by a step.
    """
    if not steps:
        raise ValueError("A fallback policy needs at least one step")

    failures: list[ProviderError] = []
    for step in steps:
        try:
            value = await step.invoke()
        except ProviderError as exc:
            failures.append(exc)
            logger.warning(
                "fallback_step_failed",
                chain=chain,
                provider=step.name,
                error_type=type(exc).__name__,
                error=exc.message,
            )
            continue

        if failures:
            logger.info(
                "fallback_step_recovered",
                chain=chain,
                provider=step.name,
                skipped=[f.provider for f in failures],
            )
        return ChainResult(provider=step.name, value=value, failures=tuple(failures))

    raise on_exhausted(failures)
