"""Settle-All Aggregation

Runs a keyed batch of checks concurrently and waits for every one of them
to finish before deciding anything. A failing child never cancels or hides
its siblings, so callers can report every invalid field at once.

Usage:
    result = await settle({"presence": check_a(), "length": check_b()})
    if result.has_failures:
        raise ValidationError("...", result.detail())
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Generic, Mapping, TypeVar

from ratify.config import get_settings
from ratify.errors import ErrorCode, ValidationError

K = TypeVar("K")


@dataclass
class SettleResult(Generic[K]):
    """Outcome of one settle run. Allocated fresh for every call."""
    passed: list[K] = field(default_factory=list)
    failures: dict[K, ValidationError] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    @property
    def total_count(self) -> int:
        return len(self.passed) + len(self.failures)

    def detail(self) -> dict[K, Any]:
        """Fold each child failure's own detail under its key."""
        return {key: error.detail for key, error in self.failures.items()}

    def merged_detail(self) -> dict[str, Any]:
        """Union of the children's details, one level flatter than ``detail()``."""
        merged: dict[str, Any] = {}
        for error in self.failures.values():
            merged.update(error.detail)
        return merged

    def raise_if_failed(self, message: str | None = None) -> None:
        """Raise a generic ValidationError if any child failed."""
        if self.failures:
            raise ValidationError(message)


def _as_validation_error(key: Any, exc: Exception) -> ValidationError:
    if isinstance(exc, ValidationError):
        return exc
    error = ValidationError(f"check {key!r} raised {type(exc).__name__}: {exc}",
        code=ErrorCode.E9001_UNEXPECTED_ERROR)
    error.__cause__ = exc
    return error


async def settle(
    pending: Mapping[K, Awaitable[Any]],
    *,
    max_concurrent: int | None = None,
) -> SettleResult[K]:
    """Await every child, successful or not, and sort them into passed/failed.

    Args:
        pending: Key to awaitable. Keys identify children in the result.
        max_concurrent: Optional cap on children running at once. Defaults to
            RATIFY_MAX_CONCURRENT_CHECKS; None runs everything together.
    """
    start = datetime.now(timezone.utc)
    limit = max_concurrent if max_concurrent is not None else get_settings().MAX_CONCURRENT_CHECKS
    keys = list(pending)

    if limit:
        semaphore = asyncio.Semaphore(limit)

        async def bounded(aw: Awaitable[Any]) -> Any:
            async with semaphore:
                return await aw

        outcomes = await asyncio.gather(*(bounded(pending[k]) for k in keys), return_exceptions=True)
    else:
        outcomes = await asyncio.gather(*(pending[k] for k in keys), return_exceptions=True)

    result: SettleResult[K] = SettleResult()
    for key, outcome in zip(keys, outcomes):
        # CancelledError and friends are BaseException; they propagate
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, Exception):
            result.failures[key] = _as_validation_error(key, outcome)
        else:
            result.passed.append(key)

    result.duration_ms = (datetime.now(timezone.utc) - start).total_seconds() * 1000
    return result


async def settle_all(pending: Mapping[K, Awaitable[Any]], *, max_concurrent: int | None = None) -> None:
    """Resolve if every child passed; raise a generic ValidationError otherwise.

    The raised error carries no detail. Callers wanting per-child detail use
    ``settle`` and fold ``SettleResult.failures`` themselves.
    """
    result = await settle(pending, max_concurrent=max_concurrent)
    result.raise_if_failed()
