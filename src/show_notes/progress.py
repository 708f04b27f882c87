"""Pluggable progress reporting for batch runs.

The library reports progress through whatever factory is registered; the CLI
installs a tqdm-backed factory, everything else gets a silent one.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class ProgressReporter(Protocol):
    """Minimal interface for progress callbacks."""

    def update(self, advance: int) -> None: ...


ProgressFactory = Callable[[Optional[int], str], ContextManager[ProgressReporter]]


class _SilentProgress:
    def update(self, advance: int) -> None:  # pragma: no cover - trivial
        return None


@contextmanager
def _silent_progress(total: Optional[int], description: str) -> Iterator[ProgressReporter]:
    yield _SilentProgress()


_progress_factory: ProgressFactory = _silent_progress


def set_progress_factory(factory: Optional[ProgressFactory]) -> None:
    """Register the factory used for new progress reporters (None disables progress)."""
    global _progress_factory
    _progress_factory = factory or _silent_progress


@contextmanager
def progress_context(total: Optional[int], description: str) -> Iterator[ProgressReporter]:
    with _progress_factory(total, description) as reporter:
        yield reporter


def track(items: Sequence[T], description: str) -> Iterator[T]:
    """Yield ``items`` one by one, advancing a progress reporter after each."""
    with progress_context(len(items), description) as reporter:
        for item in items:
            yield item
            reporter.update(1)


__all__ = [
    "ProgressFactory",
    "ProgressReporter",
    "progress_context",
    "set_progress_factory",
    "track",
]
