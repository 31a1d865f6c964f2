"""File store backends and the wrapper factory."""

from __future__ import annotations

from collections.abc import Sequence

from ..protocol import EnvFileStore
from ..wrappers.dry_run import DryRunWrapper
from ..wrappers.logging_wrapper import LoggingWrapper
from .local import LocalFileStore

WRAPPERS = ("dry_run", "logging")


def create_store(
    wrappers: Sequence[str] = ("logging",), inner: EnvFileStore | None = None
) -> EnvFileStore:
    """Build a store with composable wrappers applied.

    Order matters: DryRun innermost, Logging outermost, so logged writes
    are the ones that would have happened.
    """
    unknown = set(wrappers) - set(WRAPPERS)
    if unknown:
        raise ValueError(f"Unknown store wrapper(s): {sorted(unknown)}. Use: {list(WRAPPERS)}")
    store: EnvFileStore = inner if inner is not None else LocalFileStore()
    if "dry_run" in wrappers:
        store = DryRunWrapper(store)
    if "logging" in wrappers:
        store = LoggingWrapper(store)
    return store


__all__ = ["LocalFileStore", "create_store"]
