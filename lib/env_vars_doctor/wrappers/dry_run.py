"""DryRunWrapper: captures writes instead of performing them.

Reads see captured writes, so a multi-step workflow (shared values first,
then per-workspace values) plans exactly what a real run would write.
"""

from __future__ import annotations

from pathlib import Path

from ..protocol import EnvFileStore

_DELETED = object()


class DryRunWrapper:
    """Holds writes and deletes in memory. Reads fall through to the inner store."""

    def __init__(self, inner: EnvFileStore) -> None:
        self._inner = inner
        self._pending: dict[Path, object] = {}

    @property
    def pending_writes(self) -> dict[Path, str]:
        """Planned file contents, keyed by path (deletions excluded)."""
        return {p: c for p, c in self._pending.items() if c is not _DELETED}

    @property
    def pending_deletes(self) -> list[Path]:
        return [p for p, c in self._pending.items() if c is _DELETED]

    def read_text(self, path: Path) -> str | None:
        key = Path(path)
        if key in self._pending:
            content = self._pending[key]
            return None if content is _DELETED else content  # type: ignore[return-value]
        return self._inner.read_text(path)

    def write_text(self, path: Path, content: str) -> None:
        self._pending[Path(path)] = content

    def delete(self, path: Path) -> None:
        self._pending[Path(path)] = _DELETED

    def exists(self, path: Path) -> bool:
        key = Path(path)
        if key in self._pending:
            return self._pending[key] is not _DELETED
        return self._inner.exists(path)
