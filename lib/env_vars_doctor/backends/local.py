"""LocalFileStore: example and values files on the host filesystem."""

from __future__ import annotations

from pathlib import Path


class LocalFileStore:
    """EnvFileStore backed by pathlib, UTF-8 throughout."""

    def read_text(self, path: Path) -> str | None:
        path = Path(path)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def delete(self, path: Path) -> None:
        Path(path).unlink(missing_ok=True)
