"""LoggingWrapper: composable logging for env-file stores.

Wraps any EnvFileStore, logging reads and writes as they pass through.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..protocol import EnvFileStore


class LoggingWrapper:
    """Logs file operations passing through a store.

    Writes and deletes are logged at INFO, reads at DEBUG. ``exists`` is
    too noisy to log.
    """

    def __init__(self, inner: EnvFileStore, logger_name: str = "env_vars_doctor.files") -> None:
        self._inner = inner
        self._logger = logging.getLogger(logger_name)

    def read_text(self, path: Path) -> str | None:
        content = self._inner.read_text(path)
        if content is None:
            self._logger.debug("files: read %s (absent)", path)
        else:
            self._logger.debug("files: read %s (%d chars)", path, len(content))
        return content

    def write_text(self, path: Path, content: str) -> None:
        self._logger.info("files: write %s (%d chars)", path, len(content))
        self._inner.write_text(path, content)

    def delete(self, path: Path) -> None:
        self._logger.info("files: delete %s", path)
        self._inner.delete(path)

    def exists(self, path: Path) -> bool:
        return self._inner.exists(path)
