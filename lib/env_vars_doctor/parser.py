"""Parser for example (schema) files.

Two phases: a line-level state machine accumulates ``#`` comment lines
and attaches the block to the next ``NAME=value`` line; the finished
comment is then handed to ``directives.parse_comment``. A blank line
discards any pending comment.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from .directives import parse_comment
from .models import EnvSchema, EnvVarDefinition
from .protocol import EnvFileStore, ValueSource

logger = logging.getLogger(__name__)

# Uppercase is a naming convention, not something the matcher enforces.
VAR_LINE_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=(.*)$")


def parse_variable_line(line: str) -> tuple[str, str] | None:
    """Return ``(name, value)`` for a declaration line, else None."""
    match = VAR_LINE_PATTERN.match(line.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


class CommentState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


class CommentAccumulator:
    """Collects consecutive comment lines into one pending block."""

    def __init__(self) -> None:
        self.state = CommentState.IDLE
        self._parts: list[str] = []

    def add(self, line: str) -> None:
        text = line.strip()[1:].strip()
        if text:
            self._parts.append(text)
        self.state = CommentState.ACCUMULATING

    def clear(self) -> None:
        self._parts = []
        self.state = CommentState.IDLE

    def take(self) -> str:
        """Return the pending comment and reset to idle."""
        text = " ".join(self._parts)
        self.clear()
        return text


def parse_example(
    text: str, source_path: str = "", sources: Sequence[ValueSource] = ()
) -> EnvSchema:
    """Parse example-file text into an ordered schema.

    A repeated name replaces the earlier definition but keeps its position.
    """
    definitions: dict[str, EnvVarDefinition] = {}
    pending = CommentAccumulator()

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            pending.clear()
            continue
        if stripped.startswith("#"):
            pending.add(stripped)
            continue

        parsed = parse_variable_line(stripped)
        if parsed is None:
            continue
        name, value = parsed
        comment = pending.take()
        meta = parse_comment(comment, sources)
        definitions[name] = EnvVarDefinition(
            name=name,
            example_value=value,
            requirement=meta.requirement,
            directive=meta.directive,
            description=meta.description,
            raw_comment=comment,
        )

    return EnvSchema(source_path=source_path, definitions=list(definitions.values()))


def parse_example_file(
    path: Path, store: EnvFileStore, sources: Sequence[ValueSource] = ()
) -> EnvSchema:
    """Parse an example file. A missing file yields an empty schema."""
    text = store.read_text(path)
    if text is None:
        logger.debug("parser: no example file at %s", path)
        return EnvSchema(source_path=str(path))
    return parse_example(text, str(path), sources)


def merge_schemas(
    shared: EnvSchema | Iterable[EnvVarDefinition],
    specific: EnvSchema | Iterable[EnvVarDefinition],
) -> list[EnvVarDefinition]:
    """Combine a shared and a workspace schema.

    A name in both yields the specific definition whole, never a
    field-level blend. Overridden names keep their shared position.
    """
    merged: dict[str, EnvVarDefinition] = {}
    for schema in (shared, specific):
        definitions = schema.definitions if isinstance(schema, EnvSchema) else schema
        for definition in definitions:
            merged[definition.name] = definition
    return list(merged.values())
