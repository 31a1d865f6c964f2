"""Reading and non-destructive rewriting of values files.

Rewrites keep every untouched line byte-for-byte, replace only the value
part of updated lines, and append new variables at the end with their
schema description as a comment.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from .models import EnvLocalValues, EnvVarDefinition
from .parser import parse_variable_line
from .protocol import EnvFileStore

_ASSIGNMENT_PREFIX = re.compile(r"^(\s*([A-Za-z_][A-Za-z0-9_]*)[ \t]*=[ \t]*)")


def parse_local(text: str) -> EnvLocalValues:
    """Parse values-file text.

    Only the single comment line directly above a variable is kept.
    """
    values: dict[str, str] = {}
    comments: dict[str, str] = {}
    pending = ""

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            pending = ""
            continue
        if stripped.startswith("#"):
            pending = stripped
            continue
        parsed = parse_variable_line(stripped)
        if parsed is None:
            continue
        name, value = parsed
        values[name] = value
        if pending:
            comments[name] = pending
        pending = ""

    return EnvLocalValues(values=values, comments=comments, original_text=text)


def parse_local_file(path: Path, store: EnvFileStore) -> EnvLocalValues:
    """Parse a values file. A missing file yields no values."""
    text = store.read_text(path)
    return parse_local(text or "")


def _normalize(lines: list[str], newline: str = "\n") -> str:
    content = "\n".join(lines)
    content = re.sub(r"\n{3,}", "\n\n", content)
    return (content.strip("\n") + "\n").replace("\n", newline)


def update_local_content(
    original: EnvLocalValues,
    updates: Mapping[str, str],
    schema: Sequence[EnvVarDefinition] = (),
) -> str:
    """Apply updates to values-file content without disturbing other lines.

    A file written with CRLF line endings keeps them, appended lines included.
    """
    lines: list[str] = []
    seen: set[str] = set()
    newline = "\r\n" if "\r\n" in original.original_text else "\n"

    if original.original_text:
        for line in original.original_text.split("\n"):
            line = line.removesuffix("\r")
            stripped = line.strip()
            match = None if stripped.startswith("#") else _ASSIGNMENT_PREFIX.match(line)
            if match is None:
                lines.append(line)
                continue
            name = match.group(2)
            seen.add(name)
            if name in updates:
                lines.append(f"{match.group(1)}{updates[name]}")
            else:
                lines.append(line)

    descriptions = {d.name: d.description for d in schema}
    appended: list[str] = []
    for name, value in updates.items():
        if name in seen:
            continue
        if descriptions.get(name):
            appended.append(f"# {descriptions[name]}")
        appended.append(f"{name}={value}")
        appended.append("")

    if appended:
        if lines and lines[-1].strip():
            lines.append("")
        lines.extend(appended)

    return _normalize(lines, newline)


def format_env_file(entries: Iterable[tuple[str, str, str | None]]) -> str:
    """Render ``(name, value, comment)`` entries as a fresh values file."""
    lines: list[str] = []
    for name, value, comment in entries:
        if comment:
            lines.append(comment if comment.startswith("#") else f"# {comment}")
        lines.append(f"{name}={value}")
        lines.append("")
    return _normalize(lines)
