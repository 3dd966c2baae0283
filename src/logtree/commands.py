"""
Workflow command recognition.

A runner line carries at most one control command, written in one of three
syntaxes. They are tried in this order and the first match wins:

  ##[name]message          hash-bracket form used by the runner itself
  [command]shell line      echo of a shell invocation (not a real command)
  ::name params::message   legacy form written by actions and scripts

The [command] form must be tried before the legacy one so that a
``::error::`` inside an echoed shell line stays part of that shell line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from logtree.types import (
    CommandParams,
    DebugMessage,
    ErrorAnnotation,
    GroupEnd,
    GroupStart,
    NoticeAnnotation,
    WarningAnnotation,
    WorkflowCommand,
)

logger = logging.getLogger(__name__)


class CommandSyntax(Enum):
    HASH_BRACKET = "hash_bracket"
    COMMAND_PREFIX = "command_prefix"
    LEGACY = "legacy"


@dataclass(frozen=True)
class CommandMatch:
    """A recognized command and where its message sits in the input line.

    ``start``/``end`` index the string passed to match_command(), so callers
    can cut the message out of a styled copy of the same text.
    """
    command: WorkflowCommand
    message: str
    syntax: CommandSyntax
    start: int
    end: int


_HASH_BRACKET = re.compile(r"^##\[([a-zA-Z-]+)\](.*)$")
_COMMAND_PREFIX = re.compile(r"^\[command\](.*)$")
_LEGACY = re.compile(r"^::([a-zA-Z-]+)(?:\s+([^:]+?))?::(.*)$")

_INT_PARAMS = {
    "line": "line",
    "col": "col",
    "endColumn": "end_column",
    "endLine": "end_line",
}
_STR_PARAMS = {
    "file": "file",
    "title": "title",
}


def recognize(line: str) -> tuple[WorkflowCommand, str] | None:
    """Return ``(command, cleaned_message)`` for *line*, or None for plain text."""
    match = match_command(line)
    if match is None:
        return None
    return match.command, match.message


def match_command(line: str) -> CommandMatch | None:
    """Like recognize(), but also report which syntax matched and where."""
    lead = len(line) - len(line.lstrip())
    text = line.strip()

    for syntax, matcher in (
        (CommandSyntax.HASH_BRACKET, _match_hash_bracket),
        (CommandSyntax.COMMAND_PREFIX, _match_command_prefix),
        (CommandSyntax.LEGACY, _match_legacy),
    ):
        found = matcher(text)
        if found is None:
            continue
        command, message, start, end = found
        return CommandMatch(
            command=command,
            message=message,
            syntax=syntax,
            start=lead + start,
            end=lead + end,
        )
    return None


def parse_params(params: str) -> CommandParams:
    """Parse ``file=app.js,line=10,col=15`` into CommandParams.

    Unknown keys, empty segments and segments without ``=`` are skipped.
    Numeric values that do not parse are left unset.
    """
    values: dict[str, object] = {}
    for segment in params.split(","):
        segment = segment.strip()
        if not segment or "=" not in segment:
            continue
        key, value = segment.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key in _STR_PARAMS:
            values[_STR_PARAMS[key]] = value
        elif key in _INT_PARAMS:
            if value.isascii() and value.isdigit():
                values[_INT_PARAMS[key]] = int(value)
            else:
                logger.debug("Ignoring non-numeric %s=%r", key, value)
    return CommandParams(**values)


# ---------------------------------------------------------------------------
# Syntax matchers: (command, message, start, end) relative to the stripped line
# ---------------------------------------------------------------------------

def _match_hash_bracket(text: str):
    m = _HASH_BRACKET.match(text)
    if not m:
        return None
    start, end = _stripped_span(text, m.start(2), m.end(2))
    message = text[start:end]
    command = _build_command(m.group(1), message, CommandParams())
    if command is None:
        return None
    return command, message, start, end


def _match_command_prefix(text: str):
    m = _COMMAND_PREFIX.match(text)
    if not m:
        return None
    start, end = _stripped_span(text, m.start(1), m.end(1))
    message = text[start:end]
    return DebugMessage(message), message, start, end


def _match_legacy(text: str):
    m = _LEGACY.match(text)
    if not m:
        return None
    start, end = m.start(3), m.end(3)
    message = m.group(3)
    params = parse_params(m.group(2) or "")
    command = _build_command(m.group(1), message, params)
    if command is None:
        return None
    return command, message, start, end


def _build_command(name: str, message: str, params: CommandParams) -> WorkflowCommand | None:
    name = name.lower()
    if name == "group":
        return GroupStart(title=message)
    if name == "endgroup":
        return GroupEnd()
    if name == "error":
        return ErrorAnnotation(message=message, params=params)
    if name == "warning":
        return WarningAnnotation(message=message, params=params)
    if name == "notice":
        return NoticeAnnotation(message=message, params=params)
    if name == "debug":
        return DebugMessage(message=message)
    return None


def _stripped_span(text: str, start: int, end: int) -> tuple[int, int]:
    chunk = text[start:end]
    start += len(chunk) - len(chunk.lstrip())
    end -= len(chunk) - len(chunk.rstrip())
    return start, max(start, end)
