"""
Line assembly: raw runner line -> LogLine.

Combines timestamp extraction, command recognition and ANSI decoding.
Nesting is not tracked here; group_level/group_title are filled in later
by logtree.tree.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from logtree.ansi import decode, slice_segments
from logtree.commands import CommandSyntax, match_command
from logtree.types import GroupEnd, GroupStart, LogLine


class LineAssembler:
    """Builds LogLine records for GitHub Actions runner output."""

    # 2024-01-15T10:30:00.1234567Z, then one space or the end of the line
    _TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?Z)(?: |$)")
    _NEWLINE = re.compile(r"\r\n|\r|\n")

    def extract_timestamp(self, raw_line: str) -> tuple[str | None, str]:
        """Split a leading runner timestamp off *raw_line*.

        Returns ``(timestamp, rest)``; timestamp is None when the line does
        not start with one.
        """
        m = self._TIMESTAMP.match(raw_line)
        if not m:
            return None, raw_line
        return m.group(1), raw_line[m.end():]

    def assemble(self, raw_line: str) -> LogLine:
        timestamp, text = self.extract_timestamp(raw_line)

        segments = decode(text)
        plain = "".join(seg.text for seg in segments)

        match = match_command(plain)
        if match is None:
            return LogLine(
                content=raw_line,
                display_content=plain,
                timestamp=timestamp,
                styled_segments=tuple(segments),
            )

        is_metadata = (
            isinstance(match.command, (GroupStart, GroupEnd))
            or match.message == ""
        )
        return LogLine(
            content=raw_line,
            display_content=match.message,
            timestamp=timestamp,
            styled_segments=tuple(slice_segments(segments, match.start, match.end)),
            command=match.command,
            is_metadata=is_metadata,
            is_command=match.syntax is CommandSyntax.COMMAND_PREFIX,
        )

    def iter_lines(self, text: str) -> Iterator[LogLine]:
        # Only \n, \r\n and \r end a line; form feeds and friends stay inside it
        raw_lines = self._NEWLINE.split(text)
        if raw_lines[-1] == "":
            raw_lines.pop()
        for raw_line in raw_lines:
            yield self.assemble(raw_line)


_default = LineAssembler()


def assemble(raw_line: str) -> LogLine:
    """Build one fully annotated LogLine from a raw runner line."""
    return _default.assemble(raw_line)


def extract_timestamp(raw_line: str) -> tuple[str | None, str]:
    return _default.extract_timestamp(raw_line)


def iter_lines(text: str) -> Iterator[LogLine]:
    """Assemble every line of a job's text, lazily and in order."""
    return _default.iter_lines(text)
