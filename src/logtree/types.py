"""
Data model shared by every stage of the log reconstruction engine.

Flat form:   ParsedLog -> JobLog -> LogLine -> StyledSegment
Tree form:   LogTree -> WorkflowNode -> JobNode -> StepNode -> LogLine

Value types are frozen; later stages derive copies with
dataclasses.replace() instead of mutating what an earlier stage built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union


# ---------------------------------------------------------------------------
# Colors and styles
# ---------------------------------------------------------------------------

class NamedColor(IntEnum):
    """The 16-color ANSI palette (0-7 standard, 8-15 bright)."""
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    BRIGHT_BLACK = 8
    BRIGHT_RED = 9
    BRIGHT_GREEN = 10
    BRIGHT_YELLOW = 11
    BRIGHT_BLUE = 12
    BRIGHT_MAGENTA = 13
    BRIGHT_CYAN = 14
    BRIGHT_WHITE = 15

    def to_dict(self) -> dict:
        return {"kind": "named", "name": self.name.lower(), "index": int(self)}


@dataclass(frozen=True)
class Palette256:
    """Index into the 256-color palette (SGR 38;5;N / 48;5;N)."""
    index: int

    def to_dict(self) -> dict:
        return {"kind": "palette256", "index": self.index}


@dataclass(frozen=True)
class Rgb:
    """24-bit color (SGR 38;2;R;G;B / 48;2;R;G;B)."""
    r: int
    g: int
    b: int

    def to_dict(self) -> dict:
        return {"kind": "rgb", "r": self.r, "g": self.g, "b": self.b}


Color = Union[NamedColor, Palette256, Rgb]


@dataclass(frozen=True)
class AnsiStyle:
    """Text attributes in effect for a run of characters."""
    fg_color: Color | None = None
    bg_color: Color | None = None
    bold: bool = False
    faint: bool = False
    italic: bool = False
    underline: bool = False
    blink: bool = False
    reversed: bool = False
    hidden: bool = False
    strikethrough: bool = False

    @property
    def is_default(self) -> bool:
        return self == AnsiStyle()

    def to_dict(self) -> dict:
        return {
            "fg_color": self.fg_color.to_dict() if self.fg_color is not None else None,
            "bg_color": self.bg_color.to_dict() if self.bg_color is not None else None,
            "bold": self.bold,
            "faint": self.faint,
            "italic": self.italic,
            "underline": self.underline,
            "blink": self.blink,
            "reversed": self.reversed,
            "hidden": self.hidden,
            "strikethrough": self.strikethrough,
        }


@dataclass(frozen=True)
class StyledSegment:
    """A contiguous run of text sharing one style."""
    text: str
    style: AnsiStyle = field(default_factory=AnsiStyle)

    def to_dict(self) -> dict:
        return {"text": self.text, "style": self.style.to_dict()}


# ---------------------------------------------------------------------------
# Workflow commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CommandParams:
    """Source-location parameters of an annotation (file=..,line=..)."""
    file: str | None = None
    line: int | None = None
    col: int | None = None
    end_column: int | None = None
    end_line: int | None = None
    title: str | None = None

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "col": self.col,
            "end_column": self.end_column,
            "end_line": self.end_line,
            "title": self.title,
        }


@dataclass(frozen=True)
class GroupStart:
    title: str

    def to_dict(self) -> dict:
        return {"type": "group", "title": self.title}


@dataclass(frozen=True)
class GroupEnd:
    def to_dict(self) -> dict:
        return {"type": "endgroup"}


@dataclass(frozen=True)
class ErrorAnnotation:
    message: str
    params: CommandParams = field(default_factory=CommandParams)

    def to_dict(self) -> dict:
        return {"type": "error", "message": self.message, "params": self.params.to_dict()}


@dataclass(frozen=True)
class WarningAnnotation:
    message: str
    params: CommandParams = field(default_factory=CommandParams)

    def to_dict(self) -> dict:
        return {"type": "warning", "message": self.message, "params": self.params.to_dict()}


@dataclass(frozen=True)
class DebugMessage:
    message: str

    def to_dict(self) -> dict:
        return {"type": "debug", "message": self.message}


@dataclass(frozen=True)
class NoticeAnnotation:
    message: str
    params: CommandParams = field(default_factory=CommandParams)

    def to_dict(self) -> dict:
        return {"type": "notice", "message": self.message, "params": self.params.to_dict()}


WorkflowCommand = Union[
    GroupStart, GroupEnd, ErrorAnnotation, WarningAnnotation, DebugMessage, NoticeAnnotation,
]


# ---------------------------------------------------------------------------
# Flat form
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LogLine:
    """One runner output line with everything the viewer needs to show it.

    ``content`` is the raw line (timestamp and ANSI codes included),
    ``display_content`` the same line with ANSI codes and workflow command
    syntax removed.
    """
    content: str
    display_content: str
    timestamp: str | None = None
    styled_segments: tuple[StyledSegment, ...] = ()
    command: WorkflowCommand | None = None
    group_level: int = 0
    group_title: str | None = None
    is_metadata: bool = False
    is_command: bool = False

    @property
    def plain_text(self) -> str:
        return "".join(seg.text for seg in self.styled_segments)

    @property
    def should_display(self) -> bool:
        return not self.is_metadata

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "display_content": self.display_content,
            "timestamp": self.timestamp,
            "styled_segments": [s.to_dict() for s in self.styled_segments],
            "command": self.command.to_dict() if self.command is not None else None,
            "group_level": self.group_level,
            "group_title": self.group_title,
            "is_metadata": self.is_metadata,
            "is_command": self.is_command,
        }


@dataclass
class JobLog:
    """One job's full output, in input order."""
    name: str
    lines: list[LogLine] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "lines": [ln.to_dict() for ln in self.lines]}


@dataclass
class JobFailure:
    """A job whose content could not be turned into text."""
    name: str
    error: str

    def to_dict(self) -> dict:
        return {"name": self.name, "error": self.error}


@dataclass
class ParsedLog:
    """Every job of a workflow run, in input order."""
    jobs: list[JobLog] = field(default_factory=list)
    failures: list[JobFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "jobs": [j.to_dict() for j in self.jobs],
            "failures": [f.to_dict() for f in self.failures],
        }


# ---------------------------------------------------------------------------
# Tree form
# ---------------------------------------------------------------------------

@dataclass
class StepNode:
    """The contents of one group (or of the synthetic ungrouped step)."""
    name: str
    lines: list[LogLine] = field(default_factory=list)
    error_count: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "error_count": self.error_count,
            "lines": [ln.to_dict() for ln in self.lines],
        }


@dataclass
class JobNode:
    name: str
    steps: list[StepNode] = field(default_factory=list)
    error_count: int = 0

    @property
    def has_failures(self) -> bool:
        return self.error_count > 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "error_count": self.error_count,
            "has_failures": self.has_failures,
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass
class WorkflowNode:
    name: str
    jobs: list[JobNode] = field(default_factory=list)
    total_errors: int = 0
    has_failures: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "total_errors": self.total_errors,
            "has_failures": self.has_failures,
            "jobs": [j.to_dict() for j in self.jobs],
        }


@dataclass
class LogTree:
    workflows: list[WorkflowNode] = field(default_factory=list)

    @property
    def total_errors(self) -> int:
        return sum(w.total_errors for w in self.workflows)

    def to_dict(self) -> dict:
        return {
            "total_errors": self.total_errors,
            "workflows": [w.to_dict() for w in self.workflows],
        }
