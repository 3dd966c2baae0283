"""logtree - GitHub Actions log reconstruction."""

from logtree.ansi import decode, strip_ansi
from logtree.assembler import assemble
from logtree.commands import parse_params, recognize
from logtree.errors import JobDecodeError, LogParseError
from logtree.parser import clean_job_name, parse_job_log, parse_workflow_logs
from logtree.tree import build_log_tree, build_tree, build_workflow, job_log_to_tree
from logtree.types import (
    AnsiStyle,
    CommandParams,
    DebugMessage,
    ErrorAnnotation,
    GroupEnd,
    GroupStart,
    JobFailure,
    JobLog,
    JobNode,
    LogLine,
    LogTree,
    NamedColor,
    NoticeAnnotation,
    Palette256,
    ParsedLog,
    Rgb,
    StepNode,
    StyledSegment,
    WarningAnnotation,
    WorkflowNode,
)

__all__ = [
    "AnsiStyle",
    "CommandParams",
    "DebugMessage",
    "ErrorAnnotation",
    "GroupEnd",
    "GroupStart",
    "JobDecodeError",
    "JobFailure",
    "JobLog",
    "JobNode",
    "LogLine",
    "LogParseError",
    "LogTree",
    "NamedColor",
    "NoticeAnnotation",
    "Palette256",
    "ParsedLog",
    "Rgb",
    "StepNode",
    "StyledSegment",
    "WarningAnnotation",
    "WorkflowNode",
    "assemble",
    "build_log_tree",
    "build_tree",
    "build_workflow",
    "clean_job_name",
    "decode",
    "job_log_to_tree",
    "parse_job_log",
    "parse_params",
    "parse_workflow_logs",
    "recognize",
    "strip_ansi",
]
