"""
Group tree reconstruction.

Runner logs carry no parent pointers: nesting exists only as the order of
group/endgroup markers in a flat line stream. build_tree() replays that
stream against a stack of open steps.

Policies:
  - an endgroup with nothing open is ignored
  - groups still open at the end of the stream are closed innermost first,
    as if the missing endgroup markers had been appended
  - lines outside every group go to one synthetic leading step
  - marker and other metadata lines never reach a step
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace

from logtree.types import (
    ErrorAnnotation,
    GroupEnd,
    GroupStart,
    JobLog,
    JobNode,
    LogLine,
    LogTree,
    ParsedLog,
    StepNode,
    WorkflowNode,
)

logger = logging.getLogger(__name__)

UNGROUPED_STEP_NAME = "(ungrouped)"
DEFAULT_WORKFLOW_NAME = "workflow"


@dataclass
class _OpenStep:
    title: str
    lines: list[LogLine] = field(default_factory=list)

    def finalize(self) -> StepNode:
        return StepNode(
            name=self.title,
            lines=self.lines,
            error_count=count_errors(self.lines),
        )


def is_error_line(line: LogLine) -> bool:
    """True for an error annotation, or plain output mentioning ``error:``."""
    if line.command is not None:
        return isinstance(line.command, ErrorAnnotation)
    return "error:" in line.display_content.lower()


def count_errors(lines: Iterable[LogLine]) -> int:
    return sum(1 for line in lines if is_error_line(line))


def build_tree(job: JobLog) -> JobNode:
    """Reconstruct the step tree of one job from its flat line stream."""
    stack: list[_OpenStep] = []
    ungrouped = _OpenStep(UNGROUPED_STEP_NAME)
    steps: list[StepNode] = []

    for index, line in enumerate(job.lines):
        command = line.command

        if isinstance(command, GroupStart):
            stack.append(_OpenStep(command.title))
            continue

        if isinstance(command, GroupEnd):
            if not stack:
                logger.debug("%s: line %d: endgroup without open group, ignored", job.name, index + 1)
                continue
            steps.append(stack.pop().finalize())
            continue

        if line.is_metadata:
            continue

        target = stack[-1] if stack else ungrouped
        target.lines.append(replace(
            line,
            group_level=len(stack),
            group_title=stack[-1].title if stack else None,
        ))

    if stack:
        logger.debug(
            "%s: %d group(s) left open at end of log: %s",
            job.name, len(stack), ", ".join(s.title for s in stack),
        )
    while stack:
        steps.append(stack.pop().finalize())

    if ungrouped.lines:
        steps.insert(0, ungrouped.finalize())

    return JobNode(
        name=job.name,
        steps=steps,
        error_count=sum(s.error_count for s in steps),
    )


job_log_to_tree = build_tree


# ---------------------------------------------------------------------------
# Workflow aggregation
# ---------------------------------------------------------------------------

def build_workflow(name: str, jobs: Iterable[JobNode]) -> WorkflowNode:
    jobs = list(jobs)
    total = sum(j.error_count for j in jobs)
    return WorkflowNode(
        name=name,
        jobs=jobs,
        total_errors=total,
        has_failures=any(j.error_count for j in jobs),
    )


def group_by_prefix(separator: str = " / ") -> Callable[[str], str | None]:
    """Key function: ``"build / test (ubuntu)"`` -> ``"build"``.

    Job names without the separator get no key and fall into the default
    workflow.
    """
    def key(job_name: str) -> str | None:
        if separator not in job_name:
            return None
        return job_name.split(separator, 1)[0].strip() or None
    return key


def build_log_tree(
    parsed: ParsedLog | Iterable[JobLog],
    workflow_for: Callable[[str], str | None] | None = None,
    default: str = DEFAULT_WORKFLOW_NAME,
) -> LogTree:
    """Group every job's tree under workflows.

    *workflow_for* maps a job name to its workflow name (None -> *default*).
    Without it all jobs share one workflow. Jobs keep input order inside a
    workflow; workflows with failures come first, then by name.
    """
    jobs = parsed.jobs if isinstance(parsed, ParsedLog) else list(parsed)

    grouped: dict[str, list[JobNode]] = {}
    for job in jobs:
        name = (workflow_for(job.name) if workflow_for else None) or default
        grouped.setdefault(name, []).append(build_tree(job))

    workflows = [build_workflow(name, nodes) for name, nodes in grouped.items()]
    workflows.sort(key=lambda w: (not w.has_failures, w.name))
    return LogTree(workflows=workflows)


def expanded_paths(tree: LogTree) -> set[str]:
    """Default expand/collapse state for a tree viewer.

    Paths are ``"w"``, ``"w:j"`` and ``"w:j:s"`` indices. Workflows are
    always expanded; jobs and steps only when they contain errors.
    """
    paths: set[str] = set()
    for w_idx, workflow in enumerate(tree.workflows):
        paths.add(str(w_idx))
        for j_idx, job in enumerate(workflow.jobs):
            if not job.error_count:
                continue
            paths.add(f"{w_idx}:{j_idx}")
            for s_idx, step in enumerate(job.steps):
                if step.error_count:
                    paths.add(f"{w_idx}:{j_idx}:{s_idx}")
    return paths
