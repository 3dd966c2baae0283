"""
Plain-text report of a LogTree.
Kept separate from the CLI so the tree can be printed from anywhere.
"""

from logtree.tree import is_error_line
from logtree.types import JobNode, LogTree, StepNode


_STATUS_ICON = {
    True:  "❌",
    False: "✅",
}


def _step_lines(step: StepNode, errors_only: bool) -> list[str]:
    lines: list[str] = []
    count = f" ({step.error_count} error(s))" if step.error_count else ""
    lines.append(f"    ▸ {step.name}{count}")
    for line in step.lines:
        if errors_only and not is_error_line(line):
            continue
        indent = "  " * max(line.group_level - 1, 0)
        lines.append(f"      | {indent}{line.display_content.rstrip()}")
    return lines


def _job_lines(job: JobNode, show_lines: bool, errors_only: bool) -> list[str]:
    lines = [f"  {_STATUS_ICON[job.has_failures]} {job.name} ({job.error_count} error(s))"]
    for step in job.steps:
        if errors_only and not step.error_count:
            continue
        if show_lines:
            lines.extend(_step_lines(step, errors_only))
        else:
            count = f" ({step.error_count} error(s))" if step.error_count else ""
            lines.append(f"    ▸ {step.name}{count}")
    return lines


def format_tree(tree: LogTree, show_lines: bool = False, errors_only: bool = False) -> str:
    """Format a LogTree into a readable terminal report."""
    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("  WORKFLOW LOG TREE")
    lines.append("=" * 60)
    lines.append(f"  {tree.total_errors} error(s) in {len(tree.workflows)} workflow(s)")
    lines.append("")

    for workflow in tree.workflows:
        title = workflow.name
        lines.append(f"── {title} ({workflow.total_errors}) {'─' * max(40 - len(title), 0)}")
        for job in workflow.jobs:
            if errors_only and not job.has_failures:
                continue
            lines.extend(_job_lines(job, show_lines, errors_only))
        lines.append("")

    lines.append("=" * 60)
    return "\n".join(lines)
