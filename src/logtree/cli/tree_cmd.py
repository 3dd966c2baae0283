"""CLI command: logtree tree - show job log files as a workflow/job/step tree."""

from __future__ import annotations

import json
import sys

import click

from logtree.formatter import format_tree
from logtree.parser import parse_workflow_logs
from logtree.tree import DEFAULT_WORKFLOW_NAME, build_log_tree, group_by_prefix


@click.command("tree")
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--workflow", "-n", default=DEFAULT_WORKFLOW_NAME, help="Name of the workflow holding the jobs.")
@click.option("--group-by-prefix", "by_prefix", is_flag=True,
              help="Put 'name / job' jobs under a workflow called 'name'.")
@click.option("--lines", "show_lines", is_flag=True,
              help="Print step contents, not just step names (text output only).")
@click.option("--errors-only", is_flag=True,
              help="Only show steps and lines with errors (text output only).")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None,
              help="Parse jobs on this many threads (or set LOGTREE_MAX_WORKERS).")
@click.option("--fail-on-errors", is_flag=True, help="Exit 1 when any job has errors.")
def tree_cmd(
    files: tuple[str, ...],
    output: str,
    workflow: str,
    by_prefix: bool,
    show_lines: bool,
    errors_only: bool,
    workers: int | None,
    fail_on_errors: bool,
) -> None:
    """Build the step tree of job log FILES.

    \b
    Examples:
        logtree tree 1_build.txt 2_test.txt
        logtree tree logs/*.txt --lines --errors-only
        logtree tree logs/*.txt -o json --group-by-prefix
    """
    from logtree.cli import read_job_files, report_failures

    parsed = parse_workflow_logs(read_job_files(files), max_workers=workers)
    key = group_by_prefix() if by_prefix else None
    tree = build_log_tree(parsed, workflow_for=key, default=workflow)

    if output == "json":
        click.echo(json.dumps(tree.to_dict(), indent=2))
    else:
        click.echo(format_tree(tree, show_lines=show_lines, errors_only=errors_only))

    report_failures(parsed)

    if fail_on_errors and tree.total_errors:
        sys.exit(1)