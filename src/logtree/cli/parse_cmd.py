"""CLI command: logtree parse - print the flat parse of job log files as JSON."""

from __future__ import annotations

import json

import click

from logtree.parser import parse_workflow_logs


@click.command("parse")
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None,
              help="Parse jobs on this many threads (or set LOGTREE_MAX_WORKERS).")
@click.option("--hide-metadata", is_flag=True, help="Leave out marker-only lines.")
def parse_cmd(files: tuple[str, ...], workers: int | None, hide_metadata: bool) -> None:
    """Parse job log FILES and print every line as JSON.

    \b
    Examples:
        logtree parse 1_build.txt 2_test.txt
        logtree parse logs/*.txt --hide-metadata
    """
    from logtree.cli import read_job_files, report_failures

    parsed = parse_workflow_logs(read_job_files(files), max_workers=workers)

    payload = parsed.to_dict()
    if hide_metadata:
        for job in payload["jobs"]:
            job["lines"] = [ln for ln in job["lines"] if not ln["is_metadata"]]

    click.echo(json.dumps(payload, indent=2))
    report_failures(parsed)
