"""logtree CLI - inspect GitHub Actions job logs."""

import logging
from pathlib import Path

import click

from logtree.config import get_settings
from logtree.parser import clean_job_name


def read_job_files(paths):
    """Read job log files into a name -> bytes mapping, in argument order.

    Job names come from the file names (``2_build.txt`` -> ``build``).
    Two files that clean to the same job name are rejected.
    """
    logs = {}
    sources = {}
    for path in paths:
        path = Path(path)
        name = clean_job_name(path.name)
        if name in sources:
            raise click.ClickException(
                f"{sources[name]} and {path} both name job '{name}'"
            )
        try:
            logs[name] = path.read_bytes()
        except OSError as exc:
            raise click.ClickException(f"Cannot read {path}: {exc.strerror or exc}")
        sources[name] = path
    return logs


def report_failures(parsed):
    """Raise a ClickException listing jobs that could not be decoded."""
    if parsed.ok:
        return
    names = ", ".join(f.name for f in parsed.failures)
    raise click.ClickException(f"{len(parsed.failures)} job(s) could not be parsed: {names}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log parser decisions (debug level).")
def cli(verbose):
    """logtree - GitHub Actions log reconstruction."""
    settings = get_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


from logtree.cli.parse_cmd import parse_cmd
from logtree.cli.tree_cmd import tree_cmd

cli.add_command(parse_cmd)
cli.add_command(tree_cmd)
