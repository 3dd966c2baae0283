"""
Library entry points: job text in, flat ParsedLog out.

Each job is parsed independently, so jobs may be spread over a thread pool;
results are always returned in input order. A job that cannot be decoded
is reported in ParsedLog.failures and does not stop its siblings.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor

from logtree.assembler import iter_lines
from logtree.config import get_settings
from logtree.errors import JobDecodeError
from logtree.types import JobFailure, JobLog, ParsedLog

logger = logging.getLogger(__name__)

_JOB_PREFIX = re.compile(r"^\d+_")


def clean_job_name(file_name: str) -> str:
    """Turn an archive member name into a job name.

    ``2_check (ubuntu-latest).txt`` -> ``check (ubuntu-latest)``
    """
    name = file_name[:-4] if file_name.endswith(".txt") else file_name
    return _JOB_PREFIX.sub("", name, count=1)


def parse_job_log(name: str, content: str | bytes, encoding: str = "utf-8") -> JobLog:
    """Parse one job's output into a flat JobLog.

    Every input line is kept, metadata lines included.

    Raises:
        JobDecodeError: *content* is bytes that are not valid *encoding*,
            or *encoding* is not a known codec.
    """
    if isinstance(content, (bytes, bytearray)):
        try:
            content = bytes(content).decode(encoding)
        except UnicodeDecodeError as exc:
            raise JobDecodeError(name, str(exc)) from exc
        except LookupError as exc:
            raise JobDecodeError(name, f"unknown encoding {encoding!r}") from exc

    job = JobLog(name=name, lines=list(iter_lines(content)))
    logger.debug("Parsed job '%s': %d line(s)", name, len(job.lines))
    return job


def parse_workflow_logs(
    logs: Mapping[str, str | bytes],
    max_workers: int | None = None,
    encoding: str | None = None,
) -> ParsedLog:
    """Parse every job of a workflow run.

    Args:
        logs: job name -> raw log content, in the order the jobs should
            appear (archive enumeration order).
        max_workers: parse jobs on this many threads; defaults to the
            LOGTREE_MAX_WORKERS setting.
        encoding: used to decode bytes content; defaults to the
            LOGTREE_ENCODING setting.

    Returns:
        ParsedLog with jobs and failures, each in input order.
    """
    settings = get_settings()
    if max_workers is None:
        max_workers = settings.max_workers
    if encoding is None:
        encoding = settings.encoding

    items = list(logs.items())

    def _parse(item: tuple[str, str | bytes]) -> JobLog | JobFailure:
        name, content = item
        try:
            return parse_job_log(name, content, encoding=encoding)
        except JobDecodeError as exc:
            logger.warning("%s", exc)
            return JobFailure(name=name, error=exc.reason)

    if max_workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            # map() yields in submission order whatever the completion order
            results = list(pool.map(_parse, items))
    else:
        results = [_parse(item) for item in items]

    parsed = ParsedLog()
    for result in results:
        if isinstance(result, JobFailure):
            parsed.failures.append(result)
        else:
            parsed.jobs.append(result)
    return parsed
