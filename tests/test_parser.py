"""Tests for the job-level entry points."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from logtree.errors import JobDecodeError, LogParseError
from logtree.parser import clean_job_name, parse_job_log, parse_workflow_logs
from logtree.types import GroupStart


class TestCleanJobName:
    @pytest.mark.parametrize("file_name,expected", [
        ("2_check (ubuntu-latest).txt", "check (ubuntu-latest)"),
        ("build.txt", "build"),
        ("1_test", "test"),
        ("my-job", "my-job"),
        ("my_job.txt", "my_job"),
        ("10_lint_all.txt", "lint_all"),
    ])
    def test_clean(self, file_name, expected):
        assert clean_job_name(file_name) == expected


class TestParseJobLog:
    def test_keeps_metadata_lines(self):
        job = parse_job_log("build", "##[group]Step\nhello\n##[endgroup]")
        assert job.name == "build"
        assert len(job.lines) == 3
        assert job.lines[0].command == GroupStart(title="Step")
        assert [ln.is_metadata for ln in job.lines] == [True, False, True]

    def test_bytes_input(self):
        job = parse_job_log("build", "café ready\n".encode("utf-8"))
        assert job.lines[0].display_content == "café ready"

    def test_undecodable_bytes(self):
        with pytest.raises(JobDecodeError) as exc_info:
            parse_job_log("broken", b"ok\n\xff\xfe\xfa")
        assert exc_info.value.job_name == "broken"
        assert isinstance(exc_info.value, LogParseError)
        assert "broken" in str(exc_info.value)

    def test_other_encoding(self):
        job = parse_job_log("latin", "café".encode("latin-1"), encoding="latin-1")
        assert job.lines[0].display_content == "café"

    def test_unknown_encoding(self):
        with pytest.raises(JobDecodeError) as exc_info:
            parse_job_log("odd", b"ok", encoding="no-such-codec")
        assert exc_info.value.job_name == "odd"
        assert "unknown encoding" in exc_info.value.reason


class TestParseWorkflowLogs:
    def _logs(self, n=8):
        return {f"job-{i}": f"##[group]Step {i}\nline {i}\n##[endgroup]" for i in range(n)}

    def test_order_preserved_sequential(self):
        parsed = parse_workflow_logs(self._logs(), max_workers=1)
        assert [j.name for j in parsed.jobs] == [f"job-{i}" for i in range(8)]
        assert parsed.ok

    def test_order_preserved_parallel(self):
        with patch("logtree.parser.ThreadPoolExecutor", wraps=ThreadPoolExecutor) as pool_cls:
            parsed = parse_workflow_logs(self._logs(), max_workers=4)
        pool_cls.assert_called_once_with(max_workers=4)
        assert [j.name for j in parsed.jobs] == [f"job-{i}" for i in range(8)]
        assert parsed.jobs[5].lines[1].display_content == "line 5"

    def test_failure_does_not_stop_siblings(self):
        logs = {
            "first": "hello",
            "broken": b"\xff\xfe",
            "last": b"bye",
        }
        parsed = parse_workflow_logs(logs, max_workers=1)
        assert [j.name for j in parsed.jobs] == ["first", "last"]
        assert [f.name for f in parsed.failures] == ["broken"]
        assert not parsed.ok

    def test_failure_logged(self, caplog):
        parse_workflow_logs({"broken": b"\xff"}, max_workers=1)
        assert "Cannot decode log for job 'broken'" in caplog.text

    def test_workers_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOGTREE_MAX_WORKERS", "3")
        with patch("logtree.parser.ThreadPoolExecutor", wraps=ThreadPoolExecutor) as pool_cls:
            parse_workflow_logs(self._logs(2))
        pool_cls.assert_called_once_with(max_workers=3)

    def test_encoding_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOGTREE_ENCODING", "latin-1")
        parsed = parse_workflow_logs({"j": "café".encode("latin-1")}, max_workers=1)
        assert parsed.jobs[0].lines[0].display_content == "café"

    def test_unknown_encoding_in_environment(self, monkeypatch):
        monkeypatch.setenv("LOGTREE_ENCODING", "no-such-codec")
        parsed = parse_workflow_logs({"a": b"ok", "b": "text"}, max_workers=1)
        assert [j.name for j in parsed.jobs] == ["a", "b"]
        assert parsed.ok

    def test_unknown_encoding_argument_isolated_per_job(self):
        parsed = parse_workflow_logs({"a": b"ok", "b": "text"}, max_workers=1, encoding="no-such-codec")
        assert [j.name for j in parsed.jobs] == ["b"]
        assert [f.name for f in parsed.failures] == ["a"]
        assert "no-such-codec" in parsed.failures[0].error

    def test_to_dict(self):
        parsed = parse_workflow_logs({"j": "::error file=a.py,line=3::bad"}, max_workers=1)
        data = parsed.to_dict()
        line = data["jobs"][0]["lines"][0]
        assert line["command"] == {
            "type": "error",
            "message": "bad",
            "params": {
                "file": "a.py", "line": 3, "col": None,
                "end_column": None, "end_line": None, "title": None,
            },
        }
        assert data["failures"] == []
