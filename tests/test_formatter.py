"""Tests for the plain-text tree report."""

from logtree.formatter import format_tree
from logtree.parser import parse_job_log
from logtree.tree import build_log_tree
from logtree.types import LogTree


# -- Fixtures: sample logs --

NESTED_LOG = """
2024-01-15T10:33:00Z ##[group]Build Docker image
2024-01-15T10:33:30Z ##[group]Pull base
2024-01-15T10:33:31Z Error: connection timed out
2024-01-15T10:33:32Z ##[endgroup]
2024-01-15T10:33:33Z pushing layers
2024-01-15T10:33:34Z ##[endgroup]
"""

CLEAN_LOG = """
2024-01-15T10:34:00Z ##[group]Run tests
2024-01-15T10:34:05Z ====== 42 passed in 3.21s ======
2024-01-15T10:34:06Z ##[endgroup]
"""


def _tree():
    jobs = [parse_job_log("docker", NESTED_LOG), parse_job_log("tests", CLEAN_LOG)]
    return build_log_tree(jobs, default="CI")


class TestFormatTree:
    def test_summary(self):
        out = format_tree(_tree())
        assert "1 error(s) in 1 workflow(s)" in out
        assert "── CI (1)" in out
        assert "❌ docker (1 error(s))" in out
        assert "✅ tests (0 error(s))" in out

    def test_step_names_without_lines(self):
        out = format_tree(_tree())
        assert "▸ Pull base (1 error(s))" in out
        assert "▸ Build Docker image" in out
        assert "pushing layers" not in out

    def test_lines_indented_by_depth(self):
        out = format_tree(_tree(), show_lines=True)
        assert "      |   Error: connection timed out" in out
        assert "      | pushing layers" in out

    def test_errors_only(self):
        out = format_tree(_tree(), show_lines=True, errors_only=True)
        assert "tests" not in out.split("── CI")[1]
        assert "pushing layers" not in out
        assert "Error: connection timed out" in out

    def test_empty_tree(self):
        out = format_tree(LogTree())
        assert "0 error(s) in 0 workflow(s)" in out
