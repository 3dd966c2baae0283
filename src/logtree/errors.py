"""Exceptions raised for input that cannot be parsed at all."""


class LogParseError(Exception):
    """Base class for hard parse failures."""


class JobDecodeError(LogParseError):
    """A job's raw bytes could not be decoded as text."""

    def __init__(self, job_name: str, reason: str):
        self.job_name = job_name
        self.reason = reason
        super().__init__(f"Cannot decode log for job '{job_name}': {reason}")
