# libs/adapters/errors.py
from __future__ import annotations

from typing import Optional


class JobsError(Exception):
    """Base for every error raised by the jobs subsystem."""

    retryable: bool = False


class QueueNotConfigured(JobsError):
    """No provider credential outside development mode."""


class QueueUnavailable(JobsError):
    """Network failure or non-2xx answer from the queue provider."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body[:500]


class QueueTimeout(QueueUnavailable):
    retryable = True


class InvalidMessage(JobsError):
    """Descriptor rejected before it was sent."""


class UnknownJobType(JobsError):
    def __init__(self, job_type: str) -> None:
        super().__init__(f"Unknown job type: {job_type}")
        self.job_type = job_type


class SignatureHeaderError(JobsError):
    """Malformed signature header; stays inside the verifier."""
