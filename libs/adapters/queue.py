from __future__ import annotations
from typing import Protocol
from .errors import QueueUnavailable, InvalidMessage  # noqa: F401  (re-exported for callers)
from libs.contracts.job_models import JobDescriptor, EnqueueOptions


class QueueAdapter(Protocol):
    def publish(self, descriptor: JobDescriptor, callback_url: str, options: EnqueueOptions) -> str:
        """Hand one job to the provider; returns the provider message_id. Raise InvalidMessage/QueueUnavailable."""
        ...

    def ping(self) -> bool:
        return True
