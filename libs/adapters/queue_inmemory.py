from __future__ import annotations
from collections import deque
from typing import Deque, NamedTuple
from libs.contracts.job_models import JobDescriptor, EnqueueOptions
from .errors import InvalidMessage


class PublishedMessage(NamedTuple):
    message_id: str
    descriptor: JobDescriptor
    callback_url: str
    options: EnqueueOptions


class InMemoryQueueAdapter:
    """Keeps published jobs in process; nothing is ever delivered back."""

    def __init__(self, prefix: str = "m") -> None:
        self._q: Deque[PublishedMessage] = deque()
        self._seq = 0
        self._prefix = prefix

    def publish(self, descriptor: JobDescriptor, callback_url: str, options: EnqueueOptions) -> str:
        if not descriptor.job_type:
            raise InvalidMessage("missing jobType")
        self._seq += 1
        mid = f"{self._prefix}{self._seq}"
        self._q.append(PublishedMessage(mid, descriptor, callback_url, options))
        return mid

    @property
    def messages(self) -> list[PublishedMessage]:
        return list(self._q)

    def ping(self) -> bool:
        return True
