# apps/api/services/jobs_service.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import structlog
from pydantic import ValidationError

from libs.adapters.errors import InvalidMessage, JobsError, QueueNotConfigured
from libs.adapters.queue import QueueAdapter
from libs.contracts.job_models import EnqueueOptions, EnqueueReceipt, JobDescriptor, JobType
from libs.settings.config import JobsSettings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobsService:
    """
    Orchestration for outbound jobs:
      - validate descriptor (known job type, JSON payload)
      - hand it to the queue adapter with the callback url
      - without a provider token: simulate in development, fail otherwise
    """

    def __init__(
        self,
        settings: JobsSettings,
        queue: Optional[QueueAdapter] = None,
        *,
        logger=None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.settings = settings
        self.queue = queue          # None == no provider credential configured
        self.log = logger or structlog.get_logger()
        self.clock = clock

    def enqueue(
        self,
        job_type: str,
        payload: Optional[Dict[str, Any]] = None,
        options: Optional[EnqueueOptions] = None,
    ) -> EnqueueReceipt:
        descriptor = self._build_descriptor(job_type, payload)
        options = options or EnqueueOptions()

        if self.queue is None:
            self.log.warning("enqueue.unconfigured", job_type=descriptor.job_type)
            if self.settings.is_development:
                message_id = f"dev-{int(self.clock().timestamp() * 1000)}"
                self.log.info(
                    "enqueue.simulated",
                    job_type=descriptor.job_type,
                    message_id=message_id,
                    payload_keys=sorted(descriptor.payload),
                )
                return EnqueueReceipt(
                    message_id=message_id,
                    job_type=descriptor.job_type,
                    delay_seconds=options.delay_seconds,
                    simulated=True,
                )
            raise QueueNotConfigured("QStash token not configured")

        try:
            message_id = self.queue.publish(descriptor, self.settings.callback_url(), options)
        except JobsError as exc:
            self.log.error(
                "enqueue.failed",
                job_type=descriptor.job_type,
                error=str(exc),
                retryable=exc.retryable,
            )
            raise

        self.log.info(
            "enqueue.done",
            job_type=descriptor.job_type,
            message_id=message_id,
            delay_seconds=options.delay_seconds,
            deduplication_id=options.deduplication_id,
        )
        return EnqueueReceipt(
            message_id=message_id,
            job_type=descriptor.job_type,
            delay_seconds=options.delay_seconds,
        )

    def schedule(
        self,
        job_type: str,
        payload: Optional[Dict[str, Any]],
        scheduled_time: str | datetime,
    ) -> EnqueueReceipt:
        """Past times clamp to zero delay (run now), never an error."""
        return self.enqueue(
            job_type,
            payload,
            EnqueueOptions(delay_seconds=self.delay_until(scheduled_time)),
        )

    def delay_until(self, scheduled_time: str | datetime) -> int:
        when = self._parse_time(scheduled_time)
        return max(0, round((when - self.clock()).total_seconds()))

    def readiness(self) -> dict:
        """{queue: bool, signing: bool, ok: bool}"""
        dev = self.settings.is_development
        queue_ok = self.queue.ping() if self.queue is not None else dev
        signing_ok = bool(self.settings.QSTASH_CURRENT_SIGNING_KEY) or dev
        return {"queue": queue_ok, "signing": signing_ok, "ok": queue_ok and signing_ok}

    # ---------- helpers ----------

    @staticmethod
    def _build_descriptor(job_type: str, payload: Optional[Dict[str, Any]]) -> JobDescriptor:
        try:
            descriptor = JobDescriptor(job_type=job_type, payload=payload or {})
        except ValidationError as e:
            raise InvalidMessage(str(e)) from e
        if descriptor.job_type not in {t.value for t in JobType}:
            raise InvalidMessage(f"Unknown job type: {descriptor.job_type}")
        return descriptor

    @staticmethod
    def _parse_time(value: str | datetime) -> datetime:
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
            except ValueError as e:
                raise InvalidMessage(f"scheduledTime is not ISO-8601: {value!r}") from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
