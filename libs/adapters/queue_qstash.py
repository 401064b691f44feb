# libs/adapters/queue_qstash.py
from __future__ import annotations

from typing import Dict, Optional

import requests

from libs.contracts.job_models import EnqueueOptions, JobDescriptor
from .errors import QueueUnavailable, QueueTimeout

QSTASH_PUBLISH_URL = "https://qstash.upstash.io/v1/publish"


class QStashQueueAdapter:
    """
    REST client for the QStash publish endpoint.

    POST <publish_url>?url=<callback_url>
      Authorization: Bearer <token>
      Content-Type : application/json
      X-Delay / X-Deduplication-Id only when supplied
    No retry here: a QueueTimeout is flagged retryable and the caller decides.
    """

    def __init__(
        self,
        token: str,
        *,
        publish_url: str = QSTASH_PUBLISH_URL,
        timeout_sec: int = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token
        self.publish_url = publish_url
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()

    def build_headers(self, options: EnqueueOptions) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        if options.delay_seconds:
            headers["X-Delay"] = str(options.delay_seconds)
        if options.deduplication_id:
            headers["X-Deduplication-Id"] = options.deduplication_id
        return headers

    def publish(self, descriptor: JobDescriptor, callback_url: str, options: EnqueueOptions) -> str:
        try:
            r = self.session.post(
                self.publish_url,
                params={"url": callback_url},
                data=descriptor.to_json().encode("utf-8"),
                headers=self.build_headers(options),
                timeout=self.timeout_sec,
            )
        except requests.Timeout as exc:
            raise QueueTimeout(f"QStash publish timed out after {self.timeout_sec}s") from exc
        except requests.RequestException as exc:
            raise QueueUnavailable(f"QStash publish failed: {exc}") from exc

        try:
            r.raise_for_status()
        except requests.HTTPError as exc:
            # keep the provider's answer, it is the only useful hint
            raise QueueUnavailable(
                f"QStash publish failed: status={r.status_code}",
                status_code=r.status_code,
                body=r.text or "",
            ) from exc

        try:
            body = r.json() or {}
        except ValueError:
            body = {}
        message_id = body.get("messageId") if isinstance(body, dict) else None
        if not message_id:
            raise QueueUnavailable(
                "QStash response carried no messageId",
                status_code=r.status_code,
                body=r.text or "",
            )
        return str(message_id)

    def ping(self) -> bool:
        return bool(self.token)
