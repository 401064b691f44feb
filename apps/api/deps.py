# apps/api/deps.py
from __future__ import annotations
from functools import lru_cache
from typing import Optional
import structlog

from libs.settings.config import JobsSettings
from libs.security.signatures import SignatureVerifier
from libs.adapters.queue import QueueAdapter
from libs.adapters.queue_qstash import QStashQueueAdapter
from libs.adapters.dedup_inmemory import RecentMessageCache
from apps.api.services.job_runner import JobRunner
from apps.api.services.jobs_service import JobsService


@lru_cache
def get_settings() -> JobsSettings:
    """Read once per process; tests build their own JobsSettings instead."""
    return JobsSettings()


def _select_queue(settings: JobsSettings) -> Optional[QueueAdapter]:
    """
    Very small factory: QStash when a token exists, otherwise None
    (JobsService then simulates in development and refuses elsewhere).
    """
    if not settings.QSTASH_TOKEN:
        return None
    return QStashQueueAdapter(
        settings.QSTASH_TOKEN,
        publish_url=settings.QSTASH_URL,
        timeout_sec=settings.QSTASH_TIMEOUT_SECONDS,
    )


@lru_cache
def get_jobs_service() -> JobsService:
    """
    Wire up jobs service (DI):
      - settings: JobsSettings (env)
      - queue   : QStash adapter or None
      - logger  : structlog
    """
    settings = get_settings()
    return JobsService(settings, _select_queue(settings), logger=structlog.get_logger())


@lru_cache
def get_verifier() -> SignatureVerifier:
    settings = get_settings()
    return SignatureVerifier(settings.signing_keys(), development=settings.is_development)


@lru_cache
def get_runner() -> JobRunner:
    return JobRunner(logger=structlog.get_logger())


@lru_cache
def get_dedup_cache() -> RecentMessageCache:
    return RecentMessageCache(get_settings().DEDUP_TTL_SECONDS)
