# apps/api/services/scheduled_jobs.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Tuple

import structlog

from apps.api.services.job_runner import JobRunner
from libs.contracts.job_models import JobType, ScheduledBatchReport, ScheduledJobOutcome


def daily_jobs(now: datetime) -> List[Tuple[JobType, Dict[str, Any]]]:
    """The daily batch, in execution order."""
    return [
        (JobType.DAILY_DIGEST, {"timestamp": now.isoformat()}),
        (JobType.DATA_CLEANUP, {"olderThanDays": 30}),
    ]


def run_daily_jobs(
    runner: JobRunner,
    *,
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    logger=None,
) -> ScheduledBatchReport:
    """Run every daily job inline; one failure does not stop the rest."""
    log = logger or structlog.get_logger()
    results: List[ScheduledJobOutcome] = []
    for job_type, payload in daily_jobs(clock()):
        try:
            result = runner.process(job_type.value, payload)
            results.append(ScheduledJobOutcome(job_type=job_type.value, success=True, result=result))
        except Exception as exc:
            results.append(ScheduledJobOutcome(job_type=job_type.value, success=False, error=str(exc)))

    log.info(
        "scheduled.done",
        jobs=len(results),
        failed=sum(1 for r in results if not r.success),
    )
    return ScheduledBatchReport(results=results)
