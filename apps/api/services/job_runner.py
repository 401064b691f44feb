# apps/api/services/job_runner.py
from __future__ import annotations

from time import perf_counter
from typing import Any, Callable, Dict, Mapping, Optional

import structlog

from libs.adapters.errors import UnknownJobType
from libs.contracts.job_models import JobType

JobHandler = Callable[[Dict[str, Any]], Dict[str, Any]]


class JobRunner:
    """
    Dispatch table: JobType -> handler.

    The handlers are placeholders: they log which payload keys arrived and return a
    canned result flagged with mock=True. Real email/report/sync/resume work lives in
    its own services and is not wired here.
    """

    def __init__(self, logger=None, clock=perf_counter, handlers: Optional[Mapping[JobType, JobHandler]] = None):
        self.log = logger or structlog.get_logger()
        self.clock = clock
        table: Dict[JobType, JobHandler] = {
            JobType.PROCESS_EMAIL: self._process_email,
            JobType.GENERATE_REPORT: self._generate_report,
            JobType.SYNC_DATA: self._sync_data,
            JobType.ANALYZE_RESUME: self._analyze_resume,
            JobType.DAILY_DIGEST: self._daily_digest,
            JobType.DATA_CLEANUP: self._data_cleanup,
        }
        if handlers:
            table.update(handlers)
        missing = [t.value for t in JobType if t not in table]
        if missing:
            raise RuntimeError(f"job handlers missing for: {missing}")
        self._table = table

    @property
    def job_types(self) -> list[str]:
        return [t.value for t in self._table]

    def resolve(self, job_type: str) -> JobType:
        try:
            return JobType(job_type)
        except ValueError:
            raise UnknownJobType(job_type) from None

    def process(self, job_type: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        t0 = self.clock()
        payload = payload or {}
        self.log.info("runner.start", job_type=job_type)
        try:
            handler = self._table[self.resolve(job_type)]
            result = handler(payload)
        except Exception as exc:
            self.log.error("runner.failed", job_type=job_type, error=str(exc), exc_info=True)
            raise
        self.log.info("runner.done", job_type=job_type, duration_ms=int((self.clock() - t0) * 1000))
        return result

    # ---------- placeholder handlers ----------

    def _process_email(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.log.info("job.email.mock", payload_keys=sorted(payload))
        return {"success": True, "message": "Email processed (mock)", "mock": True}

    def _generate_report(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.log.info("job.report.mock", payload_keys=sorted(payload))
        return {"success": True, "message": "Report generated (mock)", "mock": True}

    def _sync_data(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.log.info("job.sync.mock", payload_keys=sorted(payload))
        return {"success": True, "message": "Data synced (mock)", "mock": True}

    def _analyze_resume(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.log.info("job.resume.mock", payload_keys=sorted(payload))
        return {
            "success": True,
            "message": "Resume analyzed (mock)",
            "mock": True,
            "analysis": {
                "skills": ["JavaScript", "TypeScript", "NestJS"],
                "experience": "5-7 years",
                "recommendedRoles": ["Senior Developer", "Tech Lead"],
            },
        }

    def _daily_digest(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.log.info("job.digest.mock", payload_keys=sorted(payload))
        return {"success": True, "message": "Daily digest prepared (mock)", "mock": True}

    def _data_cleanup(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        older_than = payload.get("olderThanDays")
        self.log.info("job.cleanup.mock", older_than_days=older_than)
        return {
            "success": True,
            "message": "Data cleanup completed (mock)",
            "mock": True,
            "olderThanDays": older_than,
        }
