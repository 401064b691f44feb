# apps/api/routers/job_runner.py
from __future__ import annotations

import hmac

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from apps.api.deps import get_dedup_cache, get_runner, get_settings, get_verifier
from apps.api.services.job_runner import JobRunner
from apps.api.services.scheduled_jobs import run_daily_jobs
from libs.adapters.dedup_inmemory import RecentMessageCache
from libs.contracts.job_models import DispatchFailure, DispatchSuccess, JobDescriptor
from libs.security.signatures import SignatureVerifier
from libs.settings.config import JobsSettings

router = APIRouter(prefix="/api", tags=["job-runner"])
log = structlog.get_logger()

SIGNATURE_HEADER = "X-Signature"
MESSAGE_ID_HEADER = "X-Message-Id"


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post("/job-runner")
async def run_job(
    request: Request,
    settings: JobsSettings = Depends(get_settings),
    verifier: SignatureVerifier = Depends(get_verifier),
    runner: JobRunner = Depends(get_runner),
    dedup: RecentMessageCache = Depends(get_dedup_cache),
):
    """Callback invoked by the queue provider to execute one job."""
    raw = await request.body()

    # development skips verification entirely
    if not settings.is_development:
        if not verifier.is_configured:
            log.error("dispatch.unconfigured")
            failure = DispatchFailure(
                message="Signature verification is not configured",
                error="signing key missing",
            )
            return JSONResponse(status_code=500, content=failure.model_dump())
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            return _message(401, "Missing signature")
        # the provider signed the raw bytes, verify those rather than a re-serialization
        if not verifier.verify(signature, raw):
            return _message(401, "Invalid signature")

    message_id = request.headers.get(MESSAGE_ID_HEADER, "").strip()
    if not dedup.reserve(message_id):
        log.info("dispatch.duplicate", message_id=message_id)
        return DispatchSuccess(message="Duplicate delivery ignored", result=None).model_dump()

    with structlog.contextvars.bound_contextvars(message_id=message_id or None):
        try:
            descriptor = JobDescriptor.model_validate_json(raw)
            result = await run_in_threadpool(runner.process, descriptor.job_type, descriptor.payload)
        except Exception as exc:
            # free the id so the provider's redelivery can run it
            dedup.release(message_id)
            log.error("dispatch.failed", error=str(exc))
            failure = DispatchFailure(message=f"Error processing job: {exc}", error=str(exc))
            return JSONResponse(status_code=500, content=failure.model_dump())

    dedup.remember(message_id)
    return DispatchSuccess(
        message=f"Job {descriptor.job_type} processed successfully",
        result=result,
    ).model_dump()


@router.api_route("/job-runner", methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def job_runner_wrong_method():
    return JSONResponse(
        status_code=405,
        content={"message": "Method not allowed. Use POST."},
        headers={"Allow": "POST"},
    )


@router.api_route("/scheduled-job", methods=["GET", "POST"])
def run_scheduled_jobs(
    request: Request,
    settings: JobsSettings = Depends(get_settings),
    runner: JobRunner = Depends(get_runner),
):
    """Daily batch; cron platforms call it with GET."""
    if settings.CRON_SECRET:
        expected = f"Bearer {settings.CRON_SECRET}"
        supplied = request.headers.get("Authorization", "")
        if not hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8")):
            return _message(401, "Invalid cron secret")

    try:
        report = run_daily_jobs(runner)
    except Exception as exc:
        log.error("scheduled.failed", error=str(exc))
        failure = DispatchFailure(message="Error processing scheduled jobs", error=str(exc))
        return JSONResponse(status_code=500, content=failure.model_dump())
    return report.model_dump(by_alias=True)
