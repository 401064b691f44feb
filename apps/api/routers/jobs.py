# apps/api/routers/jobs.py
from fastapi import APIRouter, Depends, HTTPException, status
from apps.api.deps import get_jobs_service
from apps.api.services.jobs_service import JobsService
from libs.adapters.errors import InvalidMessage, QueueNotConfigured, QueueUnavailable
from libs.contracts.job_models import EnqueueOptions, EnqueueRequest, ScheduleRequest

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _raise_http(exc: Exception):
    if isinstance(exc, InvalidMessage):
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if isinstance(exc, QueueNotConfigured):
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    if isinstance(exc, QueueUnavailable):
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": str(exc), "retryable": exc.retryable},
        ) from exc
    raise exc


@router.post("", status_code=status.HTTP_202_ACCEPTED)
def enqueue_job(req: EnqueueRequest, svc: JobsService = Depends(get_jobs_service)):
    """Hand a job to the queue provider for async execution"""
    try:
        opts = EnqueueOptions(delay_seconds=req.delay_seconds, deduplication_id=req.deduplication_id)
        receipt = svc.enqueue(req.job_type, req.payload, opts)
    except (InvalidMessage, QueueNotConfigured, QueueUnavailable) as exc:
        _raise_http(exc)
    return receipt.model_dump(by_alias=True)


@router.post("/schedule", status_code=status.HTTP_202_ACCEPTED)
def schedule_job(req: ScheduleRequest, svc: JobsService = Depends(get_jobs_service)):
    """Run a job at an ISO-8601 time; past times run immediately"""
    try:
        receipt = svc.schedule(req.job_type, req.payload, req.scheduled_time)
    except (InvalidMessage, QueueNotConfigured, QueueUnavailable) as exc:
        _raise_http(exc)
    return receipt.model_dump(by_alias=True)
