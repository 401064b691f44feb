# apps/api/routers/health.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from apps.api.deps import get_jobs_service
from apps.api.services.jobs_service import JobsService

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    return {"status": "ok"}


@router.get("/readyz")
def readyz(svc: JobsService = Depends(get_jobs_service)):
    report = svc.readiness()
    return JSONResponse(status_code=200 if report["ok"] else 503, content=report)
