# apps/scheduler/flow_daily.py
from prefect import flow, task

from apps.api.deps import get_runner
from apps.api.services.scheduled_jobs import run_daily_jobs
from libs.contracts.job_models import ScheduledBatchReport


@task
def run_batch() -> ScheduledBatchReport:
    return run_daily_jobs(get_runner())


@task
def check(report: ScheduledBatchReport) -> None:
    failed = [r.job_type for r in report.results if not r.success]
    if failed:
        raise RuntimeError(f"daily jobs failed: {failed}")


@flow(name="daily-scheduled-jobs")
def run() -> dict:
    report = run_batch()
    check(report)
    return report.model_dump(by_alias=True)


if __name__ == "__main__":
    print(run())
