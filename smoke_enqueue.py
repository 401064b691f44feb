# smoke_enqueue.py
"""
Smoke test for the job round trip:
- Build the jobs service via deps (settings -> queue adapter)
- Enqueue one job (simulated when APP_ENV=development and no QSTASH_TOKEN)
- Optionally sign the same descriptor and POST it to a running dispatch endpoint

Run:
    $ APP_ENV=development python smoke_enqueue.py
    $ python smoke_enqueue.py --job analyzeResume --runner-url http://localhost:8000/api/job-runner
"""

from __future__ import annotations

import argparse
import json
import os
import time

import requests


def main():
    parser = argparse.ArgumentParser(description="End-to-end smoke test for job dispatch.")
    parser.add_argument("--job", type=str, default=os.getenv("TEST_JOB_TYPE", "processEmail"),
                        help="Job type to enqueue (default: processEmail or TEST_JOB_TYPE env).")
    parser.add_argument("--payload", type=str, default='{"to": "smoke@example.com"}',
                        help="JSON payload for the job.")
    parser.add_argument("--runner-url", type=str, default=None,
                        help="If set, also POST a signed callback to this dispatch endpoint.")
    args = parser.parse_args()

    from apps.api.deps import get_jobs_service, get_settings
    from libs.contracts.job_models import JobDescriptor
    from libs.observability.logging import setup_logging
    from libs.security.signatures import build_signature_header

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, json=not settings.is_development)
    svc = get_jobs_service()
    payload = json.loads(args.payload)

    print("Jobs wiring")
    print(f"   env     : {settings.APP_ENV}")
    print(f"   queue   : {type(svc.queue).__name__ if svc.queue else 'none (simulated)'}")
    print(f"   callback: {settings.callback_url()}")

    receipt = svc.enqueue(args.job, payload)
    print("\nEnqueued:", receipt.model_dump(by_alias=True))

    if not args.runner_url:
        return

    body = JobDescriptor(job_type=args.job, payload=payload).to_json()
    headers = {"Content-Type": "application/json"}
    if settings.QSTASH_CURRENT_SIGNING_KEY:
        headers["X-Signature"] = build_signature_header(
            settings.QSTASH_CURRENT_SIGNING_KEY, str(int(time.time())), body
        )
    r = requests.post(args.runner_url, data=body.encode("utf-8"), headers=headers, timeout=30)
    print(f"\nDispatch -> {r.status_code}: {r.text[:500]}")


if __name__ == "__main__":
    main()
