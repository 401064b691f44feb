# Minimal runner so we can: python -m apps.scheduler.worker [--job dataCleanup --payload '{"olderThanDays": 7}']
import argparse
import json

from libs.observability.logging import setup_logging


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--job", default=None, help="run a single job type instead of the daily flow")
    p.add_argument("--payload", default="{}", help="JSON payload for --job")
    args = p.parse_args()
    setup_logging()

    if args.job:
        from apps.api.deps import get_runner
        print(json.dumps(get_runner().process(args.job, json.loads(args.payload))))
    else:
        from apps.scheduler.flow_daily import run
        print(run())
