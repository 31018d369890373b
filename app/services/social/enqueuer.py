# app/services/social/enqueuer.py

from __future__ import annotations

import os
import time
from typing import Optional

from ...extensions import db
from ...extensions.queue import ping_redis
from ...utils.logger import Log
from .appctx import get_app
from .publish_due import publish_due_posts


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def enqueue_due_posts(
    poll_seconds: Optional[int] = None,
    limit: Optional[int] = None,
    queue_name: Optional[str] = None,
    max_loops: Optional[int] = None,
):
    """
    Long-running sweeper: every poll_seconds claim due posts and queue publish
    jobs for the RQ workers.

    Env overrides:
      - ENQUEUER_POLL_SECONDS (default 5)
      - PUBLISH_DUE_BATCH_LIMIT (default from config)
    """
    poll_seconds = poll_seconds if poll_seconds is not None else _env_int("ENQUEUER_POLL_SECONDS", 5)

    app = get_app()
    limit = limit if limit is not None else app.config["PUBLISH_DUE_BATCH_LIMIT"]

    with app.app_context():
        Log.info(f"[enqueuer][start] polling due posts... poll={poll_seconds}s limit={limit}")

        db.create_indexes()

        if not ping_redis():
            Log.info("[enqueuer][warn] redis ping failed (will continue and retry on loop)")

        loops = 0
        while max_loops is None or loops < max_loops:
            loops += 1
            try:
                publish_due_posts(batch_limit=limit, queue_name=queue_name)
            except Exception as e:
                Log.error(f"[enqueuer][error] {e}")
            time.sleep(max(1, int(poll_seconds)))


if __name__ == "__main__":
    enqueue_due_posts()
