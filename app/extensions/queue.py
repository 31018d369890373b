# app/extensions/queue.py

from __future__ import annotations

import os
from typing import Any, Optional

from rq import Queue

from .db import redis_connection


# -------------------------------------------------------------------
# Queue names
# -------------------------------------------------------------------

PUBLISH_QUEUE_NAME = (os.getenv("RQ_PUBLISH_QUEUE") or "publish").strip() or "publish"


# -------------------------------------------------------------------
# Job defaults (per-call arguments win)
# -------------------------------------------------------------------

RQ_DEFAULT_TIMEOUT = int(os.getenv("RQ_DEFAULT_TIMEOUT", "900"))          # seconds; covers video uploads
RQ_DEFAULT_RESULT_TTL = int(os.getenv("RQ_DEFAULT_RESULT_TTL", "300"))    # seconds
RQ_DEFAULT_FAILURE_TTL = int(os.getenv("RQ_DEFAULT_FAILURE_TTL", "86400"))# seconds
RQ_DEFAULT_TTL = int(os.getenv("RQ_DEFAULT_TTL", "600"))                  # seconds (job ttl)


def ping_redis() -> bool:
    """Quick health check for Redis before enqueueing."""
    try:
        return bool(redis_connection.get_connection().ping())
    except Exception:
        return False


def get_queue(name: Optional[str] = None) -> Queue:
    qn = (name or "").strip() or PUBLISH_QUEUE_NAME
    return Queue(qn, connection=redis_connection.get_connection(), default_timeout=RQ_DEFAULT_TIMEOUT)


def enqueue(
    func: str,
    *args: Any,
    queue_name: Optional[str] = None,
    job_timeout: Optional[int] = None,
    result_ttl: Optional[int] = None,
    failure_ttl: Optional[int] = None,
    ttl: Optional[int] = None,
    **kwargs: Any,
):
    """
    Enqueue a job by dotted path on the publish queue (or queue_name).

    Example:
      enqueue("app.tasks.social.publish_job.publish_post_job", post_id)
    """
    q = get_queue(queue_name)

    return q.enqueue(
        func,
        *args,
        **kwargs,
        job_timeout=job_timeout or RQ_DEFAULT_TIMEOUT,
        result_ttl=result_ttl if result_ttl is not None else RQ_DEFAULT_RESULT_TTL,
        failure_ttl=failure_ttl if failure_ttl is not None else RQ_DEFAULT_FAILURE_TTL,
        ttl=ttl if ttl is not None else RQ_DEFAULT_TTL,
    )

