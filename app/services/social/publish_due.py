from datetime import datetime, timezone

from ...extensions.queue import enqueue
from ...models.social.post import Post
from ...utils.logger import Log

PUBLISH_JOB = "app.tasks.social.publish_job.publish_post_job"


def publish_due_posts(batch_limit=20, now=None, queue_name=None):
    """
    Claim posts whose scheduled time has come and queue one publish job each.

    Claiming flips pending -> publishing atomically, so two sweepers never
    queue the same post. A post whose job cannot be queued is handed back
    (publishing -> pending) for the next sweep.
    """
    log_tag = "[publish_due.py][publish_due_posts]"
    now = now or datetime.now(timezone.utc)

    claimed = Post.claim_due_posts(limit=batch_limit, now=now)
    Log.info(f"{log_tag} claimed={len(claimed)}")

    queued = []
    for post_id in claimed:
        try:
            job = enqueue(PUBLISH_JOB, post_id, queue_name=queue_name)
        except Exception as e:
            Log.error(f"{log_tag} enqueue failed post_id={post_id} err={e}")
            Post.set_status(post_id, Post.STATUS_PENDING)
            continue

        Log.info(f"{log_tag} queued post_id={post_id} job_id={getattr(job, 'id', None)}")
        queued.append({"post_id": post_id, "job_id": getattr(job, "id", None)})

    return queued
