from flask import current_app

from ...services.social.appctx import run_in_app_context
from ...services.social.entities import STATUS_FAILED, PostUpdate
from ...services.social.orchestrator import PublishOrchestrator
from ...services.social.settings import PublisherSettings
from ...services.social.store import get_store
from ...utils.logger import Log


def _publish(post_id: str) -> dict:
    log_tag = f"[publish_job.py][_publish][{post_id}]"
    store = get_store()

    try:
        orchestrator = PublishOrchestrator(store, PublisherSettings.from_mapping(current_app.config))
        return orchestrator.run(post_id).to_response()
    except Exception as e:
        # release the claim: a post left in publishing is never picked up again
        Log.error(f"{log_tag} publish crashed: {e}")
        try:
            store.update_post(post_id, PostUpdate(
                status=STATUS_FAILED,
                platform_posts={},
                published_at=None,
                error_message=f"Publish job failed: {e}",
            ))
        except Exception as write_err:
            Log.error(f"{log_tag} could not mark post failed: {write_err}")
        raise


def publish_post_job(post_id: str) -> dict:
    """
    RQ job: publish one post to every account it targets.
    Returns the same body as the synchronous publish endpoint. A crash marks
    the post failed and is re-raised so RQ records the failed job.
    """
    log_tag = f"[publish_job.py][publish_post_job][{post_id}]"
    Log.info(f"{log_tag} started")

    body = run_in_app_context(_publish, post_id)

    Log.info(f"{log_tag} finished success={body.get('success')}")
    return body
