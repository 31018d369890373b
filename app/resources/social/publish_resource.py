from __future__ import annotations

from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint, abort

from ...constants.service_code import ERROR_MESSAGES, HTTP_STATUS_CODES
from ...extensions.queue import enqueue, ping_redis
from ...schemas.social.publish_schema import (
    EnqueueResponseSchema,
    PublishResponseSchema,
    TwitterThreadRequestSchema,
    TwitterThreadResponseSchema,
)
from ...services.social.orchestrator import PublishOrchestrator
from ...services.social.publish_due import PUBLISH_JOB
from ...services.social.settings import PublisherSettings
from ...services.social.store import get_store
from ...services.social.token_manager import TokenManager
from ...services.social.adapters.twitter_adapter import TwitterAdapter
from ...utils.logger import Log

# ------------------------------------------------------------------
# Blueprint
# ------------------------------------------------------------------
blp_social_publish = Blueprint(
    "social_publish",
    __name__,
    description="Publish posts to connected social accounts",
)


_NOT_FOUND_ERRORS = (
    [ERROR_MESSAGES["POST_NOT_FOUND"]],
    [ERROR_MESSAGES["ACCOUNTS_NOT_FOUND"]],
)


def _settings() -> PublisherSettings:
    return PublisherSettings.from_mapping(current_app.config)


# ------------------------------------------------------------------
# Publish now (synchronous)
# ------------------------------------------------------------------
@blp_social_publish.route("/social/posts/<string:post_id>/publish")
class PublishPostResource(MethodView):

    @blp_social_publish.response(HTTP_STATUS_CODES["OK"], PublishResponseSchema)
    def post(self, post_id):
        """
        Publish a post to every account it targets and record the outcome.

        200 when at least one account published, 404 when the post or all of
        its accounts are missing, 400 for other pre-flight failures (no
        accounts selected), 502 when every attempt failed.
        """
        log_tag = f"[publish_resource.py][PublishPostResource][post][{post_id}]"

        result = PublishOrchestrator(get_store(), _settings()).run(post_id)
        body = result.to_response()

        if result.success:
            status = HTTP_STATUS_CODES["OK"]
        elif not result.results and result.errors[:1] in _NOT_FOUND_ERRORS:
            status = HTTP_STATUS_CODES["NOT_FOUND"]
        elif not result.results:
            status = HTTP_STATUS_CODES["BAD_REQUEST"]
        else:
            status = HTTP_STATUS_CODES["BAD_GATEWAY"]

        Log.info(f"{log_tag} status={status} errors={body.get('errors')}")
        return body, status


# ------------------------------------------------------------------
# Publish in the background (RQ)
# ------------------------------------------------------------------
@blp_social_publish.route("/social/posts/<string:post_id>/publish/async")
class EnqueuePublishResource(MethodView):

    @blp_social_publish.response(HTTP_STATUS_CODES["ACCEPTED"], EnqueueResponseSchema)
    def post(self, post_id):
        log_tag = f"[publish_resource.py][EnqueuePublishResource][post][{post_id}]"

        if get_store().get_post(post_id) is None:
            abort(HTTP_STATUS_CODES["NOT_FOUND"], message=ERROR_MESSAGES["POST_NOT_FOUND"])

        if not ping_redis():
            Log.error(f"{log_tag} redis unavailable")
            abort(HTTP_STATUS_CODES["SERVICE_UNAVAILABLE"], message=ERROR_MESSAGES["QUEUE_UNAVAILABLE"])

        job = enqueue(PUBLISH_JOB, post_id)
        Log.info(f"{log_tag} queued job_id={getattr(job, 'id', None)}")

        return {
            "success": True,
            "post_id": post_id,
            "job_id": getattr(job, "id", None),
            "message": "Publish job queued",
        }


# ------------------------------------------------------------------
# Twitter threads
# ------------------------------------------------------------------
@blp_social_publish.route("/social/accounts/<string:account_id>/twitter/thread")
class TwitterThreadResource(MethodView):

    @blp_social_publish.arguments(TwitterThreadRequestSchema)
    @blp_social_publish.response(HTTP_STATUS_CODES["OK"], TwitterThreadResponseSchema)
    def post(self, payload, account_id):
        log_tag = f"[publish_resource.py][TwitterThreadResource][post][{account_id}]"
        store = get_store()

        accounts = store.get_accounts([account_id])
        if not accounts:
            abort(HTTP_STATUS_CODES["NOT_FOUND"], message=ERROR_MESSAGES["ACCOUNT_NOT_FOUND"])

        account = accounts[0]
        if account.load_error:
            abort(HTTP_STATUS_CODES["INTERNAL_SERVER_ERROR"], message=account.load_error)
        if account.platform != TwitterAdapter.platform:
            abort(HTTP_STATUS_CODES["BAD_REQUEST"], message="Threads can only be published to Twitter accounts")

        settings = _settings()
        adapter = TwitterAdapter(TokenManager(store, settings), settings)
        result, thread_ids = adapter.publish_thread(account, payload["tweets"])

        Log.info(f"{log_tag} success={result.success} count={len(thread_ids)}")
        status = HTTP_STATUS_CODES["OK"] if result.success else HTTP_STATUS_CODES["BAD_GATEWAY"]
        return {"success": result.success, "result": result.to_dict(), "thread_ids": thread_ids}, status
