# app/services/social/aggregator.py

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ...utils.logger import Log
from .entities import STATUS_FAILED, STATUS_PUBLISHED, Post, PostUpdate, PublishAttemptResult
from .token_manager import utcnow


def error_summary(results: Dict[str, PublishAttemptResult]) -> List[str]:
    return [f"{r.platform}: {r.error}" for r in results.values() if not r.success]


class ResultAggregator:
    def __init__(self, store, now=None):
        self.store = store
        self.now = now or utcnow

    def aggregate(self, post: Post, results: Dict[str, PublishAttemptResult]) -> PostUpdate:
        published = any(r.success for r in results.values())
        errors = error_summary(results)

        published_at = None
        if published:
            published_at = post.published_at or self.now()

        return PostUpdate(
            status=STATUS_PUBLISHED if published else STATUS_FAILED,
            platform_posts={account_id: r.to_dict() for account_id, r in results.items()},
            published_at=published_at,
            error_message="; ".join(errors) if errors else None,
        )

    def commit(self, post: Post, results: Dict[str, PublishAttemptResult]) -> Tuple[PostUpdate, Optional[str]]:
        """
        Write the aggregated outcome to the post in a single update.

        Returns (update, write_error). A failed write is logged and reported,
        never raised; the platform posts already exist either way.
        """
        log_tag = f"[aggregator.py][ResultAggregator][commit][{post.id}]"
        update = self.aggregate(post, results)

        try:
            self.store.update_post(post.id, update)
        except Exception as e:
            Log.error(f"{log_tag} failed to save publish result status={update.status} error={e}")
            return update, f"Failed to save publish result: {e}"

        post.status = update.status
        post.platform_posts = update.platform_posts
        post.published_at = update.published_at
        post.error_message = update.error_message

        Log.info(f"{log_tag} status={update.status} errors={update.error_message}")
        return update, None

    def commit_failure(self, post: Post, message: str) -> Optional[str]:
        """
        Mark a post failed without any attempt results (pre-flight failure of a
        post already claimed for publishing). Returns the write error, if any.
        """
        log_tag = f"[aggregator.py][ResultAggregator][commit_failure][{post.id}]"
        update = PostUpdate(
            status=STATUS_FAILED,
            platform_posts=dict(post.platform_posts or {}),
            published_at=post.published_at,
            error_message=message,
        )

        try:
            self.store.update_post(post.id, update)
        except Exception as e:
            Log.error(f"{log_tag} failed to save publish result status={update.status} error={e}")
            return f"Failed to save publish result: {e}"

        post.status = update.status
        post.error_message = message
        Log.info(f"{log_tag} status={update.status} error={message}")
        return None
