# app/services/social/store.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from flask import current_app

from ...models.social.post import Post as PostModel
from ...models.social.social_account import SocialAccount as SocialAccountModel
from ...utils.logger import Log
from .entities import MediaAsset, Post, PostUpdate, SocialAccount


class PublishStore(Protocol):
    """What the publishing pipeline needs from the datastore."""

    def get_post(self, post_id: str) -> Optional[Post]: ...

    def get_accounts(self, account_ids: List[str]) -> List[SocialAccount]: ...

    def update_account_tokens(
        self,
        account_id: str,
        *,
        access_token: str,
        refresh_token: Optional[str],
        token_expires_at: Optional[datetime],
    ) -> None: ...

    def update_post(self, post_id: str, update: PostUpdate) -> None: ...


def _parse_dt(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    s = str(value).strip().replace("Z", "+00:00")
    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def post_from_doc(doc: Dict[str, Any], media_docs: List[Dict[str, Any]]) -> Post:
    post_id = str(doc["_id"])
    media = [
        MediaAsset(
            id=str(m.get("_id")),
            post_id=post_id,
            kind=(m.get("kind") or m.get("type") or "").lower(),
            url=m.get("url") or "",
            position=int(m.get("position") or 0),
        )
        for m in media_docs
    ]
    return Post(
        id=post_id,
        content=doc.get("content") or "",
        hashtags=list(doc.get("hashtags") or []),
        account_ids=[str(a) for a in (doc.get("account_ids") or [])],
        status=doc.get("status") or PostModel.STATUS_DRAFT,
        platform_posts=dict(doc.get("platform_posts") or {}),
        error_message=doc.get("error_message"),
        published_at=_parse_dt(doc.get("published_at")),
        media=sorted(media, key=lambda m: m.position),
        metadata=dict(doc.get("metadata") or {}),
        scheduled_for=_parse_dt(doc.get("scheduled_for")),
    )


def account_from_doc(doc: Dict[str, Any]) -> SocialAccount:
    return SocialAccount(
        id=str(doc["_id"]),
        platform=(doc.get("platform") or "").lower(),
        platform_account_id=str(doc.get("platform_account_id") or ""),
        access_token=doc.get("access_token_plain") or "",
        refresh_token=doc.get("refresh_token_plain"),
        token_expires_at=_parse_dt(doc.get("token_expires_at")),
        username=doc.get("username"),
    )


def unloadable_account(doc: Dict[str, Any], reason: str) -> SocialAccount:
    return SocialAccount(
        id=str(doc.get("_id")),
        platform=str(doc.get("platform") or "unknown").lower(),
        platform_account_id="",
        access_token="",
        load_error=f"Social account could not be loaded: {reason}",
    )


class MongoPublishStore:
    """PublishStore over the posts / post_media / social_accounts collections."""

    def get_post(self, post_id: str) -> Optional[Post]:
        doc = PostModel.get_by_id(post_id)
        if not doc:
            return None
        return post_from_doc(doc, PostModel.get_media(doc["_id"]))

    def get_accounts(self, account_ids: List[str]) -> List[SocialAccount]:
        """
        One SocialAccount per stored document. A document that cannot be
        mapped comes back as a placeholder carrying ``load_error`` so the
        other accounts are still published.
        """
        accounts = []
        for doc in SocialAccountModel.get_by_ids(account_ids):
            try:
                if doc.get("load_error"):
                    raise ValueError(doc["load_error"])
                accounts.append(account_from_doc(doc))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                Log.error(f"[store.py][MongoPublishStore][get_accounts][{doc.get('_id')}] unusable account document: {e}")
                accounts.append(unloadable_account(doc, str(e)))
        return accounts

    def update_account_tokens(self, account_id, *, access_token, refresh_token, token_expires_at):
        SocialAccountModel.update_tokens(
            account_id,
            access_token=access_token,
            refresh_token=refresh_token,
            token_expires_at=token_expires_at,
        )

    def update_post(self, post_id: str, update: PostUpdate) -> None:
        PostModel.update_publish_result(
            post_id,
            status=update.status,
            platform_posts=update.platform_posts,
            published_at=update.published_at,
            error_message=update.error_message,
        )


def get_store():
    """Store registered on the current Flask app by create_social_app()."""
    return current_app.extensions["social_publish_store"]
