# app/services/social/entities.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import ErrorKind

PLATFORMS = ("facebook", "instagram", "twitter", "youtube", "linkedin", "tiktok")

STATUS_DRAFT = "draft"
STATUS_PENDING = "pending"
STATUS_PUBLISHING = "publishing"
STATUS_PUBLISHED = "published"
STATUS_FAILED = "failed"

MEDIA_IMAGE = "image"
MEDIA_VIDEO = "video"


@dataclass
class MediaAsset:
    id: str
    post_id: str
    kind: str
    url: str
    position: int = 0


@dataclass
class Post:
    id: str
    content: str = ""
    hashtags: List[str] = field(default_factory=list)
    account_ids: List[str] = field(default_factory=list)
    status: str = STATUS_DRAFT
    platform_posts: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    error_message: Optional[str] = None
    published_at: Optional[datetime] = None
    media: List[MediaAsset] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    scheduled_for: Optional[datetime] = None


@dataclass
class SocialAccount:
    id: str
    platform: str
    platform_account_id: str
    access_token: str
    refresh_token: Optional[str] = None
    token_expires_at: Optional[datetime] = None
    username: Optional[str] = None
    # set by the store when the stored document could not be turned into an account
    load_error: Optional[str] = None


@dataclass
class PublishAttemptResult:
    account_id: str
    platform: str
    success: bool
    post_id: Optional[str] = None
    post_url: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    published_at: Optional[datetime] = None

    @classmethod
    def ok(cls, account, *, post_id, post_url=None, published_at=None):
        return cls(
            account_id=account.id,
            platform=account.platform,
            success=True,
            post_id=str(post_id) if post_id is not None else None,
            post_url=post_url,
            published_at=published_at,
        )

    @classmethod
    def failed(cls, account_id, platform, error, kind=ErrorKind.INTERNAL):
        return cls(
            account_id=account_id,
            platform=platform,
            success=False,
            error=error,
            error_kind=kind,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "platform": self.platform,
            "success": self.success,
            "post_id": self.post_id,
            "post_url": self.post_url,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "published_at": self.published_at,
        }


@dataclass
class PostUpdate:
    status: str
    platform_posts: Dict[str, Dict[str, Any]]
    published_at: Optional[datetime]
    error_message: Optional[str]


@dataclass
class OrchestrationResult:
    success: bool
    results: Dict[str, PublishAttemptResult] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    status: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        """Trigger contract: {success, perAccountResults, errors?}."""
        body: Dict[str, Any] = {
            "success": self.success,
            "perAccountResults": {k: r.to_dict() for k, r in self.results.items()},
        }
        if self.errors:
            body["errors"] = list(self.errors)
        return body
