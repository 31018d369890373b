"""Shared test fixtures and configuration.

Every outbound HTTP call of the publishing pipeline goes through
``app.services.social.http.send`` which calls ``requests.request``; the
``fake_http`` fixture patches that single point with a URL router, so no
test ever touches the network. The datastore is replaced by an in-memory
``PublishStore``.
"""

from __future__ import annotations

import os
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import patch

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-token-encryption")
os.environ.setdefault("APP_LOG_DIR", tempfile.mkdtemp(prefix="social-publisher-logs-"))

import pytest
from requests.structures import CaseInsensitiveDict

from app.services.social.entities import MediaAsset, Post, SocialAccount
from app.services.social.settings import PublisherSettings

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------
# Fake HTTP
# ---------------------------------------------------------------------
class FakeResponse:
    """Just enough of requests.Response for the adapters."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        content: bytes = b"",
    ):
        self.status_code = status_code
        self._json = json_data
        self.headers = CaseInsensitiveDict(headers or {})
        self.content = content
        self.text = "" if json_data is None else str(json_data)

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


@dataclass
class Call:
    method: str
    url: str
    timeout: Any
    kwargs: Dict[str, Any] = field(default_factory=dict)


class FakeHttp:
    """Routes requests.request(method, url, ...) to canned responses.

    ``add(method, fragment, *responses)`` registers responses for any URL
    containing ``fragment``; the longest matching fragment wins. Responses
    are served in order and the last one repeats. An Exception instance is
    raised instead of returned.
    """

    def __init__(self):
        self.routes: List[list] = []
        self.calls: List[Call] = []
        self._lock = threading.Lock()

    def add(self, method: str, fragment: str, *responses):
        self.routes.append([method.upper(), fragment, list(responses)])
        return self

    def __call__(self, method, url, timeout=None, **kwargs):
        method = method.upper()
        with self._lock:
            self.calls.append(Call(method, url, timeout, kwargs))
            matches = [r for r in self.routes if r[0] == method and r[1] in url]
            if not matches:
                raise AssertionError(f"Unexpected HTTP call: {method} {url}")
            route = max(matches, key=lambda r: len(r[1]))
            queue = route[2]
            resp = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(resp, Exception):
            raise resp
        return resp

    def calls_to(self, fragment: str, method: Optional[str] = None) -> List[Call]:
        return [
            c for c in self.calls
            if fragment in c.url and (method is None or c.method == method.upper())
        ]


@pytest.fixture
def fake_http():
    """Patch requests.request inside the http helper with a FakeHttp router."""
    router = FakeHttp()
    with patch("app.services.social.http.requests.request", side_effect=router):
        yield router


# ---------------------------------------------------------------------
# In-memory datastore
# ---------------------------------------------------------------------
class InMemoryStore:
    """PublishStore backed by dicts; records every write."""

    def __init__(self):
        self.posts: Dict[str, Post] = {}
        self.accounts: Dict[str, SocialAccount] = {}
        self.token_updates: List[Dict[str, Any]] = []
        self.post_updates: List[Any] = []
        self.fail_post_update: Optional[Exception] = None
        self.fail_token_update: Optional[Exception] = None

    def add_post(self, post: Post) -> Post:
        self.posts[post.id] = post
        return post

    def add_account(self, account: SocialAccount) -> SocialAccount:
        self.accounts[account.id] = account
        return account

    def get_post(self, post_id):
        return self.posts.get(post_id)

    def get_accounts(self, account_ids):
        return [self.accounts[i] for i in account_ids if i in self.accounts]

    def update_account_tokens(self, account_id, *, access_token, refresh_token, token_expires_at):
        if self.fail_token_update:
            raise self.fail_token_update
        self.token_updates.append({
            "account_id": account_id,
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_expires_at": token_expires_at,
        })

    def update_post(self, post_id, update):
        if self.fail_post_update:
            raise self.fail_post_update
        self.post_updates.append((post_id, update))


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


# ---------------------------------------------------------------------
# Configuration / clock
# ---------------------------------------------------------------------
@pytest.fixture
def now():
    """Fixed clock used by the token manager, adapters and aggregator."""
    return lambda: NOW


@pytest.fixture
def settings() -> PublisherSettings:
    return PublisherSettings.from_mapping({
        "GRAPH_API_VERSION": "v18.0",
        "PUBLISH_HTTP_TIMEOUT": 30,
        "PUBLISH_MEDIA_TIMEOUT": 120,
        "PUBLISH_VIDEO_TIMEOUT": 600,
        "PUBLISH_MAX_WORKERS": 4,
        "FACEBOOK_APP_ID": "fb-app",
        "FACEBOOK_APP_SECRET": "fb-secret",
        "LINKEDIN_CLIENT_ID": "li-client",
        "LINKEDIN_CLIENT_SECRET": "li-secret",
        "TWITTER_CLIENT_ID": "tw-client",
        "TWITTER_CLIENT_SECRET": "tw-secret",
        "TIKTOK_CLIENT_KEY": "tt-key",
        "TIKTOK_CLIENT_SECRET": "tt-secret",
        "YOUTUBE_CLIENT_ID": "yt-client",
        "YOUTUBE_CLIENT_SECRET": "yt-secret",
    })


# ---------------------------------------------------------------------
# Entity factories
# ---------------------------------------------------------------------
def make_image(n: int, position: Optional[int] = None, post_id: str = "post-1") -> MediaAsset:
    return MediaAsset(
        id=f"img-{n}",
        post_id=post_id,
        kind="image",
        url=f"https://cdn.example.com/img{n}.jpg",
        position=n if position is None else position,
    )


def make_video(n: int = 1, post_id: str = "post-1") -> MediaAsset:
    return MediaAsset(
        id=f"vid-{n}",
        post_id=post_id,
        kind="video",
        url=f"https://cdn.example.com/video{n}.mp4",
        position=n,
    )


def make_post(**overrides) -> Post:
    values = {
        "id": "post-1",
        "content": "Hello world",
        "hashtags": [],
        "account_ids": [],
        "status": "pending",
    }
    values.update(overrides)
    return Post(**values)


PLATFORM_ACCOUNT_IDS = {
    "facebook": "page-1",
    "instagram": "ig-1",
    "twitter": "tw-user-1",
    "youtube": "channel-1",
    "linkedin": "person-1",
    "tiktok": "open-1",
}


def make_account(platform: str, account_id: Optional[str] = None, **overrides) -> SocialAccount:
    values = {
        "id": account_id or f"acct-{platform}",
        "platform": platform,
        "platform_account_id": PLATFORM_ACCOUNT_IDS.get(platform, "ext-1"),
        "access_token": f"{platform}-token",
        "refresh_token": None,
        "token_expires_at": None,
        "username": f"{platform}_user",
    }
    values.update(overrides)
    return SocialAccount(**values)
