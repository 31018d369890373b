# app/services/social/adapters/base.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ....utils.logger import Log
from .. import content_formatter, http, media_classifier
from ..entities import MediaAsset, Post, PublishAttemptResult, SocialAccount
from ..errors import PreconditionError, PublishError
from ..settings import PublisherSettings
from ..token_manager import TokenManager, platform_label, utcnow


class PlatformAdapter(ABC):
    """
    One platform's publishing protocol.

    publish() runs the common sequence for every platform:
      1) format the text        (pure, may raise PreconditionError)
      2) select the media       (pure, may raise PreconditionError)
      3) check credentials      (pure, may raise PreconditionError)
      4) get a valid token      (may refresh, may raise CredentialError)
      5) deliver()              (platform calls)
      6) wrap into a PublishAttemptResult

    Every precondition is checked before the token step, so a post that can
    never be delivered makes no network call at all. The trade-off: an expired
    token on such an attempt is not refreshed until the next publish.

    Any PublishError ends the attempt for this account only.
    """

    platform: str = ""

    def __init__(self, token_manager: TokenManager, settings: PublisherSettings, now=None):
        self.token_manager = token_manager
        self.settings = settings
        self.now = now or utcnow

    def publish(self, post: Post, account: SocialAccount) -> PublishAttemptResult:
        log_tag = f"[{self.platform}_adapter.py][{type(self).__name__}][publish][{post.id}][{account.id}]"

        try:
            text = self.format_text(post)
            media = media_classifier.classify(post.media, self.platform)
            self.check_credentials(account)
            token = self.token_manager.ensure_valid_token(account)

            Log.info(f"{log_tag} delivering media_count={len(media)} text_len={len(text)}")
            post_id, post_url = self.deliver(
                post=post, account=account, token=token, text=text, media=media, log_tag=log_tag
            )
        except PublishError as e:
            Log.info(f"{log_tag} failed kind={e.kind.value} error={e.message}")
            return PublishAttemptResult.failed(account.id, self.platform, e.message, e.kind)

        Log.info(f"{log_tag} published post_id={post_id}")
        return PublishAttemptResult.ok(
            account, post_id=post_id, post_url=post_url, published_at=self.now()
        )

    def format_text(self, post: Post) -> str:
        return content_formatter.format(post.content, post.hashtags, self.platform)

    def check_credentials(self, account: SocialAccount) -> None:
        if not account.access_token or not account.platform_account_id:
            raise PreconditionError(
                f"Missing {platform_label(self.platform)} credentials", platform=self.platform
            )

    @abstractmethod
    def deliver(
        self,
        *,
        post: Post,
        account: SocialAccount,
        token: str,
        text: str,
        media: List[MediaAsset],
        log_tag: str,
    ) -> Tuple[str, Optional[str]]:
        """Run the platform calls and return (platform_post_id, post_url)."""

    # ----------------------------
    # Helpers shared by adapters
    # ----------------------------
    def _request(
        self,
        method: str,
        url: str,
        *,
        fallback: str,
        timeout: Optional[int] = None,
        **kwargs,
    ):
        resp = http.send(
            method,
            url,
            timeout=timeout or self.settings.http_timeout,
            platform=self.platform,
            **kwargs,
        )
        data = http.raise_for_upstream(resp, platform=self.platform, fallback=fallback)
        return resp, data

    def _post_json(self, url: str, *, fallback: str, **kwargs) -> Dict[str, Any]:
        _, data = self._request("POST", url, fallback=fallback, **kwargs)
        return data

    def _download(self, url: str, *, timeout: Optional[int] = None) -> bytes:
        return http.download_bytes(url, timeout=timeout or self.settings.media_timeout, platform=self.platform)

    @staticmethod
    def _bearer(token: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        h = {"Authorization": f"Bearer {token}"}
        if extra:
            h.update(extra)
        return h
