# app/services/social/adapters/twitter_adapter.py

from __future__ import annotations

import base64
from typing import List, Optional, Tuple

from ....utils.logger import Log
from .. import content_formatter
from ..entities import PublishAttemptResult, SocialAccount
from ..errors import PreconditionError, PublishError, UpstreamError
from .base import PlatformAdapter


class TwitterAdapter(PlatformAdapter):
    """
    X (Twitter) publishing with an OAuth 2.0 user bearer token.

      - Upload each image to upload.twitter.com v1.1 (base64 media_data)
      - Create the tweet via API v2 POST /2/tweets

    Text over 280 characters is rejected before anything is sent.
    """

    platform = "twitter"

    API_BASE = "https://api.twitter.com"
    UPLOAD_BASE = "https://upload.twitter.com"

    CREATE_TWEET_URL = f"{API_BASE}/2/tweets"
    MEDIA_UPLOAD_URL = f"{UPLOAD_BASE}/1.1/media/upload.json"

    def deliver(self, *, post, account, token, text, media, log_tag):
        media_ids = [self.upload_media(token, m.url) for m in media]
        tweet_id = self.create_tweet(token, text, media_ids=media_ids)
        return tweet_id, self.tweet_url(account.username, tweet_id)

    # ----------------------------
    # Media upload (simple, images only)
    # ----------------------------
    def upload_media(self, access_token: str, media_url: str) -> str:
        content = self._download(media_url)

        data = self._post_json(
            self.MEDIA_UPLOAD_URL,
            headers=self._bearer(access_token),
            data={"media_data": base64.b64encode(content).decode()},
            timeout=self.settings.media_timeout,
            fallback="Twitter media upload failed",
        )
        media_id = data.get("media_id_string") or (str(data["media_id"]) if data.get("media_id") else None)
        if not media_id:
            raise UpstreamError("Twitter media upload returned no media id", platform=self.platform, body=data)
        return media_id

    def create_tweet(
        self,
        access_token: str,
        text: str,
        *,
        media_ids: Optional[List[str]] = None,
        in_reply_to: Optional[str] = None,
    ) -> str:
        payload = {"text": text}
        if media_ids:
            payload["media"] = {"media_ids": media_ids}
        if in_reply_to:
            payload["reply"] = {"in_reply_to_tweet_id": in_reply_to}

        data = self._post_json(
            self.CREATE_TWEET_URL,
            headers=self._bearer(access_token, {"Content-Type": "application/json"}),
            json=payload,
            fallback="Failed to publish tweet",
        )
        tweet_id = (data.get("data") or {}).get("id")
        if not tweet_id:
            raise UpstreamError("Twitter did not return a tweet id", platform=self.platform, body=data)
        return tweet_id

    # ----------------------------
    # Threads
    # ----------------------------
    def publish_thread(self, account: SocialAccount, texts: List[str]) -> Tuple[PublishAttemptResult, List[str]]:
        """
        Publish texts as a reply chain. The result carries the first tweet's id;
        the second value lists every tweet id that made it out, in order.
        """
        log_tag = f"[twitter_adapter.py][TwitterAdapter][publish_thread][{account.id}]"
        tweet_ids: List[str] = []

        try:
            if not texts:
                raise PreconditionError("Thread has no tweets", platform=self.platform)
            for t in texts:
                content_formatter.format(t, [], self.platform)
            self.check_credentials(account)

            token = self.token_manager.ensure_valid_token(account)

            previous_id = None
            for t in texts:
                previous_id = self.create_tweet(token, t, in_reply_to=previous_id)
                tweet_ids.append(previous_id)
        except PublishError as e:
            Log.info(f"{log_tag} thread failed after {len(tweet_ids)} tweets error={e.message}")
            return PublishAttemptResult.failed(account.id, self.platform, e.message, e.kind), tweet_ids

        Log.info(f"{log_tag} thread published count={len(tweet_ids)}")
        result = PublishAttemptResult.ok(
            account,
            post_id=tweet_ids[0],
            post_url=self.tweet_url(account.username, tweet_ids[0]),
            published_at=self.now(),
        )
        return result, tweet_ids

    @staticmethod
    def tweet_url(username, tweet_id):
        if username:
            return f"https://twitter.com/{username}/status/{tweet_id}"
        return f"https://twitter.com/i/web/status/{tweet_id}"
