# app/services/social/adapters/tiktok_adapter.py

from __future__ import annotations

from typing import Any, Dict

from ..errors import UpstreamError
from .base import PlatformAdapter


class TikTokAdapter(PlatformAdapter):
    """
    TikTok Content Posting API, direct post with a single-chunk FILE_UPLOAD.

      1) download the video (size is needed for init)
      2) POST /v2/post/publish/video/init/  -> upload_url, publish_id
      3) PUT the bytes with Content-Range: bytes 0-{n-1}/{n}

    TikTok processes the video asynchronously; the publish_id is returned
    without polling for the final status.
    """

    platform = "tiktok"

    OPEN_API_BASE = "https://open.tiktokapis.com"
    VIDEO_INIT_URL = f"{OPEN_API_BASE}/v2/post/publish/video/init/"

    def deliver(self, *, post, account, token, text, media, log_tag):
        video_bytes = self._download(media[0].url, timeout=self.settings.video_timeout)
        size = len(video_bytes)

        privacy_level = (post.metadata or {}).get("privacy_level") or "PUBLIC_TO_EVERYONE"
        init = self.init_video_post(token, text, size, privacy_level)

        upload_url = init.get("upload_url")
        publish_id = init.get("publish_id")
        if not upload_url or not publish_id:
            raise UpstreamError("TikTok video init missing upload_url/publish_id", platform=self.platform, body=init)

        self._request(
            "PUT",
            upload_url,
            headers={
                "Content-Type": "video/mp4",
                "Content-Length": str(size),
                "Content-Range": f"bytes 0-{size - 1}/{size}",
            },
            data=video_bytes,
            timeout=self.settings.video_timeout,
            fallback="Failed to upload video to TikTok",
        )

        post_url = f"https://www.tiktok.com/@{account.username}" if account.username else None
        return publish_id, post_url

    def init_video_post(self, access_token: str, caption: str, video_size: int, privacy_level: str) -> Dict[str, Any]:
        payload = {
            "post_info": {
                "title": caption or "",
                "privacy_level": privacy_level,
                "disable_comment": False,
                "disable_duet": False,
                "disable_stitch": False,
                "video_cover_timestamp_ms": 1000,
            },
            "source_info": {
                "source": "FILE_UPLOAD",
                "video_size": int(video_size),
                "chunk_size": int(video_size),
                "total_chunk_count": 1,
            },
        }

        data = self._post_json(
            self.VIDEO_INIT_URL,
            headers=self._bearer(access_token, {"Content-Type": "application/json; charset=UTF-8"}),
            json=payload,
            fallback="TikTok video init failed",
        )

        # success is error.code == "ok" (or absent)
        err = data.get("error") or {}
        if err.get("code") not in (None, "", "ok"):
            raise UpstreamError(
                err.get("message") or "TikTok video init failed",
                platform=self.platform,
                body=data,
            )
        return data.get("data") or {}
