# app/services/social/adapters/youtube_adapter.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ....utils.logger import Log
from .. import content_formatter
from ..errors import UpstreamError
from .base import PlatformAdapter


class YouTubeAdapter(PlatformAdapter):
    """
    YouTube Data API v3 resumable upload.

      1) POST .../upload/youtube/v3/videos?uploadType=resumable  -> Location header
      2) download the video
      3) PUT the whole byte buffer to the Location URL            -> video resource

    The post's formatted text becomes the description; the title comes from
    metadata.title or the start of the content.
    """

    platform = "youtube"

    YT_UPLOAD_BASE = "https://www.googleapis.com/upload/youtube/v3"
    DEFAULT_CATEGORY_ID = "22"  # People & Blogs

    def deliver(self, *, post, account, token, text, media, log_tag):
        metadata = post.metadata or {}

        upload_url = self.init_resumable_upload(
            access_token=token,
            title=content_formatter.youtube_title(post.content, metadata),
            description=text,
            tags=metadata.get("tags") or list(post.hashtags or []),
            category_id=metadata.get("category_id") or self.DEFAULT_CATEGORY_ID,
            privacy_status=metadata.get("privacy_status") or "public",
            made_for_kids=bool(metadata.get("made_for_kids", False)),
        )

        video_bytes = self._download(media[0].url, timeout=self.settings.video_timeout)
        data = self.upload_video_bytes(upload_url=upload_url, video_bytes=video_bytes, log_tag=log_tag)

        video_id = data.get("id")
        if not video_id:
            raise UpstreamError("YouTube upload returned no video id", platform=self.platform, body=data)
        return video_id, f"https://www.youtube.com/watch?v={video_id}"

    def init_resumable_upload(
        self,
        *,
        access_token: str,
        title: str,
        description: str,
        tags: Optional[List[str]],
        category_id: str,
        privacy_status: str,
        made_for_kids: bool,
    ) -> str:
        payload = {
            "snippet": {
                "title": title,
                "description": description,
                "categoryId": str(category_id),
            },
            "status": {
                "privacyStatus": privacy_status,
                "selfDeclaredMadeForKids": made_for_kids,
            },
        }
        if tags:
            payload["snippet"]["tags"] = list(tags)

        resp, _ = self._request(
            "POST",
            f"{self.YT_UPLOAD_BASE}/videos",
            params={"uploadType": "resumable", "part": "snippet,status"},
            headers=self._bearer(access_token, {
                "Content-Type": "application/json; charset=UTF-8",
                "X-Upload-Content-Type": "video/*",
            }),
            json=payload,
            fallback="YouTube init resumable upload failed",
        )

        upload_url = resp.headers.get("Location")
        if not upload_url:
            raise UpstreamError("YouTube resumable init returned no upload URL", platform=self.platform)
        return upload_url

    def upload_video_bytes(self, *, upload_url: str, video_bytes: bytes, log_tag: str) -> Dict[str, Any]:
        resp, data = self._request(
            "PUT",
            upload_url,
            headers={
                "Content-Type": "video/*",
                "Content-Length": str(len(video_bytes)),
            },
            data=video_bytes,
            timeout=self.settings.video_timeout,
            fallback="YouTube video upload failed",
        )

        # 308 = resume incomplete; a single-shot upload never expects it
        if resp.status_code == 308:
            Log.info(f"{log_tag} youtube upload incomplete (308)")
            raise UpstreamError("YouTube upload incomplete", platform=self.platform, status_code=308)
        return data

    # ----------------------------
    # Video management (outside a publish run)
    # ----------------------------
    YT_API_BASE = "https://www.googleapis.com/youtube/v3"

    def update_video(self, account, video_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace snippet/status of an uploaded video. ``updates`` is the videos
        resource body without the id, e.g. {"snippet": {...}, "status": {...}}.
        Raises PublishError on failure.
        """
        token = self.token_manager.ensure_valid_token(account)
        _, data = self._request(
            "PUT",
            f"{self.YT_API_BASE}/videos",
            params={"part": "snippet,status"},
            headers=self._bearer(token, {"Content-Type": "application/json"}),
            json={"id": video_id, **(updates or {})},
            fallback="Failed to update YouTube video",
        )
        Log.info(f"[youtube_adapter.py][YouTubeAdapter][update_video][{account.id}] video_id={video_id}")
        return data

    def set_thumbnail(self, account, video_id: str, thumbnail_url: str) -> Dict[str, Any]:
        token = self.token_manager.ensure_valid_token(account)
        image = self._download(thumbnail_url)
        _, data = self._request(
            "POST",
            f"{self.YT_UPLOAD_BASE}/thumbnails/set",
            params={"videoId": video_id},
            headers=self._bearer(token, {"Content-Type": "image/jpeg"}),
            data=image,
            timeout=self.settings.media_timeout,
            fallback="Failed to set YouTube thumbnail",
        )
        Log.info(f"[youtube_adapter.py][YouTubeAdapter][set_thumbnail][{account.id}] video_id={video_id}")
        return data

    def get_categories(self, account, region_code: str = "US") -> List[Dict[str, Any]]:
        """Assignable video categories for a region (ids feed metadata.category_id)."""
        token = self.token_manager.ensure_valid_token(account)
        _, data = self._request(
            "GET",
            f"{self.YT_API_BASE}/videoCategories",
            params={"part": "snippet", "regionCode": region_code},
            headers=self._bearer(token),
            fallback="Failed to get YouTube categories",
        )
        return data.get("items") or []
