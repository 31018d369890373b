import json

from ....utils.logger import Log
from ..errors import PublishError, UpstreamError
from .base import PlatformAdapter


class FacebookAdapter(PlatformAdapter):
    platform = "facebook"

    # ----------------------------
    # Dispatch on image count
    #   0  -> POST /{page_id}/feed
    #   1  -> POST /{page_id}/photos
    #   2+ -> unpublished photos, then POST /{page_id}/feed with attached_media
    # ----------------------------
    def deliver(self, *, post, account, token, text, media, log_tag):
        page_id = account.platform_account_id

        if not media:
            data = self.publish_page_feed(page_id, token, text)
        elif len(media) == 1:
            data = self.publish_page_photo(page_id, token, media[0].url, text)
        else:
            data = self.publish_page_album(page_id, token, [m.url for m in media], text, log_tag)

        post_id = data.get("id") or data.get("post_id")
        if not post_id:
            raise UpstreamError("Facebook did not return a post id", platform=self.platform, body=data)
        return post_id, f"https://facebook.com/{post_id}"

    def publish_page_feed(self, page_id, page_access_token, message, attached_media=None) -> dict:
        payload = {
            "message": message or "",
            "access_token": page_access_token,
        }
        if attached_media:
            payload["attached_media"] = json.dumps(attached_media)

        return self._post_json(
            f"{self.settings.graph_base}/{page_id}/feed",
            data=payload,
            fallback="Facebook feed publish failed",
        )

    def publish_page_photo(self, page_id, page_access_token, image_url, message="", published=True) -> dict:
        payload = {
            "url": image_url,
            "access_token": page_access_token,
        }
        if published:
            payload["message"] = message or ""
        else:
            payload["published"] = "false"

        # Usually returns {"id": "<photo_id>", "post_id": "<page_post_id>"}
        return self._post_json(
            f"{self.settings.graph_base}/{page_id}/photos",
            data=payload,
            timeout=self.settings.media_timeout,
            fallback="Facebook photo publish failed",
        )

    def publish_page_album(self, page_id, page_access_token, image_urls, message, log_tag) -> dict:
        photo_ids = []
        for url in image_urls:
            try:
                data = self.publish_page_photo(page_id, page_access_token, url, published=False)
            except PublishError as e:
                # one bad image does not sink the album
                Log.info(f"{log_tag} unpublished photo upload skipped url={url} error={e.message}")
                continue
            if data.get("id"):
                photo_ids.append(data["id"])

        if not photo_ids:
            raise UpstreamError("Failed to upload any photos to Facebook", platform=self.platform)

        return self.publish_page_feed(
            page_id,
            page_access_token,
            message,
            attached_media=[{"media_fbid": pid} for pid in photo_ids],
        )
