# app/services/social/adapters/linkedin_adapter.py

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ....utils.logger import Log
from ..errors import PublishError, UpstreamError
from .base import PlatformAdapter


class LinkedInAdapter(PlatformAdapter):
    """
    LinkedIn UGC posting for a member.

    Per image:
      1) registerUpload (assets?action=registerUpload)
      2) PUT bytes to uploadUrl
    Then:
      3) ugcPosts referencing the uploaded asset URNs

    Images that fail to register or upload are skipped; when none made it the
    post goes out as text-only (shareMediaCategory NONE).
    """

    platform = "linkedin"

    API_BASE = "https://api.linkedin.com/v2"
    IMAGE_RECIPE = "urn:li:digitalmediaRecipe:feedshare-image"

    MEDIA_NONE = "NONE"
    MEDIA_IMAGE = "IMAGE"

    def deliver(self, *, post, account, token, text, media, log_tag):
        author_urn = self.author_urn(account.platform_account_id)

        asset_urns: List[str] = []
        for m in media:
            try:
                asset_urns.append(self.upload_image(token, author_urn, m.url))
            except PublishError as e:
                Log.info(f"{log_tag} image skipped url={m.url} error={e.message}")

        payload = self.build_ugc_payload(author_urn=author_urn, text=text, asset_urns=asset_urns)

        resp, data = self._request(
            "POST",
            f"{self.API_BASE}/ugcPosts",
            headers=self._headers(token),
            json=payload,
            fallback="LinkedIn ugcPosts failed",
        )

        post_id = resp.headers.get("X-RestLi-Id") or data.get("id")
        if not post_id:
            raise UpstreamError("LinkedIn did not return a post id", platform=self.platform, body=data)
        return post_id, f"https://www.linkedin.com/feed/update/{post_id}"

    @staticmethod
    def author_urn(platform_account_id: str) -> str:
        pid = str(platform_account_id or "").strip()
        if pid.startswith("urn:li:"):
            return pid
        return f"urn:li:person:{pid}"

    @staticmethod
    def _headers(access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "X-Restli-Protocol-Version": "2.0.0",
        }

    def upload_image(self, access_token: str, owner_urn: str, image_url: str) -> str:
        upload_url, asset_urn = self.register_upload(access_token, owner_urn)
        content = self._download(image_url)

        self._request(
            "PUT",
            upload_url,
            headers={"Authorization": f"Bearer {access_token}"},
            data=content,
            timeout=self.settings.media_timeout,
            fallback="LinkedIn image upload failed",
        )
        return asset_urn

    def register_upload(self, access_token: str, owner_urn: str) -> Tuple[str, str]:
        """Returns (upload_url, asset_urn)."""
        data = self._post_json(
            f"{self.API_BASE}/assets?action=registerUpload",
            headers=self._headers(access_token),
            json={
                "registerUploadRequest": {
                    "owner": owner_urn,
                    "recipes": [self.IMAGE_RECIPE],
                    "serviceRelationships": [
                        {"relationshipType": "OWNER", "identifier": "urn:li:userGeneratedContent"}
                    ],
                }
            },
            fallback="LinkedIn registerUpload failed",
        )

        value = data.get("value") or {}
        mech = value.get("uploadMechanism") or {}
        http_mech = mech.get("com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest") or {}
        upload_url = http_mech.get("uploadUrl")
        asset_urn = value.get("asset")

        if not asset_urn or not upload_url:
            raise UpstreamError("LinkedIn registerUpload missing uploadUrl/asset", platform=self.platform, body=data)
        return str(upload_url), str(asset_urn)

    @classmethod
    def build_ugc_payload(cls, *, author_urn: str, text: str, asset_urns: List[str]) -> Dict[str, Any]:
        share_content: Dict[str, Any] = {
            "shareCommentary": {"text": text or ""},
            "shareMediaCategory": cls.MEDIA_IMAGE if asset_urns else cls.MEDIA_NONE,
        }
        if asset_urns:
            share_content["media"] = [{"status": "READY", "media": urn} for urn in asset_urns]

        return {
            "author": author_urn,
            "lifecycleState": "PUBLISHED",
            "specificContent": {"com.linkedin.ugc.ShareContent": share_content},
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
        }
