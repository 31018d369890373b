from ..errors import UpstreamError
from .base import PlatformAdapter


class InstagramAdapter(PlatformAdapter):
    """
    Instagram Graph API content publishing (business accounts).

    1 image   -> container(image_url, caption) -> media_publish
    2..10     -> one carousel-item container per image
                 -> CAROUSEL container(children, caption) -> media_publish

    Any container failure fails the whole attempt; a half-built carousel is never published.
    """

    platform = "instagram"

    def deliver(self, *, post, account, token, text, media, log_tag):
        ig_user_id = account.platform_account_id

        if len(media) == 1:
            creation_id = self.create_media_container(
                ig_user_id, token, image_url=media[0].url, caption=text
            )
        else:
            children = [
                self.create_media_container(ig_user_id, token, image_url=m.url, is_carousel_item=True)
                for m in media
            ]
            creation_id = self.create_media_container(
                ig_user_id, token, media_type="CAROUSEL", children=children, caption=text
            )

        data = self._post_json(
            f"{self.settings.graph_base}/{ig_user_id}/media_publish",
            data={"creation_id": creation_id, "access_token": token},
            fallback="Instagram media publish failed",
        )
        media_id = data.get("id")
        if not media_id:
            raise UpstreamError("Instagram did not return a media id", platform=self.platform, body=data)

        return media_id, self.profile_url(account.username)

    def create_media_container(
        self,
        ig_user_id,
        access_token,
        *,
        caption="",
        image_url=None,
        media_type=None,
        children=None,
        is_carousel_item=False,
    ) -> str:
        """POST /{ig-user-id}/media, returns the creation id."""
        payload = {"access_token": access_token}

        if caption:
            payload["caption"] = caption
        if is_carousel_item:
            payload["is_carousel_item"] = "true"
        if media_type:
            payload["media_type"] = media_type
        if image_url:
            payload["image_url"] = image_url
        if children:
            payload["children"] = ",".join(children)

        data = self._post_json(
            f"{self.settings.graph_base}/{ig_user_id}/media",
            data=payload,
            timeout=self.settings.media_timeout,
            fallback="Instagram create container failed",
        )
        if not data.get("id"):
            raise UpstreamError("Instagram did not return a container id", platform=self.platform, body=data)
        return data["id"]

    @staticmethod
    def profile_url(username):
        if username:
            return f"https://www.instagram.com/{username}/"
        return "https://www.instagram.com/"
