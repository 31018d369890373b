# app/services/social/settings.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ...config import Config


@dataclass
class OAuthClient:
    token_url: str
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    client_id_field: str = "client_id"


@dataclass
class PublisherSettings:
    """
    Snapshot of everything the publishing pipeline reads from configuration.

    Built from Flask's app.config (or the Config class directly) so services
    do not need an app context.
    """

    graph_api_version: str = "v18.0"
    http_timeout: int = 30
    media_timeout: int = 120
    video_timeout: int = 600
    max_workers: int = 6
    oauth_clients: Dict[str, OAuthClient] = field(default_factory=dict)

    @property
    def graph_base(self) -> str:
        return f"https://graph.facebook.com/{self.graph_api_version}"

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "PublisherSettings":
        graph_version = cfg.get("GRAPH_API_VERSION") or "v18.0"
        meta = OAuthClient(
            token_url=f"https://graph.facebook.com/{graph_version}/oauth/access_token",
            client_id=cfg.get("FACEBOOK_APP_ID"),
            client_secret=cfg.get("FACEBOOK_APP_SECRET"),
        )
        return cls(
            graph_api_version=graph_version,
            http_timeout=int(cfg.get("PUBLISH_HTTP_TIMEOUT") or 30),
            media_timeout=int(cfg.get("PUBLISH_MEDIA_TIMEOUT") or 120),
            video_timeout=int(cfg.get("PUBLISH_VIDEO_TIMEOUT") or 600),
            max_workers=int(cfg.get("PUBLISH_MAX_WORKERS") or 6),
            oauth_clients={
                "facebook": meta,
                "instagram": meta,
                "linkedin": OAuthClient(
                    token_url="https://www.linkedin.com/oauth/v2/accessToken",
                    client_id=cfg.get("LINKEDIN_CLIENT_ID"),
                    client_secret=cfg.get("LINKEDIN_CLIENT_SECRET"),
                ),
                "twitter": OAuthClient(
                    token_url="https://api.twitter.com/2/oauth2/token",
                    client_id=cfg.get("TWITTER_CLIENT_ID"),
                    client_secret=cfg.get("TWITTER_CLIENT_SECRET"),
                ),
                "tiktok": OAuthClient(
                    token_url="https://open.tiktokapis.com/v2/oauth/token/",
                    client_id=cfg.get("TIKTOK_CLIENT_KEY"),
                    client_secret=cfg.get("TIKTOK_CLIENT_SECRET"),
                    client_id_field="client_key",
                ),
                "youtube": OAuthClient(
                    token_url="https://oauth2.googleapis.com/token",
                    client_id=cfg.get("YOUTUBE_CLIENT_ID"),
                    client_secret=cfg.get("YOUTUBE_CLIENT_SECRET"),
                ),
            },
        )

    @classmethod
    def from_config(cls, config_obj=Config) -> "PublisherSettings":
        cfg = {k: getattr(config_obj, k) for k in dir(config_obj) if k.isupper()}
        return cls.from_mapping(cfg)
