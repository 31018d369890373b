# app/services/social/registry.py
from .adapters.facebook_adapter import FacebookAdapter
from .adapters.instagram_adapter import InstagramAdapter
from .adapters.linkedin_adapter import LinkedInAdapter
from .adapters.tiktok_adapter import TikTokAdapter
from .adapters.twitter_adapter import TwitterAdapter
from .adapters.youtube_adapter import YouTubeAdapter

PUBLISHERS = {
    "facebook": FacebookAdapter,
    "instagram": InstagramAdapter,
    "twitter": TwitterAdapter,
    "youtube": YouTubeAdapter,
    "linkedin": LinkedInAdapter,
    "tiktok": TikTokAdapter,
}


def build_publishers(token_manager, settings, now=None):
    return {
        platform: cls(token_manager, settings, now=now)
        for platform, cls in PUBLISHERS.items()
    }
