# app/services/social/media_classifier.py

from __future__ import annotations

from typing import Any, Dict, List

from .entities import MEDIA_IMAGE, MEDIA_VIDEO, MediaAsset
from .errors import PreconditionError
from .token_manager import platform_label

# which media kind each platform consumes, and how many
PLATFORM_MEDIA_RULES: Dict[str, Dict[str, Any]] = {
    "facebook": {"kind": MEDIA_IMAGE, "min": 0, "max": None},
    "instagram": {"kind": MEDIA_IMAGE, "min": 1, "max": 10},
    "twitter": {"kind": MEDIA_IMAGE, "min": 0, "max": 4},
    "linkedin": {"kind": MEDIA_IMAGE, "min": 0, "max": None},
    "youtube": {"kind": MEDIA_VIDEO, "min": 1, "max": 1},
    "tiktok": {"kind": MEDIA_VIDEO, "min": 1, "max": 1},
}


def classify(media_assets: List[MediaAsset], platform: str) -> List[MediaAsset]:
    """Return the subset of the post's media this platform publishes, in position order."""
    rules = PLATFORM_MEDIA_RULES.get(platform)
    if rules is None:
        raise PreconditionError(f"Platform {platform} not supported yet", platform=platform)

    ordered = sorted(media_assets or [], key=lambda m: m.position)
    selected = [m for m in ordered if m.kind == rules["kind"]]
    count = len(selected)
    label = platform_label(platform)

    if rules["kind"] == MEDIA_VIDEO:
        if count == 0:
            raise PreconditionError(f"{label} requires a video", platform=platform)
        if count > 1:
            raise PreconditionError(
                f"{label} supports exactly one video per post (got {count})", platform=platform
            )
        return selected

    if count < rules["min"]:
        raise PreconditionError(f"{label} requires at least one image", platform=platform)

    if platform == "instagram" and count > rules["max"]:
        raise PreconditionError(
            f"{label} allows a maximum {rules['max']} images per carousel (got {count})",
            platform=platform,
        )

    if rules["max"] is not None and count > rules["max"]:
        raise PreconditionError(
            f"{label} allows a maximum {rules['max']} images per tweet (got {count})",
            platform=platform,
        )

    return selected
