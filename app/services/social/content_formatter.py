# app/services/social/content_formatter.py

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from .errors import PreconditionError

TWITTER_MAX_CHARS = 280
TIKTOK_MAX_CAPTION = 150
YOUTUBE_MAX_TITLE = 100
YOUTUBE_DEFAULT_TITLE = "Untitled Video"

_HASHTAG_LINE = re.compile(r"^(#\S+)(\s+#\S+)*$")


def _hashtag_line(hashtags: List[str]) -> str:
    tags = []
    for tag in hashtags or []:
        t = str(tag or "").strip()
        if not t:
            continue
        tags.append(t if t.startswith("#") else f"#{t}")
    return " ".join(tags)


def build_text(content: Optional[str], hashtags: Optional[List[str]]) -> str:
    """content + blank line + '#a #b'. Either side may be empty."""
    content = content or ""
    line = _hashtag_line(hashtags or [])
    if not line:
        return content
    if not content:
        return line
    return f"{content}\n\n{line}"


def parse_hashtags(text: str) -> List[str]:
    """Recover the hashtags appended by build_text (without the leading '#')."""
    if not text:
        return []
    last_block = text.rsplit("\n\n", 1)[-1].strip()
    if not _HASHTAG_LINE.match(last_block):
        return []
    return [t[1:] for t in last_block.split()]


def format(content: Optional[str], hashtags: Optional[List[str]], platform: str) -> str:
    text = build_text(content, hashtags)

    if platform == "twitter":
        if len(text) > TWITTER_MAX_CHARS:
            raise PreconditionError(
                f"Tweet exceeds {TWITTER_MAX_CHARS} characters ({len(text)} characters)",
                platform=platform,
            )
        return text

    if platform == "tiktok":
        if len(text) > TIKTOK_MAX_CAPTION:
            return text[: TIKTOK_MAX_CAPTION - 3] + "..."
        return text

    return text


def youtube_title(content: Optional[str], metadata: Optional[Dict[str, Any]] = None) -> str:
    title = ((metadata or {}).get("title") or "").strip()
    if title:
        return title[:YOUTUBE_MAX_TITLE]
    content = (content or "").strip()
    return content[:YOUTUBE_MAX_TITLE] or YOUTUBE_DEFAULT_TITLE
