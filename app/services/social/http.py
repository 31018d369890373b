# app/services/social/http.py

from __future__ import annotations

from typing import Any, Dict

import requests

from ...constants.service_code import HTTP_STATUS_CODES
from ...utils.logger import Log
from .errors import TransportError, UpstreamError


def send(method: str, url: str, *, timeout: int, platform: str | None = None, **kwargs) -> requests.Response:
    """
    Every outbound call of the publishing pipeline goes through here so that a
    timeout is always set and requests' exceptions become TransportError.
    """
    try:
        return requests.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        Log.info(f"[http.py][send][{platform}] {method} {url} transport error: {e}")
        raise TransportError(f"Network error calling {platform or 'platform'} API: {e}", platform=platform) from e


def safe_json(resp) -> Dict[str, Any]:
    try:
        data = resp.json()
    except Exception:
        t = getattr(resp, "text", "") or ""
        return {"raw": t[:1500]} if t else {}
    return data if isinstance(data, dict) else {"data": data}


def upstream_message(data: Dict[str, Any], fallback: str) -> str:
    """Pull the human-readable message out of the usual platform error shapes."""
    if not isinstance(data, dict):
        return fallback

    err = data.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str) and err:
        return data.get("error_description") or err

    errors = data.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and (first.get("message") or first.get("detail")):
            return str(first.get("message") or first.get("detail"))

    for key in ("detail", "message"):
        if data.get(key):
            return str(data[key])

    return fallback


def raise_for_upstream(resp, *, platform: str, fallback: str) -> Dict[str, Any]:
    data = safe_json(resp)
    if resp.status_code >= HTTP_STATUS_CODES["BAD_REQUEST"]:
        raise UpstreamError(
            upstream_message(data, fallback),
            platform=platform,
            status_code=resp.status_code,
            body=data,
        )
    return data


def download_bytes(url: str, *, timeout: int, platform: str) -> bytes:
    resp = send("GET", url, timeout=timeout, platform=platform)
    if resp.status_code >= HTTP_STATUS_CODES["BAD_REQUEST"]:
        raise UpstreamError(
            f"Failed to download media ({resp.status_code})",
            platform=platform,
            status_code=resp.status_code,
        )
    content = resp.content or b""
    if not content:
        raise UpstreamError("Downloaded media is empty", platform=platform)
    return content
