# app/services/social/token_manager.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ...constants.service_code import HTTP_STATUS_CODES
from ...utils.logger import Log
from . import http
from .entities import SocialAccount
from .errors import CredentialError, TransportError
from .settings import PublisherSettings

PLATFORM_LABELS = {
    "facebook": "Facebook",
    "instagram": "Instagram",
    "twitter": "Twitter",
    "youtube": "YouTube",
    "linkedin": "LinkedIn",
    "tiktok": "TikTok",
}


def platform_label(platform: str) -> str:
    return PLATFORM_LABELS.get(platform, (platform or "").capitalize())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class TokenManager:
    """
    Hands adapters a usable access token.

    A token with no recorded expiry, or an expiry in the future, is used as-is.
    An expired token is redeemed once with the stored refresh token; the new
    credentials are written to the store before the token is handed out.
    """

    def __init__(self, store, settings: PublisherSettings, now: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.settings = settings
        self.now = now or utcnow

    def is_expired(self, account: SocialAccount) -> bool:
        if account.token_expires_at is None:
            return False
        return _aware(account.token_expires_at) <= self.now()

    def ensure_valid_token(self, account: SocialAccount) -> str:
        log_tag = f"[token_manager.py][TokenManager][ensure_valid_token][{account.platform}][{account.id}]"

        if not self.is_expired(account):
            return account.access_token

        if not account.refresh_token:
            Log.info(f"{log_tag} token expired and no refresh token stored")
            raise self._reconnect_error(account)

        data = self._redeem(account, log_tag)

        new_token = data["access_token"]
        expires_in = data.get("expires_in")
        expires_at = self.now() + timedelta(seconds=int(expires_in)) if expires_in else None
        refresh_token = data.get("refresh_token") or account.refresh_token

        # persist before anyone uses the new token
        self.store.update_account_tokens(
            account.id,
            access_token=new_token,
            refresh_token=refresh_token,
            token_expires_at=expires_at,
        )

        account.access_token = new_token
        account.refresh_token = refresh_token
        account.token_expires_at = expires_at

        Log.info(f"{log_tag} token refreshed expires_at={expires_at}")
        return new_token

    def _redeem(self, account: SocialAccount, log_tag: str) -> dict:
        client = self.settings.oauth_clients.get(account.platform)
        if client is None:
            Log.info(f"{log_tag} no oauth client configured")
            raise self._reconnect_error(account)

        payload = {
            client.client_id_field: client.client_id or "",
            "client_secret": client.client_secret or "",
            "refresh_token": account.refresh_token,
            "grant_type": "refresh_token",
        }

        try:
            resp = http.send(
                "POST",
                client.token_url,
                timeout=self.settings.http_timeout,
                platform=account.platform,
                data=payload,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except TransportError as e:
            Log.info(f"{log_tag} refresh transport error: {e}")
            raise self._reconnect_error(account) from e

        data = http.safe_json(resp)
        if resp.status_code >= HTTP_STATUS_CODES["BAD_REQUEST"] or not data.get("access_token"):
            Log.info(f"{log_tag} refresh failed http={resp.status_code} body={data}")
            raise self._reconnect_error(account)

        return data

    @staticmethod
    def _reconnect_error(account: SocialAccount) -> CredentialError:
        label = platform_label(account.platform)
        return CredentialError(
            f"{label} access token has expired and could not be refreshed. "
            f"Please reconnect your {label} account.",
            platform=account.platform,
        )
