from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cryptography.exceptions import InvalidTag

from ...extensions import db as db_ext
from ...utils.crypt import decrypt_data, encrypt_data
from ...utils.logger import Log
from .post import _id_query, _oid_str


class SocialAccount:
    """
    One connected account per document.

    Examples:
      - Facebook Page: platform="facebook",  platform_account_id="<PAGE_ID>"
      - Instagram:     platform="instagram", platform_account_id="<IG_BUSINESS_ID>"
      - LinkedIn:      platform="linkedin",  platform_account_id="<PERSON_ID or URN>"
      - YouTube:       platform="youtube",   platform_account_id="<CHANNEL_ID>"
      - Twitter:       platform="twitter",   platform_account_id="<USER_ID>"
      - TikTok:        platform="tiktok",    platform_account_id="<OPEN_ID>"

    Tokens are encrypted at rest and only decrypted on read.
    """

    collection_name = "social_accounts"

    # -------------------------
    # Reads
    # -------------------------
    @staticmethod
    def _decrypt_doc(doc: dict) -> Dict[str, Any]:
        out = _oid_str(doc)
        for field in ("access_token", "refresh_token"):
            enc = out.get(field)
            try:
                out[f"{field}_plain"] = decrypt_data(enc) if enc else None
            except (InvalidTag, ValueError, TypeError) as e:
                # rotated key or corrupt ciphertext; only this account is affected
                Log.error(f"[social_account.py][SocialAccount][_decrypt_doc][{out['_id']}] cannot decrypt {field}: {e!r}")
                out[f"{field}_plain"] = None
                out["load_error"] = f"Stored {field} could not be decrypted"
        return out

    @classmethod
    def get_by_ids(cls, account_ids: List[str]) -> List[Dict[str, Any]]:
        if not account_ids:
            return []
        col = db_ext.get_collection(cls.collection_name)
        return [cls._decrypt_doc(d) for d in col.find(_id_query(account_ids))]

    # -------------------------
    # Token writes
    # -------------------------
    @classmethod
    def update_tokens(
        cls,
        account_id: str,
        *,
        access_token: str,
        refresh_token: Optional[str] = None,
        token_expires_at: Optional[datetime] = None,
    ) -> bool:
        log_tag = f"[social_account.py][SocialAccount][update_tokens][{account_id}]"
        col = db_ext.get_collection(cls.collection_name)

        update = {
            "access_token": encrypt_data(access_token),
            "token_expires_at": token_expires_at,
            "updated_at": datetime.now(timezone.utc),
        }
        if refresh_token:
            update["refresh_token"] = encrypt_data(refresh_token)

        res = col.update_one(_id_query([account_id]), {"$set": update})
        Log.info(f"{log_tag} matched={res.matched_count}")
        return res.matched_count > 0
