#app/models/social/post.py

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument

from ...extensions import db as db_ext
from ...utils.logger import Log


def _as_oid(value):
    s = str(value)
    return ObjectId(s) if ObjectId.is_valid(s) else s


def _id_query(ids: List[str]) -> Dict[str, Any]:
    """Match documents whose _id is either the ObjectId or the raw string form."""
    candidates = []
    for i in ids:
        candidates.append(_as_oid(i))
        if str(i) not in candidates:
            candidates.append(str(i))
    return {"_id": {"$in": candidates}}


def _oid_str(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return doc
    out = dict(doc)
    out["_id"] = str(out["_id"])
    return out


class Post:
    collection_name = "posts"
    media_collection_name = "post_media"

    STATUS_DRAFT = "draft"
    STATUS_PENDING = "pending"
    STATUS_PUBLISHING = "publishing"
    STATUS_PUBLISHED = "published"
    STATUS_FAILED = "failed"

    # -------------------------
    # Reads
    # -------------------------
    @classmethod
    def get_by_id(cls, post_id) -> Optional[Dict[str, Any]]:
        col = db_ext.get_collection(cls.collection_name)
        return _oid_str(col.find_one(_id_query([post_id])))

    @classmethod
    def get_media(cls, post_id) -> List[Dict[str, Any]]:
        col = db_ext.get_collection(cls.media_collection_name)
        cursor = col.find({"post_id": str(post_id)}).sort("position", ASCENDING)
        return [_oid_str(d) for d in cursor]

    # -------------------------
    # Scheduling
    # -------------------------
    @classmethod
    def claim_due_posts(cls, limit=20, now=None) -> List[str]:
        """
        Atomically move due posts from pending -> publishing so that only one
        sweeper enqueues each post.
        """
        col = db_ext.get_collection(cls.collection_name)
        now = now or datetime.now(timezone.utc)

        claimed = []
        for _ in range(limit):
            doc = col.find_one_and_update(
                {
                    "status": cls.STATUS_PENDING,
                    "scheduled_for": {"$lte": now},
                },
                {"$set": {"status": cls.STATUS_PUBLISHING, "updated_at": now}},
                sort=[("scheduled_for", ASCENDING)],
                return_document=ReturnDocument.AFTER,
            )
            if not doc:
                break
            claimed.append(str(doc["_id"]))
        return claimed

    # -------------------------
    # Result write-back
    # -------------------------
    @classmethod
    def update_publish_result(
        cls,
        post_id,
        *,
        status: str,
        platform_posts: Dict[str, Any],
        published_at: Optional[datetime],
        error_message: Optional[str],
    ) -> bool:
        log_tag = f"[post.py][Post][update_publish_result][{post_id}]"
        col = db_ext.get_collection(cls.collection_name)

        res = col.update_one(
            _id_query([post_id]),
            {
                "$set": {
                    "status": status,
                    "platform_posts": platform_posts,
                    "published_at": published_at,
                    "error_message": error_message,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        Log.info(f"{log_tag} status={status} matched={res.matched_count}")
        return res.matched_count > 0

    @classmethod
    def set_status(cls, post_id, status: str) -> bool:
        col = db_ext.get_collection(cls.collection_name)
        res = col.update_one(
            _id_query([post_id]),
            {"$set": {"status": status, "updated_at": datetime.now(timezone.utc)}},
        )
        return res.modified_count > 0
