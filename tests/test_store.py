"""Tests for the MongoDB-backed store and its document mapping."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from bson import ObjectId

from app.models.social.post import Post as PostModel
from app.models.social.social_account import SocialAccount as SocialAccountModel
from app.services.social.entities import PostUpdate
from app.services.social.store import MongoPublishStore, account_from_doc, post_from_doc
from app.utils.crypt import decrypt_data, encrypt_data
from tests.conftest import NOW


class TestDocumentMapping:

    def test_post_from_doc(self):
        oid = ObjectId()
        doc = {
            "_id": str(oid),
            "content": "Body",
            "hashtags": ["a"],
            "account_ids": [ObjectId("65a000000000000000000001")],
            "status": "pending",
            "scheduled_for": "2026-01-15T12:00:00Z",
            "metadata": {"title": "T"},
        }
        media = [
            {"_id": "m2", "type": "video", "url": "https://v", "position": 2},
            {"_id": "m1", "kind": "IMAGE", "url": "https://i", "position": 1},
        ]

        post = post_from_doc(doc, media)

        assert post.id == str(oid)
        assert post.account_ids == ["65a000000000000000000001"]
        assert post.scheduled_for == NOW
        assert [m.id for m in post.media] == ["m1", "m2"]
        assert post.media[0].kind == "image"
        assert post.media[1].kind == "video"
        assert post.metadata == {"title": "T"}

    def test_account_from_doc_naive_datetime_is_utc(self):
        doc = {
            "_id": "a1",
            "platform": "LinkedIn",
            "platform_account_id": "p1",
            "access_token_plain": "tok",
            "refresh_token_plain": None,
            "token_expires_at": datetime(2026, 1, 15, 12, 0),
        }

        account = account_from_doc(doc)

        assert account.platform == "linkedin"
        assert account.access_token == "tok"
        assert account.token_expires_at == NOW


class TestTokenEncryption:

    def test_round_trip(self):
        enc = encrypt_data("secret-token")
        assert enc != "secret-token"
        assert decrypt_data(enc) == "secret-token"

    def test_update_tokens_encrypts_at_rest(self):
        col = MagicMock()
        col.update_one.return_value = MagicMock(matched_count=1)

        with patch("app.models.social.social_account.db_ext.get_collection", return_value=col):
            ok = SocialAccountModel.update_tokens(
                "a1", access_token="new", refresh_token="r2", token_expires_at=NOW,
            )

        assert ok is True
        _, update = col.update_one.call_args[0]
        saved = update["$set"]
        assert decrypt_data(saved["access_token"]) == "new"
        assert decrypt_data(saved["refresh_token"]) == "r2"
        assert saved["token_expires_at"] == NOW

    def test_get_by_ids_decrypts(self):
        col = MagicMock()
        col.find.return_value = [{"_id": ObjectId(), "access_token": encrypt_data("tok"), "refresh_token": None}]

        with patch("app.models.social.social_account.db_ext.get_collection", return_value=col):
            docs = SocialAccountModel.get_by_ids(["65a000000000000000000001"])

        assert docs[0]["access_token_plain"] == "tok"
        assert docs[0]["refresh_token_plain"] is None


class TestMongoPublishStore:

    def test_update_post_single_write(self):
        update = PostUpdate(status="failed", platform_posts={"a": {}}, published_at=None, error_message="x: y")

        with patch.object(PostModel, "update_publish_result") as write:
            MongoPublishStore().update_post("p1", update)

        write.assert_called_once_with(
            "p1", status="failed", platform_posts={"a": {}}, published_at=None, error_message="x: y",
        )

    def test_get_post_missing(self):
        with patch.object(PostModel, "get_by_id", return_value=None):
            assert MongoPublishStore().get_post("nope") is None

    def test_claim_due_posts_moves_to_publishing(self):
        col = MagicMock()
        col.find_one_and_update.side_effect = [{"_id": ObjectId("65a000000000000000000002")}, None]

        with patch("app.models.social.post.db_ext.get_collection", return_value=col):
            claimed = PostModel.claim_due_posts(limit=5, now=datetime(2026, 1, 1, tzinfo=timezone.utc))

        assert claimed == ["65a000000000000000000002"]
        query, update = col.find_one_and_update.call_args_list[0][0]
        assert query["status"] == "pending"
        assert update["$set"]["status"] == "publishing"


class TestUnusableAccountDocuments:

    def test_bad_expiry_becomes_placeholder(self):
        docs = [
            {"_id": "a1", "platform": "facebook", "platform_account_id": "page-1", "access_token_plain": "tok"},
            {"_id": "a2", "platform": "linkedin", "platform_account_id": "p", "access_token_plain": "t",
             "token_expires_at": "not-a-date"},
        ]

        with patch.object(SocialAccountModel, "get_by_ids", return_value=docs):
            accounts = MongoPublishStore().get_accounts(["a1", "a2"])

        assert [a.id for a in accounts] == ["a1", "a2"]
        assert accounts[0].load_error is None
        assert accounts[0].access_token == "tok"
        assert accounts[1].platform == "linkedin"
        assert accounts[1].access_token == ""
        assert accounts[1].load_error.startswith("Social account could not be loaded:")
        assert "not-a-date" in accounts[1].load_error

    def test_undecryptable_token_only_affects_its_account(self):
        col = MagicMock()
        col.find.return_value = [
            {"_id": "a1", "platform": "facebook", "platform_account_id": "page-1", "access_token": encrypt_data("ok")},
            {"_id": "a2", "platform": "tiktok", "platform_account_id": "open-1", "access_token": "bm90LXJlYWwtY2lwaGVydGV4dA=="},
        ]

        with patch("app.models.social.social_account.db_ext.get_collection", return_value=col):
            accounts = MongoPublishStore().get_accounts(["a1", "a2"])

        assert accounts[0].access_token == "ok"
        assert accounts[0].load_error is None
        assert accounts[1].load_error == (
            "Social account could not be loaded: Stored access_token could not be decrypted"
        )
