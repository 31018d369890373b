"""Tests for Twitter media upload, tweet creation and threads."""

from __future__ import annotations

import base64

import pytest
import requests

from app.services.social.adapters.twitter_adapter import TwitterAdapter
from app.services.social.errors import ErrorKind
from app.services.social.token_manager import TokenManager
from tests.conftest import FakeResponse, make_account, make_image, make_post

UPLOAD = "upload.twitter.com/1.1/media/upload.json"
TWEETS = "api.twitter.com/2/tweets"


@pytest.fixture
def adapter(store, settings, now) -> TwitterAdapter:
    return TwitterAdapter(TokenManager(store, settings, now=now), settings, now=now)


@pytest.fixture
def account():
    return make_account("twitter", username="jack")


class TestTwitterPublish:

    def test_text_tweet(self, adapter, account, fake_http):
        fake_http.add("POST", TWEETS, FakeResponse(201, {"data": {"id": "t-1", "text": "Hi"}}))

        result = adapter.publish(make_post(content="Hi"), account)

        assert result.success
        assert result.post_id == "t-1"
        assert result.post_url == "https://twitter.com/jack/status/t-1"

        call = fake_http.calls[0]
        assert call.kwargs["json"] == {"text": "Hi"}
        assert call.kwargs["headers"]["Authorization"] == "Bearer twitter-token"

    def test_images_uploaded_then_attached(self, adapter, account, fake_http):
        fake_http.add("GET", "cdn.example.com/img1", FakeResponse(200, content=b"one"))
        fake_http.add("GET", "cdn.example.com/img2", FakeResponse(200, content=b"two"))
        fake_http.add(
            "POST", UPLOAD,
            FakeResponse(200, {"media_id_string": "m-1"}),
            FakeResponse(200, {"media_id_string": "m-2"}),
        )
        fake_http.add("POST", TWEETS, FakeResponse(201, {"data": {"id": "t-2"}}))
        post = make_post(media=[make_image(1), make_image(2)])

        result = adapter.publish(post, account)

        assert result.success
        uploads = fake_http.calls_to(UPLOAD)
        assert uploads[0].kwargs["data"] == {"media_data": base64.b64encode(b"one").decode()}
        assert uploads[1].kwargs["data"] == {"media_data": base64.b64encode(b"two").decode()}
        assert fake_http.calls_to(TWEETS)[0].kwargs["json"]["media"] == {"media_ids": ["m-1", "m-2"]}

    def test_too_long_rejected_before_any_call(self, adapter, account, fake_http):
        result = adapter.publish(make_post(content="x" * 300), account)

        assert result.success is False
        assert result.error_kind == ErrorKind.PRECONDITION
        assert "300" in result.error
        assert fake_http.calls == []

    def test_v2_error_message(self, adapter, account, fake_http):
        fake_http.add("POST", TWEETS, FakeResponse(403, {
            "errors": [{"message": "You are not allowed to create a Tweet with duplicate content."}],
        }))

        result = adapter.publish(make_post(), account)

        assert result.success is False
        assert result.error == "You are not allowed to create a Tweet with duplicate content."
        assert result.error_kind == ErrorKind.UPSTREAM

    def test_timeout_is_transport_error(self, adapter, account, fake_http):
        fake_http.add("POST", TWEETS, requests.ConnectTimeout("timed out"))

        result = adapter.publish(make_post(), account)

        assert result.success is False
        assert result.error_kind == ErrorKind.TRANSPORT

    def test_url_without_username(self, adapter, fake_http):
        fake_http.add("POST", TWEETS, FakeResponse(201, {"data": {"id": "t-9"}}))

        result = adapter.publish(make_post(), make_account("twitter", username=None))

        assert result.post_url == "https://twitter.com/i/web/status/t-9"


class TestTwitterThread:

    def test_thread_chains_replies(self, adapter, account, fake_http):
        fake_http.add(
            "POST", TWEETS,
            FakeResponse(201, {"data": {"id": "a"}}),
            FakeResponse(201, {"data": {"id": "b"}}),
            FakeResponse(201, {"data": {"id": "c"}}),
        )

        result, ids = adapter.publish_thread(account, ["one", "two", "three"])

        assert result.success
        assert result.post_id == "a"
        assert ids == ["a", "b", "c"]

        bodies = [c.kwargs["json"] for c in fake_http.calls]
        assert "reply" not in bodies[0]
        assert bodies[1]["reply"] == {"in_reply_to_tweet_id": "a"}
        assert bodies[2]["reply"] == {"in_reply_to_tweet_id": "b"}

    def test_thread_stops_at_first_failure(self, adapter, account, fake_http):
        fake_http.add(
            "POST", TWEETS,
            FakeResponse(201, {"data": {"id": "a"}}),
            FakeResponse(429, {"detail": "Too Many Requests"}),
        )

        result, ids = adapter.publish_thread(account, ["one", "two", "three"])

        assert result.success is False
        assert result.error == "Too Many Requests"
        assert ids == ["a"]
        assert len(fake_http.calls) == 2

    def test_thread_with_long_tweet_sends_nothing(self, adapter, account, fake_http):
        result, ids = adapter.publish_thread(account, ["ok", "x" * 281])

        assert result.success is False
        assert ids == []
        assert fake_http.calls == []
