"""Tests for Instagram container + publish flow."""

from __future__ import annotations

import pytest

from app.services.social.adapters.instagram_adapter import InstagramAdapter
from app.services.social.errors import ErrorKind
from app.services.social.token_manager import TokenManager
from tests.conftest import FakeResponse, make_account, make_image, make_post


@pytest.fixture
def adapter(store, settings, now) -> InstagramAdapter:
    return InstagramAdapter(TokenManager(store, settings, now=now), settings, now=now)


@pytest.fixture
def account():
    return make_account("instagram", username="brand")


class TestInstagramAdapter:

    def test_single_image(self, adapter, account, fake_http):
        fake_http.add("POST", "/ig-1/media", FakeResponse(200, {"id": "container-1"}))
        fake_http.add("POST", "/ig-1/media_publish", FakeResponse(200, {"id": "ig-media-1"}))
        post = make_post(content="Caption", hashtags=["x"], media=[make_image(1)])

        result = adapter.publish(post, account)

        assert result.success
        assert result.post_id == "ig-media-1"
        assert result.post_url == "https://www.instagram.com/brand/"

        container = fake_http.calls_to("/ig-1/media", "POST")[0].kwargs["data"]
        assert container["image_url"] == "https://cdn.example.com/img1.jpg"
        assert container["caption"] == "Caption\n\n#x"

        publish = fake_http.calls_to("/media_publish")[0].kwargs["data"]
        assert publish["creation_id"] == "container-1"

    def test_carousel(self, adapter, account, fake_http):
        fake_http.add(
            "POST", "/ig-1/media",
            FakeResponse(200, {"id": "c-1"}),
            FakeResponse(200, {"id": "c-2"}),
            FakeResponse(200, {"id": "carousel"}),
        )
        fake_http.add("POST", "/ig-1/media_publish", FakeResponse(200, {"id": "ig-media-2"}))
        post = make_post(media=[make_image(2, position=1), make_image(1, position=0)])

        result = adapter.publish(post, account)

        assert result.success
        container_calls = [c for c in fake_http.calls if c.url.endswith("/ig-1/media")]
        items = [c.kwargs["data"] for c in container_calls[:2]]
        assert [i["image_url"] for i in items] == [
            "https://cdn.example.com/img1.jpg",
            "https://cdn.example.com/img2.jpg",
        ]
        assert all(i["is_carousel_item"] == "true" for i in items)
        assert all("caption" not in i for i in items)

        carousel = container_calls[2].kwargs["data"]
        assert carousel["media_type"] == "CAROUSEL"
        assert carousel["children"] == "c-1,c-2"
        assert carousel["caption"] == "Hello world"

        assert fake_http.calls_to("/media_publish")[0].kwargs["data"]["creation_id"] == "carousel"

    def test_carousel_item_failure_fails_account(self, adapter, account, fake_http):
        """No partial carousel is ever published."""
        fake_http.add(
            "POST", "/ig-1/media",
            FakeResponse(200, {"id": "c-1"}),
            FakeResponse(400, {"error": {"message": "Image ratio not supported"}}),
        )
        post = make_post(media=[make_image(1), make_image(2), make_image(3)])

        result = adapter.publish(post, account)

        assert result.success is False
        assert result.error == "Image ratio not supported"
        assert fake_http.calls_to("/media_publish") == []

    def test_no_image_fails_without_network(self, adapter, account, fake_http):
        result = adapter.publish(make_post(), account)

        assert result.success is False
        assert result.error_kind == ErrorKind.PRECONDITION
        assert "at least one image" in result.error
        assert fake_http.calls == []

    def test_eleven_images_fail_without_network(self, adapter, account, fake_http):
        post = make_post(media=[make_image(i) for i in range(11)])

        result = adapter.publish(post, account)

        assert result.success is False
        assert "maximum 10" in result.error
        assert fake_http.calls == []

    def test_profile_url_without_username(self, adapter, fake_http):
        fake_http.add("POST", "/ig-1/media", FakeResponse(200, {"id": "c"}))
        fake_http.add("POST", "/ig-1/media_publish", FakeResponse(200, {"id": "m"}))
        account = make_account("instagram", username=None)

        result = adapter.publish(make_post(media=[make_image(1)]), account)

        assert result.post_url == "https://www.instagram.com/"
