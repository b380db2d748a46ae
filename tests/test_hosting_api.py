import base64

import pytest
import requests

from organoai.api import hosting_api
from organoai.api.classification_api import ClassificationResponse
from organoai.api.hosting_api import ImgbbAPI, decode_image, strip_data_url_prefix
from organoai.errors import MissingImageError, UploadError

from .conftest import FakeResponse

SUCCESS = {"success": True, "data": {"url": "https://i.ibb.co/abc/leaf.png"}}


@pytest.fixture
def posts(monkeypatch):
    """Capture requests.post calls and answer with a queued response."""
    calls = []
    replies = [FakeResponse(200, SUCCESS)]

    def fake_post(url, **kwargs):
        calls.append({"url": url, **kwargs})
        reply = replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(hosting_api.requests, "post", fake_post)
    return calls, replies


def test_prefixed_image_is_sent_without_header(posts):
    calls, _ = posts
    url = ImgbbAPI("k").upload("data:image/png;base64,AAAA")

    assert url == "https://i.ibb.co/abc/leaf.png"
    assert calls[0]["data"] == {"image": "AAAA"}
    assert calls[0]["params"] == {"key": "k"}


def test_unprefixed_image_is_sent_as_is(posts):
    calls, _ = posts
    ImgbbAPI("k").upload("AAAA")
    assert calls[0]["data"] == {"image": "AAAA"}


def test_strip_splits_on_first_comma():
    assert strip_data_url_prefix("data:image/jpeg;base64,AB,CD") == "AB,CD"
    assert strip_data_url_prefix("AAAA") == "AAAA"


def test_provider_failure_raises_with_its_message(posts):
    _, replies = posts
    replies[0] = FakeResponse(200, {"success": False, "error": {"message": "Invalid API key"}})

    with pytest.raises(UploadError, match="Invalid API key"):
        ImgbbAPI("k").upload("AAAA")


def test_http_error_raises(posts):
    _, replies = posts
    replies[0] = FakeResponse(400, {"error": {"message": "bad"}})

    with pytest.raises(UploadError, match="400"):
        ImgbbAPI("k").upload("AAAA")


def test_transport_error_raises(posts):
    _, replies = posts
    replies[0] = requests.ConnectionError("no route to host")

    with pytest.raises(UploadError, match="no route to host"):
        ImgbbAPI("k").upload("AAAA")


def test_success_without_url_raises(posts):
    _, replies = posts
    replies[0] = FakeResponse(200, {"success": True, "data": {}})

    with pytest.raises(UploadError):
        ImgbbAPI("k").upload("AAAA")


@pytest.mark.parametrize("payload", [
    {"success": False, "error": "Rate limit reached"},
    {"success": False, "error": None},
    {"success": True, "data": "https://i.ibb.co/abc/leaf.png"},
    {"success": True, "data": {"url": 42}},
    ["success", True],
    "ok",
])
def test_malformed_reply_raises_upload_error(posts, payload):
    _, replies = posts
    replies[0] = FakeResponse(200, payload)

    with pytest.raises(UploadError):
        ImgbbAPI("k").upload("AAAA")


def test_string_error_keeps_its_message(posts):
    _, replies = posts
    replies[0] = FakeResponse(200, {"success": False, "error": "Rate limit reached"})

    with pytest.raises(UploadError, match="Rate limit reached"):
        ImgbbAPI("k").upload("AAAA")


def test_empty_image_raises_without_request(posts):
    calls, _ = posts
    with pytest.raises(UploadError):
        ImgbbAPI("k").upload("")
    assert calls == []


def test_upload_from_response_requires_imagen(posts):
    calls, _ = posts
    with pytest.raises(MissingImageError):
        ImgbbAPI("k").upload_from_response(ClassificationResponse(enfermedades=["a: b"]))
    assert calls == []


def test_decode_image():
    raw = b"\x89PNG fake bytes"
    encoded = "data:image/png;base64," + base64.b64encode(raw).decode()

    assert decode_image(ClassificationResponse(imagen=encoded)) == raw
    assert decode_image(ClassificationResponse()) is None
    assert decode_image(ClassificationResponse(imagen="not base64!")) is None
