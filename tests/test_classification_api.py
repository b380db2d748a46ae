import pytest
import requests

from organoai.api import classification_api
from organoai.api.classification_api import (
    ClassificationAPI,
    ClassificationFailure,
    ClassificationResponse,
    MockClassificationAPI,
)
from organoai.errors import ClassificationAPIError

from .conftest import FakeResponse


@pytest.fixture
def reply(monkeypatch):
    calls = []
    holder = {"reply": FakeResponse(200, {"imagen": "AAAA", "enfermedades": ["Planta: Mildiu"]})}

    def fake_post(url, **kwargs):
        name, handle, mimetype = kwargs["files"]["file"]
        calls.append({"url": url, "name": name, "mimetype": mimetype, "body": handle.read()})
        if isinstance(holder["reply"], Exception):
            raise holder["reply"]
        return holder["reply"]

    monkeypatch.setattr(classification_api.requests, "post", fake_post)
    holder["calls"] = calls
    return holder


def test_predict_uploads_the_file(reply, image_file):
    api = ClassificationAPI("http://classifier/predict")
    response = api.predict(image_file)

    assert response.imagen == "AAAA"
    assert response.enfermedades == ["Planta: Mildiu"]
    call = reply["calls"][0]
    assert call["url"] == "http://classifier/predict"
    assert call["name"] == "leaf.png"
    assert call["mimetype"] == "image/png"
    assert call["body"] == image_file.read_bytes()


def test_unknown_fields_are_kept(reply, image_file):
    reply["reply"] = FakeResponse(200, {"enfermedades": [1, "b"], "confianza": 0.9})
    response = ClassificationAPI("http://c").predict(image_file)

    assert response.enfermedades == ["1", "b"]
    assert response.imagen is None
    assert response.model_extra == {"confianza": 0.9}


def test_http_error_becomes_failure(reply, image_file):
    reply["reply"] = FakeResponse(503, text="unavailable")
    outcome = ClassificationAPI("http://c").classify(image_file)

    assert isinstance(outcome, ClassificationFailure)
    assert outcome.kind == "http"
    assert "503" in outcome.message


def test_network_error_becomes_failure(reply, image_file):
    reply["reply"] = requests.Timeout("timed out")
    outcome = ClassificationAPI("http://c").classify(image_file)

    assert isinstance(outcome, ClassificationFailure)
    assert outcome.kind == "network"


def test_bad_body_becomes_decode_failure(reply, image_file):
    reply["reply"] = FakeResponse(200, None, text="<html>")
    outcome = ClassificationAPI("http://c").classify(image_file)

    assert isinstance(outcome, ClassificationFailure)
    assert outcome.kind == "decode"


def test_predict_raises(reply, image_file):
    reply["reply"] = FakeResponse(500, text="boom")
    with pytest.raises(ClassificationAPIError):
        ClassificationAPI("http://c").predict(image_file)


def test_missing_file(tmp_path):
    api = ClassificationAPI("http://c")
    with pytest.raises(FileNotFoundError):
        api.predict(tmp_path / "missing.jpg")
    assert isinstance(api.classify(tmp_path / "missing.jpg"), ClassificationFailure)


def test_mock_api_replays_responses():
    failure = ClassificationFailure("down", "network")
    api = MockClassificationAPI([{"enfermedades": ["a: Roya"]}, failure])

    assert isinstance(api.classify("one.jpg"), ClassificationResponse)
    assert api.classify("two.jpg") is failure
    assert api.classify("three.jpg") is failure
    assert api.calls == ["one.jpg", "two.jpg", "three.jpg"]
