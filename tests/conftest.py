import pytest
from PIL import Image

from organoai.api.hosting_api import ImgbbAPI
from organoai.config import ENV_OVERRIDES
from organoai.errors import UploadError
from organoai.storage.disease_db import DiseaseLookup
from organoai.storage.documents import SQLiteDocumentStore
from organoai.storage.scan_store import ScanRecordStore


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHosting(ImgbbAPI):
    """Records uploads instead of calling ImgBB."""

    def __init__(self, fail: bool = False):
        super().__init__(api_key="test-key")
        self.fail = fail
        self.uploads = []

    def upload(self, base64_image):
        if self.fail:
            raise UploadError("Error HTTP: 500")
        self.uploads.append(base64_image)
        return f"https://i.ibb.co/fake/{len(self.uploads)}.png"


class RecordingPresenter:
    def __init__(self):
        self.messages = []
        self.results = None
        self.confirmed = []

    def show_message(self, text):
        self.messages.append(text)

    def show_results(self, results):
        self.results = results

    def confirm(self, record):
        self.confirmed.append(record)


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.shown = []

    def show(self, title, body):
        self.shown.append(title)
        if self.fail:
            raise RuntimeError("notification service unavailable")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the developer's environment out of the tests."""
    for env_var in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("ORGANOAI_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def store(tmp_path):
    return SQLiteDocumentStore(tmp_path / "test.db")


@pytest.fixture
def scans(store):
    return ScanRecordStore(store)


@pytest.fixture
def diseases(store):
    return DiseaseLookup(store)


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "leaf.png"
    Image.new("RGB", (8, 8), color=(20, 120, 40)).save(path)
    return path
