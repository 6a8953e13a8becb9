"""Shared fixtures: offline settings, a fake HTTP session and a manual clock."""
import base64
import io

import pytest
from PIL import Image

from studium.config import Settings
from studium.transfer.context import AppContext
from studium.transfer.notifications import NotificationQueue
from studium.utils import strip_data_uri


def decode_image(image_base64):
    image_bytes = base64.b64decode(strip_data_uri(image_base64))
    return Image.open(io.BytesIO(image_bytes)).convert("RGB")


def pixel_hex(image, x, y):
    r, g, b = image.convert("RGB").getpixel((x, y))
    return f"#{r:02x}{g:02x}{b:02x}"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def json(self):
        if self._text is not None:
            raise ValueError(f"Expecting value: {self._text[:20]!r}")
        return self._payload


class FakeHTTP:
    """Stands in for requests.Session; records every POST."""

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.error = None

    def reply(self, url, status_code=200, payload=None, text=None):
        self.responses[url] = FakeResponse(status_code, payload, text)

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses[url]


class ManualClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def settings():
    return Settings(
        analyze_url="http://collab.test/analyze",
        equations_url="http://collab.test/equations",
        graph_url="http://collab.test/graph",
        transfer_timeout=5.0,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def context(settings, clock):
    return AppContext(settings, NotificationQueue(default_ttl=settings.notification_ttl, clock=clock))


@pytest.fixture
def http():
    return FakeHTTP()
