"""Tests for media host uploads."""
from __future__ import annotations

import json

import pytest
import requests

from shiptrack.config import MediaHostSettings
from shiptrack.services import media_host

SETTINGS = MediaHostSettings(public_url="https://media.test/v1/upload", upload_preset="shipments")


class DummyResp:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    @property
    def text(self):
        return json.dumps(self._payload) if self._payload is not None else "<html>oops</html>"


def test_upload_posts_file_and_preset(monkeypatch):
    captured = {}

    def fake_post(url, data=None, files=None, timeout=None):
        captured.update(url=url, data=data, files=files)
        return DummyResp(200, {"public_id": "abc", "secure_url": "http://x/abc.jpg", "bytes": 10})

    monkeypatch.setattr(media_host.requests, "post", fake_post)

    ok, payload = media_host.upload_image("photo.jpg", b"bytes", "image/jpeg", settings=SETTINGS)

    assert ok is True
    assert payload["asset"] == media_host.MediaAsset(public_id="abc", secure_url="http://x/abc.jpg")
    assert captured["url"] == "https://media.test/v1/upload"
    assert captured["data"] == {"upload_preset": "shipments"}
    assert captured["files"]["file"] == ("photo.jpg", b"bytes", "image/jpeg")


def test_upload_reads_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MEDIA_HOST_PUBLIC_URL", "https://media.env/upload")
    monkeypatch.setenv("MEDIA_HOST_UPLOAD_PRESET", "env-preset")
    captured = {}

    def fake_post(url, data=None, files=None, timeout=None):
        captured.update(url=url, data=data)
        return DummyResp(200, {"public_id": "p", "secure_url": "https://cdn/p.png"})

    monkeypatch.setattr(media_host.requests, "post", fake_post)

    ok, _ = media_host.upload_image("p.png", b"png")

    assert ok is True
    assert captured == {"url": "https://media.env/upload", "data": {"upload_preset": "env-preset"}}


def test_upload_not_configured_skips_request(monkeypatch):
    def fail_post(*args, **kwargs):  # pragma: no cover - must not run
        raise AssertionError("request must not be sent")

    monkeypatch.setattr(media_host.requests, "post", fail_post)

    ok, payload = media_host.upload_image(
        "photo.jpg", b"bytes", settings=MediaHostSettings(public_url=None, upload_preset="x")
    )

    assert ok is False
    assert payload == {"error": "not_configured"}


@pytest.mark.parametrize(
    "response,code",
    [
        (DummyResp(400, {"error": {"message": "Upload preset not found"}}), "http_error"),
        (DummyResp(200, {"public_id": "abc"}), "invalid_payload"),
        (DummyResp(200, ["not", "a", "dict"]), "invalid_json"),
        (DummyResp(502, None), "http_error"),
    ],
)
def test_upload_failures_return_error_codes(monkeypatch, response, code):
    monkeypatch.setattr(media_host.requests, "post", lambda *a, **k: response)

    ok, payload = media_host.upload_image("photo.jpg", b"bytes", settings=SETTINGS)

    assert ok is False
    assert payload["error"] == code


def test_upload_network_error_is_caught(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(media_host.requests, "post", boom)

    ok, payload = media_host.upload_image("photo.jpg", b"bytes", settings=SETTINGS)

    assert ok is False
    assert payload["error"] == "request_failed"
