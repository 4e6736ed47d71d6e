"""Tests for admin token sign-in."""
from __future__ import annotations

import pytest

from shiptrack.startup import create_app
from shiptrack.utils.constants import SESSION_ADMIN_KEY


@pytest.fixture
def flask_app():
    return create_app({"TESTING": True, "WTF_CSRF_ENABLED": False, "SECRET_KEY": "login-secret"})


def test_valid_token_opens_admin_session(flask_app, monkeypatch):
    monkeypatch.setenv("SHIPTRACK_ADMIN_TOKEN", "let-me-in")
    client = flask_app.test_client()

    resp = client.post(
        "/admin/login",
        data={"token": "let-me-in", "next": "/admin/shipments/T1/images"},
    )

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/shipments/T1/images")
    with client.session_transaction() as sess:
        assert sess[SESSION_ADMIN_KEY] is True


def test_invalid_token_rejected(flask_app, monkeypatch):
    monkeypatch.setenv("SHIPTRACK_ADMIN_TOKEN", "let-me-in")
    client = flask_app.test_client()

    resp = client.post("/admin/login", data={"token": "wrong"})

    assert resp.status_code == 401
    assert "Invalid admin token." in resp.get_data(as_text=True)
    with client.session_transaction() as sess:
        assert SESSION_ADMIN_KEY not in sess


def test_login_disabled_without_configured_token(flask_app, monkeypatch):
    monkeypatch.delenv("SHIPTRACK_ADMIN_TOKEN", raising=False)
    client = flask_app.test_client()

    resp = client.post("/admin/login", data={"token": ""})

    assert resp.status_code == 401
    assert "Admin access is not configured." in resp.get_data(as_text=True)


@pytest.mark.parametrize("target", ["https://evil.example/", "//evil.example/"])
def test_next_must_stay_on_site(flask_app, monkeypatch, target):
    monkeypatch.setenv("SHIPTRACK_ADMIN_TOKEN", "let-me-in")
    client = flask_app.test_client()

    resp = client.post("/admin/login", data={"token": "let-me-in", "next": target})

    assert resp.headers["Location"].endswith("/home")


def test_logout_clears_admin_session(flask_app):
    client = flask_app.test_client()
    with client.session_transaction() as sess:
        sess[SESSION_ADMIN_KEY] = True

    resp = client.post("/admin/logout")

    assert resp.status_code == 302
    with client.session_transaction() as sess:
        assert SESSION_ADMIN_KEY not in sess
