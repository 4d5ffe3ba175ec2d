"""
Tests for POST /api/remove-background.

rembg is replaced with a stub; no model is downloaded.

Usage:
    pytest tests/test_remove_background.py -v
"""

import app.api.routes as routes
from conftest import PNG_BYTES, leftover_files


def _upload(client, data=b"fake-jpeg-bytes", name="photo.jpg", mime="image/jpeg"):
    return client.post("/api/remove-background", files={"image": (name, data, mime)})


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------

def test_valid_image_returns_png(api_client, upload_dir, monkeypatch):
    seen = {}

    def fake_remove(image_bytes):
        seen["input"] = image_bytes
        return PNG_BYTES

    monkeypatch.setattr(routes, "remove_background", fake_remove)

    resp = _upload(api_client)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content == PNG_BYTES
    assert float(resp.headers["x-processing-time"]) >= 0
    assert seen["input"] == b"fake-jpeg-bytes"
    assert leftover_files(upload_dir) == []


def test_webp_and_png_are_accepted(api_client, monkeypatch):
    monkeypatch.setattr(routes, "remove_background", lambda b: PNG_BYTES)
    assert _upload(api_client, name="a.webp", mime="image/webp").status_code == 200
    assert _upload(api_client, name="a.png", mime="image/png").status_code == 200


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_missing_file_is_rejected(api_client, upload_dir):
    resp = api_client.post("/api/remove-background")
    assert resp.status_code == 400
    assert resp.json()["error"] == "No image provided"
    assert leftover_files(upload_dir) == []


def test_disallowed_mime_type_is_rejected(api_client, upload_dir, monkeypatch):
    monkeypatch.setattr(routes, "remove_background", lambda b: PNG_BYTES)
    resp = _upload(api_client, name="doc.gif", mime="image/gif")
    assert resp.status_code == 400
    assert "Invalid file type" in resp.json()["error"]
    assert leftover_files(upload_dir) == []


def test_oversized_file_is_rejected_and_removed(api_client, upload_dir, monkeypatch):
    from app.config import get_settings

    monkeypatch.setenv("UPLOAD_MAX_BYTES", "1024")
    get_settings.cache_clear()
    monkeypatch.setattr(routes, "remove_background", lambda b: PNG_BYTES)

    resp = _upload(api_client, data=b"x" * 4096)
    assert resp.status_code == 400
    assert "too large" in resp.json()["error"]
    assert leftover_files(upload_dir) == []


# ---------------------------------------------------------------------------
# Processing failures
# ---------------------------------------------------------------------------

def _boom(image_bytes):
    raise RuntimeError("model exploded")


def test_processing_failure_returns_500_with_details(api_client, upload_dir, monkeypatch):
    monkeypatch.setattr(routes, "remove_background", _boom)

    resp = _upload(api_client)
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Background removal failed. Please try with a different image."
    assert body["details"] == "model exploded"
    assert "stack" not in body
    assert leftover_files(upload_dir) == []


def test_processing_failure_hides_details_in_production(production, api_client, monkeypatch):
    monkeypatch.setattr(routes, "remove_background", _boom)

    resp = _upload(api_client)
    assert resp.status_code == 500
    assert "details" not in resp.json()
