"""Tests for the upload endpoint."""

import json

from fastapi.testclient import TestClient

from tests.conftest import InMemoryPhotoStorage, decode, frame_png, image_bytes
from wedding_gallery.api.app import create_app

PHOTO_NAME = "original_2025-05-02T12-10-12-389Z.jpg"


def _storage(container) -> InMemoryPhotoStorage:
    storage = container.upload_service.storage
    assert isinstance(storage, InMemoryPhotoStorage)
    return storage


def test_upload_requires_api_key(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        files={"photo": (PHOTO_NAME, image_bytes(60, 40), "image/jpeg")},
        headers={"x-api-key": "wrong"},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}
    assert _storage(container).photos == {}


def test_upload_without_photo_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        data={"metadata": json.dumps({"filename": PHOTO_NAME})},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No photo uploaded"}
    assert _storage(container).photos == {}


def test_upload_stores_and_frames_photo(container) -> None:
    storage = _storage(container)
    storage.photos["wedding-frame.png"] = frame_png()
    storage.modified["wedding-frame.png"] = 0
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        files={"photo": (PHOTO_NAME, image_bytes(600, 400), "image/jpeg")},
        data={"metadata": json.dumps({"filename": PHOTO_NAME})},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "photoId": PHOTO_NAME,
        "framedUrl": "/photos/wedding_2025-05-02T12-10-12-389Z.jpg",
        "message": "Photo uploaded and framed successfully",
    }
    assert PHOTO_NAME in storage.photos


def test_upload_over_size_limit_is_rejected(container) -> None:
    container.settings.max_upload_bytes = 100
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        files={"photo": (PHOTO_NAME, b"x" * 101, "image/jpeg")},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "File too large"
    assert _storage(container).photos == {}


def test_compositing_failure_returns_server_error(container) -> None:
    storage = _storage(container)
    storage.photos["wedding-frame.png"] = frame_png()
    storage.modified["wedding-frame.png"] = 0
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        files={"photo": (PHOTO_NAME, b"not an image", "image/jpeg")},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Server error during upload or framing",
    }
    assert storage.photos[PHOTO_NAME] == b"not an image"


def test_local_environment_adds_debug_detail(container) -> None:
    container.settings.environment = "local"
    storage = _storage(container)
    storage.photos["wedding-frame.png"] = frame_png()
    storage.modified["wedding-frame.png"] = 0
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        files={"photo": (PHOTO_NAME, b"not an image", "image/jpeg")},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 500
    assert response.json()["debug"].startswith("PhotoUnavailableError")


def test_conftest_fakes_are_shared_with_fixtures(storage) -> None:
    assert isinstance(storage, InMemoryPhotoStorage)


def test_upload_with_too_many_files_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload-photo",
        files=[
            ("photo", (PHOTO_NAME, image_bytes(60, 40), "image/jpeg")),
            ("thumbnail", ("thumb.jpg", image_bytes(30, 20), "image/jpeg")),
            ("extra", ("extra.jpg", image_bytes(30, 20), "image/jpeg")),
        ],
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Too many files")
    assert _storage(container).photos == {}


def test_overlay_upload_replaces_server_frame(container) -> None:
    storage = _storage(container)
    storage.photos["wedding-frame.png"] = frame_png()
    container.compositor.cache.set("path:stale", object())
    client = TestClient(create_app(container))

    response = client.post(
        "/api/admin/overlays",
        files={"overlay": ("frame.png", frame_png(200, 150), "image/png")},
        data={"type": "standard", "name": "wedding-frame.png"},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "frameUrl": "/photos/wedding-frame.png",
        "message": "Frame uploaded successfully",
    }
    assert storage.photos["wedding-frame.png"] == frame_png(200, 150)
    assert len(container.compositor.cache) == 0

    upload = client.post(
        "/api/upload-photo",
        files={"photo": (PHOTO_NAME, image_bytes(600, 400), "image/jpeg")},
        headers={"x-api-key": "test-key"},
    )

    assert upload.status_code == 200
    framed = storage.photos["wedding_2025-05-02T12-10-12-389Z.jpg"]
    assert decode(framed).size == (200, 150)


def test_overlay_upload_rejects_non_png(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/admin/overlays",
        files={"overlay": ("frame.jpg", image_bytes(200, 150), "image/jpeg")},
        headers={"x-api-key": "test-key"},
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Frame must be a PNG image",
    }
    assert "wedding-frame.png" not in _storage(container).photos


def test_overlay_upload_requires_api_key(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/admin/overlays",
        files={"overlay": ("frame.png", frame_png(), "image/png")},
    )

    assert response.status_code == 401
    assert _storage(container).photos == {}
