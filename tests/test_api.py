"""API tests for the upload endpoint."""

import pytest
from conftest import make_mpo
from fastapi.testclient import TestClient

from model_studio.api.config import settings
from model_studio.api.main import app
from model_studio.exceptions import UpstreamError
from model_studio.models.parts import ImagePart, TextPart
from model_studio.services.request_builder import DEFAULT_PROMPT, POSE_INSTRUCTION


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def product_files(png_bytes: bytes, pose: bytes | None = None) -> dict:
    files = {"productFile": ("shirt.png", png_bytes, "image/png")}
    if pose is not None:
        files["poseFile"] = ("pose.jpg", pose, "image/jpeg")
    return files


class TestHealth:
    """Health endpoint tests."""

    def test_health_returns_ok(self, client: TestClient):
        """Health endpoint returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_root_returns_api_info(self, client: TestClient):
        """Root endpoint returns API info."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "name" in data
        assert data["docs"] == "/docs"


class TestUploadSuccess:
    """Successful generations."""

    def test_returns_image_and_text(self, client, fake_generator, png_bytes):
        response = client.post(
            "/api/upload",
            files=product_files(png_bytes),
            data={"userPrompt": "Beach at sunset", "selectedAspectRatio": "16:9"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["image"].startswith("data:image/png;base64,")
        assert data["text"] == "Here is your model wearing the shirt."

        request = fake_generator.requests[0]
        assert request.aspect_ratio == "16:9"
        assert request.instruction.endswith("- **CONTEXT:** Beach at sunset")

    def test_empty_prompt_uses_default(self, client, fake_generator, png_bytes):
        response = client.post(
            "/api/upload",
            files=product_files(png_bytes),
            data={"userPrompt": "", "selectedAspectRatio": "1:1"},
        )

        assert response.status_code == 200
        assert fake_generator.requests[0].instruction.endswith(DEFAULT_PROMPT)

    def test_multi_picture_jpeg_is_accepted(self, client, fake_generator):
        response = client.post(
            "/api/upload",
            files={"productFile": ("photo.jpg", make_mpo(), "image/jpeg")},
        )

        assert response.status_code == 200
        assert fake_generator.requests[0].parts[1].mime_type == "image/jpeg"

    def test_whitespace_prompt_is_sent_as_typed(self, client, fake_generator, png_bytes):
        response = client.post(
            "/api/upload",
            files=product_files(png_bytes),
            data={"userPrompt": "   "},
        )

        assert response.status_code == 200
        assert fake_generator.requests[0].instruction.endswith("- **CONTEXT:**    ")

    def test_pose_file_is_last_part(self, client, fake_generator, png_bytes, jpeg_bytes):
        response = client.post(
            "/api/upload",
            files=product_files(png_bytes, pose=jpeg_bytes),
            data={"userPrompt": "x", "selectedAspectRatio": "1:1"},
        )

        assert response.status_code == 200
        request = fake_generator.requests[0]
        assert [p.kind for p in request.parts] == ["text", "image", "image"]
        assert request.parts[1].mime_type == "image/png"
        assert request.parts[2].mime_type == "image/jpeg"
        assert POSE_INSTRUCTION in request.instruction

    def test_empty_pose_part_is_ignored(self, client, fake_generator, png_bytes):
        files = product_files(png_bytes)
        files["poseFile"] = ("", b"", "application/octet-stream")

        response = client.post("/api/upload", files=files, data={"userPrompt": "x"})

        assert response.status_code == 200
        assert len(fake_generator.requests[0].parts) == 2
        assert POSE_INSTRUCTION not in fake_generator.requests[0].instruction

    def test_missing_aspect_ratio_defaults_to_square(self, client, fake_generator, png_bytes):
        response = client.post("/api/upload", files=product_files(png_bytes))
        assert response.status_code == 200
        assert fake_generator.requests[0].aspect_ratio == "1:1"

    def test_text_is_null_when_model_sends_none(
        self, client, fake_generator, png_bytes
    ):
        fake_generator.parts = [ImagePart(mime_type="image/png", data=png_bytes)]
        response = client.post("/api/upload", files=product_files(png_bytes))
        assert response.status_code == 200
        assert response.json()["text"] is None


class TestUploadFailures:
    """Validation and upstream failures."""

    def test_get_is_not_allowed(self, client: TestClient):
        response = client.get("/api/upload")
        assert response.status_code == 405
        assert response.json() == {"message": "Method Not Allowed"}

    def test_put_is_not_allowed(self, client: TestClient):
        response = client.put("/api/upload")
        assert response.status_code == 405
        assert response.json()["message"] == "Method Not Allowed"

    def test_missing_product_returns_400(self, client, fake_generator):
        response = client.post(
            "/api/upload", data={"userPrompt": "x", "selectedAspectRatio": "1:1"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Please upload a product image."}
        assert fake_generator.requests == []

    def test_unparseable_form_returns_500(self, client, fake_generator):
        response = client.post(
            "/api/upload",
            content=b"--broken\r\nnot really multipart",
            headers={"Content-Type": "multipart/form-data"},
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process upload."}
        assert fake_generator.requests == []

    def test_non_image_returns_415(self, client, fake_generator):
        response = client.post(
            "/api/upload",
            files={"productFile": ("notes.txt", b"just some text", "text/plain")},
        )
        assert response.status_code == 415
        assert "error" in response.json()

    def test_oversized_file_returns_413(self, client, fake_generator, png_bytes, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 16)
        response = client.post("/api/upload", files=product_files(png_bytes))
        assert response.status_code == 413
        assert fake_generator.requests == []

    def test_too_many_pixels_returns_413(
        self, client, fake_generator, png_bytes, tiny_pixel_limit
    ):
        response = client.post("/api/upload", files=product_files(png_bytes))

        assert response.status_code == 413
        assert response.headers["content-type"].startswith("application/json")
        assert "too many pixels" in response.json()["error"]
        assert fake_generator.requests == []

    def test_unsupported_aspect_ratio_returns_400(self, client, fake_generator, png_bytes):
        response = client.post(
            "/api/upload",
            files=product_files(png_bytes),
            data={"selectedAspectRatio": "7:3"},
        )
        assert response.status_code == 400
        assert "aspect ratio" in response.json()["error"]

    def test_no_image_from_model_returns_500(self, client, fake_generator, png_bytes):
        fake_generator.parts = [TextPart(text="I can't generate that.")]

        response = client.post("/api/upload", files=product_files(png_bytes))

        assert response.status_code == 500
        assert response.json() == {
            "error": "The model did not return an image. Please try adjusting your prompt or images."
        }

    def test_upstream_failure_returns_generic_500(self, client, fake_generator, png_bytes):
        fake_generator.error = UpstreamError("quota exceeded: internal detail")

        response = client.post("/api/upload", files=product_files(png_bytes))

        assert response.status_code == 500
        error = response.json()["error"]
        assert error.startswith("An error occurred while generating the image.")
        assert "internal detail" not in error

    def test_missing_api_key_returns_500(self, client, png_bytes, monkeypatch):
        from model_studio.api.routes import upload

        upload.get_generator.cache_clear()
        monkeypatch.setattr(settings, "GEMINI_API_KEY", "")

        response = client.post("/api/upload", files=product_files(png_bytes))

        assert response.status_code == 500
        assert "error" in response.json()
        upload.get_generator.cache_clear()
