"""Transports that turn a request draft into a generation result.

- HttpUploadTransport: multipart POST to the studio server (/api/upload)
- DirectTransport: builds and sends the request to Gemini in-process
"""

import logging
from typing import Protocol

import httpx

from ..exceptions import MissingProductError, NoImageReturnedError, TransportError
from ..models.generation import DEFAULT_MODEL, GenerationRequest, GenerationResult, RequestDraft
from ..models.parts import ImagePart, Part
from ..services.relay import relay_result
from ..services.request_builder import build_from_draft

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/upload"


class Transport(Protocol):
    async def send(self, draft: RequestDraft) -> GenerationResult: ...


class ImageGenerator(Protocol):
    async def generate(self, request: GenerationRequest) -> list[Part]: ...


class HttpUploadTransport:
    """Sends the draft to the studio server as a multipart form."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 180.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def build_form(self, draft: RequestDraft) -> tuple[dict, dict]:
        """Split the draft into multipart form fields and files."""
        if draft.product is None:
            raise MissingProductError()

        data = {
            "userPrompt": draft.user_prompt,
            "selectedAspectRatio": draft.aspect_ratio,
        }
        files = {
            "productFile": (
                draft.product.filename or "product",
                draft.product.data,
                draft.product.mime_type,
            )
        }
        if draft.pose is not None:
            files["poseFile"] = (
                draft.pose.filename or "pose",
                draft.pose.data,
                draft.pose.mime_type,
            )
        return data, files

    async def _post(self, client: httpx.AsyncClient, data: dict, files: dict) -> httpx.Response:
        return await client.post(
            f"{self.base_url}{UPLOAD_PATH}", data=data, files=files, timeout=self.timeout
        )

    async def send(self, draft: RequestDraft) -> GenerationResult:
        data, files = self.build_form(draft)

        try:
            if self._client is not None:
                response = await self._post(self._client, data, files)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, data, files)
        except httpx.HTTPError as e:
            raise TransportError(f"Upload request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            message = payload.get("error") or payload.get("message") or response.reason_phrase
            raise TransportError(
                f"HTTP error! status: {response.status_code} ({message})",
                status_code=response.status_code,
            )

        image = payload.get("image")
        if not image:
            raise NoImageReturnedError()

        try:
            return GenerationResult(
                image=ImagePart.from_data_uri(image), text=payload.get("text") or None
            )
        except ValueError as e:
            raise TransportError(f"Server returned an invalid image: {e}") from e


class DirectTransport:
    """Builds the request locally and calls the model without a server."""

    def __init__(self, generator: ImageGenerator, model: str = DEFAULT_MODEL):
        self.generator = generator
        self.model = model

    async def send(self, draft: RequestDraft) -> GenerationResult:
        request = build_from_draft(draft, model=self.model)
        parts = await self.generator.generate(request)
        return relay_result(parts)
