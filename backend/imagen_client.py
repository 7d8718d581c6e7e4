import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from config.settings import settings

from .payload_builder import build_predict_payload
from .utils import GenerationError, short_prompt, to_data_uri

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "No image was generated for this prompt."
INVALID_RESPONSE_MESSAGE = "Image service returned an invalid response"


def extract_error_message(response: httpx.Response) -> str:
    """
    Google APIs answer errors with {"error": {"code", "message", "status"}}.
    Fall back to the HTTP status when the body is not in that shape.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error

    return f"Image service returned HTTP {response.status_code}"


def extract_first_image(body: Dict[str, Any], default_mime: str) -> Tuple[str, str]:
    """
    From the predict response, take the first prediction carrying image data.
    Returns (base64 data, mime type). Raises GenerationError when every
    prediction was filtered or the list is empty.
    """
    filtered_reason: Optional[str] = None
    predictions = body.get("predictions") if isinstance(body, dict) else None
    if not isinstance(predictions, list):
        predictions = []

    for prediction in predictions:
        if not isinstance(prediction, dict):
            continue
        data = prediction.get("bytesBase64Encoded")
        if data:
            return data, prediction.get("mimeType") or default_mime
        filtered_reason = filtered_reason or prediction.get("raiFilteredReason")

    raise GenerationError(filtered_reason or NO_IMAGE_MESSAGE)


class ImagenClient:
    """
    Thin async client for the Gemini API Imagen `predict` endpoint.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        mime_type: Optional[str] = None,
        request_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.IMAGEN_MODEL
        self.base_url = (base_url or settings.GEMINI_API_URL).rstrip("/")
        self.mime_type = mime_type or settings.OUTPUT_MIME_TYPE
        self.request_timeout = request_timeout or settings.REQUEST_TIMEOUT
        self.transport = transport

    @property
    def predict_url(self) -> str:
        return f"{self.base_url}/models/{self.model}:predict"

    async def predict(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise GenerationError("GEMINI_API_KEY is not configured")

        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        try:
            async with httpx.AsyncClient(
                timeout=self.request_timeout, transport=self.transport
            ) as client:
                r = await client.post(self.predict_url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error("[ImagenClient] Request to %s failed: %s", self.predict_url, e)
            raise GenerationError(str(e) or e.__class__.__name__) from e

        if r.status_code != 200:
            message = extract_error_message(r)
            logger.error(
                "[ImagenClient] HTTP %s from %s: %s", r.status_code, self.predict_url, r.text[:500]
            )
            raise GenerationError(message, status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise GenerationError(INVALID_RESPONSE_MESSAGE) from e

        if not isinstance(data, dict):
            logger.error("[ImagenClient] Expected a JSON object, got %s", type(data).__name__)
            raise GenerationError(INVALID_RESPONSE_MESSAGE)
        return data

    async def generate(self, prompt: str, aspect_ratio: str) -> str:
        """
        Generate one image and return it as a data URI.
        """
        payload = build_predict_payload(prompt, aspect_ratio, mime_type=self.mime_type)

        logger.info(
            "[ImagenClient] Generating model=%s aspect_ratio=%s prompt=%s",
            self.model,
            aspect_ratio,
            short_prompt(prompt),
        )
        start = time.monotonic()
        body = await self.predict(payload)
        data, mime_type = extract_first_image(body, self.mime_type)
        logger.info(
            "[ImagenClient] Got %s image (%d base64 chars) in %.1fs",
            mime_type,
            len(data),
            time.monotonic() - start,
        )
        return to_data_uri(data, mime_type)
