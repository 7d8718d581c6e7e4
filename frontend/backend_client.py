import base64
import binascii
import logging
from io import BytesIO
from typing import Optional, Tuple

import httpx
from PIL import Image

from backend.utils import GenerationError
from config.settings import settings

MIME_EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}
INVALID_RESPONSE_MESSAGE = "Image backend returned an invalid response"

logger = logging.getLogger(__name__)


def _error_detail(resp: httpx.Response) -> str:
    try:
        detail = resp.json().get("detail")
    except (ValueError, AttributeError):
        detail = None

    # FastAPI validation errors carry a list of {"loc", "msg", ...}
    if isinstance(detail, list) and detail:
        detail = "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or None
    if isinstance(detail, str) and detail:
        return detail
    return f"Backend returned HTTP {resp.status_code}"


async def generate_image(
    prompt: str,
    aspect_ratio: str,
    backend_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Call POST /generate -> image_url (URL or data URI)"""
    base = (backend_url or settings.BACKEND_URL).rstrip("/")
    payload = {"prompt": prompt, "aspect_ratio": aspect_ratio}

    try:
        async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT + 10, transport=transport) as client:
            resp = await client.post(f"{base}/generate", json=payload)
    except httpx.HTTPError as e:
        logger.error("[BackendClient] Request to %s failed: %s", base, e)
        raise GenerationError(f"Could not reach the image backend: {str(e) or e.__class__.__name__}") from e

    if resp.status_code != 200:
        raise GenerationError(_error_detail(resp), status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as e:
        raise GenerationError(INVALID_RESPONSE_MESSAGE) from e

    if not isinstance(data, dict):
        raise GenerationError(INVALID_RESPONSE_MESSAGE)

    image_url = data.get("image_url")
    if not image_url:
        raise GenerationError("Backend response did not contain an image")
    return image_url


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """data:<mime>;base64,<payload> -> (mime, bytes)"""
    header, sep, data = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI")
    mime_type = header[len("data:"):-len(";base64")] or "application/octet-stream"
    try:
        return mime_type, base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def load_image(image_url: str, timeout: float = 30.0) -> Tuple[Image.Image, bytes, str]:
    """Decode a data URI or download an http(s) URL -> (PIL image, raw bytes, mime)"""
    if image_url.startswith("data:"):
        mime_type, content = parse_data_uri(image_url)
    else:
        resp = httpx.get(image_url, timeout=timeout)
        resp.raise_for_status()
        content = resp.content
        mime_type = resp.headers.get("content-type", "image/png").split(";")[0]

    img = Image.open(BytesIO(content))
    img.load()
    return img, content, mime_type


def file_extension(mime_type: str) -> str:
    return MIME_EXTENSIONS.get(mime_type, "png")
