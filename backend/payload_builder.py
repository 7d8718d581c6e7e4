# backend/payload_builder.py

from typing import Any, Dict

from config.settings import settings

from .model import ASPECT_RATIOS


def _set_prompt(payload: Dict[str, Any], prompt: str) -> None:
    """
    Imagen takes one instance per request; the prompt is its only input.
    """
    payload["instances"] = [{"prompt": prompt.strip()}]


def _set_aspect_ratio(payload: Dict[str, Any], aspect_ratio: str) -> None:
    if aspect_ratio not in ASPECT_RATIOS:
        raise ValueError(
            f"Unsupported aspect ratio {aspect_ratio!r}, expected one of {', '.join(ASPECT_RATIOS)}"
        )
    payload.setdefault("parameters", {})["aspectRatio"] = aspect_ratio


def build_predict_payload(
    prompt: str,
    aspect_ratio: str,
    mime_type: str | None = None,
) -> Dict[str, Any]:
    """
    Build the body for `models/{model}:predict`:
    - one instance carrying the prompt
    - a single sample in the requested aspect ratio
    - output encoded as `mime_type` (defaults to settings.OUTPUT_MIME_TYPE)
    """
    if not prompt or not prompt.strip():
        raise ValueError("Prompt must not be empty")

    payload: Dict[str, Any] = {
        "parameters": {
            "sampleCount": 1,
            "outputOptions": {"mimeType": mime_type or settings.OUTPUT_MIME_TYPE},
        }
    }
    _set_prompt(payload, prompt)
    _set_aspect_ratio(payload, aspect_ratio)
    return payload
