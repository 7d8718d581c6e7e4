"""State of the prompt form, kept free of any Streamlit calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from backend.model import ASPECT_RATIOS, DEFAULT_ASPECT_RATIO

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str, str], Awaitable[str]]

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred."


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class View:
    """What the result panel should show for the current state."""

    kind: str
    title: str
    detail: Optional[str] = None
    image_url: Optional[str] = None


def error_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message.strip() if isinstance(message, str) and message.strip() else DEFAULT_ERROR_MESSAGE


class PromptForm:
    """
    Holds prompt, aspect ratio and the outcome of the last submission.

    At most one generation call is outstanding: `submit` refuses to start
    while `is_loading` is set, independent of how the UI renders the button.

    A UI that cannot render while awaiting (Streamlit) submits in two
    phases: `request_submit` marks the form pending so the next render shows
    the loading state and a disabled button, then `run_pending` makes the call.
    """

    def __init__(self, generate: GenerateFn):
        self._generate = generate
        self.prompt: str = ""
        self.aspect_ratio: str = DEFAULT_ASPECT_RATIO
        self.image_url: Optional[str] = None
        self.is_loading: bool = False
        self.error: Optional[str] = None
        self.pending: bool = False

    def set_prompt(self, text: str) -> None:
        self.prompt = text or ""

    def set_aspect_ratio(self, ratio: str) -> None:
        if ratio not in ASPECT_RATIOS:
            raise ValueError(
                f"Unsupported aspect ratio {ratio!r}, expected one of {', '.join(ASPECT_RATIOS)}"
            )
        self.aspect_ratio = ratio

    @property
    def is_busy(self) -> bool:
        return self.is_loading or self.pending

    @property
    def can_submit(self) -> bool:
        return bool(self.prompt.strip()) and not self.is_busy

    @property
    def status(self) -> Status:
        if self.is_busy:
            return Status.LOADING
        if self.error is not None:
            return Status.FAILED
        if self.image_url is not None:
            return Status.SUCCEEDED
        return Status.IDLE

    @property
    def submit_label(self) -> str:
        return "Generating..." if self.is_busy else "Generate Image"

    def request_submit(self) -> bool:
        """
        Mark a submission as pending. Returns False, and changes nothing,
        when the prompt is blank or a submission is already pending or loading.
        """
        if not self.can_submit:
            logger.debug("[PromptForm] Submit request ignored (busy=%s)", self.is_busy)
            return False
        self.pending = True
        self.error = None
        self.image_url = None
        return True

    async def run_pending(self) -> bool:
        if not self.pending:
            return False
        return await self.submit()

    async def submit(self) -> bool:
        """
        Run one generation for the current prompt and aspect ratio.
        Returns False without calling the client when submission is not allowed.
        """
        if self.is_loading or not self.prompt.strip():
            logger.debug("[PromptForm] Submit ignored (loading=%s)", self.is_loading)
            self.pending = False
            return False

        self.pending = False
        self.is_loading = True
        self.error = None
        self.image_url = None

        prompt, aspect_ratio = self.prompt, self.aspect_ratio
        try:
            self.image_url = await self._generate(prompt, aspect_ratio)
        except Exception as e:
            self.error = error_message(e)
            logger.warning("[PromptForm] Generation failed: %s", self.error)
        finally:
            self.is_loading = False
        return True

    def view(self) -> View:
        status = self.status
        if status is Status.LOADING:
            return View(kind="loading", title="Generating your vision...")
        if status is Status.FAILED:
            return View(kind="error", title="Generation Failed", detail=self.error)
        if status is Status.SUCCEEDED:
            return View(kind="image", title=self.prompt, image_url=self.image_url)
        return View(kind="placeholder", title="Your generated image will appear here")
