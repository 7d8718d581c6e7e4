"""Tests driving the Streamlit page in :mod:`frontend.app` through AppTest."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image
from streamlit.testing.v1 import AppTest

import frontend.backend_client as backend_client
from backend.utils import GenerationError
from frontend.form_state import PromptForm

APP_PATH = str(Path(__file__).resolve().parents[1] / "frontend" / "app.py")


def _png_data_uri() -> str:
    buffer = BytesIO()
    Image.new("RGB", (16, 9), color=(200, 40, 0)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


PNG_DATA_URI = _png_data_uri()


@pytest.fixture
def generate_calls(monkeypatch) -> list[tuple[str, str]]:
    calls: list[tuple[str, str]] = []

    async def fake_generate(prompt: str, aspect_ratio: str) -> str:
        calls.append((prompt, aspect_ratio))
        if prompt == "fail":
            raise GenerationError("quota exceeded")
        return PNG_DATA_URI

    monkeypatch.setattr(backend_client, "generate_image", fake_generate)
    return calls


@pytest.fixture
def page(generate_calls) -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def _submit(at: AppTest, prompt: str) -> AppTest:
    at.text_area(key="prompt_input").input(prompt).run()
    return at.button(key="generate").click().run()


def test_initial_page_shows_placeholder(page: AppTest) -> None:
    button = page.button(key="generate")

    assert button.label == "Generate Image"
    assert button.disabled is False
    assert [info.value for info in page.info] == ["🖼️ Your generated image will appear here"]
    assert page.session_state["form"].aspect_ratio == "1:1"


def test_submit_calls_backend_once_and_shows_image(page: AppTest, generate_calls) -> None:
    page.button(key="ratio_16:9").click().run()

    at = _submit(page, "a red fox")

    assert not at.exception
    assert generate_calls == [("a red fox", "16:9")]
    form = at.session_state["form"]
    assert form.image_url == PNG_DATA_URI
    assert form.pending is False
    assert form.is_loading is False
    assert not at.error
    assert at.button(key="generate").label == "Generate Image"


def test_failure_is_shown_in_result_panel(page: AppTest, generate_calls) -> None:
    at = _submit(page, "fail")

    assert generate_calls == [("fail", "1:1")]
    assert len(at.error) == 1
    assert "Generation Failed" in at.error[0].value
    assert "quota exceeded" in at.error[0].value
    assert at.session_state["form"].image_url is None


def test_blank_prompt_click_warns_without_calling_backend(page: AppTest, generate_calls) -> None:
    at = _submit(page, "   ")

    assert generate_calls == []
    assert [w.value for w in at.warning] == ["Enter a prompt to generate an image."]


def test_in_flight_request_disables_button_and_blocks_new_clicks(generate_calls) -> None:
    form = PromptForm(backend_client.generate_image)
    form.is_loading = True

    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["form"] = form
    at.run()

    button = at.button(key="generate")
    assert button.disabled is True
    assert button.label == "Generating..."
    assert [info.value for info in at.info] == ["⏳ Generating your vision..."]

    at.text_area(key="prompt_input").input("a red fox").run()
    at.button(key="generate").click().run()

    assert generate_calls == []
    assert at.session_state["form"].pending is False
