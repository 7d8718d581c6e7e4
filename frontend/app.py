import asyncio
import datetime

import httpx
import streamlit as st

from backend.model import ASPECT_RATIOS
from config.settings import settings, setup_logging
from frontend.backend_client import file_extension, generate_image, load_image
from frontend.form_state import PromptForm

setup_logging()

# ==========================
# Config
# ==========================
st.set_page_config(
    page_title="AI Image Generator",
    page_icon="🎨",
    layout="wide"
)

st.title("🎨 AI Image Generator")
st.caption("Bring your ideas to life with the power of Gemini.")

# ==========================
# State
# ==========================
if "form" not in st.session_state:
    st.session_state["form"] = PromptForm(generate_image)

form: PromptForm = st.session_state["form"]


def render_result(form: PromptForm) -> None:
    view = form.view()

    if view.kind == "loading":
        st.info(f"⏳ {view.title}")

    elif view.kind == "error":
        st.error(f"**{view.title}**\n\n{view.detail}")

    elif view.kind == "image":
        try:
            image, img_bytes, mime_type = load_image(view.image_url)
        except (ValueError, OSError, httpx.HTTPError) as e:
            st.error(f"Could not load image: {e}")
            return

        st.image(image, caption=view.title, width="stretch")

        ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        st.download_button(
            "⬇️ Download image",
            data=img_bytes,
            file_name=f"generated_{ts}.{file_extension(mime_type)}",
            mime=mime_type,
            key="download_image",
        )

    else:
        st.info(f"🖼️ {view.title}")


def request_submit() -> None:
    """Button callback: runs before the next script run, so that run can show the loading state."""
    form: PromptForm = st.session_state["form"]
    form.set_prompt(st.session_state.get("prompt_input", ""))
    if not form.request_submit() and not form.is_busy:
        st.session_state["notice"] = "Enter a prompt to generate an image."


result_col, controls_col = st.columns([3, 2], gap="large")

# ==========================
# Controls
# ==========================
with controls_col:
    prompt = st.text_area(
        "Enter your prompt",
        key="prompt_input",
        height=130,
        placeholder="e.g., A photorealistic image of a cat wearing a space helmet, cinematic lighting",
    )
    form.set_prompt(prompt)

    st.markdown("**Aspect Ratio**")
    ratio_cols = st.columns(len(ASPECT_RATIOS))
    for col, ratio in zip(ratio_cols, ASPECT_RATIOS):
        with col:
            st.button(
                ratio,
                key=f"ratio_{ratio}",
                type="primary" if ratio == form.aspect_ratio else "secondary",
                on_click=form.set_aspect_ratio,
                args=(ratio,),
                width="stretch",
            )

    # Only disabled while busy: the text area commits on blur, blank prompts are refused in request_submit.
    st.button(
        form.submit_label,
        key="generate",
        type="primary",
        disabled=form.is_busy,
        on_click=request_submit,
        width="stretch",
    )

    notice = st.session_state.pop("notice", None)
    if notice:
        st.warning(notice)

    st.markdown("---")
    st.write("🔗 Backend:", settings.BACKEND_URL)

# ==========================
# Result
# ==========================
with result_col:
    render_result(form)

    # The disabled button and loading panel are already on the page at this point.
    if form.pending:
        with st.spinner("Generating your vision..."):
            asyncio.run(form.run_pending())
        st.rerun()
