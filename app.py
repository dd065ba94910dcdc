"""
Streamlit frontend for the AI Logo Animator.

This is the main entry point for the application. It renders the form, runs
logo and animation jobs through the JobOrchestrator, and offers the finished
video for download and sharing.

Environment Variables:
- GEMINI_API_KEY or GOOGLE_GENAI_API_KEY: Required for Gemini calls
- IMAGEN_MODEL: (Optional) Logo model (default: imagen-3.0-generate-002)
- VEO_MODEL: (Optional) Video model (default: veo-2.0-generate-001)
- VIDEO_POLL_INTERVAL / VIDEO_PROGRESS_INTERVAL: (Optional) Seconds between polls / progress messages
- VIDEO_MAX_POLL_ATTEMPTS: (Optional) Poll bound, 0 = unbounded
- APP_SHARE_URL: (Optional) Link placed in social share posts
"""

import asyncio

import streamlit as st
from dotenv import load_dotenv

# Import all modular components
from logo_animator import (
    PROGRESS_MESSAGES,
    AspectRatio,
    GeminiBackend,
    JobOrchestrator,
    Presentation,
    SessionStore,
    Settings,
    SharePlatform,
    Status,
    Tab,
    VideoFormat,
    get_api_key,
)

# Load environment variables from .env file
load_dotenv()

# ---------- Streamlit Page Configuration ----------
st.set_page_config(
    page_title="AI Logo Animator",
    page_icon="🎬",
    layout="centered"
)

TAB_LABELS = {
    Tab.GENERATE: "✨ Generate with AI",
    Tab.UPLOAD: "📤 Upload Image",
}
RATIO_LABELS = {
    AspectRatio.WIDE: "16:9 (Landscape)",
    AspectRatio.TALL: "9:16 (Portrait)",
}
SHARE_LABELS = {
    SharePlatform.TWITTER: "𝕏 Twitter",
    SharePlatform.FACEBOOK: "Facebook",
    SharePlatform.LINKEDIN: "LinkedIn",
}


def _get_animator():
    """Build the store, presentation and orchestrator once per browser session."""
    if "animator" not in st.session_state:
        settings = Settings.from_env()
        store = SessionStore()
        st.session_state["animator"] = (
            Presentation(store, share_url=settings.share_url),
            JobOrchestrator(store, GeminiBackend.from_env(settings), settings),
        )
    return st.session_state["animator"]


def _on_tab_change():
    _get_animator()[0].select_tab(st.session_state["tab_choice"])


def _on_reset():
    _get_animator()[0].reset()
    st.session_state["tab_choice"] = Tab.GENERATE
    st.session_state["logo_prompt"] = ""
    st.session_state.pop("last_upload_id", None)


# ---------- Main UI ----------
st.title("🎬 AI Logo Animator")
st.markdown("_Generate a logo from a prompt or upload your own, then bring it to life_")

if not get_api_key():
    st.warning("⚠️ Set `GEMINI_API_KEY` (or `GOOGLE_GENAI_API_KEY`) in your environment or `.env` file.")
    st.stop()

presentation, orchestrator = _get_animator()
session = presentation.session
# A job queued by the previous run starts in this one, below controls that are already disabled.
pending_job = st.session_state.pop("pending_job", None)
busy = session.is_busy or pending_job is not None

# ---------- Sidebar: Environment Configuration ----------
with st.sidebar:
    st.markdown("**Models**")
    backend = orchestrator.backend
    st.caption(f"🖼️ Logo: {backend.image_model}")
    st.caption(f"🎞️ Video: {backend.video_model}")
    st.markdown("**Status**")
    st.caption(f"State: `{session.status.value}`")

# ---------- Section 1: Logo Source ----------
st.header("1️⃣ Create Your Logo")

if "tab_choice" not in st.session_state:
    st.session_state["tab_choice"] = session.active_tab
st.radio(
    "Logo source",
    list(Tab),
    format_func=lambda t: TAB_LABELS[t],
    key="tab_choice",
    horizontal=True,
    on_change=_on_tab_change,
    disabled=busy,
    label_visibility="collapsed",
)

if session.active_tab is Tab.GENERATE:
    prompt = st.text_input(
        "Describe your logo",
        key="logo_prompt",
        placeholder="e.g. A minimalist fox for a coffee brand",
        disabled=busy,
    )
    presentation.set_prompt(prompt)
    if st.button("🎨 Generate Logo", disabled=busy or not prompt.strip(), use_container_width=True):
        st.session_state["pending_job"] = ("logo", prompt)
        st.rerun()
else:
    uploaded = st.file_uploader(
        "Choose an image file",
        type=["png", "jpg", "jpeg", "webp"],
        help="Supported formats: PNG, JPG, JPEG, WEBP",
        disabled=busy,
    )
    # The uploader returns the same file on every rerun; only react to a new one.
    if uploaded is not None and uploaded.file_id != st.session_state.get("last_upload_id"):
        st.session_state["last_upload_id"] = uploaded.file_id
        presentation.upload_image(uploaded)
        st.rerun()

if pending_job and pending_job[0] == "logo":
    with st.spinner("Generating your logo..."):
        asyncio.run(orchestrator.generate_logo(pending_job[1]))
    st.rerun()

session = presentation.session
source = session.image_source_for_animation
if source:
    st.image(source, caption="Logo to animate", width=320)

# ---------- Section 2: Animation ----------
st.header("2️⃣ Animate It")

if "ratio_choice" not in st.session_state:
    st.session_state["ratio_choice"] = session.aspect_ratio
ratio = st.radio(
    "Aspect ratio",
    list(AspectRatio),
    key="ratio_choice",
    format_func=lambda r: RATIO_LABELS[r],
    horizontal=True,
    disabled=busy,
)
presentation.set_aspect_ratio(ratio)

if st.button("🚀 Animate Logo", type="primary", disabled=busy or not source, use_container_width=True):
    st.session_state["pending_job"] = ("animation", ratio)
    st.rerun()

if pending_job and pending_job[0] == "animation":
    with st.status(PROGRESS_MESSAGES[0], expanded=True) as status:
        status.write("⏳ Video generation usually takes a few minutes.")

        def _show_progress(previous, current):
            if current.progress_message and current.progress_message != previous.progress_message:
                status.update(label=current.progress_message)

        unsubscribe = presentation.store.subscribe(_show_progress)
        try:
            asyncio.run(orchestrator.generate_animation(pending_job[1]))
        finally:
            unsubscribe()
    # Re-render with the controls enabled and the result or error shown.
    st.rerun()

session = presentation.session
if session.status in (Status.ERROR, Status.TIMED_OUT) and session.error_message:
    st.error(session.error_message)

# ---------- Section 3: Result ----------
if session.generated_video is not None:
    st.header("3️⃣ Your Animated Logo")
    st.video(session.generated_video.read(), format=session.generated_video.mime_type)

    col_download, col_share = st.columns(2)
    with col_download:
        with st.popover("📥 Download", use_container_width=True):
            for fmt in VideoFormat:
                action = presentation.build_download(fmt)
                if action is not None:
                    st.download_button(
                        label=f"Download .{fmt.value}",
                        data=action.data,
                        file_name=action.file_name,
                        mime=action.mime_type,
                        use_container_width=True,
                    )
    with col_share:
        with st.popover("🔗 Share", use_container_width=True):
            for platform in SharePlatform:
                url = presentation.build_share_url(platform)
                if url:
                    st.link_button(SHARE_LABELS[platform], url, use_container_width=True)

st.button("🔄 Start Over", on_click=_on_reset, disabled=session.is_busy)

st.caption("Built with Streamlit + Google Imagen & Veo.")
