"""Smoke tests for the Streamlit page."""

from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from logo_animator.config import PROGRESS_MESSAGES, Settings
from logo_animator.orchestrator import JobOrchestrator
from logo_animator.presentation import Presentation
from logo_animator.session import SessionStore, Status

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    monkeypatch.setattr("dotenv.load_dotenv", lambda *a, **kw: False)


def test_app_asks_for_api_key(monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_GENAI_API_KEY", raising=False)

    at = AppTest.from_file(APP_PATH).run()

    assert not at.exception
    assert "GEMINI_API_KEY" in at.warning[0].value


def test_app_generates_logo_with_backend(monkeypatch, backend, settings) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    store = SessionStore()
    at = AppTest.from_file(APP_PATH)
    at.session_state["animator"] = (Presentation(store), JobOrchestrator(store, backend, settings))
    at.run()

    at.text_input(key="logo_prompt").input("a fox").run()
    button = next(b for b in at.button if "Generate Logo" in b.label)
    button.click().run()

    assert not at.exception
    assert backend.calls("generate_images") == [("generate_images", "a fox")]
    assert store.session.generated_image is not None
    assert store.session.status is Status.IDLE


def test_app_animation_renders_controls_disabled_while_job_runs(monkeypatch, store_with_logo, backend) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    store_with_logo.update(progress_message=PROGRESS_MESSAGES[-1])

    async def stop_script(operation):
        backend.events.append(("refresh_video",))
        st.stop()

    backend.refresh_video = stop_script
    fast = Settings(poll_interval=0, progress_interval=60)
    at = AppTest.from_file(APP_PATH)
    at.session_state["animator"] = (Presentation(store_with_logo), JobOrchestrator(store_with_logo, backend, fast))
    at.run()

    button = next(b for b in at.button if "Animate Logo" in b.label)
    button.click().run()

    assert not at.exception
    assert len(backend.calls("start_video")) == 1
    assert backend.calls("refresh_video")
    assert at.status[0].label == PROGRESS_MESSAGES[0]
    assert at.radio(key="tab_choice").disabled
    assert at.radio(key="ratio_choice").disabled
    assert at.text_input(key="logo_prompt").disabled
    assert all(b.disabled for b in at.button)
    assert store_with_logo.session.status is Status.IDLE


def test_app_animation_finishes_and_reenables_controls(monkeypatch, store_with_logo, backend) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    fast = Settings(poll_interval=0, progress_interval=0)
    at = AppTest.from_file(APP_PATH)
    at.session_state["animator"] = (Presentation(store_with_logo), JobOrchestrator(store_with_logo, backend, fast))
    at.run()

    button = next(b for b in at.button if "Animate Logo" in b.label)
    button.click().run()

    assert not at.exception
    assert store_with_logo.session.status is Status.FINISHED
    assert backend.calls("fetch_video")
    assert not at.radio(key="ratio_choice").disabled
    assert not at.text_input(key="logo_prompt").disabled
