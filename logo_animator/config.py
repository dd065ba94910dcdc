"""
Configuration, constants, and data models for AI Logo Animator.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from enum import Enum

from .utils import get_logger

logger = get_logger("config")


# ---------- Enums ----------
class AspectRatio(str, Enum):
    WIDE = "16:9"
    TALL = "9:16"


class Tab(str, Enum):
    GENERATE = "generate"
    UPLOAD = "upload"


class VideoFormat(str, Enum):
    MP4 = "mp4"
    GIF = "gif"


class SharePlatform(str, Enum):
    TWITTER = "twitter"
    FACEBOOK = "facebook"
    LINKEDIN = "linkedin"


# ---------- Gemini Models ----------
DEFAULT_IMAGE_MODEL = "imagen-3.0-generate-002"
DEFAULT_VIDEO_MODEL = "veo-2.0-generate-001"

LOGO_PROMPT_TEMPLATE = (
    "A clean, modern, vector-style logo for: {prompt}. "
    "The logo should be on a solid, neutral background."
)
ANIMATION_PROMPT = "Animate this logo with a clean, dynamic, and professional cinematic reveal."

# ---------- Job Timing ----------
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_PROGRESS_INTERVAL = 8.0
DEFAULT_MAX_POLL_ATTEMPTS = 0  # 0 = poll until the backend reports done
DEFAULT_FETCH_TIMEOUT = 120.0

PROGRESS_MESSAGES = (
    "Initializing video synthesis...",
    "Analyzing logo structure...",
    "Generating motion vectors...",
    "Rendering keyframes...",
    "Applying cinematic effects...",
    "Compositing final animation...",
    "Almost there, polishing the details...",
)

# ---------- User-Facing Messages ----------
LOGO_ERROR_MESSAGE = "Failed to generate logo. Please check the console for details."
ANIMATION_ERROR_MESSAGE = "Failed to generate animation. Please check the console for details."
MISSING_SOURCE_MESSAGE = "Please generate or upload a logo first."
TIMEOUT_MESSAGE = "Video generation timed out. Please try again."
UPLOAD_ERROR_MESSAGE = "Could not read the uploaded image."

# ---------- Download & Share ----------
DOWNLOAD_BASENAME = "animated-logo"
DEFAULT_SHARE_URL = "https://your-app-url.com"
SHARE_TEXT = "Check out this amazing animated logo I created with the AI Logo Animator!"
SHARE_TITLE = "AI Animated Logo"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


# ---------- Data Models ----------
@dataclass(frozen=True)
class Settings:
    """Runtime settings for the orchestrator, backend and share links."""
    image_model: str = DEFAULT_IMAGE_MODEL
    video_model: str = DEFAULT_VIDEO_MODEL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    progress_interval: float = DEFAULT_PROGRESS_INTERVAL
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    share_url: str = DEFAULT_SHARE_URL

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Missing variables keep their defaults; malformed numbers are logged
        and replaced by the default.
        """
        return cls(
            image_model=os.getenv("IMAGEN_MODEL") or DEFAULT_IMAGE_MODEL,
            video_model=os.getenv("VEO_MODEL") or DEFAULT_VIDEO_MODEL,
            poll_interval=_env_float("VIDEO_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            progress_interval=_env_float("VIDEO_PROGRESS_INTERVAL", DEFAULT_PROGRESS_INTERVAL),
            max_poll_attempts=max(0, _env_int("VIDEO_MAX_POLL_ATTEMPTS", DEFAULT_MAX_POLL_ATTEMPTS)),
            fetch_timeout=_env_float("VIDEO_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
            share_url=os.getenv("APP_SHARE_URL") or DEFAULT_SHARE_URL,
        )
