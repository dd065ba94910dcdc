"""
Presentation actions - tab switching, uploads, downloads and share links.
"""

from __future__ import annotations
from typing import Optional
from urllib.parse import quote

from PIL import Image

from .config import (
    DEFAULT_SHARE_URL,
    SHARE_TEXT,
    SHARE_TITLE,
    UPLOAD_ERROR_MESSAGE,
    AspectRatio,
    SharePlatform,
    Tab,
    VideoFormat,
)
from .media import DownloadAction, build_download
from .session import Session, SessionStore, Status
from .utils import get_logger, load_image_bytes, to_data_url

logger = get_logger("presentation")

SHARE_TEMPLATES = {
    SharePlatform.TWITTER: "https://twitter.com/intent/tweet?text={text}&url={url}",
    SharePlatform.FACEBOOK: "https://www.facebook.com/sharer/sharer.php?u={url}&quote={text}",
    SharePlatform.LINKEDIN: (
        "https://www.linkedin.com/shareArticle?mini=true&url={url}&title={title}&summary={text}"
    ),
}


def _encode(value: str) -> str:
    return quote(value, safe="")


def build_share_url(
    platform: SharePlatform,
    text: str = SHARE_TEXT,
    url: str = DEFAULT_SHARE_URL,
    title: str = SHARE_TITLE,
) -> str:
    """Fill the platform template with percent-encoded text, URL and title."""
    template = SHARE_TEMPLATES[SharePlatform(platform)]
    return template.format(text=_encode(text), url=_encode(url), title=_encode(title))


class Presentation:
    """User-input handlers that read and write the shared ``SessionStore``."""

    def __init__(self, store: SessionStore, share_url: str = DEFAULT_SHARE_URL):
        self.store = store
        self.share_url = share_url

    @property
    def session(self) -> Session:
        return self.store.session

    @property
    def image_source_for_animation(self) -> Optional[str]:
        return self.store.session.image_source_for_animation

    def select_tab(self, tab: Tab) -> None:
        tab = Tab(tab)
        if tab is not self.session.active_tab:
            self.store.update(active_tab=tab)

    def set_prompt(self, text: str) -> None:
        if text != self.session.prompt_text:
            self.store.update(prompt_text=text)

    def set_aspect_ratio(self, ratio: AspectRatio) -> None:
        ratio = AspectRatio(ratio)
        if ratio is not self.session.aspect_ratio:
            self.store.update(aspect_ratio=ratio)

    def upload_image(self, file) -> Optional[str]:
        """
        Use an uploaded file as the animation source.

        The image is re-encoded as PNG. Any generated logo and video are
        dropped and the upload tab becomes active.

        Returns:
            PNG data URL of the upload, or None if nothing was read
        """
        if file is None:
            return None
        if self.session.is_busy:
            logger.warning("Ignoring upload while a job is in flight")
            return None
        try:
            image_bytes, mime = load_image_bytes(file)
        except (OSError, Image.DecompressionBombError):
            logger.exception("Could not decode uploaded image")
            self.store.update(status=Status.ERROR, error_message=UPLOAD_ERROR_MESSAGE)
            return None
        data_url = to_data_url(image_bytes, mime)
        self.store.update(
            uploaded_image=data_url,
            generated_image=None,
            generated_video=None,
            active_tab=Tab.UPLOAD,
            status=Status.IDLE,
            error_message=None,
        )
        logger.info(f"Uploaded image accepted ({len(image_bytes)} bytes)")
        return data_url

    def build_download(self, fmt: VideoFormat) -> Optional[DownloadAction]:
        return build_download(self.session.generated_video, fmt)

    def build_share_url(self, platform: SharePlatform) -> Optional[str]:
        """Share link for the finished video, or None when there is nothing to share."""
        if self.session.generated_video is None:
            return None
        return build_share_url(platform, url=self.share_url)

    def reset(self) -> Session:
        return self.store.reset()
