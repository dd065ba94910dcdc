"""
Gemini API client initialization and the Imagen/Veo backend adapter.
"""

from __future__ import annotations
import asyncio
import os
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import requests
from google import genai
from google.genai import types as genai_types

from .config import (
    ANIMATION_PROMPT,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_VIDEO_MODEL,
    LOGO_PROMPT_TEMPLATE,
    AspectRatio,
    Settings,
)
from .utils import get_logger

logger = get_logger("gemini_client")


class MissingApiKeyError(RuntimeError):
    """Raised when no Gemini API key is configured."""


def get_api_key() -> Optional[str]:
    """
    Read the Gemini API key from the environment.

    Returns:
        The key, or None if neither variable is set
    """
    # Prefer official GEMINI_API_KEY; fallback to GOOGLE_GENAI_API_KEY for compatibility.
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_GENAI_API_KEY") or None


def get_genai_client(api_key: Optional[str] = None) -> Optional["genai.Client"]:
    """
    Initialize and return Gemini API client.

    Returns:
        genai.Client instance or None if API key not available
    """
    api_key = api_key or get_api_key()
    if not api_key:
        return None
    return genai.Client(api_key=api_key)


@dataclass(frozen=True)
class VideoOperation:
    """Snapshot of a Veo long-running operation."""
    name: Optional[str]
    done: bool
    video_uris: Tuple[str, ...] = ()
    handle: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_sdk(cls, operation) -> "VideoOperation":
        uris: List[str] = []
        response = getattr(operation, "response", None)
        for generated in getattr(response, "generated_videos", None) or []:
            video = getattr(generated, "video", None)
            uri = getattr(video, "uri", None)
            if uri:
                uris.append(uri)
        return cls(
            name=getattr(operation, "name", None),
            done=bool(getattr(operation, "done", False)),
            video_uris=tuple(uris),
            handle=operation,
        )


class GeminiBackend:
    """
    Imagen + Veo calls used by the job orchestrator.

    All methods are coroutines; the video byte download uses ``requests`` in
    a worker thread.
    """

    def __init__(
        self,
        client: "genai.Client",
        api_key: str,
        image_model: str = DEFAULT_IMAGE_MODEL,
        video_model: str = DEFAULT_VIDEO_MODEL,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        self._client = client
        self._api_key = api_key
        self.image_model = image_model
        self.video_model = video_model
        self.fetch_timeout = fetch_timeout

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None) -> "GeminiBackend":
        settings = settings or Settings.from_env()
        api_key = get_api_key()
        if not api_key:
            raise MissingApiKeyError("Set GEMINI_API_KEY or GOOGLE_GENAI_API_KEY")
        return cls(
            client=get_genai_client(api_key),
            api_key=api_key,
            image_model=settings.image_model,
            video_model=settings.video_model,
            fetch_timeout=settings.fetch_timeout,
        )

    async def generate_images(self, prompt: str) -> List[bytes]:
        """Generate one square PNG logo. Returns the image bytes in response order."""
        response = await self._client.aio.models.generate_images(
            model=self.image_model,
            prompt=LOGO_PROMPT_TEMPLATE.format(prompt=prompt),
            config=genai_types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type="image/png",
                aspect_ratio="1:1",
            ),
        )
        images = []
        for generated in response.generated_images or []:
            if generated.image is not None and generated.image.image_bytes:
                images.append(generated.image.image_bytes)
        logger.info(f"Imagen returned {len(images)} image(s)")
        return images

    async def start_video(self, image_bytes: bytes, mime_type: str, aspect_ratio: AspectRatio) -> VideoOperation:
        """Submit the animation request and return the initial operation."""
        operation = await self._client.aio.models.generate_videos(
            model=self.video_model,
            prompt=ANIMATION_PROMPT,
            image=genai_types.Image(image_bytes=image_bytes, mime_type=mime_type),
            config=genai_types.GenerateVideosConfig(
                number_of_videos=1,
                aspect_ratio=AspectRatio(aspect_ratio).value,
            ),
        )
        result = VideoOperation.from_sdk(operation)
        logger.info(f"Veo operation submitted: {result.name}")
        return result

    async def refresh_video(self, operation: VideoOperation) -> VideoOperation:
        refreshed = await self._client.aio.operations.get(operation.handle)
        return VideoOperation.from_sdk(refreshed)

    async def fetch_video(self, uri: str) -> bytes:
        """Download the generated video. Non-success HTTP status raises."""
        return await asyncio.to_thread(self._download, uri)

    def _download(self, uri: str) -> bytes:
        # The API key must travel with the download link to fetch the bytes.
        resp = requests.get(uri, params={"key": self._api_key}, timeout=self.fetch_timeout)
        resp.raise_for_status()
        logger.info(f"Downloaded video ({len(resp.content)} bytes)")
        return resp.content
