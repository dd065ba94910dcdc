"""
Job Orchestrator - runs one logo or animation job at a time against the backend.

A video job is a submit / poll / fetch sequence. While the poll loop waits on
the backend, a progress ticker rotates human-readable status text into the
session. The ticker is scoped to the poll loop and is cancelled on every exit
path.
"""

from __future__ import annotations
import asyncio
import contextlib
from typing import Awaitable, Callable, Optional

from .config import (
    ANIMATION_ERROR_MESSAGE,
    LOGO_ERROR_MESSAGE,
    MISSING_SOURCE_MESSAGE,
    PROGRESS_MESSAGES,
    TIMEOUT_MESSAGE,
    AspectRatio,
    Settings,
    Tab,
)
from .media import VideoResource
from .session import SessionStore, Status
from .utils import get_logger, split_data_url, to_data_url

logger = get_logger("orchestrator")


class EmptyResultError(RuntimeError):
    """Raised when the backend completes without producing an artifact."""


class PollTimeoutError(RuntimeError):
    """Raised when a video operation exceeds the poll bound."""


class JobOrchestrator:
    """
    Drive logo and animation jobs and reflect their lifecycle in a ``SessionStore``.

    Args:
        store: Session store shared with the presentation layer
        backend: Object exposing ``generate_images``, ``start_video``,
            ``refresh_video`` and ``fetch_video`` coroutines (see GeminiBackend)
        settings: Poll/progress timing and poll bound
        sleep: Coroutine function used for every timed wait
    """

    def __init__(
        self,
        store: SessionStore,
        backend,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = settings or Settings()
        self._store = store
        self._backend = backend
        self._sleep = sleep
        self.poll_interval = settings.poll_interval
        self.progress_interval = settings.progress_interval
        self.max_poll_attempts = settings.max_poll_attempts

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def backend(self):
        return self._backend

    # ---------- Logo ----------
    async def generate_logo(self, prompt: Optional[str] = None) -> Optional[str]:
        """
        Generate a logo from ``prompt`` (or the session prompt).

        Returns:
            PNG data URL of the logo, or None when skipped or failed
        """
        if prompt is None:
            prompt = self._store.session.prompt_text
        if not prompt or not prompt.strip():
            return None

        token = self._store.begin_job()
        if token is None:
            logger.warning("Ignoring logo request: another job is in flight")
            return None

        try:
            self._store.update(
                status=Status.GENERATING_LOGO,
                error_message=None,
                prompt_text=prompt,
                generated_image=None,
                generated_video=None,
            )
            logger.info(f"Logo job {token} started")
            try:
                images = await self._backend.generate_images(prompt)
                if not images:
                    raise EmptyResultError("No images were generated.")
            except Exception:
                logger.exception(f"Error generating logo (job {token})")
                if self._store.is_current(token):
                    self._store.update(status=Status.ERROR, error_message=LOGO_ERROR_MESSAGE)
                return None

            if not self._store.is_current(token):
                logger.info(f"Discarding logo from abandoned job {token}")
                return None
            logo = to_data_url(images[0], "image/png")
            self._store.update(
                generated_image=logo,
                uploaded_image=None,
                active_tab=Tab.GENERATE,
                status=Status.IDLE,
            )
            logger.info(f"Logo job {token} finished")
            return logo
        finally:
            self._finish(token)

    # ---------- Animation ----------
    async def generate_animation(self, aspect_ratio: Optional[AspectRatio] = None) -> Optional[VideoResource]:
        """
        Animate the session's active image source.

        Returns:
            The fetched video, or None when rejected, failed or abandoned
        """
        if self._store.job_active:
            logger.warning("Ignoring animation request: another job is in flight")
            return None

        session = self._store.session
        source = session.image_source_for_animation
        if not source:
            self._store.update(status=Status.ERROR, error_message=MISSING_SOURCE_MESSAGE)
            return None

        token = self._store.begin_job()
        ratio = AspectRatio(aspect_ratio or session.aspect_ratio)
        try:
            self._store.update(
                status=Status.GENERATING_VIDEO,
                error_message=None,
                generated_video=None,
                aspect_ratio=ratio,
                progress_message=PROGRESS_MESSAGES[0],
            )
            logger.info(f"Animation job {token} started ({ratio.value})")
            try:
                image_bytes, mime_type = split_data_url(source)
                operation = await self._backend.start_video(image_bytes, mime_type, ratio)
                async with self._progress_ticker(token):
                    operation = await self._wait_for(operation, token)
                if not operation.video_uris:
                    raise EmptyResultError("No video was generated.")
                data = await self._backend.fetch_video(operation.video_uris[0])
            except PollTimeoutError:
                logger.exception(f"Animation job {token} timed out")
                if self._store.is_current(token):
                    self._store.update(status=Status.TIMED_OUT, error_message=TIMEOUT_MESSAGE)
                return None
            except Exception:
                logger.exception(f"Error generating animation (job {token})")
                if self._store.is_current(token):
                    self._store.update(status=Status.ERROR, error_message=ANIMATION_ERROR_MESSAGE)
                return None

            video = VideoResource(data=data, mime_type="video/mp4")
            if not self._store.is_current(token):
                logger.info(f"Discarding video from abandoned job {token}")
                video.release()
                return None
            self._store.update(generated_video=video, status=Status.FINISHED)
            logger.info(f"Animation job {token} finished ({video.size} bytes)")
            return video
        finally:
            self._finish(token)

    async def _wait_for(self, operation, token: int):
        attempts = 0
        while not operation.done:
            if self.max_poll_attempts and attempts >= self.max_poll_attempts:
                raise PollTimeoutError(
                    f"Operation {operation.name} not done after {attempts} polls"
                )
            await self._sleep(self.poll_interval)
            operation = await self._backend.refresh_video(operation)
            attempts += 1
            logger.debug(f"Job {token} poll {attempts}: done={operation.done}")
        return operation

    @contextlib.asynccontextmanager
    async def _progress_ticker(self, token: int):
        task = asyncio.ensure_future(self._rotate_progress(token))
        try:
            yield task
        finally:
            task.cancel()
            # Progress display never decides the job outcome.
            await asyncio.wait([task])
            if not task.cancelled() and task.exception() is not None:
                logger.error(f"Progress ticker for job {token} stopped: {task.exception()!r}")

    async def _rotate_progress(self, token: int) -> None:
        tick = 1
        while True:
            await self._sleep(self.progress_interval)
            if self._store.is_current(token):
                try:
                    self._store.update(progress_message=PROGRESS_MESSAGES[tick % len(PROGRESS_MESSAGES)])
                except Exception:
                    logger.exception(f"Failed to publish progress for job {token}")
            tick += 1

    def _finish(self, token: int) -> None:
        # Reached without a terminal transition only when the job was interrupted.
        if self._store.is_current(token) and self._store.session.is_busy:
            logger.warning(f"Job {token} interrupted, returning session to idle")
            self._store.update(status=Status.IDLE)
        self._store.end_job(token)
