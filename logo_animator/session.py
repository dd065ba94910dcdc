"""
Session state for AI Logo Animator.

The UI state is a single frozen ``Session`` value. ``SessionStore`` swaps it
for a new value on every change, bumps a version counter and notifies
subscribers with the previous and current session, so the orchestrator and
the Streamlit view never share mutable fields.
"""

from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .config import AspectRatio, Tab
from .media import VideoResource
from .utils import get_logger

logger = get_logger("session")


class Status(str, Enum):
    IDLE = "idle"
    GENERATING_LOGO = "generating_logo"
    GENERATING_VIDEO = "generating_video"
    FINISHED = "finished"
    ERROR = "error"
    TIMED_OUT = "timed_out"


BUSY_STATUSES = frozenset({Status.GENERATING_LOGO, Status.GENERATING_VIDEO})


@dataclass(frozen=True)
class Session:
    status: Status = Status.IDLE
    error_message: Optional[str] = None
    active_tab: Tab = Tab.GENERATE
    prompt_text: str = ""
    uploaded_image: Optional[str] = None  # PNG data URL
    generated_image: Optional[str] = None  # PNG data URL
    generated_video: Optional[VideoResource] = None
    progress_message: str = ""
    aspect_ratio: AspectRatio = AspectRatio.WIDE

    def __post_init__(self):
        if self.generated_image and self.uploaded_image:
            raise ValueError("generated_image and uploaded_image cannot both be set")
        if self.status is Status.FINISHED and self.generated_video is None:
            raise ValueError("status cannot be finished without a generated video")

    @property
    def is_busy(self) -> bool:
        return self.status in BUSY_STATUSES

    @property
    def image_source_for_animation(self) -> Optional[str]:
        """Generated logo on the generate tab, uploaded image on the upload tab."""
        if self.active_tab is Tab.GENERATE:
            return self.generated_image
        return self.uploaded_image


Listener = Callable[[Session, Session], None]


class SessionStore:
    """Versioned holder of the current ``Session`` with observer callbacks."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session or Session()
        self._version = 0
        self._listeners: List[Listener] = []
        self._job_counter = 0
        self._active_job: Optional[int] = None

    @property
    def session(self) -> Session:
        return self._session

    @property
    def version(self) -> int:
        return self._version

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked as ``listener(previous, current)``.

        Returns:
            A function that removes the callback again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> Session:
        """
        Replace session fields and notify subscribers.

        A video that is replaced or cleared by this update is released.
        Invalid combinations raise ``ValueError`` and leave the store untouched.
        """
        previous = self._session
        current = dataclasses.replace(previous, **changes)
        self._commit(previous, current)
        return current

    def reset(self) -> Session:
        """
        Drop every artifact and abandon any running job. Safe to call repeatedly.

        Keeps the chosen aspect ratio.
        """
        if self._active_job is not None:
            logger.info(f"Abandoning job {self._active_job} on reset")
        self._active_job = None
        previous = self._session
        self._commit(previous, Session(aspect_ratio=previous.aspect_ratio))
        return self._session

    # ---------- Single-flight job tokens ----------
    def begin_job(self) -> Optional[int]:
        """Claim the job slot. Returns a token, or None if a job is already running."""
        if self._active_job is not None:
            return None
        self._job_counter += 1
        self._active_job = self._job_counter
        return self._active_job

    def is_current(self, token: int) -> bool:
        return token is not None and token == self._active_job

    def end_job(self, token: int) -> None:
        if self.is_current(token):
            self._active_job = None

    @property
    def job_active(self) -> bool:
        return self._active_job is not None

    def _commit(self, previous: Session, current: Session) -> None:
        old_video = previous.generated_video
        if old_video is not None and old_video is not current.generated_video:
            old_video.release()
        self._session = current
        self._version += 1
        for listener in list(self._listeners):
            listener(previous, current)
