"""Shared test fixtures."""

import asyncio
import heapq
import io
from dataclasses import dataclass, field
from typing import Optional

import pytest
from PIL import Image

from logo_animator.config import Settings, Tab
from logo_animator.gemini_client import VideoOperation
from logo_animator.media import VideoResource
from logo_animator.orchestrator import JobOrchestrator
from logo_animator.session import Session, SessionStore, Status
from logo_animator.utils import to_data_url

VIDEO_URI = "https://generativelanguage.example/v1/files/abc:download?alt=media"


@dataclass
class FakeBackend:
    """In-memory stand-in for GeminiBackend."""

    images: list = field(default_factory=lambda: [b"logo-png"])
    polls_until_done: int = 2
    video_uris: tuple = (VIDEO_URI,)
    video_bytes: bytes = b"mp4-bytes"
    image_error: Optional[Exception] = None
    start_error: Optional[Exception] = None
    refresh_error: Optional[Exception] = None
    fetch_error: Optional[Exception] = None
    events: list = field(default_factory=list)
    refreshes: int = 0
    image_model: str = "imagen-test"
    video_model: str = "veo-test"

    async def generate_images(self, prompt):
        self.events.append(("generate_images", prompt))
        if self.image_error:
            raise self.image_error
        return list(self.images)

    async def start_video(self, image_bytes, mime_type, aspect_ratio):
        self.events.append(("start_video", image_bytes, mime_type, aspect_ratio))
        if self.start_error:
            raise self.start_error
        return self._operation(done=self.polls_until_done == 0)

    async def refresh_video(self, operation):
        self.events.append(("refresh_video",))
        if self.refresh_error:
            raise self.refresh_error
        self.refreshes += 1
        return self._operation(done=self.refreshes >= self.polls_until_done)

    async def fetch_video(self, uri):
        self.events.append(("fetch_video", uri))
        if self.fetch_error:
            raise self.fetch_error
        return self.video_bytes

    def _operation(self, done):
        return VideoOperation(
            name="operations/test",
            done=done,
            video_uris=self.video_uris if done else (),
        )

    def calls(self, name):
        return [event for event in self.events if event[0] == name]


class RecordingSleep:
    """Sleep replacement that records delays and yields to the event loop once."""

    def __init__(self, events: Optional[list] = None):
        self.delays = []
        self.events = events

    async def __call__(self, delay):
        self.delays.append(delay)
        if self.events is not None:
            self.events.append(("sleep", delay))
        await asyncio.sleep(0)


class VirtualClock:
    """
    Sleep replacement on a simulated timeline.

    ``sleep(delay)`` parks the caller until ``now + delay``. ``run(coro)``
    drives the coroutine and, whenever every task is parked, jumps the clock
    to the earliest wake time and wakes that sleeper.
    """

    def __init__(self):
        self.now = 0.0
        self.delays = []
        self._waiters = []
        self._seq = 0

    async def sleep(self, delay):
        self.delays.append(delay)
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._waiters, (self.now + delay, self._seq, future))
        self._seq += 1
        await future

    async def run(self, coro):
        task = asyncio.ensure_future(coro)
        while True:
            for _ in range(10):
                await asyncio.sleep(0)
            if task.done() or not self._waiters:
                break
            wake_at, _, future = heapq.heappop(self._waiters)
            if future.cancelled():
                continue
            self.now = wake_at
            future.set_result(None)
        return await task


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def sleep(backend) -> RecordingSleep:
    return RecordingSleep(backend.events)


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(poll_interval=10, progress_interval=8)


@pytest.fixture
def orchestrator(store, backend, settings, sleep) -> JobOrchestrator:
    return JobOrchestrator(store, backend, settings, sleep=sleep)


@pytest.fixture
def logo_url() -> str:
    return to_data_url(b"logo-png", "image/png")


@pytest.fixture
def store_with_logo(store, logo_url) -> SessionStore:
    store.update(generated_image=logo_url, active_tab=Tab.GENERATE)
    return store


@pytest.fixture
def finished_store(logo_url) -> SessionStore:
    return SessionStore(
        Session(
            status=Status.FINISHED,
            generated_image=logo_url,
            generated_video=VideoResource(data=b"old-video"),
            progress_message="Rendering keyframes...",
            prompt_text="a fox",
        )
    )


def make_image_file(fmt: str = "JPEG", size=(8, 8), color=(200, 40, 40)) -> io.BytesIO:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    buf.seek(0)
    return buf


@pytest.fixture
def image_file():
    return make_image_file
