"""
Owned media resources and download actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .config import DOWNLOAD_BASENAME, VideoFormat


class ResourceReleasedError(RuntimeError):
    """Raised when a released video resource is read."""


@dataclass(eq=False)
class VideoResource:
    """
    Fetched video bytes owned by the session.

    The session releases the resource whenever it drops it (new job, upload,
    reset), so the bytes are not kept alive by a stale reference.
    """
    data: Optional[bytes]
    mime_type: str = "video/mp4"
    _released: bool = field(default=False, init=False, repr=False)

    @property
    def released(self) -> bool:
        return self._released

    @property
    def size(self) -> int:
        return 0 if self.data is None else len(self.data)

    def read(self) -> bytes:
        if self._released or self.data is None:
            raise ResourceReleasedError("Video resource has been released")
        return self.data

    def release(self) -> None:
        self._released = True
        self.data = None


@dataclass(frozen=True)
class DownloadAction:
    file_name: str
    data: bytes
    mime_type: str


def build_download(video: Optional[VideoResource], fmt: VideoFormat) -> Optional[DownloadAction]:
    """
    Build a download for the current video under the chosen container name.

    Only the file name changes with the format; the bytes are passed through
    untouched.
    """
    if video is None or video.released:
        return None
    fmt = VideoFormat(fmt)
    return DownloadAction(
        file_name=f"{DOWNLOAD_BASENAME}.{fmt.value}",
        data=video.read(),
        mime_type=video.mime_type,
    )
