"""
Caller-owned camera handle for camera-based lighting detection.

Platform capture and permissions live outside this package behind the
FrameSource protocol. A CameraHandle is acquired by the caller, lent to the
detector for individual detection calls, and released by the caller:

    with CameraHandle(source) as camera:
        result = detector.detect_with_camera(camera)
"""

import threading
from typing import Protocol

from loguru import logger


class FrameSource(Protocol):
    """Platform camera collaborator."""

    def initialize(self) -> bool:
        """Open the camera; True when it is ready to capture."""
        ...

    def capture_frame(self) -> bytes | None:
        """Capture one encoded still frame, or None on failure."""
        ...

    def release(self) -> None:
        """Free the underlying camera."""
        ...


class CameraHandle:
    """
    Scoped camera resource.

    `is_available` stays False until the source reports readiness and goes
    back to False once released. `release()` may be called any number of
    times and never waits for a capture in progress.
    """

    def __init__(self, source: FrameSource):
        self._source = source
        self._lock = threading.Lock()
        self._ready = False
        self._released = False

    @property
    def is_available(self) -> bool:
        return self._ready and not self._released

    def acquire(self) -> bool:
        """Initialize the source; returns availability."""
        with self._lock:
            if self._released:
                return False
            if not self._ready:
                self._ready = bool(self._source.initialize())
                logger.debug("Camera initialized, available: {}", self._ready)
        return self.is_available

    def capture(self) -> bytes | None:
        """Capture one frame, or None if unavailable or the capture failed."""
        if not self.is_available:
            return None
        frame = self._source.capture_frame()
        if frame is None:
            logger.warning("Camera capture returned no frame")
        return frame

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
            was_ready = self._ready
            self._ready = False
        if was_ready:
            self._source.release()
            logger.debug("Camera released")

    def __enter__(self) -> "CameraHandle":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
