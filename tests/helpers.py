"""
Builders shared by the test modules.

Sessions and images are constructed in memory; nothing touches disk.
"""

import io
import struct
import sys
import zlib
from datetime import datetime, timedelta
from pathlib import Path

from PIL import Image

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chronolight.types import LightSample, ResultsModel, Session


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Naive datetime; chronolight treats naive values as UTC."""
    return datetime(year, month, day, hour, minute)


def make_samples(
    start: datetime,
    count: int,
    lux: float,
    spacing_minutes: float = 1.0,
    **fields,
) -> list[LightSample]:
    """
    Evenly spaced samples at a constant ambient lux.

    Extra keyword arguments are passed to every LightSample
    (e.g., screen_brightness, accel_magnitude).
    """
    fields.setdefault("screen_on", False)
    return [
        LightSample(
            timestamp=start + timedelta(minutes=spacing_minutes * i),
            ambient_lux=lux,
            **fields,
        )
        for i in range(count)
    ]


def make_session(
    start: datetime,
    count: int = 60,
    lux: float = 100.0,
    spacing_minutes: float = 1.0,
    session_id: str = "session-1",
    timezone: str | None = None,
    meta: dict | None = None,
    **fields,
) -> Session:
    """
    Session whose stop time is one spacing after the last sample.

    With the defaults this is one hour of 100 lux sampled every minute.
    """
    samples = make_samples(start, count, lux, spacing_minutes, **fields)
    return Session(
        id=session_id,
        started_at=start,
        stopped_at=start + timedelta(minutes=spacing_minutes * count),
        samples=tuple(samples),
        meta=meta,
        timezone=timezone,
    )


def solid_image_bytes(
    color: tuple[int, int, int], size: tuple[int, int] = (64, 64), fmt: str = "PNG"
) -> bytes:
    """Encode a single-color image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def split_image_bytes(
    left: tuple[int, int, int], right: tuple[int, int, int], size: tuple[int, int] = (64, 64)
) -> bytes:
    """Encode an image whose left half and right half have different colors."""
    width, height = size
    image = Image.new("RGB", size, left)
    image.paste(right, (width // 2, 0, width, height))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    crc = struct.pack(">I", zlib.crc32(kind + payload))
    return struct.pack(">I", len(payload)) + kind + payload + crc


def oversized_png_bytes(width: int = 20000, height: int = 20000) -> bytes:
    """A well-formed PNG header claiming dimensions far beyond Pillow's pixel limit."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b"\x00"))
        + _png_chunk(b"IEND", b"")
    )


class FakeFrameSource:
    """In-memory FrameSource that records its lifecycle calls."""

    def __init__(self, frame: bytes | None = None, ready: bool = True):
        self.frame = frame
        self.ready = ready
        self.initialize_calls = 0
        self.capture_calls = 0
        self.release_calls = 0

    def initialize(self) -> bool:
        self.initialize_calls += 1
        return self.ready

    def capture_frame(self) -> bytes | None:
        self.capture_calls += 1
        return self.frame

    def release(self) -> None:
        self.release_calls += 1


def make_results(
    start: datetime,
    msi: float = 0.0,
    phase_shift: float = 0.0,
    count: int = 4,
    timezone: str | None = None,
    light_type: str = "neutral_led_4000k",
) -> ResultsModel:
    """ResultsModel with `count` samples one minute apart and fixed metrics."""
    timestamps = tuple(start + timedelta(minutes=i) for i in range(count))
    return ResultsModel(
        session_id="results-1",
        start_time=start,
        end_time=start + timedelta(minutes=count),
        duration_hours=count / 60,
        timestamps=timestamps,
        lux_values=(100.0,) * count,
        melanopic_values=(60.0,) * count,
        cs_values=(0.18,) * count,
        total_dose_x=0.18 * count / 60,
        msi_predicted=msi,
        phase_shift=phase_shift,
        average_cs=0.18,
        peak_cs=0.18,
        average_melanopic_lux=60.0,
        light_type=light_type,
        timezone=timezone,
    )
