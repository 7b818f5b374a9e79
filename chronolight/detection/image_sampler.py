"""
Representative RGB sampling from encoded still images.

Decoding is delegated to Pillow; tiling and averaging use numpy. Both entry
points are pure functions of the byte buffer. Undecodable input is reported
on the result (is_valid=False, sample_count=0) rather than raised, because
camera frames are sampled opportunistically and may be corrupt.
"""

import io
import math

import numpy as np
from loguru import logger
from PIL import Image

from ..errors import InvalidInputError
from ..types import RGB, RGBExtractionResult

DEFAULT_SAMPLE_REGIONS = 4
DEFAULT_NEUTRAL_THRESHOLD = 0.1

# Pillow signals unreadable or oversized images with all of these
DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


def _failure(error: str) -> RGBExtractionResult:
    return RGBExtractionResult(rgb=None, sample_count=0, neutral_region_ratio=0.0, error=error)


def _decode(data: bytes) -> np.ndarray:
    """Decode to an (height, width, 3) float array with channels in 0-1."""
    with Image.open(io.BytesIO(data)) as image:
        return np.asarray(image.convert("RGB"), dtype=np.float64) / 255.0


def _grid_shape(sample_regions: int) -> tuple[int, int]:
    """Square grid for perfect squares, otherwise a single row of columns."""
    side = math.isqrt(sample_regions)
    if side * side == sample_regions:
        return (side, side)
    return (1, sample_regions)


def _tiles(pixels: np.ndarray, rows: int, cols: int) -> list[np.ndarray]:
    """Split into rows x cols near-equal-area tiles, dropping empty ones."""
    tiles = []
    for band in np.array_split(pixels, rows, axis=0):
        for tile in np.array_split(band, cols, axis=1):
            if tile.size:
                tiles.append(tile)
    return tiles


def _to_rgb(values: np.ndarray) -> RGB:
    r, g, b = (float(v) for v in values)
    return RGB(r=r, g=g, b=b)


def extract_average_rgb(
    data: bytes,
    sample_regions: int = DEFAULT_SAMPLE_REGIONS,
    neutral_threshold: float = DEFAULT_NEUTRAL_THRESHOLD,
) -> RGBExtractionResult:
    """
    Average RGB of an image, sampled over equal-area tiles.

    Args:
        data: Encoded image bytes (any format Pillow can decode)
        sample_regions: Number of tiles; a square grid when this is a
            perfect square, otherwise a 1 x N strip
        neutral_threshold: Max channel spread (max - min) for a tile to count
            as neutral

    Returns:
        RGBExtractionResult with the mean of tile means and the fraction of
        neutral tiles (a proxy for a scene dominated by the light's color cast)
    """
    if sample_regions < 1:
        raise InvalidInputError(f"sample_regions must be >= 1, got {sample_regions}")

    try:
        pixels = _decode(data)
    except DECODE_ERRORS as e:
        logger.warning("Image decode failed: {}", e)
        return _failure(f"Failed to decode image: {e}")

    height, width = pixels.shape[:2]
    rows, cols = _grid_shape(sample_regions)
    tiles = _tiles(pixels, rows, cols)
    if not tiles:
        return _failure(f"Invalid image dimensions {width}x{height}")

    tile_means = np.array([tile.reshape(-1, 3).mean(axis=0) for tile in tiles])
    spreads = tile_means.max(axis=1) - tile_means.min(axis=1)
    neutral_ratio = float(np.count_nonzero(spreads < neutral_threshold)) / len(tile_means)

    rgb = _to_rgb(tile_means.mean(axis=0))
    logger.debug(
        "Sampled {}x{} image over {} tiles: {} (neutral {:.0%})",
        width, height, len(tile_means), rgb, neutral_ratio,
    )

    return RGBExtractionResult(
        rgb=rgb,
        sample_count=len(tile_means),
        neutral_region_ratio=neutral_ratio,
    )


def extract_rgb_from_region(
    data: bytes,
    x: int,
    y: int,
    width: int,
    height: int,
    neutral_threshold: float = DEFAULT_NEUTRAL_THRESHOLD,
) -> RGBExtractionResult:
    """
    Average RGB of one rectangle of an image.

    A malformed rectangle (negative origin, non-positive size) raises
    InvalidInputError. A rectangle that is well formed but not fully inside
    the decoded image gives an invalid result; it is never clamped.

    Args:
        data: Encoded image bytes
        x, y: Top-left corner in pixels
        width, height: Size of the rectangle in pixels

    Returns:
        RGBExtractionResult with the pixel count as sample_count
    """
    if x < 0 or y < 0 or width <= 0 or height <= 0:
        raise InvalidInputError(f"Malformed region x={x} y={y} width={width} height={height}")

    try:
        pixels = _decode(data)
    except DECODE_ERRORS as e:
        logger.warning("Image decode failed: {}", e)
        return _failure(f"Failed to decode image: {e}")

    image_height, image_width = pixels.shape[:2]
    if x + width > image_width or y + height > image_height:
        return _failure(
            f"Region ({x}, {y}, {width}x{height}) exceeds image bounds "
            f"{image_width}x{image_height}"
        )

    region = pixels[y:y + height, x:x + width].reshape(-1, 3)
    rgb = _to_rgb(region.mean(axis=0))

    return RGBExtractionResult(
        rgb=rgb,
        sample_count=len(region),
        neutral_region_ratio=1.0 if rgb.channel_spread < neutral_threshold else 0.0,
    )
