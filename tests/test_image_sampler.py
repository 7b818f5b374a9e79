"""
Tests for RGB sampling from encoded images.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chronolight.detection.image_sampler import extract_average_rgb, extract_rgb_from_region
from chronolight.errors import InvalidInputError

from helpers import oversized_png_bytes, solid_image_bytes, split_image_bytes

RED = (255, 0, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


class TestExtractAverageRgb:
    """Tests for whole-image sampling."""

    def test_white_image(self):
        result = extract_average_rgb(solid_image_bytes(WHITE))
        assert result.is_valid
        assert result.rgb.r > 0.9 and result.rgb.g > 0.9 and result.rgb.b > 0.9
        assert result.sample_count == 4
        assert result.neutral_region_ratio == 1.0

    def test_red_image(self):
        result = extract_average_rgb(solid_image_bytes(RED))
        assert result.rgb.r > result.rgb.g
        assert result.rgb.r > result.rgb.b
        assert result.neutral_region_ratio == 0.0

    def test_jpeg_decodes(self):
        result = extract_average_rgb(solid_image_bytes(WHITE, fmt="JPEG"))
        assert result.is_valid
        assert result.rgb.g > 0.9

    def test_invalid_bytes(self):
        """Undecodable data is reported, not raised."""
        result = extract_average_rgb(b"definitely not an image")
        assert not result.is_valid
        assert result.rgb is None
        assert result.sample_count == 0
        assert result.error

    def test_empty_bytes(self):
        assert not extract_average_rgb(b"").is_valid

    def test_oversized_image_is_reported(self):
        """A header past the decompression-bomb limit is a failed result."""
        result = extract_average_rgb(oversized_png_bytes())
        assert not result.is_valid
        assert result.sample_count == 0
        assert result.error

    def test_non_square_region_count_uses_strip(self):
        """Three regions sample three vertical strips."""
        result = extract_average_rgb(solid_image_bytes(WHITE), sample_regions=3)
        assert result.sample_count == 3

    def test_square_grid(self):
        result = extract_average_rgb(solid_image_bytes(WHITE), sample_regions=9)
        assert result.sample_count == 9

    def test_tile_means_are_averaged(self):
        """Half red, half blue: mean of the two column tiles."""
        result = extract_average_rgb(split_image_bytes(RED, BLUE), sample_regions=2)
        assert result.sample_count == 2
        assert result.rgb.r == pytest.approx(0.5, abs=0.01)
        assert result.rgb.b == pytest.approx(0.5, abs=0.01)
        assert result.rgb.g == pytest.approx(0.0, abs=0.01)

    def test_image_smaller_than_grid(self):
        """Tiles with no pixels are dropped."""
        result = extract_average_rgb(solid_image_bytes(WHITE, size=(1, 1)), sample_regions=4)
        assert result.is_valid
        assert result.sample_count == 1

    def test_zero_regions_rejected(self):
        with pytest.raises(InvalidInputError):
            extract_average_rgb(solid_image_bytes(WHITE), sample_regions=0)


class TestExtractRgbFromRegion:
    """Tests for single-rectangle sampling."""

    def test_region_inside_image(self):
        data = split_image_bytes(RED, BLUE)
        result = extract_rgb_from_region(data, 0, 0, 32, 64)
        assert result.is_valid
        assert result.rgb.r > 0.9
        assert result.rgb.b < 0.1
        assert result.sample_count == 32 * 64
        assert result.neutral_region_ratio == 0.0

    def test_neutral_region(self):
        result = extract_rgb_from_region(solid_image_bytes(WHITE), 10, 10, 5, 5)
        assert result.neutral_region_ratio == 1.0

    def test_region_out_of_bounds(self):
        """Well-formed but outside the image: invalid, never clamped."""
        result = extract_rgb_from_region(solid_image_bytes(WHITE), 60, 60, 10, 10)
        assert not result.is_valid
        assert result.rgb is None

    @pytest.mark.parametrize(
        "x,y,width,height",
        [(-1, 0, 10, 10), (0, -5, 10, 10), (0, 0, 0, 10), (0, 0, 10, -3)],
    )
    def test_malformed_region_raises(self, x, y, width, height):
        with pytest.raises(InvalidInputError):
            extract_rgb_from_region(solid_image_bytes(WHITE), x, y, width, height)

    def test_invalid_bytes(self):
        result = extract_rgb_from_region(b"\x00\x01\x02", 0, 0, 1, 1)
        assert not result.is_valid

    def test_oversized_image_is_reported(self):
        result = extract_rgb_from_region(oversized_png_bytes(), 0, 0, 10, 10)
        assert not result.is_valid
        assert result.sample_count == 0
