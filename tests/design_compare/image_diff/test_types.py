from __future__ import annotations

import pytest
from PIL import Image
from pydantic import ValidationError

from design_compare.image_diff.types import ComparisonRequest, ComparisonResult, Raster


class TestRaster:
    def test_buffer_length_must_match_dimensions(self):
        with pytest.raises(ValidationError):
            Raster(width=2, height=2, data=b"\x00" * 15)

    def test_dimensions_must_be_positive(self):
        with pytest.raises(ValidationError):
            Raster(width=0, height=1, data=b"")

    def test_frozen(self):
        raster = Raster(width=1, height=1, data=b"\x01\x02\x03\x04")
        with pytest.raises(ValidationError):
            raster.width = 2

    def test_from_rgb_image_adds_alpha(self):
        raster = Raster.from_image(Image.new("RGB", (3, 2), (1, 2, 3)))
        assert raster.size == (3, 2)
        assert raster.total_pixels == 6
        assert raster.data == b"\x01\x02\x03\xff" * 6

    def test_round_trips_through_pillow(self):
        raster = Raster(width=2, height=1, data=b"\x01\x02\x03\x04\x05\x06\x07\x08")
        img = raster.to_image()
        assert img.mode == "RGBA"
        assert img.getpixel((1, 0)) == (5, 6, 7, 8)


class TestComparisonRequest:
    def test_defaults(self):
        request = ComparisonRequest(design_path="a.png", implementation_path="b.png")
        assert request.output_diff_path is None
        assert request.threshold == 0.1


class TestComparisonResult:
    def test_requires_one_diff_output(self):
        with pytest.raises(ValidationError):
            ComparisonResult(total_pixels=1, different_pixels=0, difference_percentage=0.0)

    def test_rejects_both_diff_outputs(self):
        with pytest.raises(ValidationError):
            ComparisonResult(
                total_pixels=1,
                different_pixels=0,
                difference_percentage=0.0,
                diff_image_path="diff.png",
                diff_image_encoded_bytes="aGVsbG8=",
            )

    def test_different_pixels_bounded_by_total(self):
        with pytest.raises(ValidationError):
            ComparisonResult(
                total_pixels=1,
                different_pixels=2,
                difference_percentage=100.0,
                diff_image_path="diff.png",
            )

    def test_wire_format_uses_camel_case(self):
        result = ComparisonResult(
            total_pixels=100,
            different_pixels=5,
            difference_percentage=5.0,
            diff_image_encoded_bytes="aGVsbG8=",
        )
        assert result.to_wire() == {
            "totalPixels": 100,
            "differentPixels": 5,
            "differencePercentage": 5.0,
            "diffImageEncodedBytes": "aGVsbG8=",
        }
