from __future__ import annotations

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_THRESHOLD = 0.1

WIDE_GRAYSCALE_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")


class Raster(BaseModel):
    """Decoded image: RGBA bytes, four per pixel, row-major."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    data: bytes

    @model_validator(mode="after")
    def _check_buffer_length(self) -> Raster:
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"pixel buffer holds {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )
        return self

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @classmethod
    def from_image(cls, img: Image.Image) -> Raster:
        if img.mode in WIDE_GRAYSCALE_MODES:
            # convert() clips these to 255; scale 16-bit samples down to 8 bits instead.
            with img.convert("I") as wide, wide.point(lambda v: v * (1 / 256)) as scaled:
                with scaled.convert("L") as gray:
                    return cls.from_image(gray)
        if img.mode != "RGBA":
            rgba = img.convert("RGBA")
            try:
                return cls(width=rgba.width, height=rgba.height, data=rgba.tobytes())
            finally:
                rgba.close()
        return cls(width=img.width, height=img.height, data=img.tobytes())

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", self.size, self.data)


class ComparisonRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    design_path: str
    implementation_path: str
    output_diff_path: str | None = None
    threshold: float = DEFAULT_THRESHOLD


class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_pixels: int = Field(ge=0)
    different_pixels: int = Field(ge=0)
    difference_percentage: float = Field(ge=0.0, le=100.0)
    diff_image_path: str | None = None
    diff_image_encoded_bytes: str | None = None

    @model_validator(mode="after")
    def _check_single_diff_output(self) -> ComparisonResult:
        if (self.diff_image_path is None) == (self.diff_image_encoded_bytes is None):
            raise ValueError(
                "exactly one of diff_image_path and diff_image_encoded_bytes must be set"
            )
        if self.different_pixels > self.total_pixels:
            raise ValueError("different_pixels cannot exceed total_pixels")
        return self

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)
