from __future__ import annotations

import base64
import io
import logging

import sentry_sdk
from pixelmatch import pixelmatch

from design_compare.conf import Settings, get_settings
from design_compare.image_diff.errors import DimensionMismatch, InvalidThreshold, WriteFailed
from design_compare.image_diff.loader import load_raster
from design_compare.image_diff.types import ComparisonRequest, ComparisonResult, Raster

logger = logging.getLogger(__name__)

DIFF_IMAGE_FORMAT = "PNG"
DIFF_IMAGE_MIME_TYPE = "image/png"

DIFF_COLOR = (255, 0, 0)
AA_COLOR = (255, 255, 0)


def compare_rasters(
    a: Raster,
    b: Raster,
    threshold: float,
    include_aa: bool = False,
    alpha: float = 0.1,
) -> tuple[int, Raster]:
    """Count perceptually different pixels and render a diff raster.

    Differences are drawn in ``DIFF_COLOR``; unchanged pixels become a
    faded grayscale copy of ``a``. Anti-aliased pixels are drawn in
    ``AA_COLOR`` and only counted when ``include_aa`` is set.
    """
    if a.size != b.size:
        raise DimensionMismatch(a.size, b.size)
    if not 0.0 <= threshold <= 1.0:
        raise InvalidThreshold(threshold)

    output = [0] * len(a.data)
    different_pixels = pixelmatch(
        a.data,
        b.data,
        a.width,
        a.height,
        output,
        threshold=threshold,
        includeAA=include_aa,
        alpha=alpha,
        aa_color=AA_COLOR,
        diff_color=DIFF_COLOR,
    )
    return different_pixels, Raster(width=a.width, height=a.height, data=bytes(map(int, output)))


def _encode_png(raster: Raster) -> bytes:
    buf = io.BytesIO()
    img = raster.to_image()
    try:
        img.save(buf, format=DIFF_IMAGE_FORMAT)
    finally:
        img.close()
    return buf.getvalue()


def _write_diff_image(raster: Raster, output_path: str) -> None:
    encoded = _encode_png(raster)
    try:
        with open(output_path, "wb") as f:
            f.write(encoded)
    except OSError as e:
        raise WriteFailed(output_path, e.strerror or str(e)) from e


def package_result(
    total_pixels: int,
    different_pixels: int,
    diff: Raster,
    output_path: str | None = None,
) -> ComparisonResult:
    difference_percentage = different_pixels / total_pixels * 100 if total_pixels else 0.0

    if output_path:
        _write_diff_image(diff, output_path)
        return ComparisonResult(
            total_pixels=total_pixels,
            different_pixels=different_pixels,
            difference_percentage=difference_percentage,
            diff_image_path=output_path,
        )

    return ComparisonResult(
        total_pixels=total_pixels,
        different_pixels=different_pixels,
        difference_percentage=difference_percentage,
        diff_image_encoded_bytes=base64.b64encode(_encode_png(diff)).decode("ascii"),
    )


@sentry_sdk.trace
def compare_screenshots(
    request: ComparisonRequest,
    settings: Settings | None = None,
) -> ComparisonResult:
    if settings is None:
        settings = get_settings()

    design = load_raster(request.design_path, settings.supported_formats)
    implementation = load_raster(request.implementation_path, settings.supported_formats)

    different_pixels, diff = compare_rasters(
        design,
        implementation,
        request.threshold,
        include_aa=settings.include_aa,
        alpha=settings.diff_alpha,
    )
    result = package_result(
        design.total_pixels, different_pixels, diff, request.output_diff_path
    )

    logger.info(
        "Compared screenshots",
        extra={
            "design_path": request.design_path,
            "implementation_path": request.implementation_path,
            "threshold": request.threshold,
            "total_pixels": result.total_pixels,
            "different_pixels": result.different_pixels,
        },
    )
    return result


def format_summary(result: ComparisonResult) -> str:
    return (
        f"Total Pixels: {result.total_pixels:,}\n"
        f"Different Pixels: {result.different_pixels:,}\n"
        f"Difference: {result.difference_percentage:.2f}%\n"
    )
