from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from design_compare.conf import get_settings
from design_compare.image_diff.errors import NotFound, UnsupportedFormat
from design_compare.image_diff.types import Raster

logger = logging.getLogger(__name__)


def _open_image(path: str, formats: Sequence[str]) -> Image.Image:
    try:
        img = Image.open(path, formats=list(formats))
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise UnsupportedFormat(path) from e
    except OSError as e:
        # Missing (raced with the existence check) or unreadable.
        raise NotFound(path) from e

    try:
        img.load()
    except (OSError, SyntaxError, ValueError) as e:
        img.close()
        raise UnsupportedFormat(path) from e
    return img


def load_raster(path: str, formats: Sequence[str] | None = None) -> Raster:
    """Decode the image at ``path`` into an RGBA raster.

    The format is sniffed from the file content and must be one of
    ``formats`` (defaults to ``Settings.supported_formats``). Multi-frame
    images yield their first frame.
    """
    if formats is None:
        formats = get_settings().supported_formats

    if not Path(path).is_file():
        raise NotFound(path)

    img = _open_image(path, formats)
    try:
        raster = Raster.from_image(img)
        logger.debug(
            "Loaded image",
            extra={"path": path, "format": img.format, "mode": img.mode, "size": img.size},
        )
        return raster
    finally:
        img.close()
