from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from design_compare.conf import Settings

RED = (255, 0, 0, 255)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., str]:
    def _write(
        name: str,
        width: int = 10,
        height: int = 10,
        color: tuple[int, ...] | int = RED,
        format: str = "PNG",
        mode: str = "RGBA",
    ) -> str:
        path = tmp_path / name
        with Image.new(mode, (width, height), color) as img:
            img.save(path, format)
        return str(path)

    return _write
