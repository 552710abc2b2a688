from __future__ import annotations


class ComparisonError(Exception):
    """Terminal failure of a single comparison call.

    ``str(error)`` is the caller-facing message; nothing else is exposed.
    """

    kind = "ComparisonError"


class NotFound(ComparisonError):
    kind = "NotFound"

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class UnsupportedFormat(ComparisonError):
    kind = "UnsupportedFormat"

    def __init__(self, path: str) -> None:
        super().__init__(f"Unsupported image format: {path}")
        self.path = path


class DimensionMismatch(ComparisonError):
    kind = "DimensionMismatch"

    def __init__(
        self, design_size: tuple[int, int], implementation_size: tuple[int, int]
    ) -> None:
        dw, dh = design_size
        iw, ih = implementation_size
        super().__init__(
            f"Image dimensions don't match: design ({dw}x{dh}) vs implementation ({iw}x{ih})"
        )
        self.design_size = design_size
        self.implementation_size = implementation_size


class WriteFailed(ComparisonError):
    kind = "WriteFailed"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write diff image to {path}: {reason}")
        self.path = path
        self.reason = reason


class InvalidThreshold(ComparisonError):
    kind = "InvalidThreshold"

    def __init__(self, threshold: float) -> None:
        super().__init__(f"Threshold must be between 0 and 1, got {threshold}")
        self.threshold = threshold
