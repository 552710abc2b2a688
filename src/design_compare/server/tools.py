from __future__ import annotations

import logging
from typing import Any

import sentry_sdk
from mcp import types
from pydantic import BaseModel, ConfigDict, ValidationError

from design_compare.conf import Settings
from design_compare.image_diff.compare import (
    DIFF_IMAGE_MIME_TYPE,
    compare_screenshots,
    format_summary,
)
from design_compare.image_diff.errors import ComparisonError
from design_compare.image_diff.types import ComparisonRequest

logger = logging.getLogger(__name__)

COMPARE_DESIGN = "compare_design"

ToolContent = types.TextContent | types.ImageContent


class ToolCallFailed(Exception):
    """Raised from a tool handler; the server reports the message as an ``isError`` result."""


class CompareDesignArguments(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    design_path: str
    implementation_path: str
    output_diff_path: str | None = None
    threshold: float | None = None


def compare_design_tool(settings: Settings) -> types.Tool:
    formats = ", ".join(settings.supported_formats)
    return types.Tool(
        name=COMPARE_DESIGN,
        description=(
            "Compare a design screenshot with an implementation screenshot using pixelmatch. "
            "Returns the number and percentage of different pixels, and optionally outputs "
            "a diff image highlighting the differences."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "design_path": {
                    "type": "string",
                    "description": f"Path to the design screenshot ({formats})",
                },
                "implementation_path": {
                    "type": "string",
                    "description": f"Path to the implementation screenshot ({formats})",
                },
                "output_diff_path": {
                    "type": "string",
                    "description": (
                        "Optional path to save the diff image. If not provided, "
                        "the diff image will be returned as base64."
                    ),
                },
                "threshold": {
                    "type": "number",
                    "description": (
                        "Matching threshold (0-1). Smaller values make the comparison "
                        f"more sensitive. Default is {settings.threshold}."
                    ),
                    "default": settings.threshold,
                    "minimum": 0,
                    "maximum": 1,
                },
            },
            "required": ["design_path", "implementation_path"],
        },
    )


def _failed(message: str) -> ToolCallFailed:
    return ToolCallFailed(f"Error comparing screenshots: {message}")


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "arguments"
        problems.append(f"{loc}: {err['msg']}")
    return "Invalid arguments: " + "; ".join(problems)


def call_compare_design(arguments: dict[str, Any] | None, settings: Settings) -> list[ToolContent]:
    try:
        args = CompareDesignArguments.model_validate(arguments or {})
    except ValidationError as e:
        raise _failed(_format_validation_error(e)) from e

    request = ComparisonRequest(
        design_path=args.design_path,
        implementation_path=args.implementation_path,
        output_diff_path=args.output_diff_path,
        threshold=settings.threshold if args.threshold is None else args.threshold,
    )

    try:
        result = compare_screenshots(request, settings)
    except ComparisonError as e:
        logger.info(
            "compare_design: comparison failed",
            extra={"kind": e.kind, "design_path": request.design_path},
        )
        raise _failed(str(e)) from e
    except Exception as e:
        logger.exception("compare_design: unexpected failure")
        sentry_sdk.capture_exception(e)
        raise _failed(str(e)) from e

    text = "Design Comparison Results:\n\n" + format_summary(result)
    if result.diff_image_path is not None:
        text += f"\nDiff image saved to: {result.diff_image_path}"

    content: list[ToolContent] = [types.TextContent(type="text", text=text)]
    if result.diff_image_encoded_bytes is not None:
        content.append(
            types.ImageContent(
                type="image",
                data=result.diff_image_encoded_bytes,
                mimeType=DIFF_IMAGE_MIME_TYPE,
            )
        )
    return content
