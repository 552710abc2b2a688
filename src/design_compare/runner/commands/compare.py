from __future__ import annotations

import logging
import sys
from typing import Any

import click
import orjson
import sentry_sdk

from design_compare.conf import get_settings
from design_compare.image_diff.compare import compare_screenshots, format_summary
from design_compare.image_diff.errors import ComparisonError
from design_compare.image_diff.types import ComparisonRequest, ComparisonResult
from design_compare.runner.initializer import initialize_app

logger = logging.getLogger(__name__)


class CompareCommand(click.Command):
    """Reports usage errors with exit status 1, like every other failure."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _run(
    design: str,
    implementation: str,
    output: str | None,
    threshold: float | None,
    use_json: bool,
) -> ComparisonResult:
    settings = get_settings()
    initialize_app(settings)

    request = ComparisonRequest(
        design_path=design,
        implementation_path=implementation,
        output_diff_path=output,
        threshold=settings.threshold if threshold is None else threshold,
    )

    if not use_json:
        click.echo("Comparing screenshots...")
        click.echo(f"Design: {design}")
        click.echo(f"Implementation: {implementation}")

    return compare_screenshots(request, settings)


@click.command("design-compare", cls=CompareCommand)
@click.argument("design")
@click.argument("implementation")
@click.argument("output", required=False)
@click.option(
    "--threshold",
    type=float,
    default=None,
    help="Matching threshold (0-1). Smaller values are stricter. Defaults to the configured value.",
)
@click.option("--json", "use_json", is_flag=True, help="Print the result as JSON.")
def compare(
    design: str,
    implementation: str,
    output: str | None,
    threshold: float | None,
    use_json: bool,
) -> None:
    """Compare a DESIGN screenshot with an IMPLEMENTATION screenshot.

    Writes the diff image to OUTPUT when given. Exits 1 on any failure.
    """
    try:
        result = _run(design, implementation, output, threshold, use_json)
    except ComparisonError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.debug("design-compare: unexpected failure", exc_info=True)
        sentry_sdk.capture_exception(e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if use_json:
        click.echo(orjson.dumps(result.to_wire()).decode())
        return

    click.echo("\nComparison Results:")
    click.echo(format_summary(result), nl=False)
    if result.diff_image_path is not None:
        click.echo(f"\nDiff image saved to: {result.diff_image_path}")
    else:
        size = len(result.diff_image_encoded_bytes or "")
        click.echo(f"\nDiff image size: {size:,} bytes (base64)")
