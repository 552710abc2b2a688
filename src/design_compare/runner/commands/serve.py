from __future__ import annotations

import logging

import anyio
import click

from design_compare.conf import get_settings
from design_compare.runner.initializer import initialize_app
from design_compare.server.server import serve_stdio

logger = logging.getLogger(__name__)


@click.command("design-compare-server")
def serve() -> None:
    """Run the compare_design tool server on stdin/stdout."""
    settings = get_settings()
    initialize_app(settings)

    try:
        anyio.run(serve_stdio, settings)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
