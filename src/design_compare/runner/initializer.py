from __future__ import annotations

import logging
import sys

import sentry_sdk

from design_compare.conf import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    # stdout carries protocol messages and CLI output, so logs go to stderr.
    logging.basicConfig(level=settings.log_level, stream=sys.stderr, format=LOG_FORMAT)


def configure_sdk(settings: Settings) -> None:
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        release=f"design-compare@{settings.server_version}",
        traces_sample_rate=1.0,
    )


def initialize_app(settings: Settings) -> None:
    configure_logging(settings)
    configure_sdk(settings)
