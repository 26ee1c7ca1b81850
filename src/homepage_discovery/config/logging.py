"""Shared logging helpers for the discovery controller."""

from __future__ import annotations

import logging
import os


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to ``LOG_LEVEL`` from the environment (INFO when unset) and the format
    is terse enough for container logs. Pass ``force=True`` to reconfigure during
    tests or specialised entry points.
    """

    effective_level = level if level is not None else os.getenv("LOG_LEVEL") or logging.INFO
    if isinstance(effective_level, str):
        effective_level = effective_level.strip().upper()

    logging.basicConfig(
        level=effective_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
