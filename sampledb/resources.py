"""Locate the bundled SampleDB archive."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .constants import SAMPLE_DB_ENTRY
from .errors import ProvisionFailed

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent


def locate_archive(archive_override: Path | None = None) -> Path:
    """Find the archive, checking the override, this package, then ``sys.path``."""

    if archive_override is not None:
        if archive_override.is_file():
            return archive_override
        raise ProvisionFailed(f"Configured SampleDB archive not found: {archive_override}")

    candidate = PACKAGE_DIR / SAMPLE_DB_ENTRY
    if candidate.is_file():
        return candidate

    for entry in sys.path:
        candidate = Path(entry or ".") / SAMPLE_DB_ENTRY
        if candidate.is_file():
            logger.debug(f"Using SampleDB archive found on sys.path: {candidate}")
            return candidate

    logger.error(f"SampleDB archive not found: {SAMPLE_DB_ENTRY}")
    raise ProvisionFailed(f"SampleDB archive not found: {SAMPLE_DB_ENTRY}")
