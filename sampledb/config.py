"""Runtime configuration for SampleDB."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SampleDBConfig:
    """Configuration values used by the provisioner and the web surface."""

    temp_dir: Path
    dir_prefix: str
    archive_override: Path | None
    copy_buffer_size: int
    log_level: str


def build_config() -> SampleDBConfig:
    """Build configuration from environment variables with safe defaults."""

    archive = os.environ.get("SAMPLEDB_ARCHIVE")
    buffer_size = int(os.environ.get("SAMPLEDB_COPY_BUFFER", 4000))
    if buffer_size <= 0:
        raise ValueError("SAMPLEDB_COPY_BUFFER must be positive")

    return SampleDBConfig(
        temp_dir=Path(os.environ.get("SAMPLEDB_TEMP_DIR", tempfile.gettempdir())),
        dir_prefix=os.environ.get("SAMPLEDB_DIR_PREFIX", "SampleDB"),
        archive_override=Path(archive) if archive else None,
        copy_buffer_size=buffer_size,
        log_level=os.environ.get("SAMPLEDB_LOG_LEVEL", "INFO").upper(),
    )
