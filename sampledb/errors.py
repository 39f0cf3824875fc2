"""Exception types raised while provisioning the sample database."""

from __future__ import annotations

from pathlib import Path


class SampleDBError(Exception):
    """Base class for SampleDB failures."""


class ExtractionFailed(SampleDBError):
    """Materializing an archive onto disk failed part way through."""

    def __init__(self, cause: BaseException | str, entry: str | None = None) -> None:
        self.cause = cause
        self.entry = entry
        where = f" at entry {entry!r}" if entry else ""
        super().__init__(f"Archive extraction failed{where}: {cause}")


class ProvisionFailed(SampleDBError):
    """The working copy of the sample database could not be created."""

    def __init__(self, cause: BaseException | str) -> None:
        self.cause = cause
        super().__init__(f"SampleDB provisioning failed: {cause}")


class TeardownWarning(UserWarning):
    """A failure during release that is reported but never raised."""

    def __init__(self, stage: str, path: Path | None, cause: BaseException | str) -> None:
        self.stage = stage
        self.path = path
        self.cause = cause
        super().__init__(f"SampleDB teardown {stage} failed for {path}: {cause}")
