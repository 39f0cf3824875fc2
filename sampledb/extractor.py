"""Materialize a bundled archive onto disk."""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from pathlib import Path
from typing import BinaryIO

from cabarchive import CabArchive

from .errors import ExtractionFailed
from .validation import entry_target, sniff_archive_format

logger = logging.getLogger(__name__)

_READ_ERRORS = (OSError, EOFError, RuntimeError, zipfile.BadZipFile, zlib.error)


class ArchiveExtractor:
    """Copy every entry of a zip or CAB archive below a destination directory.

    Entries keep their relative paths. Ancestor directories are created on
    demand, so archives that list files before their directories still
    extract. The first failure aborts the run with :class:`ExtractionFailed`
    and leaves whatever was already written in place; the caller decides
    whether to remove it.
    """

    def __init__(self, buffer_size: int = 4000) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.buffer_size = buffer_size

    def extract(self, source: BinaryIO, destination: Path) -> int:
        """Extract ``source`` into ``destination`` and return the entry count."""

        if not destination.is_dir():
            raise ExtractionFailed(f"Destination {destination} is not a directory")

        stream = _seekable(source)
        kind = sniff_archive_format(stream)
        if kind == "cab":
            count = self._extract_cab(stream, destination)
        else:
            count = self._extract_zip(stream, destination)

        logger.debug(f"Extracted {count} {kind} entries into {destination}")
        return count

    def _extract_zip(self, stream: BinaryIO, destination: Path) -> int:
        try:
            archive = zipfile.ZipFile(stream)
        except _READ_ERRORS as exc:
            raise ExtractionFailed(exc) from exc

        count = 0
        with archive:
            for info in archive.infolist():
                target = entry_target(destination, info.filename)
                try:
                    if info.is_dir():
                        target.mkdir(parents=True, exist_ok=True)
                    else:
                        target.parent.mkdir(parents=True, exist_ok=True)
                        with archive.open(info) as src, open(target, "wb") as dst:
                            self._copy(src, dst)
                except _READ_ERRORS as exc:
                    raise ExtractionFailed(exc, entry=info.filename) from exc
                count += 1
        return count

    def _extract_cab(self, stream: BinaryIO, destination: Path) -> int:
        try:
            archive = CabArchive(stream.read())
        except Exception as exc:
            raise ExtractionFailed(exc) from exc

        count = 0
        for name, cab_file in archive.items():
            target = entry_target(destination, name)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                with open(target, "wb") as dst:
                    self._copy(io.BytesIO(cab_file.buf or b""), dst)
            except OSError as exc:
                raise ExtractionFailed(exc, entry=name) from exc
            count += 1
        return count

    def _copy(self, src: BinaryIO, dst: BinaryIO) -> None:
        while True:
            chunk = src.read(self.buffer_size)
            if not chunk:
                break
            dst.write(chunk)


def _seekable(source: BinaryIO) -> BinaryIO:
    """Spool a forward-only stream into memory so archive readers can seek."""

    seekable = getattr(source, "seekable", None)
    if seekable is not None and seekable():
        return source
    try:
        return io.BytesIO(source.read())
    except OSError as exc:
        raise ExtractionFailed(exc) from exc
