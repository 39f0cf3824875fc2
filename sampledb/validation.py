"""Archive sniffing and entry-name validation helpers."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from werkzeug.security import safe_join

from .errors import ExtractionFailed

ZIP_HEADERS = (b"PK\x03\x04", b"PK\x05\x06")
CAB_HEADER = b"MSCF"


def sniff_archive_format(stream: BinaryIO) -> str:
    """Return ``"zip"`` or ``"cab"`` from the magic header of a seekable stream."""

    pos = stream.tell()
    try:
        header = stream.read(4)
    except OSError as exc:
        raise ExtractionFailed(exc) from exc
    finally:
        stream.seek(pos)

    if header in ZIP_HEADERS:
        return "zip"
    if header == CAB_HEADER:
        return "cab"
    raise ExtractionFailed(f"Unrecognized archive header {header!r}")


def entry_target(destination: Path, name: str) -> Path:
    """Map an archive entry name to a path that stays under ``destination``."""

    relative = name.replace("\\", "/").strip("/")
    if not relative:
        raise ExtractionFailed("Archive entry has an empty name", entry=name)

    joined = safe_join(str(destination), relative)
    if joined is None:
        raise ExtractionFailed("Archive entry escapes the destination directory", entry=name)
    return Path(joined)
