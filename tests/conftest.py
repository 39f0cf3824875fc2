import io
import zipfile
from pathlib import Path

import pytest

from sampledb.cleanup import DeferredRemovals
from sampledb.config import SampleDBConfig
from sampledb.provisioner import ResourceProvisioner


def build_zip(entries):
    """Return zip bytes for ``(name, payload)`` pairs; a ``None`` payload is a directory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, payload in entries:
            if payload is None:
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, payload)
    return buf.getvalue()


@pytest.fixture
def temp_root(tmp_path):
    root = tmp_path / "temp"
    root.mkdir()
    return root


@pytest.fixture
def sample_archive(tmp_path):
    path = tmp_path / "SampleDB.zip"
    path.write_bytes(
        build_zip(
            [
                ("a.txt", b"X" * 100),
                ("sub/", None),
                ("sub/b.txt", b"Y" * 50),
            ]
        )
    )
    return path


@pytest.fixture
def make_config(temp_root):
    def _make(archive=None, buffer_size=16):
        return SampleDBConfig(
            temp_dir=temp_root,
            dir_prefix="SampleDBTest",
            archive_override=Path(archive) if archive else None,
            copy_buffer_size=buffer_size,
            log_level="DEBUG",
        )

    return _make


@pytest.fixture
def deferred():
    return DeferredRemovals()


@pytest.fixture
def provisioner(make_config, sample_archive, deferred):
    return ResourceProvisioner(make_config(sample_archive), deferred=deferred)


def live_dirs(root):
    return sorted(p for p in root.iterdir() if p.name.startswith("SampleDBTest_"))
