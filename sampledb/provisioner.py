"""Reference-counted provisioning of a private SampleDB working copy.

Each process gets its own copy of the database, extracted into a fresh
directory under the system temp dir. The embedded engine corrupts a database
directory that two processes open at once, so the bundled archive is never
used in place.

The first :meth:`ResourceProvisioner.acquire` extracts the archive, later
ones only bump the count. The :meth:`ResourceProvisioner.release` that brings
the count back to zero shuts the engine down and deletes the directory, and
the next acquire starts a new generation in a new directory.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import BinaryIO, Callable, Iterator

from .cleanup import DeferredRemovals, deferred_removals, remove_directory
from .config import SampleDBConfig, build_config
from .constants import FALLBACK_DESCRIPTOR, SAMPLE_DB_FILE, SQLITE_SCHEME
from .errors import ExtractionFailed, ProvisionFailed, TeardownWarning
from .extractor import ArchiveExtractor
from .models import ProvisionState
from .resources import locate_archive

logger = logging.getLogger(__name__)

ArchiveOpener = Callable[[], BinaryIO]
ShutdownHook = Callable[[], None]


class ResourceProvisioner:
    """Share one extracted copy of the bundled archive between consumers."""

    def __init__(
        self,
        config: SampleDBConfig | None = None,
        extractor: ArchiveExtractor | None = None,
        open_archive: ArchiveOpener | None = None,
        shutdown_hook: ShutdownHook | None = None,
        deferred: DeferredRemovals | None = None,
    ) -> None:
        self.config = config or build_config()
        self.extractor = extractor or ArchiveExtractor(self.config.copy_buffer_size)
        self._open_archive = open_archive or self._open_bundled_archive
        self.shutdown_hook = shutdown_hook
        self._deferred = deferred or deferred_removals
        self._state = ProvisionState()
        self._lock = RLock()
        self._instance_id = format(id(self), "x")
        self._warnings: list[TeardownWarning] = []

    @property
    def count(self) -> int:
        with self._lock:
            return self._state.count

    @property
    def working_dir(self) -> Path | None:
        with self._lock:
            return self._state.working_dir

    @property
    def generation(self) -> int:
        with self._lock:
            return self._state.generation

    @property
    def teardown_warnings(self) -> list[TeardownWarning]:
        with self._lock:
            return list(self._warnings)

    def acquire(self) -> str:
        """Take a reference on the working copy and return its descriptor."""

        with self._lock:
            logger.info(f"SampleDB acquire. Current count={self._state.count}")
            if self._state.count == 0:
                self._provision()
            self._state.count += 1
            return self.resolve_descriptor()

    def release(self) -> None:
        """Drop one reference, tearing the working copy down on the last one."""

        with self._lock:
            logger.info(f"SampleDB release. Current count={self._state.count}")
            if self._state.count <= 0:
                raise RuntimeError("SampleDB released without a matching acquire")
            self._state.count -= 1
            if self._state.count == 0:
                self._teardown()

    def resolve_descriptor(self) -> str:
        """Return the descriptor for the current working copy or the fallback."""

        with self._lock:
            working_dir = self._state.working_dir
        if working_dir is None:
            return FALLBACK_DESCRIPTOR
        return f"{SQLITE_SCHEME}{working_dir.as_posix()}/{SAMPLE_DB_FILE}"

    @contextmanager
    def lease(self) -> Iterator[str]:
        """Hold a reference for the duration of a ``with`` block."""

        descriptor = self.acquire()
        try:
            yield descriptor
        finally:
            self.release()

    def _provision(self) -> None:
        if self._state.provisioned:
            raise RuntimeError("SampleDB working directory already provisioned")

        try:
            source = self._open_archive()
        except ProvisionFailed:
            raise
        except OSError as exc:
            raise ProvisionFailed(exc) from exc

        with source:
            working_dir = self._make_working_dir()
            logger.debug(f"Creating SampleDB database at location {working_dir}")
            try:
                self.extractor.extract(source, working_dir)
            except ExtractionFailed as exc:
                logger.error(f"Failed to extract SampleDB into {working_dir}: {exc}")
                self._remove(working_dir)
                raise ProvisionFailed(exc) from exc
            except Exception:
                self._remove(working_dir)
                raise

        self._state.working_dir = working_dir
        self._state.generation += 1

    def _make_working_dir(self) -> Path:
        stamp = int(time.time() * 1000)
        name = f"{self.config.dir_prefix}_{stamp}_{self._instance_id}_{uuid.uuid4().hex[:8]}"
        working_dir = self.config.temp_dir / name
        try:
            os.mkdir(working_dir)
        except OSError as exc:
            raise ProvisionFailed(exc) from exc
        return working_dir

    def _open_bundled_archive(self) -> BinaryIO:
        return open(locate_archive(self.config.archive_override), "rb")

    def _teardown(self) -> None:
        working_dir = self._state.working_dir
        if self.shutdown_hook is not None:
            try:
                self.shutdown_hook()
            except Exception as exc:
                self._warn(TeardownWarning("shutdown", working_dir, exc))

        if working_dir is not None:
            logger.debug(f"Removing SampleDB directory at location {working_dir}")
            if not self._remove(working_dir):
                self._warn(TeardownWarning("remove", working_dir, "some files could not be deleted"))
        self._state.working_dir = None

    def _remove(self, path: Path) -> bool:
        if remove_directory(path):
            return True
        self._deferred.schedule(path)
        logger.debug(f"Failed to remove one or more files under {path}; retrying at exit")
        return False

    def _warn(self, warning: TeardownWarning) -> None:
        self._warnings.append(warning)
        logger.warning(str(warning))
