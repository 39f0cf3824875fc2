"""Best-effort directory removal with a process-exit fallback."""

from __future__ import annotations

import atexit
import logging
import os
from pathlib import Path
from threading import RLock

logger = logging.getLogger(__name__)


def remove_directory(path: Path) -> bool:
    """Remove ``path`` and everything below it, continuing past failures.

    Returns ``True`` only when every child and the directory itself were
    deleted. A path that no longer exists counts as removed.
    """

    try:
        children = os.listdir(path)
    except FileNotFoundError:
        return True
    except OSError as exc:
        logger.debug(f"Cannot list {path}: {exc}")
        children = []
        success = False
    else:
        success = True

    for name in children:
        child = os.path.join(path, name)
        if os.path.isdir(child) and not os.path.islink(child):
            if not remove_directory(Path(child)):
                success = False
            continue
        try:
            os.unlink(child)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.debug(f"Cannot remove {child}: {exc}")
            success = False

    try:
        os.rmdir(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.debug(f"Cannot remove directory {path}: {exc}")
        success = False
    return success


class DeferredRemovals:
    """Directories to retry removing when the interpreter exits."""

    def __init__(self) -> None:
        self._paths: list[Path] = []
        self._lock = RLock()
        self._registered = False

    @property
    def pending(self) -> list[Path]:
        with self._lock:
            return list(self._paths)

    def schedule(self, path: Path) -> None:
        """Queue ``path`` for removal at exit, registering the exit hook once."""

        with self._lock:
            if path in self._paths:
                return
            self._paths.append(path)
            if not self._registered:
                atexit.register(self.drain)
                self._registered = True
        logger.debug(f"Scheduled {path} for removal at exit")

    def drain(self) -> list[Path]:
        """Try every scheduled path once and return those still present."""

        with self._lock:
            paths, self._paths = self._paths, []

        leaked = [path for path in paths if not remove_directory(path)]
        for path in leaked:
            logger.warning(f"Could not remove {path}; it is left behind")
        return leaked


deferred_removals = DeferredRemovals()
