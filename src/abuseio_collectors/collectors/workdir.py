"""Scoped temporary working directory for a single collector run."""

import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Optional, Union

from abuseio_collectors.errors import FilesystemError

logger = logging.getLogger(__name__)

DIRECTORY_PREFIX = "abuseio-"


def default_tmp_root() -> Path:
    """Temp root from ABUSEIO_TMP_ROOT, falling back to the system temp dir."""
    return Path(os.getenv("ABUSEIO_TMP_ROOT") or tempfile.gettempdir())


class WorkingDirectory:
    """A uniquely named directory under the temp root, removed on release.

    Usable as a context manager::

        with WorkingDirectory() as path:
            ...
    """

    def __init__(self, tmp_root: Optional[Union[str, Path]] = None):
        self.tmp_root = Path(tmp_root) if tmp_root else default_tmp_root()
        self._path: Optional[Path] = None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def acquire(self) -> Path:
        """Create the directory and return its path."""
        if self._path is not None:
            raise RuntimeError(f"Working directory already acquired: {self._path}")

        path = self.tmp_root / f"{DIRECTORY_PREFIX}{uuid.uuid4()}"
        try:
            path.mkdir()
        except OSError as e:
            raise FilesystemError(f"Unable to create directory {path}: {e}") from e

        self._path = path
        logger.debug(f"Created working directory {path}")
        return path

    def release(self) -> None:
        """Remove the directory and its contents. Safe to call repeatedly."""
        path, self._path = self._path, None
        if path is None:
            return

        try:
            if path.is_symlink():
                path.unlink()
            elif path.is_dir():
                shutil.rmtree(path)
        except OSError as e:
            logger.warning(f"Failed to remove working directory {path}: {e}")
            return
        logger.debug(f"Removed working directory {path}")

    def __enter__(self) -> Path:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
