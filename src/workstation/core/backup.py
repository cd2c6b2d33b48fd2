"""Backup-first writing of configuration files.

This module writes configuration snippets into files in the user's home
directory. A file that already exists is copied to a timestamped backup next
to it before anything is appended, so earlier content can always be recovered.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .errors import ConfigWriteError

logger = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing one configuration file.

    Attributes:
        path (Path): The file that was written.
        created (bool): True if the file was created, False if appended to.
        backup (Optional[Path]): Backup of the previous content, if any.
    """

    path: Path
    created: bool
    backup: Optional[Path] = None


class ConfigFileWriter:
    """Creates or appends to configuration files, backing them up first.

    The writer handles:
    - Copying a pre-existing file to ``<file>.backup.<YYYYMMDD_HHMMSS>``
    - Creating missing parent directories
    - Appending to pre-existing files and creating missing ones
    - Supporting dry-run mode, where nothing on disk changes

    Backups have second resolution. Two writes to the same file within one
    second share a backup name and the later backup replaces the earlier one.

    Attributes:
        clock (Callable[[], datetime]): Source of the backup timestamp.
        dry_run (bool): If True, only log what would be written.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        dry_run: bool = False,
    ) -> None:
        """Initialize the writer.

        Args:
            clock: Returns the current time; replaced in tests.
            dry_run: If True, only log what would be written.
        """
        self.clock = clock
        self.dry_run = dry_run

    def backup_path(self, path: Path) -> Path:
        """Get the backup path for a file at the current time.

        Args:
            path (Path): File to back up.

        Returns:
            Path: ``<path>.backup.<YYYYMMDD_HHMMSS>`` in the same directory.
        """
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        return path.with_name(f"{path.name}{BACKUP_MARKER}{timestamp}")

    def list_backups(self, path: Path) -> List[Path]:
        """List existing backups of a file, oldest first."""
        path = Path(path)
        if not path.parent.is_dir():
            return []
        # Timestamps sort lexicographically in chronological order
        return sorted(path.parent.glob(f"{path.name}{BACKUP_MARKER}*"))

    def write(self, path: Path, content: str) -> WriteResult:
        """Write content to a configuration file.

        Existing files get a backup and then have the content appended.
        Missing files are created. The content always ends up followed by a
        single newline.

        Args:
            path (Path): Target file.
            content (str): Text to write.

        Returns:
            WriteResult: What was done to the file.

        Raises:
            ConfigWriteError: If the target is a directory or cannot be
                              written.
        """
        path = Path(path)
        if path.is_dir():
            raise ConfigWriteError(f"Cannot write {path}: it is a directory")

        existed = path.is_file()
        backup: Optional[Path] = None

        if self.dry_run:
            if existed:
                logger.info("Would back up %s and append to it", path)
                backup = self.backup_path(path)
            else:
                logger.info("Would create %s", path)
            return WriteResult(path=path, created=not existed, backup=backup)

        try:
            if existed:
                backup = self.backup_path(path)
                logger.info("Creating backup of %s", path)
                shutil.copy2(path, backup)

            path.parent.mkdir(parents=True, exist_ok=True)

            if existed:
                logger.info("Appending to %s", path)
                mode = "a"
            else:
                logger.info("Creating %s", path)
                mode = "w"
            with open(path, mode, encoding="utf-8") as f:
                f.write(content + "\n")
        except OSError as e:
            raise ConfigWriteError(f"Cannot write {path}: {e}") from e

        return WriteResult(path=path, created=not existed, backup=backup)
