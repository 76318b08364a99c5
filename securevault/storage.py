'''
storage.py - Handles all file operations for the vault
The backing file holds one base64 blob; backups are timestamped copies of it
'''
import logging
import os
import tempfile
from datetime import datetime
from typing import List, Optional

from .exceptions import StorageError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "securevault_"
BACKUP_SUFFIX = ".enc"


class Storage:
    """Manages the encrypted backing file and its backup directory"""

    def __init__(self, filename: str, backup_dir: Optional[str] = None):
        """
        Initialize storage.

        Args:
            filename: Path of the encrypted vault file
            backup_dir: Directory for backups (default: "backups" next to the vault)
        """
        self.filename = filename
        self.backup_dir = backup_dir or os.path.join(
            os.path.dirname(os.path.abspath(filename)), "backups"
        )

    def exists(self) -> bool:
        """
        Check if the vault file exists.

        Returns:
            True if vault file exists, False otherwise
        """
        return os.path.exists(self.filename)

    def load(self) -> str:
        """
        Read the encrypted blob.

        Raises:
            StorageError: If the file can't be read
        """
        try:
            with open(self.filename, "r", encoding="latin-1") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Failed to read vault file {self.filename}: {e}") from e

    def save(self, blob: str) -> None:
        """
        Replace the vault file with a new blob.

        The blob is written to a temporary file in the same directory and
        renamed over the old one, so a crash never leaves half a vault.

        Raises:
            StorageError: If the file can't be written
        """
        directory = os.path.dirname(os.path.abspath(self.filename))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".securevault-", dir=directory)
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(blob)

            # Owner read/write only (600) on Unix-like systems
            if os.name == "posix":
                os.chmod(tmp_path, 0o600)

            os.replace(tmp_path, self.filename)
            tmp_path = None
        except OSError as e:
            raise StorageError(f"Failed to write vault file {self.filename}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def create_backup(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Copy the current vault file into the backup directory.

        Backups are never overwritten: if the timestamped name is taken a
        numeric suffix is added.

        Returns:
            Path of the new backup, or None if there was nothing to back up

        Raises:
            StorageError: If the copy fails
        """
        if not self.exists():
            return None

        now = now or datetime.now()
        stem = f"{BACKUP_PREFIX}{now:%Y%m%d_%H%M%S_%f}"

        try:
            os.makedirs(self.backup_dir, mode=0o700, exist_ok=True)
            with open(self.filename, "rb") as f:
                data = f.read()

            counter = 0
            while True:
                name = stem + (f"_{counter}" if counter else "") + BACKUP_SUFFIX
                path = os.path.join(self.backup_dir, name)
                try:
                    # "x" refuses to open an existing file
                    with open(path, "xb") as f:
                        f.write(data)
                    break
                except FileExistsError:
                    counter += 1

            if os.name == "posix":
                os.chmod(path, 0o600)
        except OSError as e:
            raise StorageError(f"Failed to create backup of {self.filename}: {e}") from e

        logger.info("Created backup %s", path)
        return path

    def list_backups(self) -> List[str]:
        """Backup file paths, oldest first"""
        if not os.path.isdir(self.backup_dir):
            return []
        names = sorted(
            name for name in os.listdir(self.backup_dir)
            if name.startswith(BACKUP_PREFIX) and name.endswith(BACKUP_SUFFIX)
        )
        return [os.path.join(self.backup_dir, name) for name in names]

    def get_file_info(self) -> Optional[dict]:
        """
        Get information about the vault file.

        Returns:
            Dictionary with file info, or None if file doesn't exist
        """
        if not self.exists():
            return None

        stat = os.stat(self.filename)
        return {
            'size': stat.st_size,
            'modified': stat.st_mtime,
            'permissions': oct(stat.st_mode)[-3:] if os.name == 'posix' else 'N/A'
        }
