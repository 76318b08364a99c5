"""
manager.py - Credential store that orchestrates crypto, codec and storage
"""
import logging
import os
from datetime import datetime
from typing import Callable, List, Optional

from . import codec
from .config import VaultConfig
from .credential import Credential
from .crypto import Crypto
from .exceptions import NotLoadedError, StorageError, WrongPasswordOrCorruptData
from .storage import Storage

logger = logging.getLogger(__name__)

EXPORT_MASK = "********"


class CredentialStore:
    """
    In-memory credential list backed by one encrypted file.

    A store starts unloaded. load() either opens the existing vault or,
    on first run, starts an empty one; after that it stays loaded.
    """

    def __init__(
        self,
        storage_file: str,
        backup_dir: Optional[str] = None,
        crypto: Optional[Crypto] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the credential store.

        Args:
            storage_file: Path of the encrypted vault file
            backup_dir: Directory for per-save backups
            crypto: Cipher engine (default: Argon2id with default costs)
            clock: Source of "now" for timestamps
        """
        self.crypto = crypto or Crypto()
        self.storage = Storage(storage_file, backup_dir)
        self._clock = clock
        self._credentials: List[Credential] = []
        self._validator: Optional[str] = None
        self._loaded = False

    @classmethod
    def from_config(cls, config: VaultConfig, **kwargs) -> "CredentialStore":
        return cls(
            config.data_file,
            backup_dir=config.backup_dir,
            crypto=Crypto(config.kdf),
            **kwargs,
        )

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def credential_count(self) -> int:
        return len(self._credentials) if self._loaded else 0

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise NotLoadedError()

    def load(self, master_password: str) -> bool:
        """
        Open the vault with the master password.

        If no vault file exists yet this is a first run: an empty store is
        started under `master_password`.

        Returns:
            True if loaded, False if the password is wrong or the file is corrupt

        Raises:
            StorageError: If the vault file exists but can't be read
        """
        if self._loaded:
            return self.verify_master_password(master_password)

        if not self.storage.exists():
            self._validator = self.crypto.create_password_validator(master_password)
            self._credentials = []
            self._loaded = True
            logger.info("No vault at %s, starting a new one", self.storage.filename)
            return True

        blob = self.storage.load()
        try:
            plaintext = self.crypto.decrypt(blob, master_password)
        except WrongPasswordOrCorruptData:
            logger.warning("Failed to load credentials. Wrong password or corrupted file.")
            return False

        self._validator, self._credentials = codec.decode_store(plaintext, self._clock)
        self._loaded = True
        logger.info("Loaded %d credential(s) from %s", len(self._credentials), self.storage.filename)
        return True

    def verify_master_password(self, master_password: str) -> bool:
        """
        Check a candidate password against the stored validator.

        A store without a validator (written by an older version) accepts
        any password once it has been loaded.
        """
        self._require_loaded()
        if self._validator is None:
            return True
        return self.crypto.verify_password(master_password, self._validator)

    def save(self, master_password: str) -> None:
        """
        Encrypt and write the store, keeping a backup of the previous file.

        Raises:
            NotLoadedError: If load() hasn't succeeded
            WrongPasswordOrCorruptData: If the password doesn't match the validator
            StorageError: If the vault file can't be written
        """
        self._require_loaded()

        if self._validator is None:
            self._validator = self.crypto.create_password_validator(master_password)
        elif not self.crypto.verify_password(master_password, self._validator):
            raise WrongPasswordOrCorruptData("Master password does not match this vault")

        try:
            self.storage.create_backup(self._clock())
        except StorageError as e:
            logger.warning("Failed to create backup: %s", e)

        data = codec.encode_store(self._validator, self._credentials)
        self.storage.save(self.crypto.encrypt(data, master_password))
        logger.debug("Saved %d credential(s)", len(self._credentials))

    def change_master_password(self, current_password: str, new_password: str) -> bool:
        """
        Change the master password and re-encrypt the whole store.

        Args:
            current_password: Current master password
            new_password: New master password

        Returns:
            True if successful, False if current password is wrong
        """
        self._require_loaded()

        if not self.verify_master_password(current_password):
            return False

        previous = self._validator
        self._validator = self.crypto.create_password_validator(new_password)
        try:
            self.save(new_password)
        except Exception:
            self._validator = previous
            raise

        logger.info("Master password changed")
        return True

    def add_credential(
        self,
        website: str,
        username: str,
        password: str,
        notes: Optional[str] = None,
    ) -> Credential:
        self._require_loaded()

        credential = Credential.create(website, username, password, notes, now=self._clock())
        self._credentials.append(credential)
        return credential

    def get_all_credentials(self) -> List[Credential]:
        self._require_loaded()
        return list(self._credentials)

    def find_by_website(self, website: str) -> Optional[Credential]:
        """First credential whose website matches, ignoring case"""
        self._require_loaded()
        return next((c for c in self._credentials if c.is_for(website)), None)

    def search_credentials(self, term: Optional[str]) -> List[Credential]:
        """
        Search website, username and notes (case-insensitive substring).

        An empty term matches everything.
        """
        self._require_loaded()
        return [c for c in self._credentials if c.matches(term)]

    def update_credential(
        self,
        website: str,
        new_username: Optional[str] = None,
        new_password: Optional[str] = None,
        new_notes: Optional[str] = None,
    ) -> bool:
        """
        Update an existing credential.

        Returns:
            True if updated, False if website not found
        """
        credential = self.find_by_website(website)
        if credential is None:
            return False

        credential.update(new_username, new_password, new_notes, now=self._clock())
        return True

    def remove_credential(self, website: str) -> bool:
        """
        Remove every credential for a website.

        Returns:
            True if anything was removed
        """
        self._require_loaded()

        before = len(self._credentials)
        self._credentials = [c for c in self._credentials if not c.is_for(website)]
        return len(self._credentials) < before

    def list_backups(self) -> List[str]:
        """Backup file paths, oldest first. Works before load(), only names are listed."""
        return self.storage.list_backups()

    def export_to_file(self, file_path: str, include_passwords: bool = False) -> bool:
        """
        Write an unencrypted, human-readable report of all credentials.

        WARNING: The output is plain text. It is a report only and can't be
        loaded back.

        Returns:
            True if written, False if the file couldn't be written
        """
        self._require_loaded()

        lines = [
            "SecureVault Credential Export",
            f"Generated: {self._clock().isoformat(sep=' ', timespec='seconds')}",
            f"Total Credentials: {len(self._credentials)}",
            f"Passwords Included: {'yes' if include_passwords else 'no'}",
            "=" * 50,
            "",
        ]

        for c in self._credentials:
            lines.append(f"Website: {c.website or 'N/A'}")
            lines.append(f"Username: {c.username or 'N/A'}")
            if include_passwords:
                lines.append(f"Password: {c.password or 'N/A'}")
            else:
                lines.append(f"Password: {EXPORT_MASK}")
            lines.append(f"Created: {c.created_at.isoformat(sep=' ', timespec='seconds')}")
            lines.append(f"Modified: {c.last_modified.isoformat(sep=' ', timespec='seconds')}")
            if c.notes and c.notes.strip():
                lines.append(f"Notes: {c.notes}")
            lines.append("-" * 30)

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
            if os.name == "posix":
                os.chmod(file_path, 0o600)
        except OSError as e:
            logger.error("Failed to export credentials: %s", e)
            return False

        return True
