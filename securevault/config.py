"""
config.py - Runtime configuration for SecureVault

Defaults live here as module constants; VaultConfig.from_env() lets the
environment override the vault location and CLI behaviour.
"""
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .crypto import KdfParams
from .exceptions import ConfigurationError

DEFAULT_HOME = os.path.expanduser("~/.securevault")
DATA_FILE_NAME = "securevault.enc"
BACKUP_DIR_NAME = "backups"

DEFAULT_CLIPBOARD_TIMEOUT = 30  # seconds
DEFAULT_MAX_UNLOCK_ATTEMPTS = 3

ENV_HOME = "SECUREVAULT_HOME"
ENV_CLIPBOARD_TIMEOUT = "SECUREVAULT_CLIPBOARD_TIMEOUT"
ENV_MAX_ATTEMPTS = "SECUREVAULT_MAX_ATTEMPTS"


@dataclass
class VaultConfig:
    """Where the vault lives and how the collaborators behave"""

    home: str = DEFAULT_HOME
    data_file: Optional[str] = None
    backup_dir: Optional[str] = None
    clipboard_timeout: int = DEFAULT_CLIPBOARD_TIMEOUT
    max_unlock_attempts: int = DEFAULT_MAX_UNLOCK_ATTEMPTS
    kdf: KdfParams = field(default_factory=KdfParams)

    def __post_init__(self):
        self.home = os.path.expanduser(self.home)
        if self.data_file is None:
            self.data_file = os.path.join(self.home, DATA_FILE_NAME)
        if self.backup_dir is None:
            self.backup_dir = os.path.join(self.home, BACKUP_DIR_NAME)
        if self.clipboard_timeout < 0:
            raise ConfigurationError("Clipboard timeout cannot be negative")
        if self.max_unlock_attempts < 1:
            raise ConfigurationError("At least one unlock attempt must be allowed")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "VaultConfig":
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
            **overrides: Explicit values that win over the environment

        Raises:
            ConfigurationError: If a numeric variable is not an integer
        """
        env = os.environ if environ is None else environ

        values = {
            "home": env.get(ENV_HOME, DEFAULT_HOME),
            "clipboard_timeout": _int_from_env(env, ENV_CLIPBOARD_TIMEOUT, DEFAULT_CLIPBOARD_TIMEOUT),
            "max_unlock_attempts": _int_from_env(env, ENV_MAX_ATTEMPTS, DEFAULT_MAX_UNLOCK_ATTEMPTS),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def ensure_home(self) -> None:
        """Create the vault directory (owner-only) if it doesn't exist"""
        if not os.path.exists(self.home):
            os.makedirs(self.home, mode=0o700)


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
