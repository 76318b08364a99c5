"""
SecureVault - Local encrypted password manager.

Features:
- Argon2id memory-hard key derivation
- AES-256-GCM authenticated encryption with a fresh salt and nonce per save
- Master password verification through an encrypted validator
- Automatic timestamped backups on every save
- Quota-based password generation and strength scoring
- Clipboard copy with auto-clear
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .credential import Credential
from .exceptions import (
    ConfigurationError,
    MalformedRecordError,
    NotLoadedError,
    StorageError,
    VaultError,
    WrongPasswordOrCorruptData,
)
from .generator import PasswordConfig, generate, generate_password
from .manager import CredentialStore
from .strength import PasswordStrength, evaluate_password_strength, get_strength_description
from .cli import cli

__all__ = [
    "Credential",
    "CredentialStore",
    "PasswordConfig",
    "PasswordStrength",
    "generate",
    "generate_password",
    "evaluate_password_strength",
    "get_strength_description",
    "ConfigurationError",
    "MalformedRecordError",
    "NotLoadedError",
    "StorageError",
    "VaultError",
    "WrongPasswordOrCorruptData",
    "cli",
]


def get_version():
    """Get the current version string."""
    return __version__
