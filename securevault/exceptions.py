"""
exceptions.py - Error kinds raised by SecureVault

None of these messages ever carry a secret value.
"""


class VaultError(Exception):
    """Base class for all SecureVault errors"""


class ConfigurationError(VaultError, ValueError):
    """Invalid password generation parameters or configuration values"""


class WrongPasswordOrCorruptData(VaultError):
    """
    Authenticated decryption failed.

    A wrong password and tampered/corrupted data are deliberately
    indistinguishable.
    """

    def __init__(self, message: str = "Wrong password or corrupted data"):
        super().__init__(message)


class NotLoadedError(VaultError):
    """The credential store was used before a successful load()"""

    def __init__(self, message: str = "Credentials not loaded! Call load() first."):
        super().__init__(message)


class StorageError(VaultError, OSError):
    """Reading or writing a vault, backup or export file failed"""


class MalformedRecordError(VaultError, ValueError):
    """A serialized record line could not be decoded and was skipped"""
