"""
crypto.py - Handles all encryption and decryption operations
This is the security core of SecureVault

Every blob is self-contained: base64(salt || nonce || ciphertext+tag).
A fresh salt and nonce are drawn for each call, so encrypting the same
plaintext twice under the same password never yields the same blob.
"""
import base64
import binascii
import os
from dataclasses import dataclass
from typing import Callable, Optional

import argon2
from argon2.low_level import hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import WrongPasswordOrCorruptData

SALT_SIZE = 16   # 128-bit salt
NONCE_SIZE = 12  # 96-bit nonce, the size AES-GCM is designed for
TAG_SIZE = 16    # 128-bit authentication tag
KEY_SIZE = 32    # 256-bit key for AES-256

PASSWORD_VALIDATOR = "SECUREVAULT_PASSWORD_VALIDATOR"


@dataclass(frozen=True)
class KdfParams:
    """Argon2id cost parameters"""

    time_cost: int = 3        # 3 iterations
    memory_cost: int = 65536  # 64MB memory (in KiB)
    parallelism: int = 4      # 4 parallel lanes


class Crypto:
    """Authenticated encryption (AES-256-GCM) under an Argon2id password-derived key"""

    def __init__(
        self,
        kdf_params: Optional[KdfParams] = None,
        random_bytes: Callable[[int], bytes] = os.urandom,
    ):
        """
        Args:
            kdf_params: Argon2id cost parameters (default: KdfParams())
            random_bytes: CSPRNG used for salts and nonces
        """
        self.kdf_params = kdf_params or KdfParams()
        self._random_bytes = random_bytes

    def derive_key(self, password: str, salt: bytes) -> bytes:
        """
        Derive a 256-bit key from the master password.

        Argon2id is memory-hard, which makes GPU/ASIC guessing expensive,
        and the salt keeps equal passwords from producing equal keys.
        """
        return hash_secret_raw(
            secret=password.encode("utf-8"),
            salt=salt,
            time_cost=self.kdf_params.time_cost,
            memory_cost=self.kdf_params.memory_cost,
            parallelism=self.kdf_params.parallelism,
            hash_len=KEY_SIZE,
            type=argon2.Type.ID,
        )

    def encrypt(self, plaintext: str, password: str) -> str:
        """
        Encrypt a string and return the base64 blob.

        Args:
            plaintext: Text to protect
            password: Master password

        Returns:
            base64(salt || nonce || ciphertext+tag)
        """
        salt = self._random_bytes(SALT_SIZE)
        nonce = self._random_bytes(NONCE_SIZE)
        key = self.derive_key(password, salt)

        ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.b64encode(salt + nonce + ciphertext).decode("ascii")

    def decrypt(self, blob: str, password: str) -> str:
        """
        Decrypt a blob produced by encrypt().

        Raises:
            WrongPasswordOrCorruptData: If the tag does not verify, or the
                blob is not valid base64 / too short to hold a tag
        """
        try:
            data = base64.b64decode(blob.strip(), validate=True)
        except (binascii.Error, ValueError):
            raise WrongPasswordOrCorruptData() from None

        if len(data) < SALT_SIZE + NONCE_SIZE + TAG_SIZE:
            raise WrongPasswordOrCorruptData()

        salt = data[:SALT_SIZE]
        nonce = data[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
        ciphertext = data[SALT_SIZE + NONCE_SIZE:]

        key = self.derive_key(password, salt)
        try:
            plaintext = AESGCM(key).decrypt(nonce, ciphertext, None)
            return plaintext.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError):
            raise WrongPasswordOrCorruptData() from None

    def verify_password(self, password: str, blob: str) -> bool:
        """
        Verify if a password is correct by trying to decrypt a blob.
        Returns True if password is correct, False otherwise.
        """
        try:
            self.decrypt(blob, password)
            return True
        except WrongPasswordOrCorruptData:
            return False

    def create_password_validator(self, password: str) -> str:
        """Encrypt the fixed sentinel; stored alongside credentials to check the master password"""
        return self.encrypt(PASSWORD_VALIDATOR, password)


_default_crypto = Crypto()


def encrypt(plaintext: str, password: str) -> str:
    """encrypt() with the default Argon2id parameters"""
    return _default_crypto.encrypt(plaintext, password)


def decrypt(blob: str, password: str) -> str:
    """decrypt() with the default Argon2id parameters"""
    return _default_crypto.decrypt(blob, password)
