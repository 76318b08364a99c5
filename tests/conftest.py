from datetime import datetime, timedelta

import pytest

from securevault.config import VaultConfig
from securevault.crypto import Crypto, KdfParams
from securevault.manager import CredentialStore

# Argon2 minimums; the real parameters make every test take a noticeable fraction of a second
FAST_KDF = KdfParams(time_cost=1, memory_cost=8, parallelism=1)


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def fast_crypto():
    return Crypto(FAST_KDF)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 30, 15, 250000))


@pytest.fixture
def vault_path(tmp_path):
    return str(tmp_path / "securevault.enc")


@pytest.fixture
def backup_dir(tmp_path):
    return str(tmp_path / "backups")


@pytest.fixture
def make_store(vault_path, backup_dir, fast_crypto, clock):
    """Factory for stores sharing the same vault file"""
    def _make():
        return CredentialStore(vault_path, backup_dir=backup_dir, crypto=fast_crypto, clock=clock)
    return _make


@pytest.fixture
def store(make_store):
    return make_store()


@pytest.fixture
def loaded_store(store):
    assert store.load("master-pw")
    return store


@pytest.fixture
def config(tmp_path):
    return VaultConfig(home=str(tmp_path / "vault-home"), kdf=FAST_KDF, clipboard_timeout=0)
