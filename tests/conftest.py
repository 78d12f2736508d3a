import pytest

from exchange.manager import ExchangeManager
from exchange.store import DirectoryStore


@pytest.fixture
def store(tmp_path) -> DirectoryStore:
    store = DirectoryStore(tmp_path / "drop-spot")
    store.ensure_all()
    return store


@pytest.fixture
def manager(tmp_path) -> ExchangeManager:
    manager = ExchangeManager(tmp_path / "drop-spot")
    manager.start()
    return manager
