import pytest

from storage import LocalStorage
from store import HabitStore


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data" / "storage.json"))


@pytest.fixture
def store(storage):
    return HabitStore(storage)
