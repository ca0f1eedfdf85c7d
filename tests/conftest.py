import pytest

from propslot import PropertyStore, set_default_store


@pytest.fixture(autouse=True)
def store():
    """Fresh default store per test, restored afterwards."""
    fresh = PropertyStore()
    previous = set_default_store(fresh)
    try:
        yield fresh
    finally:
        set_default_store(previous)
