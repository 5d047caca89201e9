import pytest

from fakes import FakeStore


@pytest.fixture
def store():
    return FakeStore()
