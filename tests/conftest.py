"""Pytest configuration and fixtures."""

import pytest

from datastore_minio.storage.minio_impl import MinioDataStore
from tests.fakes import FakeMinio, ReversingCrypto


@pytest.fixture
def fake_minio():
    return FakeMinio()


@pytest.fixture
def patch_minio(monkeypatch, fake_minio):
    """Make ``Minio(...)`` inside the store return the fake; records the call."""
    calls = []

    def factory(*args, **kwargs):
        calls.append((args, kwargs))
        return fake_minio

    monkeypatch.setattr("datastore_minio.storage.minio_impl.Minio", factory)
    return calls


@pytest.fixture
def store(patch_minio):
    """An initialized store backed by ``fake_minio``."""
    data_store = MinioDataStore("127.0.0.1:9000", False, "ROOTNAME", "CHANGEME123")
    data_store.init()
    yield data_store
    data_store.close()


@pytest.fixture
def crypto():
    return ReversingCrypto()
