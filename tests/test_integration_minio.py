"""Runs against a live MinIO server when MINIO_INTEGRATION=1.

Connection settings come from the S3_* environment variables.
"""

import os
import uuid

import pytest

from datastore_minio.core.config import Settings
from datastore_minio.storage.factory import build_data_store

pytestmark = pytest.mark.skipif(
    os.environ.get("MINIO_INTEGRATION") != "1", reason="set MINIO_INTEGRATION=1 to run against MinIO"
)


@pytest.fixture
def live_store():
    store = build_data_store(Settings())
    yield store
    store.close()


def test_live_round_trip_and_cleanup(live_store):
    bucket = f"it-{uuid.uuid4().hex[:12]}"
    before = live_store.total()

    live_store.set(bucket, "object1", b"objectValue1", content_type="text/plain")
    live_store.copy(bucket, "object1", bucket, "object2")

    assert live_store.get(bucket, "object2").data == b"objectValue1"
    assert live_store.total() == before + 2

    live_store.delete(bucket, "object2")
    assert live_store.total() == before + 1

    items, total = live_store.list(bucket_name=bucket)
    assert total == 1
    assert items[0].object_name == "object1"
