"""Tests for the best-effort bulk eraser behind reset()."""

from unittest.mock import MagicMock

import pytest

from datastore_minio.storage.context import CallContext
from datastore_minio.storage.contracts import OperationCancelledError, ResetError
from datastore_minio.storage.eraser import BulkEraser
from tests.fakes import make_s3_error


def test_reset_removes_all_versions_and_buckets(store, fake_minio):
    store.set("bucket1", "a", b"v1")
    store.set("bucket1", "a", b"v2")
    store.set("bucket2", "b", b"x")
    store.delete("bucket2", "b")

    store.reset()

    assert fake_minio.buckets == {}
    assert store.total() == 0


def test_reset_on_empty_store(store):
    store.reset()
    store.reset()

    assert store.total() == 0


def test_reset_continues_past_failures(store, fake_minio):
    store.set("a", "1", b"x")
    store.set("a", "2", b"x")
    store.set("b", "3", b"x")
    original = fake_minio.remove_object

    def flaky(bucket_name, object_name, version_id=None):
        if object_name == "1":
            raise make_s3_error("AccessDenied", bucket_name, object_name)
        return original(bucket_name, object_name, version_id=version_id)

    fake_minio.remove_object = flaky

    with pytest.raises(ResetError) as excinfo:
        store.reset()

    err = excinfo.value
    assert err.count == 1
    assert err.first.key == "1"
    assert "1 failure(s)" in err.message
    assert set(fake_minio.buckets) == {"a"}
    assert list(fake_minio.buckets["a"].objects) == ["1"]

    fake_minio.remove_object = original
    store.reset()
    assert fake_minio.buckets == {}


def test_reset_collects_every_failure():
    client = MagicMock()
    client.list_buckets.return_value = [MagicMock(), MagicMock()]
    client.list_buckets.return_value[0].name = "a"
    client.list_buckets.return_value[1].name = "b"
    client.list_objects.side_effect = RuntimeError("listing broken")

    eraser = BulkEraser(client)
    with pytest.raises(ResetError) as excinfo:
        eraser.run()

    assert excinfo.value.count == 2
    assert [failure.bucket for failure in excinfo.value.failures] == ["a", "b"]
    client.remove_bucket.assert_not_called()


def test_reset_bucket_listing_failure():
    client = MagicMock()
    client.list_buckets.side_effect = RuntimeError("down")

    with pytest.raises(ResetError) as excinfo:
        BulkEraser(client).run()

    assert excinfo.value.count == 1
    assert "down" in str(excinfo.value.first)


def test_reset_ignores_concurrently_removed_resources():
    client = MagicMock()
    bucket = MagicMock()
    bucket.name = "gone"
    client.list_buckets.return_value = [bucket]
    client.list_objects.return_value = [MagicMock(object_name="o", version_id="v1")]
    client.remove_object.side_effect = make_s3_error("NoSuchVersion", "gone", "o")
    client.remove_bucket.side_effect = make_s3_error("NoSuchBucket", "gone")

    BulkEraser(client).run()

    client.remove_object.assert_called_once_with(bucket_name="gone", object_name="o", version_id="v1")
    client.list_objects.assert_called_once_with(bucket_name="gone", recursive=True, include_version=True)


def test_reset_cancelled_between_items(store, fake_minio):
    store.set("a", "1", b"x")
    store.set("a", "2", b"x")
    ctx = CallContext()
    original = fake_minio.remove_object

    def cancelling(bucket_name, object_name, version_id=None):
        original(bucket_name, object_name, version_id=version_id)
        ctx.cancel()

    fake_minio.remove_object = cancelling

    with pytest.raises(OperationCancelledError):
        store.reset(ctx=ctx)

    assert list(fake_minio.buckets["a"].objects) == ["2"]
