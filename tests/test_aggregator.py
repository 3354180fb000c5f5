"""Tests for total() and info() aggregation."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from datastore_minio.storage.aggregator import collect_info, count_objects, to_nanos
from datastore_minio.storage.context import CallContext
from datastore_minio.storage.contracts import AggregationError, OperationCancelledError
from tests.fakes import failing_after, make_s3_error


def test_to_nanos():
    moment = datetime(2024, 1, 1, 0, 0, 1, 500, tzinfo=timezone.utc)

    assert to_nanos(moment) == 1704067201 * 1_000_000_000 + 500_000
    assert to_nanos(None) == 0


def test_total_counts_every_bucket(store):
    store.set("bucket1", "a", b"1")
    store.set("bucket1", "b", b"22")
    store.set("bucket2", "c", b"333")

    assert store.total() == 3


def test_total_ignores_delete_markers(store):
    store.set("b", "a", b"1")
    store.set("b", "b", b"1")
    store.delete("b", "a")

    assert store.total() == 1


def test_total_skips_failing_bucket(fake_minio, store):
    store.set("a", "1", b"x")
    store.set("b", "2", b"x")
    store.set("b", "3", b"x")
    original = fake_minio.list_objects
    first_of_b = fake_minio.buckets["b"].objects["2"][-1]

    def flaky(bucket_name, **kwargs):
        if bucket_name == "b":
            return failing_after([first_of_b], make_s3_error("InternalError", "b"))()
        return original(bucket_name, **kwargs)

    fake_minio.list_objects = flaky

    assert store.total() == 2


def test_total_returns_zero_when_bucket_listing_fails():
    client = MagicMock()
    client.list_buckets.side_effect = RuntimeError("down")

    assert count_objects(client) == 0


def test_info_aggregates(store, fake_minio):
    store.set("bucket1", "a", b"1")
    store.set("bucket1", "b", b"22")
    store.set("bucket2", "c", b"333")
    newest = fake_minio.buckets["bucket2"].objects["c"][-1].last_modified

    info = store.info()

    assert info.store_type == "minio"
    assert info.connection_info == store.connection_info
    assert info.num_buckets == 2
    assert info.num_objects == 3
    assert info.total_size_in_bytes == 6
    assert info.last_update_time == to_nanos(newest)


def test_info_is_recomputed(store):
    store.set("b", "a", b"1234")
    assert store.info().num_objects == 1

    store.delete("b", "a")
    info = store.info()

    assert info.num_objects == 0
    assert info.total_size_in_bytes == 0
    assert info.num_buckets == 1


def test_info_tolerates_object_listing_failure(store, fake_minio):
    store.set("a", "1", b"xx")
    store.set("b", "2", b"yyy")
    original = fake_minio.list_objects

    def flaky(bucket_name, **kwargs):
        if bucket_name == "a":
            return failing_after([], RuntimeError("reset by peer"))()
        return original(bucket_name, **kwargs)

    fake_minio.list_objects = flaky

    info = store.info()

    assert info.num_buckets == 2
    assert info.num_objects == 1
    assert info.total_size_in_bytes == 3


def test_info_bucket_listing_failure_is_hard_error():
    client = MagicMock()
    client.list_buckets.side_effect = make_s3_error("AccessDenied")

    with pytest.raises(AggregationError) as excinfo:
        collect_info(client, store_type="minio", connection_info="ak:***@h")

    info = excinfo.value.info
    assert (info.num_buckets, info.num_objects, info.total_size_in_bytes, info.last_update_time) == (0, 0, 0, 0)
    assert info.connection_info == "ak:***@h"


def test_info_stops_between_items_when_cancelled(store, fake_minio):
    store.set("b", "1", b"x")
    store.set("b", "2", b"x")
    ctx = CallContext()
    original = fake_minio.list_objects

    def cancelling(bucket_name, **kwargs):
        for obj in original(bucket_name, **kwargs):
            yield obj
            ctx.cancel()

    fake_minio.list_objects = cancelling

    with pytest.raises(OperationCancelledError):
        store.info(ctx=ctx)
