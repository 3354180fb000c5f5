"""Aggregate statistics computed by walking every bucket and object.

Both walks here are best-effort: a failure while listing the objects of
one bucket abandons that bucket and moves on to the next one. Objects
already seen in the abandoned bucket stay counted. This is deliberately
more tolerant than ``MinioDataStore.list``, which stops at the first
enumeration failure.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterator

from minio import Minio

from datastore_minio.schemas.domain import StoreInfo
from datastore_minio.storage.context import CallContext, check
from datastore_minio.storage.contracts import AggregationError, OperationCancelledError

logger = logging.getLogger(__name__)


def to_nanos(value: datetime | None) -> int:
    if value is None:
        return 0
    return int(value.timestamp()) * 1_000_000_000 + value.microsecond * 1000


def walk_bucket(client: Minio, bucket_name: str, *, op: str, ctx: CallContext | None = None) -> Iterator[Any]:
    """Lazily yield every object of a bucket, checking ``ctx`` between items."""
    check(ctx, op, bucket_name)
    for obj in client.list_objects(bucket_name=bucket_name, recursive=True):
        yield obj
        check(ctx, op, bucket_name)


def count_objects(client: Minio, *, ctx: CallContext | None = None) -> int:
    """Count every object in every bucket; failures shrink the tally silently."""
    check(ctx, "total")
    try:
        buckets = client.list_buckets()
    except Exception as exc:
        logger.warning("total: bucket listing failed, reporting 0: %s", exc)
        return 0

    total = 0
    for bucket in buckets:
        try:
            for _ in walk_bucket(client, bucket.name, op="total", ctx=ctx):
                total += 1
        except OperationCancelledError:
            raise
        except Exception as exc:
            logger.warning("total: listing bucket %s abandoned: %s", bucket.name, exc)
    return total


def collect_info(
    client: Minio,
    *,
    store_type: str,
    connection_info: str,
    ctx: CallContext | None = None,
) -> StoreInfo:
    """Recompute bucket/object counts, byte total and last modification time.

    Raises:
        AggregationError: if the bucket listing itself fails; ``info`` on the
            error is the zeroed result.
    """
    info = StoreInfo(store_type=store_type, connection_info=connection_info)
    check(ctx, "info")
    try:
        buckets = client.list_buckets()
    except Exception as exc:
        raise AggregationError("info", None, None, f"bucket listing: {exc}", info=info) from exc

    num_buckets = 0
    num_objects = 0
    total_size = 0
    last_update = 0
    for bucket in buckets:
        num_buckets += 1
        try:
            for obj in walk_bucket(client, bucket.name, op="info", ctx=ctx):
                num_objects += 1
                total_size += obj.size or 0
                last_update = max(last_update, to_nanos(obj.last_modified))
        except OperationCancelledError:
            raise
        except Exception as exc:
            logger.warning("info: listing bucket %s abandoned: %s", bucket.name, exc)

    return info.model_copy(
        update={
            "num_buckets": num_buckets,
            "num_objects": num_objects,
            "total_size_in_bytes": total_size,
            "last_update_time": last_update,
        }
    )


__all__ = ["to_nanos", "walk_bucket", "count_objects", "collect_info"]
