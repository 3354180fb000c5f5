"""Best-effort erasure of every bucket, object and object version."""

from __future__ import annotations

import logging

from minio import Minio

from datastore_minio.storage.context import CallContext, check
from datastore_minio.storage.contracts import OperationCancelledError, ResetError, StorageError
from datastore_minio.storage.errors import is_not_found, wrap_error

logger = logging.getLogger(__name__)


class BulkEraser:
    """Deletes everything reachable through a client.

    Failures are collected instead of aborting the traversal. A bucket is
    removed only once all of its versions were deleted; otherwise it is left
    in place for the next run. Already-absent resources are not failures, so
    running the eraser again is the recovery path after a partial failure.
    """

    def __init__(self, client: Minio):
        self._client = client
        self.failures: list[StorageError] = []

    def run(self, ctx: CallContext | None = None) -> None:
        """Erase the store.

        Raises:
            ResetError: summarizing every failure, after the full traversal.
            OperationCancelledError: if ``ctx`` fires between two items.
        """
        self.failures = []
        check(ctx, "reset")
        try:
            buckets = self._client.list_buckets()
        except Exception as exc:
            raise ResetError([wrap_error("reset", None, None, exc)]) from exc

        removed = 0
        for bucket in buckets:
            check(ctx, "reset", bucket.name)
            if self._erase_bucket(bucket.name, ctx):
                removed += 1

        if self.failures:
            logger.warning(
                "Reset finished with %d failure(s), %d bucket(s) removed", len(self.failures), removed
            )
            raise ResetError(list(self.failures)) from self.failures[0]
        logger.info("Reset removed %d bucket(s)", removed)

    def _erase_bucket(self, bucket_name: str, ctx: CallContext | None) -> bool:
        failed_before = len(self.failures)
        try:
            versions = self._client.list_objects(bucket_name=bucket_name, recursive=True, include_version=True)
            for obj in versions:
                self._remove_version(bucket_name, obj.object_name, obj.version_id)
                check(ctx, "reset", bucket_name)
        except OperationCancelledError:
            raise
        except Exception as exc:
            if not is_not_found(exc):
                self._record("list_objects", bucket_name, None, exc)

        if len(self.failures) > failed_before:
            return False
        try:
            self._client.remove_bucket(bucket_name=bucket_name)
        except Exception as exc:
            if is_not_found(exc):
                return False
            self._record("remove_bucket", bucket_name, None, exc)
            return False
        return True

    def _remove_version(self, bucket_name: str, object_name: str, version_id: str | None) -> None:
        try:
            self._client.remove_object(bucket_name=bucket_name, object_name=object_name, version_id=version_id)
        except Exception as exc:
            if not is_not_found(exc):
                self._record("remove_object", bucket_name, object_name, exc)

    def _record(self, op: str, bucket: str | None, key: str | None, exc: Exception) -> None:
        logger.debug("reset: %s failed for %s/%s: %s", op, bucket, key, exc)
        self.failures.append(wrap_error(op, bucket, key, exc))


def erase_all(client: Minio, ctx: CallContext | None = None) -> None:
    BulkEraser(client).run(ctx)


__all__ = ["BulkEraser", "erase_all"]
