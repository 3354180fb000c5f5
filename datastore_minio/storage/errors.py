"""Translation of MinIO SDK exceptions into data store errors."""

from __future__ import annotations

from minio.error import S3Error

from datastore_minio.storage.contracts import ObjectNotFoundError, StorageError

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "NoSuchVersion", "NoSuchObject"})


def is_not_found(exc: BaseException) -> bool:
    return isinstance(exc, S3Error) and exc.code in NOT_FOUND_CODES


def wrap_error(op: str, bucket: str | None, key: str | None, exc: Exception) -> StorageError:
    if isinstance(exc, StorageError):
        return exc
    if is_not_found(exc):
        return ObjectNotFoundError(op=op, bucket=bucket, key=key, message=str(exc))
    return StorageError(op=op, bucket=bucket, key=key, message=str(exc))


__all__ = ["NOT_FOUND_CODES", "is_not_found", "wrap_error"]
