"""Data store interfaces and error types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Protocol, runtime_checkable

from datastore_minio.schemas.domain import DataModel, StoreInfo

if TYPE_CHECKING:
    from datastore_minio.storage.context import CallContext
    from datastore_minio.storage.options import DataStoreOptions


class StorageError(Exception):
    """Wraps underlying storage exceptions with operation context."""

    def __init__(self, op: str, bucket: str | None, key: str | None, message: str):
        self.op = op
        self.bucket = bucket
        self.key = key
        self.message = message
        super().__init__(self.__str__())

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        bucket_repr = self.bucket or "<unknown>"
        key_repr = self.key or "<unknown>"
        return f"{self.op} failed for bucket={bucket_repr} key={key_repr}: {self.message}"


class ConfigurationError(StorageError):
    """A configurator or per-call option was rejected."""


class NotInitializedError(StorageError):
    """A data operation ran before ``init()`` or after ``close()``."""


class ObjectNotFoundError(StorageError):
    """The requested bucket, object or version does not exist."""


class ProvisioningError(StorageError):
    """Bucket existence check, creation or policy attachment failed."""


class OperationCancelledError(StorageError):
    """The call context was cancelled or its deadline passed."""


class CryptoError(StorageError):
    """Encryption or decryption of a payload failed."""


class EncryptionError(CryptoError):
    pass


class DecryptionError(CryptoError):
    """Decryption failed; ``model`` holds the payload as stored (still encrypted)."""

    def __init__(self, op: str, bucket: str | None, key: str | None, message: str, model: DataModel):
        self.model = model
        super().__init__(op, bucket, key, message)


class PartialListingError(StorageError):
    """Listing stopped at the first enumeration failure.

    ``items`` holds what was enumerated before the failure and ``total`` is
    their count, a lower bound of the real population.
    """

    def __init__(
        self,
        op: str,
        bucket: str | None,
        key: str | None,
        message: str,
        items: list[DataModel],
    ):
        self.items = items
        self.total = len(items)
        super().__init__(op, bucket, key, message)


class AggregationError(StorageError):
    """Bucket listing failed during ``info()``; ``info`` is the zeroed/partial result."""

    def __init__(self, op: str, bucket: str | None, key: str | None, message: str, info: StoreInfo):
        self.info = info
        super().__init__(op, bucket, key, message)


class ResetError(StorageError):
    """Summary of every failure collected by a best-effort reset."""

    def __init__(self, failures: list[Exception]):
        self.failures = failures
        self.count = len(failures)
        self.first = failures[0]
        super().__init__(
            "reset",
            None,
            None,
            f"{self.count} failure(s) during reset, first: {self.first}",
        )


@runtime_checkable
class CryptoService(Protocol):
    """Symmetric payload encryption capability."""

    def encrypt(self, data: bytes) -> bytes:
        ...

    def decrypt(self, data: bytes) -> bytes:
        ...


@runtime_checkable
class DataStore(Protocol):
    """Contract for data store implementations."""

    def init(self, *configurators: Any, ctx: CallContext | None = None) -> None:
        ...

    def get(self, bucket_name: str, object_name: str, *, ctx: CallContext | None = None) -> DataModel:
        ...

    def set(
        self,
        bucket_name: str,
        object_name: str,
        data: bytes,
        *,
        content_type: str | None = None,
        attributes: dict[str, Any] | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        ...

    def copy(
        self,
        src_bucket_name: str,
        src_object_name: str,
        dst_bucket_name: str,
        dst_object_name: str,
        *,
        attributes: dict[str, Any] | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        ...

    def list(
        self,
        *,
        bucket_name: str | None = None,
        prefix: str | None = None,
        ctx: CallContext | None = None,
    ) -> tuple[list[DataModel], int]:
        ...

    def iter_objects(
        self,
        *,
        bucket_name: str | None = None,
        prefix: str | None = None,
        ctx: CallContext | None = None,
    ) -> Iterator[DataModel]:
        ...

    def delete(self, bucket_name: str, object_name: str, *, ctx: CallContext | None = None) -> None:
        ...

    def total(self, *, ctx: CallContext | None = None) -> int:
        ...

    def info(self, *, ctx: CallContext | None = None) -> StoreInfo:
        ...

    def reset(self, *, ctx: CallContext | None = None) -> None:
        ...

    def close(self) -> None:
        ...

    def options(self) -> DataStoreOptions:
        ...


__all__ = [
    "StorageError",
    "ConfigurationError",
    "NotInitializedError",
    "ObjectNotFoundError",
    "ProvisioningError",
    "OperationCancelledError",
    "CryptoError",
    "EncryptionError",
    "DecryptionError",
    "PartialListingError",
    "AggregationError",
    "ResetError",
    "CryptoService",
    "DataStore",
]
