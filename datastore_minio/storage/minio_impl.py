"""MinIO-backed implementation of the data store contract."""

from __future__ import annotations

import dataclasses
import io
import logging
from typing import Any, Iterator

from minio import Minio
from minio.commonconfig import CopySource

from datastore_minio.schemas.domain import DataModel, StoreInfo
from datastore_minio.storage.aggregator import collect_info, count_objects
from datastore_minio.storage.context import CallContext, check
from datastore_minio.storage.contracts import (
    DataStore,
    NotInitializedError,
    OperationCancelledError,
    PartialListingError,
    StorageError,
)
from datastore_minio.storage.crypto import decrypt_model, encrypt_payload
from datastore_minio.storage.eraser import erase_all
from datastore_minio.storage.errors import is_not_found, wrap_error
from datastore_minio.storage.options import (
    Configurator,
    CopyOptions,
    DataStoreOptions,
    DeleteOptions,
    GetOptions,
    ListOptions,
    SetOptions,
    apply_configurators,
    compose,
    is_public,
)
from datastore_minio.storage.provisioner import BucketProvisioner

logger = logging.getLogger(__name__)

STORE_TYPE = "minio"


class MinioDataStore(DataStore):
    """Data store backed by a MinIO (or any S3-compatible) server.

    The client handle is created by ``init()`` and dropped by ``close()``;
    every data operation in between shares it. The SDK client is safe for
    concurrent use, so no locking is added here.
    """

    def __init__(
        self,
        endpoint: str,
        secure: bool,
        access_key: str,
        secret_key: str,
        *configurators: Configurator,
        region: str = "us-east-1",
    ):
        self.endpoint = endpoint
        self.secure = secure
        self.region = region
        self._access_key = access_key
        self._secret_key = secret_key
        self._options = apply_configurators(DataStoreOptions(), configurators)
        self._client: Minio | None = None
        self._provisioner: BucketProvisioner | None = None

    # -----------
    # Lifecycle
    # -----------
    def init(self, *configurators: Configurator, ctx: CallContext | None = None) -> None:
        """Apply configurators, then connect to the backend.

        Raises:
            ConfigurationError: if a configurator fails; nothing is connected.
            StorageError: if the store is already initialized or the client
                cannot be created.
        """
        if self._client is not None:
            raise StorageError("init", None, None, f"{self} is already initialized")
        apply_configurators(self._options, configurators)
        check(ctx, "init")
        try:
            client = Minio(
                self.endpoint,
                access_key=self._access_key,
                secret_key=self._secret_key,
                secure=self.secure,
                region=self.region,
            )
        except Exception as exc:
            raise wrap_error("init", None, None, exc) from exc
        self._client = client
        self._provisioner = BucketProvisioner(client, region=self.region)
        logger.info("Data store initialized: %s", self.connection_info)

    def close(self) -> None:
        """Release the client handle. Safe to call repeatedly."""
        if self._client is None:
            return
        self._client = None
        self._provisioner = None
        logger.info("Data store closed: %s", self)

    def __enter__(self) -> "MinioDataStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _require_client(self, op: str, bucket: str | None = None, key: str | None = None) -> Minio:
        if self._client is None:
            raise NotInitializedError(op, bucket, key, f"{self} is not initialized")
        return self._client

    # --------------------
    # Single-object access
    # --------------------
    def get(self, bucket_name: str, object_name: str, *, ctx: CallContext | None = None) -> DataModel:
        """Read an object, decrypting it if a crypto service is configured.

        Raises:
            ObjectNotFoundError: if the bucket or object does not exist.
            DecryptionError: with ``model`` set to the payload as stored.
        """
        opts = compose(GetOptions, "get", bucket_name=bucket_name, object_name=object_name)
        client = self._require_client("get", opts.bucket_name, opts.object_name)
        check(ctx, "get", opts.bucket_name, opts.object_name)
        try:
            response = client.get_object(bucket_name=opts.bucket_name, object_name=opts.object_name)
            try:
                data = response.read()
            finally:
                response.close()
                response.release_conn()
        except Exception as exc:
            raise wrap_error("get", opts.bucket_name, opts.object_name, exc) from exc

        model = DataModel(bucket_name=opts.bucket_name, object_name=opts.object_name, data=data)
        return decrypt_model(self._options.crypto_service, model, op="get", descriptor=str(self))

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
        """Write an object, provisioning its bucket first.

        The bucket is created public-read when ``attributes["is-public"]`` is
        ``True`` and the bucket does not exist yet.
        """
        opts = compose(
            SetOptions,
            "set",
            bucket_name=bucket_name,
            object_name=object_name,
            data=data,
            content_type=content_type,
            attributes=attributes,
        )
        self._require_client("set", opts.bucket_name, opts.object_name)
        self._provisioner.ensure_bucket(opts.bucket_name, public=is_public(opts.attributes), op="set", ctx=ctx)

        payload = encrypt_payload(
            self._options.crypto_service,
            opts.data,
            op="set",
            descriptor=str(self),
            bucket=opts.bucket_name,
            key=opts.object_name,
        )
        check(ctx, "set", opts.bucket_name, opts.object_name)
        try:
            self._client.put_object(
                bucket_name=opts.bucket_name,
                object_name=opts.object_name,
                data=io.BytesIO(payload),
                length=len(payload),
                content_type=opts.content_type,
            )
        except Exception as exc:
            raise wrap_error("set", opts.bucket_name, opts.object_name, exc) from exc

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
        """Server-side copy; stored bytes are copied as-is, never re-encrypted."""
        opts = compose(
            CopyOptions,
            "copy",
            src_bucket_name=src_bucket_name,
            src_object_name=src_object_name,
            dst_bucket_name=dst_bucket_name,
            dst_object_name=dst_object_name,
            attributes=attributes,
        )
        self._require_client("copy", opts.dst_bucket_name, opts.dst_object_name)
        self._provisioner.ensure_bucket(
            opts.dst_bucket_name, public=is_public(opts.attributes), op="copy", ctx=ctx
        )
        check(ctx, "copy", opts.dst_bucket_name, opts.dst_object_name)
        try:
            self._client.copy_object(
                bucket_name=opts.dst_bucket_name,
                object_name=opts.dst_object_name,
                source=CopySource(opts.src_bucket_name, opts.src_object_name),
            )
        except Exception as exc:
            raise wrap_error("copy", opts.src_bucket_name, opts.src_object_name, exc) from exc

    def delete(self, bucket_name: str, object_name: str, *, ctx: CallContext | None = None) -> None:
        """Remove an object; an already-absent object is not an error."""
        opts = compose(DeleteOptions, "delete", bucket_name=bucket_name, object_name=object_name)
        client = self._require_client("delete", opts.bucket_name, opts.object_name)
        check(ctx, "delete", opts.bucket_name, opts.object_name)
        try:
            client.remove_object(bucket_name=opts.bucket_name, object_name=opts.object_name)
        except Exception as exc:
            if is_not_found(exc):
                logger.debug("delete: %s/%s already absent", opts.bucket_name, opts.object_name)
                return
            raise wrap_error("delete", opts.bucket_name, opts.object_name, exc) from exc

    # -----------
    # Enumeration
    # -----------
    def iter_objects(
        self,
        *,
        bucket_name: str | None = None,
        prefix: str | None = None,
        ctx: CallContext | None = None,
    ) -> Iterator[DataModel]:
        """Lazily yield every object (names only, no payload).

        Options and initialization are checked immediately; enumeration
        happens as the iterator is consumed. The iterator is not restartable
        and must not be shared between threads. The first enumeration failure
        is raised as ``StorageError`` and ends the iteration.
        """
        opts = compose(ListOptions, "list", bucket_name=bucket_name, prefix=prefix)
        client = self._require_client("list", opts.bucket_name)
        check(ctx, "list", opts.bucket_name)
        return self._walk(client, opts, ctx)

    def _walk(self, client: Minio, opts: ListOptions, ctx: CallContext | None) -> Iterator[DataModel]:
        if opts.bucket_name is not None:
            bucket_names = [opts.bucket_name]
        else:
            try:
                bucket_names = [bucket.name for bucket in client.list_buckets()]
            except Exception as exc:
                raise wrap_error("list", None, None, exc) from exc

        for name in bucket_names:
            check(ctx, "list", name)
            try:
                objects = client.list_objects(bucket_name=name, prefix=opts.prefix, recursive=True)
                for obj in objects:
                    yield DataModel(bucket_name=name, object_name=obj.object_name)
                    check(ctx, "list", name)
            except OperationCancelledError:
                raise
            except Exception as exc:
                raise wrap_error("list", name, None, exc) from exc

    def list(
        self,
        *,
        bucket_name: str | None = None,
        prefix: str | None = None,
        ctx: CallContext | None = None,
    ) -> tuple[list[DataModel], int]:
        """Collect every object (names only) and their count.

        Raises:
            PartialListingError: on the first enumeration failure, carrying
                the items collected so far; their count is a lower bound.
        """
        items: list[DataModel] = []
        iterator = self.iter_objects(bucket_name=bucket_name, prefix=prefix, ctx=ctx)
        try:
            for item in iterator:
                items.append(item)
        except OperationCancelledError:
            raise
        except StorageError as exc:
            raise PartialListingError(exc.op, exc.bucket, exc.key, exc.message, items=items) from exc
        return items, len(items)

    # ----------
    # Aggregates
    # ----------
    def total(self, *, ctx: CallContext | None = None) -> int:
        """Best-effort object count.

        Listing failures are logged and skipped, so the result is a lower
        bound whenever the backend misbehaves.
        """
        return count_objects(self._require_client("total"), ctx=ctx)

    def info(self, *, ctx: CallContext | None = None) -> StoreInfo:
        """Recompute aggregate statistics by walking the whole store.

        Raises:
            AggregationError: if the bucket listing fails.
        """
        return collect_info(
            self._require_client("info"),
            store_type=STORE_TYPE,
            connection_info=self.connection_info,
            ctx=ctx,
        )

    def reset(self, *, ctx: CallContext | None = None) -> None:
        """Erase every object version and bucket.

        Raises:
            ResetError: after the full traversal, if anything failed. Calling
                ``reset`` again is the recovery path.
        """
        erase_all(self._require_client("reset"), ctx=ctx)

    # -------------
    # Introspection
    # -------------
    def options(self) -> DataStoreOptions:
        return dataclasses.replace(self._options, attributes=dict(self._options.attributes))

    @property
    def connection_info(self) -> str:
        return f"{self._access_key}:***@{self.endpoint}, secure: {str(self.secure).lower()}"

    def __str__(self) -> str:
        return f"{STORE_TYPE}://{self.endpoint}"

    def __repr__(self) -> str:
        return f"MinioDataStore({self.connection_info})"


__all__ = ["MinioDataStore", "STORE_TYPE"]
