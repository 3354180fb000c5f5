"""Data store abstraction over S3-compatible object storage."""

from datastore_minio.schemas.domain import DataModel, StoreInfo
from datastore_minio.storage import (
    ATTRIBUTE_IS_PUBLIC,
    CallContext,
    DataStore,
    FernetCryptoService,
    MinioDataStore,
    StorageError,
    with_attribute,
    with_crypto_service,
)
from datastore_minio.storage.factory import build_data_store

__version__ = "0.1.0"

__all__ = [
    "ATTRIBUTE_IS_PUBLIC",
    "CallContext",
    "DataModel",
    "DataStore",
    "FernetCryptoService",
    "MinioDataStore",
    "StorageError",
    "StoreInfo",
    "build_data_store",
    "with_attribute",
    "with_crypto_service",
]
