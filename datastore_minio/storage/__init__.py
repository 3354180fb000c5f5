"""Storage package: data store facade over MinIO."""

from datastore_minio.storage.context import CallContext
from datastore_minio.storage.contracts import (
    AggregationError,
    ConfigurationError,
    CryptoError,
    CryptoService,
    DataStore,
    DecryptionError,
    EncryptionError,
    NotInitializedError,
    ObjectNotFoundError,
    OperationCancelledError,
    PartialListingError,
    ProvisioningError,
    ResetError,
    StorageError,
)
from datastore_minio.storage.crypto import FernetCryptoService
from datastore_minio.storage.minio_impl import MinioDataStore
from datastore_minio.storage.options import (
    ATTRIBUTE_IS_PUBLIC,
    DataStoreOptions,
    with_attribute,
    with_crypto_service,
)

__all__ = [
    "ATTRIBUTE_IS_PUBLIC",
    "AggregationError",
    "CallContext",
    "ConfigurationError",
    "CryptoError",
    "CryptoService",
    "DataStore",
    "DataStoreOptions",
    "DecryptionError",
    "EncryptionError",
    "FernetCryptoService",
    "MinioDataStore",
    "NotInitializedError",
    "ObjectNotFoundError",
    "OperationCancelledError",
    "PartialListingError",
    "ProvisioningError",
    "ResetError",
    "StorageError",
    "with_attribute",
    "with_crypto_service",
]
