"""Factory for building data stores from environment configuration."""

from __future__ import annotations

from urllib.parse import urlparse

from datastore_minio.core.config import Settings, get_settings
from datastore_minio.storage.crypto import FernetCryptoService
from datastore_minio.storage.minio_impl import MinioDataStore
from datastore_minio.storage.options import Configurator, with_crypto_service


def _normalize_endpoint(endpoint: str) -> tuple[str, bool]:
    """Extract host:port from endpoint URL and determine if secure (https).

    Returns:
        Tuple of (host:port, secure_flag)
    """
    parsed = urlparse(endpoint)
    secure = parsed.scheme == "https"
    host = parsed.netloc or parsed.path.rstrip("/")
    return host, secure


def build_data_store(settings: Settings | None = None, *configurators: Configurator) -> MinioDataStore:
    """Build and initialize a MinioDataStore.

    Environment variables (see ``Settings``):
        S3_ENDPOINT: Full URL to MinIO/S3 endpoint (e.g., http://localhost:9000)
        S3_ACCESS_KEY: Access key for authentication
        S3_SECRET_KEY: Secret key for authentication
        S3_REGION: Region used for the client and for new buckets
        DATA_STORE_ENCRYPTION_KEY: Optional Fernet key; enables payload encryption
    """
    settings = settings or get_settings()
    host, secure = _normalize_endpoint(settings.S3_ENDPOINT)

    session: list[Configurator] = []
    if settings.DATA_STORE_ENCRYPTION_KEY:
        session.append(with_crypto_service(FernetCryptoService(settings.DATA_STORE_ENCRYPTION_KEY)))
    session.extend(configurators)

    store = MinioDataStore(
        host,
        secure,
        settings.S3_ACCESS_KEY,
        settings.S3_SECRET_KEY,
        *session,
        region=settings.S3_REGION,
    )
    store.init()
    return store


__all__ = ["build_data_store"]
