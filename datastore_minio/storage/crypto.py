"""Crypto hook applied at the read/write boundary of the data store."""

from __future__ import annotations

import base64
import logging

from cryptography.fernet import Fernet, InvalidToken

from datastore_minio.schemas.domain import DataModel
from datastore_minio.storage.contracts import CryptoService, DecryptionError, EncryptionError

logger = logging.getLogger(__name__)


class FernetCryptoService:
    """CryptoService backed by Fernet (AES-128-CBC + HMAC-SHA256).

    Accepts either a urlsafe-base64 Fernet key or 32 raw key bytes.
    """

    def __init__(self, key: bytes | str):
        if isinstance(key, str):
            key = key.encode()
        if len(key) == 32:
            key = base64.urlsafe_b64encode(key)
        self._fernet = Fernet(key)

    @classmethod
    def generate(cls) -> "FernetCryptoService":
        return cls(Fernet.generate_key())

    def encrypt(self, data: bytes) -> bytes:
        return self._fernet.encrypt(data)

    def decrypt(self, data: bytes) -> bytes:
        try:
            return self._fernet.decrypt(data)
        except InvalidToken as exc:
            raise ValueError("invalid token or wrong key") from exc

    def __repr__(self) -> str:
        return "FernetCryptoService(key=***)"


def encrypt_payload(
    service: CryptoService | None,
    data: bytes,
    *,
    op: str,
    descriptor: str,
    bucket: str | None = None,
    key: str | None = None,
) -> bytes:
    """Encrypt ``data`` if a service is configured, otherwise pass it through."""
    if service is None:
        return data
    try:
        return service.encrypt(data)
    except Exception as exc:
        raise EncryptionError(op, bucket, key, f"{descriptor}: failed to encrypt data: {exc}") from exc


def decrypt_model(service: CryptoService | None, model: DataModel, *, op: str, descriptor: str) -> DataModel:
    """Return ``model`` with its payload decrypted.

    Empty payloads are returned unchanged. On failure the raised
    ``DecryptionError`` carries the untouched model.
    """
    if service is None or not model.data:
        return model
    try:
        plain = service.decrypt(model.data)
    except Exception as exc:
        logger.warning(
            "Decryption failed for %s/%s on %s", model.bucket_name, model.object_name, descriptor
        )
        raise DecryptionError(
            op,
            model.bucket_name,
            model.object_name,
            f"{descriptor}: failed to decrypt data: {exc}",
            model=model,
        ) from exc
    return model.model_copy(update={"data": plain})


__all__ = ["FernetCryptoService", "encrypt_payload", "decrypt_model"]
