"""Session and per-call options for the data store.

Session options live for the lifetime of a store and are built by applying
configurators (``with_attribute``, ``with_crypto_service``) in order; the
first failing configurator aborts the whole application.

Per-call options are typed pydantic records validated before any backend
call is made.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from datastore_minio.storage.contracts import ConfigurationError, CryptoService

ATTRIBUTE_IS_PUBLIC = "is-public"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class DataStoreOptions:
    """Session-scoped options of a store."""

    attributes: dict[str, Any] = field(default_factory=dict)
    crypto_service: Optional[CryptoService] = None


Configurator = Callable[[DataStoreOptions], None]


def with_attribute(key: str, value: Any) -> Configurator:
    """Set a session attribute."""

    def apply(options: DataStoreOptions) -> None:
        if not key:
            raise ConfigurationError("configure", None, None, "attribute key must not be empty")
        options.attributes[key] = value

    return apply


def with_crypto_service(service: CryptoService) -> Configurator:
    """Attach a crypto capability used on every read and write."""

    def apply(options: DataStoreOptions) -> None:
        if not isinstance(service, CryptoService):
            raise ConfigurationError(
                "configure",
                None,
                None,
                f"{type(service).__name__} does not provide encrypt/decrypt",
            )
        options.crypto_service = service

    return apply


def apply_configurators(options: DataStoreOptions, configurators: Iterable[Configurator]) -> DataStoreOptions:
    """Apply configurators in order, stopping at the first failure."""
    for configurator in configurators:
        try:
            configurator(options)
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError("configure", None, None, str(exc)) from exc
    return options


def is_public(attributes: dict[str, Any] | None) -> bool:
    """Only a boolean ``True`` under ``is-public`` requests a public bucket."""
    if not attributes:
        return False
    return attributes.get(ATTRIBUTE_IS_PUBLIC) is True


Name = Annotated[str, Field(min_length=1)]


class _CallOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class GetOptions(_CallOptions):
    bucket_name: Name
    object_name: Name


class SetOptions(_CallOptions):
    bucket_name: Name
    object_name: Name
    data: bytes = b""
    content_type: str = DEFAULT_CONTENT_TYPE
    attributes: dict[str, Any] = Field(default_factory=dict)


class CopyOptions(_CallOptions):
    src_bucket_name: Name
    src_object_name: Name
    dst_bucket_name: Name
    dst_object_name: Name
    attributes: dict[str, Any] = Field(default_factory=dict)


class ListOptions(_CallOptions):
    bucket_name: Optional[Name] = None
    prefix: Optional[str] = None


class DeleteOptions(_CallOptions):
    bucket_name: Name
    object_name: Name


OptionsT = TypeVar("OptionsT", bound=_CallOptions)


def compose(options_cls: type[OptionsT], op: str, **values: Any) -> OptionsT:
    """Build a per-call options record, dropping unset (``None``) values.

    Raises:
        ConfigurationError: if validation fails.
    """
    present = {name: value for name, value in values.items() if value is not None}
    try:
        return options_cls(**present)
    except ValidationError as exc:
        raise ConfigurationError(
            op,
            values.get("bucket_name") or values.get("dst_bucket_name"),
            values.get("object_name") or values.get("dst_object_name"),
            "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()),
        ) from exc


__all__ = [
    "ATTRIBUTE_IS_PUBLIC",
    "DEFAULT_CONTENT_TYPE",
    "DataStoreOptions",
    "Configurator",
    "with_attribute",
    "with_crypto_service",
    "apply_configurators",
    "is_public",
    "GetOptions",
    "SetOptions",
    "CopyOptions",
    "ListOptions",
    "DeleteOptions",
    "compose",
]
