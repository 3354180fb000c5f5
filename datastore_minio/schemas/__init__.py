"""Pydantic schemas for the data store."""

from datastore_minio.schemas.domain import DataModel, StoreInfo

__all__ = ["DataModel", "StoreInfo"]
