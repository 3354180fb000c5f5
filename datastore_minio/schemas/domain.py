"""Domain models returned by the data store."""

from pydantic import BaseModel, ConfigDict


class DataModel(BaseModel):
    """A named object within a bucket.

    ``data`` is empty for models produced by listing operations.
    """

    model_config = ConfigDict(frozen=True)

    bucket_name: str
    object_name: str
    data: bytes = b""


class StoreInfo(BaseModel):
    """Aggregate statistics of a data store, computed by full traversal."""

    store_type: str
    connection_info: str
    last_update_time: int = 0  # nanoseconds since epoch
    num_buckets: int = 0
    num_objects: int = 0
    total_size_in_bytes: int = 0
