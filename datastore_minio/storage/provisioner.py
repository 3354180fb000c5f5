"""Bucket provisioning: create missing buckets, optionally public-read."""

from __future__ import annotations

import json
import logging

from minio import Minio

from datastore_minio.storage.context import CallContext, check
from datastore_minio.storage.contracts import ProvisioningError

logger = logging.getLogger(__name__)


def public_read_policy(bucket_name: str) -> str:
    """Policy granting anonymous read access to every object in the bucket."""
    policy = {
        "Statement": [
            {
                "Action": ["s3:GetObject"],
                "Effect": "Allow",
                "Principal": {"AWS": ["*"]},
                "Resource": [f"arn:aws:s3:::{bucket_name}/*"],
            }
        ],
        "Version": "2012-10-17",
    }
    return json.dumps(policy)


class BucketProvisioner:
    """Ensures a bucket exists before it is written to.

    New buckets are created with object locking enabled. The public-read
    policy is attached once, right after creation; an existing bucket is
    never touched.
    """

    def __init__(self, client: Minio, region: str = "us-east-1"):
        self._client = client
        self._region = region

    def ensure_bucket(
        self,
        bucket_name: str,
        *,
        public: bool = False,
        op: str = "ensure_bucket",
        ctx: CallContext | None = None,
    ) -> bool:
        """Create ``bucket_name`` if missing.

        Returns:
            True if the bucket was created by this call.

        Raises:
            ProvisioningError: if the existence check, creation or policy
                attachment fails.
        """
        check(ctx, op, bucket_name)
        try:
            if self._client.bucket_exists(bucket_name=bucket_name):
                return False
        except Exception as exc:
            raise ProvisioningError(op, bucket_name, None, f"bucket existence check: {exc}") from exc
        self.create_bucket(bucket_name, public=public, op=op, ctx=ctx)
        return True

    def create_bucket(
        self,
        bucket_name: str,
        *,
        public: bool = False,
        op: str = "create_bucket",
        ctx: CallContext | None = None,
    ) -> None:
        check(ctx, op, bucket_name)
        try:
            self._client.make_bucket(bucket_name=bucket_name, location=self._region, object_lock=True)
        except Exception as exc:
            raise ProvisioningError(op, bucket_name, None, f"bucket creation: {exc}") from exc
        logger.info("Created bucket %s (region=%s, object_lock=True)", bucket_name, self._region)

        if not public:
            return
        try:
            self._client.set_bucket_policy(bucket_name=bucket_name, policy=public_read_policy(bucket_name))
        except Exception as exc:
            raise ProvisioningError(op, bucket_name, None, f"public policy: {exc}") from exc
        logger.info("Attached public-read policy to bucket %s", bucket_name)


__all__ = ["BucketProvisioner", "public_read_policy"]
