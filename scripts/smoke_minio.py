#!/usr/bin/env python3
"""
Smoke test of the data store against a running MinIO server.

WARNING: the run starts and ends with reset(), which erases every bucket
reachable with the given credentials. Point it at a disposable server.

Prerequisites:
    docker run -p 9000:9000 -e MINIO_ROOT_USER=ROOTNAME \
        -e MINIO_ROOT_PASSWORD=CHANGEME123 minio/minio server /data

Usage:
    S3_ACCESS_KEY=ROOTNAME S3_SECRET_KEY=CHANGEME123 python scripts/smoke_minio.py

    # Encrypt payloads with a generated key:
    python scripts/smoke_minio.py --encrypt

    # Output store info as JSON:
    python scripts/smoke_minio.py --json
"""

import argparse
import json
import logging
import sys

from datastore_minio.core.config import get_settings
from datastore_minio.core.logging import setup_logging
from datastore_minio.storage.contracts import StorageError
from datastore_minio.storage.crypto import FernetCryptoService
from datastore_minio.storage.factory import build_data_store
from datastore_minio.storage.options import with_crypto_service

logger = logging.getLogger("smoke_minio")


def run(args: argparse.Namespace) -> int:
    configurators = []
    if args.encrypt:
        configurators.append(with_crypto_service(FernetCryptoService.generate()))

    with build_data_store(get_settings(), *configurators) as store:
        print(f"Connected: {store!r}")
        store.reset()

        store.set("bucket1", "object1", b"objectValue1", content_type="text/plain")
        store.set("bucket2", "object2", b"objectValue2", content_type="text/plain")
        print(f"Total after two writes: {store.total()}")

        value = store.get("bucket1", "object1").data
        print(f"bucket1/object1 = {value!r}")

        store.copy("bucket1", "object1", "bucket3", "object1-copy")
        items, total = store.list()
        for item in items:
            print(f"  {item.bucket_name}/{item.object_name}")
        print(f"Listed {total} object(s)")

        store.delete("bucket2", "object2")
        info = store.info()
        if args.json:
            print(json.dumps(info.model_dump(), indent=2))
        else:
            print(
                f"Info: {info.num_buckets} bucket(s), {info.num_objects} object(s), "
                f"{info.total_size_in_bytes} byte(s)"
            )

        store.reset()
        print(f"Total after reset: {store.total()}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke test the MinIO data store")
    parser.add_argument("--encrypt", action="store_true", help="Encrypt payloads with a throwaway key")
    parser.add_argument("--json", action="store_true", help="Print store info as JSON")
    args = parser.parse_args()

    setup_logging()
    try:
        return run(args)
    except StorageError as exc:
        logger.error("Smoke test failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
