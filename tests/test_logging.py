"""Ensure logging setup does not crash and sets level."""

import logging

from datastore_minio.core.logging import setup_logging


def test_setup_logging():
    setup_logging()
    logger = logging.getLogger()
    # Should configure without raising; ensure at least one handler attached
    assert logger.handlers


def test_store_logs_bucket_creation(store, caplog):
    with caplog.at_level(logging.INFO, logger="datastore_minio"):
        store.set("logged", "o", b"x")

    assert "Created bucket logged" in caplog.text
    assert "CHANGEME123" not in caplog.text
