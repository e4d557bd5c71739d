from __future__ import annotations

import logging

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

KV_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS kv_store (
    store_key VARCHAR(191) NOT NULL PRIMARY KEY,
    store_value LONGTEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
)
"""


def ensure_kv_table(conn_factory: DatabaseConnection) -> None:
    """Idempotent: CREATE TABLE IF NOT EXISTS."""
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(KV_TABLE_DDL)
    logger.info("kv_store table ready on %s", conn_factory.config.database)
