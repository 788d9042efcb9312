"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from gateway.config import DATABASE_PATH


def init_database() -> None:
    """
    Initialize database and create tables if they don't exist.
    """
    db_path = Path(DATABASE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection() as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS local_file_records (
                record_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                local_path TEXT NOT NULL,
                extension TEXT NOT NULL,
                mime_type TEXT NOT NULL,
                size INTEGER NOT NULL DEFAULT 0,
                metadata TEXT NOT NULL,
                service_node_address TEXT NOT NULL,
                data_validator_address TEXT NOT NULL,
                data_owner_address TEXT,
                private_key TEXT,
                keep_until TEXT NOT NULL,
                uploaded_to_dds INTEGER NOT NULL DEFAULT 0,
                failed INTEGER NOT NULL DEFAULT 0,
                dds_id TEXT,
                price REAL NOT NULL DEFAULT 0,
                storage_price REAL,
                deleted_locally INTEGER NOT NULL DEFAULT 0,
                stage TEXT NOT NULL,
                failed_stage TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS upload_stage_events (
                event_id TEXT PRIMARY KEY,
                record_id TEXT NOT NULL,
                stage TEXT NOT NULL,
                status TEXT NOT NULL,
                detail TEXT,
                created_at TEXT NOT NULL,
                sequence INTEGER NOT NULL,
                FOREIGN KEY(record_id) REFERENCES local_file_records(record_id)
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_records_dds_id ON local_file_records(dds_id)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_records_stage ON local_file_records(stage)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_stage_events_record ON upload_stage_events(record_id, sequence)
        """)

        conn.commit()


@contextmanager
def get_db_connection() -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
