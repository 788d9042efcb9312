"""Local file record repository for database operations."""

import dataclasses
import json
import sqlite3
from typing import Optional

from common.logging_config import get_logger
from gateway.database import get_db_connection
from gateway.types import LocalFileRecord, UploadStage
from gateway.utils import generate_uuid, get_current_timestamp

logger = get_logger(__name__)

_COLUMNS = (
    "record_id", "name", "local_path", "extension", "mime_type", "size", "metadata",
    "service_node_address", "data_validator_address", "data_owner_address", "private_key",
    "keep_until", "uploaded_to_dds", "failed", "dds_id", "price", "storage_price",
    "deleted_locally", "stage", "failed_stage", "created_at", "updated_at",
)

_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM local_file_records"


def _to_row(record: LocalFileRecord) -> tuple:
    return (
        record.record_id,
        record.name,
        record.local_path,
        record.extension,
        record.mime_type,
        record.size,
        json.dumps(record.metadata or {}),
        record.service_node_address,
        record.data_validator_address,
        record.data_owner_address,
        record.private_key,
        record.keep_until,
        int(record.uploaded_to_dds),
        int(record.failed),
        record.dds_id,
        record.price,
        record.storage_price,
        int(record.deleted_locally),
        UploadStage(record.stage).value,
        UploadStage(record.failed_stage).value if record.failed_stage else None,
        record.created_at,
        record.updated_at,
    )


def _from_row(row: sqlite3.Row) -> LocalFileRecord:
    return LocalFileRecord(
        record_id=row["record_id"],
        name=row["name"],
        local_path=row["local_path"],
        extension=row["extension"],
        mime_type=row["mime_type"],
        size=row["size"],
        metadata=json.loads(row["metadata"]) if row["metadata"] else {},
        service_node_address=row["service_node_address"],
        data_validator_address=row["data_validator_address"],
        data_owner_address=row["data_owner_address"],
        private_key=row["private_key"],
        keep_until=row["keep_until"],
        uploaded_to_dds=bool(row["uploaded_to_dds"]),
        failed=bool(row["failed"]),
        dds_id=row["dds_id"],
        price=row["price"],
        storage_price=row["storage_price"],
        deleted_locally=bool(row["deleted_locally"]),
        stage=UploadStage(row["stage"]),
        failed_stage=UploadStage(row["failed_stage"]) if row["failed_stage"] else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class LocalFileRecordRepository:
    """
    Persists LocalFileRecord rows keyed by record id.

    There is no partial-update API: callers read the whole record, mutate it
    and hand it back to save(), which overwrites every column.
    """

    @staticmethod
    def create(record: LocalFileRecord, conn=None) -> LocalFileRecord:
        """
        Insert a new record, assigning an id if it has none.

        With a caller-supplied connection the insert joins the caller's
        transaction; otherwise it is committed on its own connection.

        Raises:
            sqlite3.IntegrityError: If a record with the same id already exists
        """
        now = get_current_timestamp()
        record = dataclasses.replace(
            record,
            record_id=record.record_id or generate_uuid(),
            created_at=record.created_at or now,
            updated_at=now,
        )
        record.check_invariants()

        if conn is None:
            with get_db_connection() as conn:
                LocalFileRecordRepository._insert(record, conn)
                conn.commit()
        else:
            LocalFileRecordRepository._insert(record, conn)

        logger.debug(f"Created local file record [record_id={record.record_id}]")
        return record

    @staticmethod
    def find_by_id(record_id: str) -> Optional[LocalFileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"{_SELECT} WHERE record_id = ?", (record_id,))
            row = cursor.fetchone()

            if row is None:
                return None

            return _from_row(row)

    @staticmethod
    def find_by_external_id(dds_id: str) -> Optional[LocalFileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"{_SELECT} WHERE dds_id = ? ORDER BY created_at DESC LIMIT 1",
                (dds_id,)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return _from_row(row)

    @staticmethod
    def save(record: LocalFileRecord, conn=None) -> LocalFileRecord:
        """
        Overwrite the stored record with the given one.

        Raises:
            LookupError: If no record with this id exists
            ValueError: If the record violates the upload invariants
        """
        record.check_invariants()
        record.updated_at = get_current_timestamp()

        try:
            if conn is None:
                with get_db_connection() as conn:
                    LocalFileRecordRepository._update(record, conn)
                    conn.commit()
            else:
                LocalFileRecordRepository._update(record, conn)
        except Exception as e:
            logger.error(f"Failed to save local file record [record_id={record.record_id}]: {e}")
            raise

        return record

    @staticmethod
    def _insert(record: LocalFileRecord, conn: sqlite3.Connection) -> None:
        cursor = conn.cursor()
        cursor.execute(
            f"""
            INSERT INTO local_file_records ({', '.join(_COLUMNS)})
            VALUES ({', '.join('?' for _ in _COLUMNS)})
            """,
            _to_row(record)
        )

    @staticmethod
    def _update(record: LocalFileRecord, conn: sqlite3.Connection) -> None:
        cursor = conn.cursor()
        row = _to_row(record)
        assignments = ", ".join(f"{column} = ?" for column in _COLUMNS[1:])
        cursor.execute(
            f"UPDATE local_file_records SET {assignments} WHERE record_id = ?",
            row[1:] + (record.record_id,)
        )
        if cursor.rowcount == 0:
            raise LookupError(f"Local file record {record.record_id} does not exist")
