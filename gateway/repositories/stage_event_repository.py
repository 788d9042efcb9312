"""Stage event repository: persisted trace of upload saga transitions."""

import sqlite3
from typing import List, Optional

from common.logging_config import get_logger
from gateway.database import get_db_connection
from gateway.types import StageEvent, StageEventStatus, UploadStage
from gateway.utils import generate_uuid, get_current_timestamp

logger = get_logger(__name__)


class StageEventRepository:
    @staticmethod
    def record_event(
        record_id: str,
        stage: UploadStage,
        status: StageEventStatus,
        detail: Optional[str] = None,
        conn=None
    ) -> StageEvent:
        """
        Append an event to the record's trace. Events are ordered by a
        per-record sequence number.
        """
        event = StageEvent(
            event_id=generate_uuid(),
            record_id=record_id,
            stage=UploadStage(stage),
            status=StageEventStatus(status),
            created_at=get_current_timestamp(),
            detail=detail,
        )

        if conn is None:
            with get_db_connection() as conn:
                StageEventRepository._insert(event, conn)
                conn.commit()
        else:
            StageEventRepository._insert(event, conn)

        return event

    @staticmethod
    def _insert(event: StageEvent, conn: sqlite3.Connection) -> None:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT COALESCE(MAX(sequence), 0) AS last FROM upload_stage_events WHERE record_id = ?",
            (event.record_id,)
        )
        sequence = cursor.fetchone()["last"] + 1

        cursor.execute(
            """
            INSERT INTO upload_stage_events (event_id, record_id, stage, status, detail, created_at, sequence)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.event_id,
                event.record_id,
                event.stage.value,
                event.status.value,
                event.detail,
                event.created_at,
                sequence,
            )
        )

    @staticmethod
    def list_for_record(record_id: str) -> List[StageEvent]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT event_id, record_id, stage, status, detail, created_at
                FROM upload_stage_events
                WHERE record_id = ?
                ORDER BY sequence
                """,
                (record_id,)
            )
            rows = cursor.fetchall()

            return [
                StageEvent(
                    event_id=row["event_id"],
                    record_id=row["record_id"],
                    stage=UploadStage(row["stage"]),
                    status=StageEventStatus(row["status"]),
                    created_at=row["created_at"],
                    detail=row["detail"],
                )
                for row in rows
            ]
