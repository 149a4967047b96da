import json
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from payslip.database.connection import get_connection
from payslip.database.models import PayrollDataRecord
from payslip.extraction.models import ExtractedLineItem, ProcessedPayslip, Source


class PayrollDataRepository:
    """Database operations for the payroll_data table.

    Records are append-only: storing the same payslip twice creates two
    rows, and both count in consolidation.
    """

    def create(self, user_id: int, payslip: ProcessedPayslip) -> int:
        """Persist one payslip and return the new row id."""
        code_data = [item.to_dict() for item in payslip.items]
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO payroll_data (user_id, date, source, code_data)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id
                    """,
                    (user_id, payslip.date, payslip.source.value, Jsonb(code_data)),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO payroll_data returned no id")
        return int(row[0])

    def find_records_by_user(self, user_id: int) -> list[PayrollDataRecord]:
        """Fetch raw rows for a user in insertion order."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, date, source, code_data, created_at
                    FROM payroll_data
                    WHERE user_id = %s
                    ORDER BY id
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()

        return [
            PayrollDataRecord(
                id=row["id"],
                user_id=row["user_id"],
                date=row["date"],
                source=row["source"],
                code_data=_decode_code_data(row["code_data"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def find_by_user(self, user_id: int) -> list[ProcessedPayslip]:
        """Fetch a user's stored payslips in insertion order."""
        return [
            ProcessedPayslip(
                date=record.date,
                source=Source(record.source),
                items=[ExtractedLineItem.from_dict(raw) for raw in record.code_data],
            )
            for record in self.find_records_by_user(user_id)
        ]

    def clear_by_user(self, user_id: int) -> int:
        """Delete every payslip of a user. Returns the number of rows removed."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM payroll_data WHERE user_id = %s", (user_id,))
                deleted = cur.rowcount
            conn.commit()
        return deleted


def _decode_code_data(raw: Any) -> list[dict[str, Any]]:
    # Older rows hold the items as a JSON-encoded string inside the jsonb column.
    if isinstance(raw, str):
        raw = json.loads(raw)
    if not isinstance(raw, list):
        raise ValueError("code_data must be a list of items")
    return raw
