from typing import Any

from psycopg.rows import dict_row

from payslip.consolidation.models import CodeAliasGroup
from payslip.database.connection import get_connection
from payslip.database.exceptions import CodeGroupNotFoundError
from payslip.database.models import CodeGroupRecord


class CodeGroupRepository:
    """Database operations for the code_groups table."""

    def find_records_by_user(self, user_id: int) -> list[CodeGroupRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, display_name, codes
                    FROM code_groups
                    WHERE user_id = %s
                    ORDER BY id
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()

        return [_to_record(row) for row in rows]

    def find_by_user(self, user_id: int) -> list[CodeAliasGroup]:
        """Fetch a user's alias groups in creation order."""
        return [
            CodeAliasGroup.from_string(record.display_name, record.codes)
            for record in self.find_records_by_user(user_id)
        ]

    def create(self, user_id: int, display_name: str, codes: str) -> int:
        """Persist a new alias group and return its id."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO code_groups (user_id, display_name, codes)
                    VALUES (%s, %s, %s)
                    RETURNING id
                    """,
                    (user_id, display_name, codes),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO code_groups returned no id")
        return int(row[0])

    def update(
        self,
        user_id: int,
        group_id: int,
        display_name: str | None = None,
        codes: str | None = None,
    ) -> CodeGroupRecord:
        """Change the display name and/or codes of a group. None keeps the old value.

        Raises:
            CodeGroupNotFoundError: if the user has no group with this ID.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    UPDATE code_groups
                    SET display_name = COALESCE(%s, display_name),
                        codes = COALESCE(%s, codes)
                    WHERE id = %s AND user_id = %s
                    RETURNING id, user_id, display_name, codes
                    """,
                    (display_name, codes, group_id, user_id),
                )
                row = cur.fetchone()
                if row is None:
                    raise CodeGroupNotFoundError(f"Code group {group_id} not found")
            conn.commit()

        return _to_record(row)

    def delete(self, user_id: int, group_id: int) -> None:
        """Delete an alias group.

        Raises:
            CodeGroupNotFoundError: if the user has no group with this ID.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM code_groups WHERE id = %s AND user_id = %s",
                    (group_id, user_id),
                )
                if cur.rowcount == 0:
                    raise CodeGroupNotFoundError(f"Code group {group_id} not found")
            conn.commit()


def _to_record(row: dict[str, Any]) -> CodeGroupRecord:
    return CodeGroupRecord(
        id=row["id"],
        user_id=row["user_id"],
        display_name=row["display_name"],
        codes=row["codes"],
    )
