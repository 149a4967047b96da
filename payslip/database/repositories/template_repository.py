from typing import Any

from psycopg.rows import dict_row

from payslip.database.connection import get_connection
from payslip.database.exceptions import TemplateNotFoundError
from payslip.database.models import TemplateRecord


class TemplateRepository:
    """Database operations for the templates table.

    Every lookup is scoped by user: a template of another user behaves as
    if it did not exist.
    """

    def find_by_user(self, user_id: int) -> list[TemplateRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, name, codes
                    FROM templates
                    WHERE user_id = %s
                    ORDER BY id
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()

        return [_to_record(row) for row in rows]

    def find_by_name(self, user_id: int, name: str) -> TemplateRecord:
        """Fetch a user's template by name; the oldest wins on duplicates.

        Raises:
            TemplateNotFoundError: if the user has no template with this name.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, name, codes
                    FROM templates
                    WHERE user_id = %s AND name = %s
                    ORDER BY id
                    LIMIT 1
                    """,
                    (user_id, name),
                )
                row = cur.fetchone()

        if row is None:
            raise TemplateNotFoundError(f"Template '{name}' not found")
        return _to_record(row)

    def create(self, user_id: int, name: str, codes: str) -> int:
        """Persist a new template and return its id."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO templates (user_id, name, codes)
                    VALUES (%s, %s, %s)
                    RETURNING id
                    """,
                    (user_id, name, codes),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO templates returned no id")
        return int(row[0])

    def update(
        self,
        user_id: int,
        template_id: int,
        name: str | None = None,
        codes: str | None = None,
    ) -> TemplateRecord:
        """Change the name and/or codes of a template. None keeps the old value.

        Raises:
            TemplateNotFoundError: if the user has no template with this ID.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    UPDATE templates
                    SET name = COALESCE(%s, name), codes = COALESCE(%s, codes)
                    WHERE id = %s AND user_id = %s
                    RETURNING id, user_id, name, codes
                    """,
                    (name, codes, template_id, user_id),
                )
                row = cur.fetchone()
                if row is None:
                    raise TemplateNotFoundError(f"Template {template_id} not found")
            conn.commit()

        return _to_record(row)

    def delete(self, user_id: int, template_id: int) -> None:
        """Delete a template.

        Raises:
            TemplateNotFoundError: if the user has no template with this ID.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM templates WHERE id = %s AND user_id = %s",
                    (template_id, user_id),
                )
                if cur.rowcount == 0:
                    raise TemplateNotFoundError(f"Template {template_id} not found")
            conn.commit()


def _to_record(row: dict[str, Any]) -> TemplateRecord:
    return TemplateRecord(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        codes=row["codes"],
    )
