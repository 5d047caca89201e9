"""Keyword management in database."""

from typing import List, Optional

from psycopg import Connection

from ..models import Keyword


class KeywordManager:
    """Manage tracked keywords in database."""

    def list_enabled_terms(self, conn: Connection) -> List[str]:
        """Enabled terms, oldest first."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT term FROM keywords WHERE enabled ORDER BY created_at, id"
            )
            return [row["term"] for row in cur.fetchall()]

    def list_keywords(self, conn: Connection) -> List[Keyword]:
        """All keywords, oldest first."""
        with conn.cursor() as cur:
            cur.execute("SELECT * FROM keywords ORDER BY created_at, id")
            return [Keyword(**row) for row in cur.fetchall()]

    def add_keyword(self, conn: Connection, term: str, enabled: bool = True) -> Keyword:
        """Insert a keyword; raises on a duplicate term."""
        with conn.cursor() as cur:
            cur.execute(
                "INSERT INTO keywords (term, enabled) VALUES (%s, %s) RETURNING *",
                (term, enabled),
            )
            row = cur.fetchone()
        conn.commit()
        return Keyword(**row)

    def set_enabled(self, conn: Connection, term: str, enabled: bool) -> Optional[Keyword]:
        """Toggle a keyword; returns None when the term is unknown."""
        with conn.cursor() as cur:
            cur.execute(
                "UPDATE keywords SET enabled = %s WHERE term = %s RETURNING *",
                (enabled, term),
            )
            row = cur.fetchone()
        conn.commit()
        return Keyword(**row) if row else None

    def delete_keyword(self, conn: Connection, term: str) -> bool:
        """Delete a keyword by term."""
        with conn.cursor() as cur:
            cur.execute("DELETE FROM keywords WHERE term = %s", (term,))
            deleted = cur.rowcount > 0
        conn.commit()
        return deleted

    def seed_keywords(self, conn: Connection, terms: List[str]) -> int:
        """
        Insert any missing terms, leaving existing rows untouched.

        Returns:
            Number of terms inserted
        """
        inserted = 0
        with conn.cursor() as cur:
            for term in terms:
                cur.execute(
                    """
                    INSERT INTO keywords (term, enabled)
                    VALUES (%s, TRUE)
                    ON CONFLICT (term) DO NOTHING
                    """,
                    (term,),
                )
                inserted += cur.rowcount
        conn.commit()
        return inserted
