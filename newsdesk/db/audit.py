"""Audit log writes."""

from typing import Any, Dict, Optional

from psycopg import Connection
from psycopg.types.json import Jsonb

from ..models import AuditAction


class AuditLogger:
    """Append-only audit log."""

    def write(
        self,
        conn: Connection,
        action: AuditAction,
        actor_email: str,
        article_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Record an action; returns the log entry id."""
        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO audit_log (article_id, action, actor_email, details)
                VALUES (%s, %s, %s, %s)
                RETURNING id
                """,
                (article_id, AuditAction(action).value, actor_email, Jsonb(details or {})),
            )
            entry_id = cur.fetchone()["id"]
        conn.commit()
        return entry_id
