"""Ingest run provenance in database."""

from datetime import datetime
from typing import List, Optional

import pendulum
from psycopg import Connection

from ..models import IngestRun


class IngestRunManager:
    """Manage per-adapter ingest run records."""

    def create_run(
        self,
        conn: Connection,
        source: str,
        feed_url: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ) -> int:
        """
        Create a new ingest run record.

        Returns:
            Run ID
        """
        if started_at is None:
            started_at = pendulum.now("UTC")

        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO ingest_runs (source, feed_url, started_at)
                VALUES (%s, %s, %s)
                RETURNING id
                """,
                (source, feed_url, started_at),
            )
            run_id = cur.fetchone()["id"]

        conn.commit()
        return run_id

    def finalize_run(
        self,
        conn: Connection,
        run_id: int,
        found: int,
        created: int,
        duped: int,
        error: Optional[str] = None,
        finished_at: Optional[datetime] = None,
    ) -> None:
        """Record an adapter's result counts."""
        if finished_at is None:
            finished_at = pendulum.now("UTC")

        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE ingest_runs
                SET
                    finished_at = %s,
                    articles_found = %s,
                    articles_created = %s,
                    articles_duped = %s,
                    error = %s
                WHERE id = %s
                """,
                (finished_at, found, created, duped, error, run_id),
            )

        conn.commit()

    def get_recent_runs(self, conn: Connection, limit: int = 10) -> List[IngestRun]:
        """Get recent runs, newest first."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT * FROM ingest_runs
                ORDER BY started_at DESC, id DESC
                LIMIT %s
                """,
                (limit,),
            )
            return [IngestRun(**row) for row in cur.fetchall()]
