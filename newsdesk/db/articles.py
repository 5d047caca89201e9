"""Article storage and lookup."""

from typing import Any, Dict, List, Optional, Sequence

from psycopg import Connection
from psycopg.types.json import Jsonb

from ..models import Article

ARTICLE_COLUMNS = (
    "title",
    "outlet",
    "outlet_domain",
    "published_at",
    "url",
    "keywords_matched",
    "snippet",
    "manual_summary",
    "status",
    "priority",
    "tags",
    "ingest_source",
    "image_url",
    "author",
    "section",
)

JSON_COLUMNS = {"keywords_matched", "tags"}


class ArticleStorage:
    """Handle article rows; the unique index on url backs dedup."""

    def find_by_url(self, conn: Connection, url: str) -> Optional[Article]:
        """Exact-match lookup by canonical URL."""
        return self.find_by_urls(conn, [url])

    def find_by_urls(self, conn: Connection, urls: Sequence[str]) -> Optional[Article]:
        """Return the first article stored under any of ``urls``."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT * FROM articles WHERE url = ANY(%s) ORDER BY id LIMIT 1",
                (list(urls),),
            )
            row = cur.fetchone()
        return Article(**row) if row else None

    def create_article(self, conn: Connection, fields: Dict[str, Any]) -> Article:
        """
        Insert a new article.

        Returns:
            The stored article with server-assigned id and timestamps
        """
        values = {column: fields[column] for column in ARTICLE_COLUMNS if column in fields}
        for column in JSON_COLUMNS & values.keys():
            values[column] = Jsonb(list(values[column] or []))
        for column in ("status", "ingest_source"):
            if column in values and hasattr(values[column], "value"):
                values[column] = values[column].value

        columns = ", ".join(values)
        placeholders = ", ".join(f"%({column})s" for column in values)
        with conn.cursor() as cur:
            cur.execute(
                f"INSERT INTO articles ({columns}) VALUES ({placeholders}) RETURNING *",
                values,
            )
            row = cur.fetchone()
        conn.commit()
        return Article(**row)

    def list_missing_image(self, conn: Connection, limit: int = 100) -> List[Article]:
        """Articles with no image, most recently created first."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT * FROM articles
                WHERE image_url IS NULL
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (limit,),
            )
            return [Article(**row) for row in cur.fetchall()]

    def update_image(self, conn: Connection, article_id: int, image_url: str) -> None:
        """Set an article's image URL."""
        with conn.cursor() as cur:
            cur.execute(
                "UPDATE articles SET image_url = %s WHERE id = %s",
                (image_url, article_id),
            )
        conn.commit()
