"""
Postgres-backed store used by ingestion.

Binds the per-table managers to one connection and exposes the flat set of
operations the ingestion code talks to. Tests substitute an in-memory object
with the same methods.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence

import psycopg
from psycopg import Connection

from ..ingestion.keywords import DEFAULT_KEYWORDS
from ..models import Article, AuditAction, IngestRun, Keyword
from .articles import ArticleStorage
from .audit import AuditLogger
from .keywords import KeywordManager
from .runs import IngestRunManager

logger = logging.getLogger(__name__)


class PostgresStore:
    """Store operations over a single psycopg connection."""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        self.articles = ArticleStorage()
        self.runs = IngestRunManager()
        self.keywords = KeywordManager()
        self.audit = AuditLogger()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
        except psycopg.Error:
            self.conn.rollback()
            raise

    # Articles

    def find_article_by_url(self, url: str) -> Optional[Article]:
        with self._transaction():
            return self.articles.find_by_url(self.conn, url)

    def find_article_by_urls(self, urls: Sequence[str]) -> Optional[Article]:
        with self._transaction():
            return self.articles.find_by_urls(self.conn, urls)

    def create_article(self, fields: Dict[str, Any]) -> Article:
        with self._transaction():
            return self.articles.create_article(self.conn, fields)

    def list_articles_missing_image(self, limit: int = 100) -> List[Article]:
        with self._transaction():
            return self.articles.list_missing_image(self.conn, limit)

    def update_article_image(self, article_id: int, image_url: str) -> None:
        with self._transaction():
            self.articles.update_image(self.conn, article_id, image_url)

    # Keywords

    def list_enabled_keywords(self) -> List[str]:
        with self._transaction():
            return self.keywords.list_enabled_terms(self.conn)

    def list_keywords(self) -> List[Keyword]:
        with self._transaction():
            return self.keywords.list_keywords(self.conn)

    def add_keyword(self, term: str, enabled: bool = True) -> Keyword:
        with self._transaction():
            return self.keywords.add_keyword(self.conn, term, enabled)

    def set_keyword_enabled(self, term: str, enabled: bool) -> Optional[Keyword]:
        with self._transaction():
            return self.keywords.set_enabled(self.conn, term, enabled)

    def delete_keyword(self, term: str) -> bool:
        with self._transaction():
            return self.keywords.delete_keyword(self.conn, term)

    def seed_default_keywords(self) -> int:
        with self._transaction():
            return self.keywords.seed_keywords(self.conn, DEFAULT_KEYWORDS)

    # Ingest runs

    def create_ingest_run(
        self,
        source: str,
        feed_url: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ) -> int:
        with self._transaction():
            return self.runs.create_run(self.conn, source, feed_url, started_at)

    def finalize_ingest_run(
        self,
        run_id: int,
        found: int,
        created: int,
        duped: int,
        error: Optional[str] = None,
    ) -> None:
        with self._transaction():
            self.runs.finalize_run(self.conn, run_id, found, created, duped, error)

    def get_recent_ingest_runs(self, limit: int = 10) -> List[IngestRun]:
        with self._transaction():
            return self.runs.get_recent_runs(self.conn, limit)

    # Audit

    def write_audit_log(
        self,
        action: AuditAction,
        actor_email: str,
        article_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> int:
        with self._transaction():
            return self.audit.write(self.conn, action, actor_email, article_id, details)
