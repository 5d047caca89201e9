"""Tests for the Postgres store wrapper."""

from unittest.mock import MagicMock

import psycopg
import pytest
from psycopg.types.json import Jsonb

from newsdesk.db import PostgresStore
from newsdesk.ingestion.keywords import DEFAULT_KEYWORDS
from newsdesk.models import AuditAction


@pytest.fixture
def conn():
    return MagicMock()


def test_delegates_with_connection(conn):
    store = PostgresStore(conn)
    store.articles = MagicMock()
    store.articles.find_by_urls.return_value = None

    assert store.find_article_by_urls(["https://a", "https://b"]) is None
    store.articles.find_by_urls.assert_called_once_with(conn, ["https://a", "https://b"])


def test_seed_uses_default_keywords(conn):
    store = PostgresStore(conn)
    store.keywords = MagicMock()
    store.keywords.seed_keywords.return_value = 11

    assert store.seed_default_keywords() == 11
    store.keywords.seed_keywords.assert_called_once_with(conn, DEFAULT_KEYWORDS)


def test_database_error_rolls_back_and_reraises(conn):
    store = PostgresStore(conn)
    store.audit = MagicMock()
    store.audit.write.side_effect = psycopg.OperationalError("server closed the connection")

    with pytest.raises(psycopg.OperationalError):
        store.write_audit_log(AuditAction.INGESTED, "system@ingestion", 1, {"url": "https://a"})
    conn.rollback.assert_called_once()


def test_other_errors_propagate_without_rollback(conn):
    store = PostgresStore(conn)
    store.runs = MagicMock()
    store.runs.create_run.side_effect = KeyError("id")

    with pytest.raises(KeyError):
        store.create_ingest_run("RSS", "https://feed")
    conn.rollback.assert_not_called()


def test_article_storage_inserts_json_columns(conn):
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchone.return_value = {
        "id": 7,
        "title": "T",
        "outlet": "O",
        "outlet_domain": "o.example",
        "published_at": "2025-01-20T10:00:00+00:00",
        "url": "https://o.example/t",
        "keywords_matched": ["Kyle Kirkland"],
        "tags": [],
        "status": "QUEUED",
        "ingest_source": "RSS",
    }
    store = PostgresStore(conn)

    article = store.create_article(
        {
            "title": "T",
            "outlet": "O",
            "outlet_domain": "o.example",
            "published_at": "2025-01-20T10:00:00+00:00",
            "url": "https://o.example/t",
            "keywords_matched": ["Kyle Kirkland"],
            "tags": [],
            "status": "QUEUED",
            "ingest_source": "RSS",
            "not_a_column": "ignored",
        }
    )

    assert article.id == 7
    sql, params = cursor.execute.call_args.args
    assert sql.startswith("INSERT INTO articles (title, outlet, outlet_domain, published_at, url, keywords_matched")
    assert "not_a_column" not in params
    assert isinstance(params["keywords_matched"], Jsonb)
    conn.commit.assert_called_once()
