"""Data models for the news desk."""

from .article import Article, ArticleStatus, IngestSource
from .audit import AuditAction, AuditLogEntry
from .keyword import Keyword
from .run import IngestRun

__all__ = [
    "Article",
    "ArticleStatus",
    "AuditAction",
    "AuditLogEntry",
    "IngestRun",
    "IngestSource",
    "Keyword",
]
