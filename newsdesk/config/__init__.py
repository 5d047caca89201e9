"""Configuration management for the news desk."""

from .loader import Config, load_config, load_feeds, save_config, save_feeds
from .models import ConfigModel, FeedConfig, IngestionConfig, NewsApiConfig, PostgresConfig

__all__ = [
    "Config",
    "ConfigModel",
    "FeedConfig",
    "IngestionConfig",
    "NewsApiConfig",
    "PostgresConfig",
    "load_config",
    "load_feeds",
    "save_config",
    "save_feeds",
]
