"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel, FeedConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "newsdesk"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = Path(
                os.environ.get("NEWSDESK_CONFIG", DEFAULT_CONFIG_DIR / "config.yaml")
            )
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def feeds_path(self) -> Path:
        """Feeds file sitting next to the config file."""
        return self.config_path.parent / "feeds.yaml"

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        # Handle password from environment if specified
        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config

    def get_news_api_config(self) -> Dict[str, Any]:
        """Get news API configuration dict with secrets resolved."""
        api_config = self.config.news_api.model_dump()

        if api_config.get("api_key_env"):
            api_key = os.environ.get(api_config["api_key_env"])
            if api_key:
                api_config["api_key"] = api_key

        if api_config.get("provider_env"):
            provider = os.environ.get(api_config["provider_env"])
            if provider:
                api_config["provider"] = provider.lower()

        return api_config

    def get_enabled_feeds(self) -> List[FeedConfig]:
        """Load feeds.yaml and keep the enabled entries."""
        try:
            feeds = load_feeds(self.feeds_path)
        except FileNotFoundError:
            logger.warning("Feeds file not found: %s", self.feeds_path)
            return []
        return [f for f in feeds if f.enabled]


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_feeds(feeds_path: Path) -> List[FeedConfig]:
    """Load feeds from YAML file."""
    if not feeds_path.exists():
        raise FileNotFoundError(f"Feeds file not found: {feeds_path}")

    try:
        with open(feeds_path) as f:
            feeds_data = yaml.safe_load(f)

        if feeds_data is None or "feeds" not in feeds_data:
            return []

        feeds = []
        for feed_data in feeds_data["feeds"] or []:
            try:
                feeds.append(FeedConfig(**feed_data))
            except (TypeError, ValidationError) as e:
                name = feed_data.get("name", "unknown") if isinstance(feed_data, dict) else "unknown"
                logger.warning("Skipping invalid feed %s: %s", name, e)

        return feeds
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in feeds file: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_feeds(feeds: List[FeedConfig], feeds_path: Path) -> None:
    """Save feeds to YAML file."""
    feeds_path.parent.mkdir(parents=True, exist_ok=True)

    feeds_data = {"feeds": [feed.model_dump() for feed in feeds]}

    with open(feeds_path, "w") as f:
        yaml.dump(feeds_data, f, default_flow_style=False, sort_keys=False)
