"""Tests for configuration loading."""

import pytest
import yaml

from newsdesk.config import Config, ConfigModel, FeedConfig, load_config, load_feeds, save_config, save_feeds


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


def test_defaults(tmp_path):
    path = write_yaml(tmp_path / "config.yaml", {})
    config = load_config(path)
    assert config.log_level == "INFO"
    assert config.postgres.database == "newsdesk"
    assert config.news_api.provider == "newsapi"
    assert config.news_api.api_key_env == "NEWS_API_KEY"
    assert config.ingestion.rss_timeout == 15.0
    assert config.ingestion.metadata_timeout == 12.0
    assert config.ingestion.image_refresh_limit == 100


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == ConfigModel()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("postgres: [unclosed")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(path)


def test_unknown_provider_rejected(tmp_path):
    path = write_yaml(tmp_path / "config.yaml", {"news_api": {"provider": "bing"}})
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_round_trip(tmp_path):
    config = ConfigModel(postgres={"host": "db.internal", "password_env": "PGPASS"}, log_level="DEBUG")
    path = tmp_path / "nested" / "config.yaml"
    save_config(config, path)
    assert load_config(path) == config


class TestConfigManager:
    def test_env_path_and_feeds_path(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path / "config.yaml", {})
        monkeypatch.setenv("NEWSDESK_CONFIG", str(path))
        config = Config()
        assert config.config_path == path
        assert config.feeds_path == tmp_path / "feeds.yaml"

    def test_secrets_resolved_from_env(self, tmp_path, monkeypatch):
        path = write_yaml(
            tmp_path / "config.yaml",
            {"postgres": {"password_env": "PGPASS"}, "news_api": {"provider": "newsapi"}},
        )
        monkeypatch.setenv("PGPASS", "s3cret")
        monkeypatch.setenv("NEWS_API_KEY", "key-123")
        monkeypatch.setenv("NEWS_API_PROVIDER", "NewsData")
        config = Config(path)

        assert config.get_db_config()["password"] == "s3cret"
        api = config.get_news_api_config()
        assert api["api_key"] == "key-123"
        assert api["provider"] == "newsdata"

    def test_no_api_key(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NEWS_API_KEY", raising=False)
        monkeypatch.delenv("NEWS_API_PROVIDER", raising=False)
        config = Config(write_yaml(tmp_path / "config.yaml", {}))
        assert not config.get_news_api_config()["api_key"]

    def test_enabled_feeds(self, tmp_path):
        config = Config(write_yaml(tmp_path / "config.yaml", {}))
        assert config.get_enabled_feeds() == []

        save_feeds(
            [
                FeedConfig(name="A", url="https://a.example/rss", outlet="A", domain="a.example"),
                FeedConfig(name="B", url="https://b.example/rss", outlet="B", domain="b.example", enabled=False),
            ],
            config.feeds_path,
        )
        assert [f.name for f in config.get_enabled_feeds()] == ["A"]


def test_invalid_feed_entries_skipped(tmp_path, caplog):
    path = write_yaml(
        tmp_path / "feeds.yaml",
        {
            "feeds": [
                {"name": "Good", "url": "https://good.example/rss", "outlet": "Good", "domain": "good.example"},
                {"name": "Missing outlet", "url": "https://bad.example/rss"},
                "not a mapping",
            ]
        },
    )
    feeds = load_feeds(path)
    assert [f.name for f in feeds] == ["Good"]
    assert "Skipping invalid feed Missing outlet" in caplog.text


def test_feeds_file_without_feeds_key(tmp_path):
    path = tmp_path / "feeds.yaml"
    path.write_text("other: 1\n")
    assert load_feeds(path) == []
