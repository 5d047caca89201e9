"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("newsdesk", description="Database name")
    user: str = Field("newsdesk", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class NewsApiConfig(BaseModel):
    """News-search API configuration."""

    provider: str = Field("newsapi", description="Search provider (newsapi, newsdata)")
    provider_env: Optional[str] = Field(
        "NEWS_API_PROVIDER", description="Environment variable overriding the provider"
    )
    api_key_env: Optional[str] = Field("NEWS_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    timeout: float = Field(20.0, description="Request timeout in seconds", gt=0)

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Accept only the supported providers."""
        v = v.lower()
        if v not in ("newsapi", "newsdata"):
            raise ValueError(f"Unknown news API provider: {v}")
        return v


class IngestionConfig(BaseModel):
    """Fetch and filtering parameters."""

    rss_user_agent: str = Field(
        "NewsDeskBot/1.0 (compliant RSS reader; contact: admin@example.com)",
        description="User-Agent for feed requests",
    )
    metadata_user_agent: str = Field(
        "NewsDesk-MetaBot/1.0 (compliant metadata reader; contact: admin@example.com)",
        description="User-Agent for page metadata requests",
    )
    rss_timeout: float = Field(15.0, description="Feed request timeout in seconds", gt=0)
    metadata_timeout: float = Field(12.0, description="Page request timeout in seconds", gt=0)
    max_response_bytes: int = Field(5 * 1024 * 1024, description="Page body byte cap", ge=1024)
    default_lookback_hours: Optional[int] = Field(
        None, description="Default ingestion window when no dates are given", ge=1
    )
    image_refresh_limit: int = Field(100, description="Articles per image refresh", ge=1, le=1000)
    image_refresh_delay: float = Field(0.25, description="Seconds between image fetches", ge=0)


class ConfigModel(BaseModel):
    """Main configuration model."""

    log_level: str = Field("INFO", description="Logging level")
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    news_api: NewsApiConfig = Field(default_factory=NewsApiConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)


class FeedConfig(BaseModel):
    """RSS feed configuration from feeds.yaml."""

    name: str = Field(..., description="Feed name")
    url: str = Field(..., description="RSS or Atom feed URL")
    outlet: str = Field(..., description="Outlet name stored on articles")
    domain: str = Field(..., description="Outlet domain stored on articles")
    enabled: bool = Field(True, description="Whether the feed is enabled")
