from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Legacy URL Redirector"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./redirector.db"

    # Cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    origin_cache_ttl: int = (60 * 60 * 24 * 365) // 12  # 1 month

    # vBulletin pagination
    posts_per_thread_page: int = 50
    threads_per_forum_page: int = 25

    # Absolute file URLs are https://{subdomain}.{file_host_domain}/api/v1/files/{sha1}
    file_host_domain: str = "microcosm.app"

    # Affiliate networks, applied in this order.
    # Options: "affwin", "ebay", "webgains", "amazon", "lfgss"
    affiliate_networks: List[str] = ["affwin", "ebay", "webgains", "amazon"]

    # Affiliate identifiers (these must never change once links are live)
    affwin_affiliate_id: str = "101164"
    webgains_campaign_id: str = "104653"
    ebay_publisher_id: str = ""  # Empty: strip the hijacked value instead of replacing it
    ebay_campaign_id: str = ""
    amazon_campaign_id: str = "1634"
    amazon_tag_id: str = "buro9"
    amazon_creative_id: str = "6738"
    bikmo_ref: str = "lfgss"
    wahoo_store: str = "uk_english"
    wahoo_account: str = "bf62768ca46b6c3b5bea9515d1a1fc45"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
