from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Notion credentials
    NOTION_API_SECRET: str = ""
    DATABASE_ID: str = ""

    # Notion API
    NOTION_API_BASE_URL: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"
    QUERY_PAGE_SIZE: int = 100  # Notion caps page_size at 100
    REQUEST_TIMEOUT_MS: int = 10_000

    # Retries per page fetch (on top of the first attempt)
    NUMBER_OF_RETRIES: int = 2
    RETRY_BASE_DELAY_SECONDS: float = 0.5

    # Listing views
    NUMBER_OF_POSTS_PER_PAGE: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # Site builds in production stay at INFO or above
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def request_timeout_seconds(self) -> float:
        return self.REQUEST_TIMEOUT_MS / 1000


settings = Settings()
