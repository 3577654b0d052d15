from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATIC_IMAGES = Path(__file__).resolve().parent.parent / "data" / "static_images.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Listing Gateway"
    environment: str = "dev"
    debug: bool = False
    log_level: str = "INFO"

    cors_origins: str = "*"

    hostaway_api_url: str = "https://api.example.com/listings"
    authorization_token: str = "default-token"
    upstream_timeout_seconds: float = 15.0
    preload_listings: bool = True

    exchange_rate_api_url: str = "https://v6.exchangerate-api.com/v6/{api_key}/latest/{base}"
    exchange_rate_api_key: str = ""
    base_currency: str = "USD"
    target_currency: str = "PKR"
    fallback_exchange_rate: float = Field(default=278.41, gt=0)

    static_image_table_path: Path = DEFAULT_STATIC_IMAGES
    placeholder_image_url: str = "https://via.placeholder.com/300"

    @property
    def exchange_rate_url(self) -> str:
        return self.exchange_rate_api_url.format(api_key=self.exchange_rate_api_key, base=self.base_currency)


@lru_cache
def get_settings() -> Settings:
    return Settings()
