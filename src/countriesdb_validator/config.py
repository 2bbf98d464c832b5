"""CountriesDB validator configuration management."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.countriesdb.com"


class Settings(BaseSettings):
    """Validator settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="COUNTRIESDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Private API key, sent as a bearer token on every request
    private_key: str | None = None

    # Service endpoint
    api_url: str = DEFAULT_API_URL

    # Per-request timeout in seconds
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        """Check if a usable private key is present."""
        return bool(self.private_key and self.private_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
