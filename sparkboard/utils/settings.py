"""
Sparkboard Configuration Settings.

Uses Pydantic Settings for type-safe configuration with environment variable support.

Required environment variables (for any network use):
- SPARKBOARD_SUPABASE_URL: Base URL of the hosted backend project
- SPARKBOARD_SUPABASE_ANON_KEY: Public (anon) API key of the project

Optional environment variables (with defaults):
- SPARKBOARD_STORAGE_BUCKET: Object storage bucket (default: 'spark-images')
- SPARKBOARD_VIEWPORT_WIDTH / SPARKBOARD_VIEWPORT_HEIGHT: Base viewport used for spawn placement (default: 390x844)
- SPARKBOARD_EMAIL / SPARKBOARD_PASSWORD: Credentials for password login
- SPARKBOARD_DEV_ACCESS_TOKEN / SPARKBOARD_DEV_REFRESH_TOKEN: Development session tokens
- SPARKBOARD_SPOTIFY_TOKEN: Spotify Web API bearer token for music search
- SPARKBOARD_DEBUG: Enable debug logging (default: false)
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sparkboard.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    # Backend project
    supabase_url: str | None = Field(default=None, alias='SPARKBOARD_SUPABASE_URL')
    supabase_anon_key: str | None = Field(default=None, alias='SPARKBOARD_SUPABASE_ANON_KEY')
    storage_bucket: str = Field(default='spark-images', alias='SPARKBOARD_STORAGE_BUCKET')

    # Canvas
    viewport_width: float = Field(default=390, alias='SPARKBOARD_VIEWPORT_WIDTH')
    viewport_height: float = Field(default=844, alias='SPARKBOARD_VIEWPORT_HEIGHT')

    # Credentials
    email: str | None = Field(default=None, alias='SPARKBOARD_EMAIL')
    password: str | None = Field(default=None, alias='SPARKBOARD_PASSWORD')
    dev_access_token: str | None = Field(default=None, alias='SPARKBOARD_DEV_ACCESS_TOKEN')
    dev_refresh_token: str | None = Field(default=None, alias='SPARKBOARD_DEV_REFRESH_TOKEN')
    spotify_token: str | None = Field(default=None, alias='SPARKBOARD_SPOTIFY_TOKEN')

    # Debug settings
    debug: bool = Field(default=False, alias='SPARKBOARD_DEBUG')

    def require_backend(self) -> tuple[str, str]:
        """
        Return the backend URL and anon key, failing if either is missing.

        :return: Tuple of (base url without trailing slash, anon key)
        :raises ConfigurationError: If the backend is not configured
        """
        if not self.supabase_url or not self.supabase_anon_key:
            raise ConfigurationError(
                "SPARKBOARD_SUPABASE_URL and SPARKBOARD_SUPABASE_ANON_KEY environment variables are required"
            )
        return self.supabase_url.rstrip('/'), self.supabase_anon_key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
