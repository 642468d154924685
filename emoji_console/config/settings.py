"""
Configuration settings using Pydantic Settings.

All deployment-specific configuration is loaded from environment variables
(or a local `.env`). Emoji provider definitions themselves are static and
live in `emoji_console.config.emoji_system`.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Order: init kwargs > .env (dotenv) > env vars > file secrets
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    # Application Configuration
    app_name: str = Field("emoji-console", alias="APP_NAME")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    app_env: str = Field("development", alias="APP_ENV")
    app_debug: bool = Field(False, alias="APP_DEBUG")
    app_log_level: str = Field("INFO", alias="APP_LOG_LEVEL")

    # HTTP server
    http_host: str = Field("0.0.0.0", alias="HTTP_HOST")
    http_port: int = Field(
        3000, validation_alias=AliasChoices("HTTP_PORT", "CONSOLE_PORT")
    )

    # Storage layout
    public_dir: str = Field(
        "public",
        alias="PUBLIC_DIR",
        description="Root holding emoji/<set>/ asset folders and dev/emoji/ artifacts",
    )

    # External reference data
    unicode_emoji_test_url: str = Field(
        "https://unicode.org/Public/emoji/latest/emoji-test.txt",
        alias="UNICODE_EMOJI_TEST_URL",
    )
    gemoji_url: str = Field(
        "https://raw.githubusercontent.com/github/gemoji/master/db/emoji.json",
        alias="GEMOJI_URL",
    )
    iamcal_url: str = Field(
        "https://raw.githubusercontent.com/iamcal/emoji-data/master/emoji.json",
        alias="IAMCAL_URL",
    )
    http_timeout_seconds: float = Field(60.0, alias="HTTP_TIMEOUT_SECONDS")
    http_user_agent: str = Field("EmojiConsole/0.1", alias="HTTP_USER_AGENT")

    # Emoji system overrides (None keeps the static default)
    emoji_active_set: str | None = Field(None, alias="EMOJI_ACTIVE_SET")
    emoji_fallback_set: str | None = Field(None, alias="EMOJI_FALLBACK_SET")
    emoji_grayscale: bool | None = Field(None, alias="EMOJI_GRAYSCALE")
    emoji_shortcodes_enabled: bool | None = Field(None, alias="EMOJI_SHORTCODES_ENABLED")

    @property
    def public_root(self) -> Path:
        """Absolute public directory (relative values resolve against CWD)."""
        root = Path(self.public_dir)
        if not root.is_absolute():
            root = Path.cwd() / root
        return root


# Global settings instance - loaded from environment.
# In development, create a .env file to override defaults.
settings = Settings()  # type: ignore[call-arg]


def get_settings() -> Settings:
    """Get the global settings instance.

    This function provides dependency injection support for settings.
    """
    return settings
