# addonhub/core/config.py
import os
import tempfile

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # General
    ENV: str = "dev"
    APP_NAME: str = "Add-on Builder"

    # Storage / DB
    DB_URL: str = "sqlite:///./data/addons.db"
    STORAGE_BACKEND: str = "local"
    BLOB_ROOT: str = "./data/assets"
    S3_BUCKET: str = ""
    AWS_REGION: str = "us-east-1"

    # Build working directories
    TEMP_ROOT: str = os.path.join(tempfile.gettempdir(), "addonhub")
    ADDONS_DIR: str = "add-ons"
    SCREENSHOTS_DIR: str = "screenshots"

    # Upstream services
    PACKAGIST_URL: str = "https://packagist.org"
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: str = ""
    HTTP_TIMEOUT: int = 30

    # Readme rendering: "github" (markdown API) or "local"
    MARKDOWN_RENDERER: str = "github"
    DEFAULT_BRANCH: str = "master"

    # Screenshots
    SCREENSHOT_MAX_BYTES: int = 2 * 1024 * 1024

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

_settings: Settings | None = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
