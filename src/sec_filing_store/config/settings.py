"""Configuration management using Pydantic Settings v2."""

from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sec_filing_store.config.constants import (
    DEFAULT_BLOB_CONTAINER,
    DEFAULT_COMPANY_TABLE,
    DEFAULT_HIGHLIGHT_WINDOW,
    DEFAULT_LOCAL_DATA_PATH,
    DEFAULT_MAX_HIGHLIGHTS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_PREVIEW_LENGTH,
    DEFAULT_PROCESSED_TABLE,
    DEFAULT_STORAGE_TIMEOUT_SECONDS,
    DEFAULT_TITLE_REGION,
    MAX_CONTENT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)

# Load .env into os.environ BEFORE nested BaseSettings classes are
# instantiated as default values in the Settings class body.  The nested
# classes only search os.environ; they have no env_file of their own.
load_dotenv()


class StorageSettings(BaseSettings):
    """Document store backend selection and connection parameters."""

    provider: Literal["Local", "Azure", "Memory"] = "Local"
    local_data_path: str = DEFAULT_LOCAL_DATA_PATH
    azure_connection_string: str = ""
    company_table_name: str = DEFAULT_COMPANY_TABLE
    processed_table_name: str = DEFAULT_PROCESSED_TABLE
    blob_container_name: str = DEFAULT_BLOB_CONTAINER
    auto_create_tables: bool = True
    timeout_seconds: float = Field(DEFAULT_STORAGE_TIMEOUT_SECONDS, gt=0)

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    @field_validator("provider", mode="before")
    @classmethod
    def normalise_provider(cls, v: object) -> object:
        """Accept any casing, e.g. STORAGE_PROVIDER=memory."""
        if isinstance(v, str):
            return v.strip().capitalize()
        return v


class SearchSettings(BaseSettings):
    """Search, pagination and highlight configuration."""

    default_page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(MAX_PAGE_SIZE, ge=1)
    max_content_page_size: int = Field(MAX_CONTENT_PAGE_SIZE, ge=1)
    highlight_window: int = Field(DEFAULT_HIGHLIGHT_WINDOW, ge=0)
    max_highlights: int = Field(DEFAULT_MAX_HIGHLIGHTS, ge=0)
    title_region: int = Field(DEFAULT_TITLE_REGION, ge=1)
    preview_length: int = Field(DEFAULT_PREVIEW_LENGTH, ge=0)

    model_config = SettingsConfigDict(env_prefix="SEARCH_")


class ApiSettings(BaseSettings):
    """HTTP API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    """Root settings class combining all sections."""

    storage: StorageSettings = StorageSettings()
    search: SearchSettings = SearchSettings()
    api: ApiSettings = ApiSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore prefixed env vars handled by nested classes
    )


_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the global Settings instance (singleton pattern)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reload_settings() -> Settings:
    """Reload settings from environment (mainly for testing)."""
    global _settings_instance
    _settings_instance = Settings(
        storage=StorageSettings(),
        search=SearchSettings(),
        api=ApiSettings(),
    )
    return _settings_instance
