"""Configuration module — settings and constants."""

from sec_filing_store.config.constants import (
    ALL_COMPANIES,
    DEFAULT_PAGE_SIZE,
    MAX_CONTENT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PROVIDER_AZURE,
    PROVIDER_LOCAL,
    PROVIDER_MEMORY,
    STORAGE_PROVIDERS,
    SUPPORTED_FORMS,
    normalise_form_types,
)
from sec_filing_store.config.settings import (
    ApiSettings,
    SearchSettings,
    Settings,
    StorageSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    # Constants
    "SUPPORTED_FORMS",
    "normalise_form_types",
    "ALL_COMPANIES",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MAX_CONTENT_PAGE_SIZE",
    "PROVIDER_LOCAL",
    "PROVIDER_AZURE",
    "PROVIDER_MEMORY",
    "STORAGE_PROVIDERS",
    # Settings
    "ApiSettings",
    "SearchSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "reload_settings",
]
