"""Build the configured document store backend."""

from typing import Optional

from sec_filing_store.config import (
    PROVIDER_AZURE,
    PROVIDER_LOCAL,
    PROVIDER_MEMORY,
    STORAGE_PROVIDERS,
    StorageSettings,
    get_settings,
)
from sec_filing_store.core import ConfigurationError, get_logger
from sec_filing_store.storage.base import DocumentStore

logger = get_logger(__name__)


def create_store(settings: Optional[StorageSettings] = None) -> DocumentStore:
    """
    Instantiate the backend selected by ``STORAGE_PROVIDER``.

    The store is returned uninitialised; callers run ``initialize()`` so
    that connectivity failures surface where they can be handled.

    Args:
        settings: Storage settings. If None, uses ``get_settings().storage``.

    Raises:
        ConfigurationError: Unknown provider, or Azure without a
            connection string.
    """
    settings = settings or get_settings().storage
    provider = settings.provider

    if provider == PROVIDER_MEMORY:
        from sec_filing_store.storage.memory import InMemoryDocumentStore

        store: DocumentStore = InMemoryDocumentStore()

    elif provider == PROVIDER_LOCAL:
        from sec_filing_store.storage.local import LocalFileDocumentStore

        store = LocalFileDocumentStore(settings.local_data_path)

    elif provider == PROVIDER_AZURE:
        if not settings.azure_connection_string:
            raise ConfigurationError(
                "Azure storage provider requires a connection string",
                details="Set STORAGE_AZURE_CONNECTION_STRING or choose another provider.",
            )
        # Imported lazily so the Azure SDK is only loaded when selected.
        from sec_filing_store.storage.azure import AzureTableDocumentStore

        store = AzureTableDocumentStore(
            connection_string=settings.azure_connection_string,
            processed_table_name=settings.processed_table_name,
            company_table_name=settings.company_table_name,
            blob_container_name=settings.blob_container_name,
            auto_create_tables=settings.auto_create_tables,
            timeout_seconds=settings.timeout_seconds,
        )

    else:
        raise ConfigurationError(
            f"Unknown storage provider: {settings.provider}",
            details=f"Supported: {', '.join(STORAGE_PROVIDERS)}",
        )

    logger.debug("Created %s", store.storage_type)
    return store
