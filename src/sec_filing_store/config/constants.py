"""Application-wide constants."""

from typing import Iterable, Optional

# Supported SEC filing forms, including amended variants
SUPPORTED_FORMS = ("10-K", "10-Q", "8-K", "10-K/A", "10-Q/A", "8-K/A")


def normalise_form_types(forms: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Validate and normalise a collection of form types.

    Form types are matched case-insensitively and returned upper-cased,
    de-duplicated, in ``SUPPORTED_FORMS`` order. An empty or missing
    collection yields an empty tuple; callers decide whether that means
    "no filter" or "all forms".

    Raises:
        ValueError: If any form type is not in ``SUPPORTED_FORMS``.
    """
    if not forms:
        return ()

    requested = {f.strip().upper() for f in forms if f and f.strip()}
    invalid = sorted(requested.difference(SUPPORTED_FORMS))
    if invalid:
        raise ValueError(
            f"Unsupported form type(s): {', '.join(invalid)}. "
            f"Supported: {', '.join(SUPPORTED_FORMS)}"
        )

    return tuple(f for f in SUPPORTED_FORMS if f in requested)


# Storage providers
PROVIDER_LOCAL = "Local"
PROVIDER_AZURE = "Azure"
PROVIDER_MEMORY = "Memory"
STORAGE_PROVIDERS = (PROVIDER_LOCAL, PROVIDER_AZURE, PROVIDER_MEMORY)

# Local file backend layout
DEFAULT_LOCAL_DATA_PATH = "./data"
TRACKED_DOCUMENTS_FILE = "tracked-documents.json"
PROCESSED_DOCUMENTS_FILE = "processed-documents.json"
CONTENT_DIRECTORY = "content"

# Azure backend defaults
DEFAULT_COMPANY_TABLE = "companies"
DEFAULT_PROCESSED_TABLE = "processed"
DEFAULT_BLOB_CONTAINER = "filings"
DEFAULT_STORAGE_TIMEOUT_SECONDS = 30.0

# Metrics
ALL_COMPANIES = "All Companies"

# Search / pagination defaults
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000
MAX_CONTENT_PAGE_SIZE = 100
DEFAULT_HIGHLIGHT_WINDOW = 40
DEFAULT_MAX_HIGHLIGHTS = 5
DEFAULT_TITLE_REGION = 500
DEFAULT_PREVIEW_LENGTH = 500
