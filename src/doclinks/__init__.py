"""doclinks - Link checker for versioned Hugo documentation sources."""

__version__ = "0.1.0"

from doclinks.exceptions import (  # noqa: E402
    ConfigNotFoundError,
    ConfigurationError,
    DocLinksError,
    NetworkError,
    ProductFolderError,
    ResolutionError,
    SetupError,
    UnknownProductError,
    UnsupportedDocumentError,
    VersionCheckError,
)

__all__ = [
    "__version__",
    # Base exception
    "DocLinksError",
    # Setup
    "SetupError",
    "UnsupportedDocumentError",
    "ConfigNotFoundError",
    # Configuration
    "ConfigurationError",
    # Resolution
    "ResolutionError",
    "ProductFolderError",
    "UnknownProductError",
    # Network
    "NetworkError",
    "VersionCheckError",
]
