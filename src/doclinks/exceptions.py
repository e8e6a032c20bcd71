"""
doclinks exception hierarchy.

Provides typed exceptions so a check run can tell setup problems (which
abort the run) apart from per-link failures (which never do).

Exception Hierarchy:
    DocLinksError (base)
    ├── SetupError - Run cannot start
    │   ├── UnsupportedDocumentError - Not an HTML/Markdown document
    │   └── ConfigNotFoundError - No config/config.toml above the document
    ├── ConfigurationError - Config file or product map unreadable/invalid
    ├── ResolutionError - Base URL cannot be computed
    │   ├── ProductFolderError - No product folder before the content root
    │   └── UnknownProductError - Product folder not in the product map
    └── NetworkError - Remote documentation site communication failures
        └── VersionCheckError - Live version lookup failed
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class DocLinksError(Exception):
    """Base exception for all doclinks errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """
        Initialize doclinks exception.

        Args:
            message: Human-readable error message
            details: Optional structured error details for logging/debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Setup Errors
# =============================================================================


class SetupError(DocLinksError):
    """A check run could not be started for a document."""

    def __init__(
        self,
        message: str,
        *,
        document: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if document:
            details["document"] = str(document)
        super().__init__(message, details=details)
        self.document = document


class UnsupportedDocumentError(SetupError):
    """Document is neither HTML nor Markdown."""

    def __init__(self, message: str, *, suffix: str | None = None, **kwargs: Any) -> None:
        details = kwargs.get("details") or {}
        if suffix is not None:
            details["suffix"] = suffix
        kwargs["details"] = details
        super().__init__(message, **kwargs)
        self.suffix = suffix


class ConfigNotFoundError(SetupError):
    """No build configuration file was found above the document."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DocLinksError):
    """Configuration file or product mapping error."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Path | str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if config_file:
            details["config_file"] = str(config_file)
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.config_file = config_file
        self.field = field


# =============================================================================
# Resolution Errors
# =============================================================================


class ResolutionError(DocLinksError):
    """Base URL for a document could not be computed."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_path:
            details["file_path"] = str(file_path)
        super().__init__(message, details=details)
        self.file_path = file_path


class ProductFolderError(ResolutionError):
    """Product folder token could not be derived from the document path."""

    pass


class UnknownProductError(ResolutionError):
    """Product folder token has no entry in the product mapping."""

    def __init__(self, message: str, *, token: str | None = None, **kwargs: Any) -> None:
        details = kwargs.get("details") or {}
        if token:
            details["token"] = token
        kwargs["details"] = details
        super().__init__(message, **kwargs)
        self.token = token


# =============================================================================
# Network Errors
# =============================================================================


class NetworkError(DocLinksError):
    """Documentation site communication failure."""

    def __init__(
        self,
        message: str,
        *,
        service: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if service:
            details["service"] = service
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.service = service
        self.url = url
        self.status_code = status_code


class VersionCheckError(NetworkError):
    """Live version lookup against the documentation site failed."""

    def __init__(self, message: str, *, product: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("service", "version-check")
        details = kwargs.get("details") or {}
        if product:
            details["product"] = product
        kwargs["details"] = details
        super().__init__(message, **kwargs)
        self.product = product
