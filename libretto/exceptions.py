"""
Custom exceptions for the libretto library.

All exceptions inherit from LibrettoError for easy catching of library-specific errors.

Reference problems inside documents (unknown ids, unordered times, coverage
gaps) are not exceptions; they are reported as ValidationIssue values by
libretto.core.validate. These exceptions cover the edges: files, settings,
and callers that refuse to proceed on a non-empty issue list.
"""

from pathlib import Path
from typing import Any


class LibrettoError(Exception):
    """Base exception for all libretto errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class DocumentError(LibrettoError):
    """Raised when a JSON document cannot be read, parsed, or written."""

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if path is not None:
            ctx["path"] = str(path)
        super().__init__(message, ctx)
        self.path = str(path) if path is not None else None


class DocumentNotFoundError(DocumentError):
    """Raised when a document file does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Document not found: {path}", path=path)


class ConfigurationError(LibrettoError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        setting_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if setting_name:
            ctx["setting"] = setting_name
        super().__init__(message, ctx)
        self.setting_name = setting_name


class ValidationFailedError(LibrettoError):
    """Raised when a caller requires a document to be free of validation issues."""

    def __init__(self, issues: list, document: str | None = None) -> None:
        ctx: dict[str, Any] = {"issues": len(issues)}
        if document:
            ctx["document"] = document
        super().__init__(
            f"{len(issues)} validation issue(s) must be fixed first", ctx
        )
        self.issues = list(issues)
        self.document = document
