#!/usr/bin/env python3
"""
KAMUT ERRORS
------------
Exception hierarchy shared by the generators and the file orchestrator.
Callers can catch KamutError to handle every failure in one place.

Recoverable errors (MissingRequiredFieldError, UnsupportedKindError) skip a
single document. Everything else aborts the file being processed.

Author: Kamut Team
Date: 2026-10-16
"""

from pathlib import Path
from typing import Optional, Union


class KamutError(Exception):
    """Base error for all kamut failures."""


class FileIOError(KamutError):
    """Raised when a kamut file cannot be opened, read or written."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class DocumentError(KamutError):
    """
    An error tied to one document of one source file.
    The index is 1-based, matching the order documents appear in the file.
    """

    def __init__(self, message: str, index: Optional[int] = None, source: Optional[str] = None):
        self.message = message
        self.index = index
        self.source = source
        super().__init__(self._render())

    def with_location(self, index: int, source: Optional[str]) -> "DocumentError":
        """Fills in provenance for errors raised before the document position was known."""
        if self.index is None:
            self.index = index
        if self.source is None:
            self.source = source
        return self

    def __str__(self) -> str:
        return self._render()

    def _render(self) -> str:
        if self.index is None:
            return self.message
        where = f"document {self.index}"
        if self.source:
            where += f" of {self.source}"
        return f"{self.message} ({where})"


class ParseError(DocumentError):
    """The document is not valid YAML or does not match the config schema."""


class MissingKindError(DocumentError):
    """The document has no 'kind' and kind inference is disabled."""


class MissingRequiredFieldError(DocumentError):
    """A field required by the document's kind (e.g. image) is absent."""

    def __init__(self, field: str, kind: str, index: Optional[int] = None, source: Optional[str] = None):
        self.field = field
        self.kind = kind
        super().__init__(f"{kind} requires '{field}' to be specified", index, source)


class UnsupportedKindError(DocumentError):
    """The document declares (or infers to) a kind with no generator."""

    def __init__(self, kind: Optional[str], index: Optional[int] = None, source: Optional[str] = None):
        self.kind = kind
        label = kind if kind else "<undetermined>"
        super().__init__(f"Unsupported kind: {label}", index, source)


class SerializationError(DocumentError):
    """A generated manifest failed validation or could not be rendered to YAML."""
