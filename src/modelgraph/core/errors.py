"""
Custom exceptions for modelgraph.

Schema problems a user can fix are never raised - they are collected as
ValidationMessages. The exceptions here signal contract violations by the
caller (malformed configuration, bad mutation input) or a rejected build.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..model.validation import ValidationResult


class ModelgraphError(Exception):
    """Base exception for all modelgraph errors."""
    pass


class ConfigurationError(ModelgraphError):
    """Raised when the model or compiler is used in a way its configuration does not allow."""
    pass


class SchemaDocumentError(ModelgraphError):
    """Raised when a schema document cannot be read into a model configuration."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class InputCoercionError(ModelgraphError):
    """Raised when a raw mutation input value has the wrong shape."""

    def __init__(self, message: str, input_name: Optional[str] = None):
        self.input_name = input_name
        super().__init__(message)


class ModelValidationError(ModelgraphError):
    """Raised when a model is rejected because validation reported errors."""

    def __init__(self, result: ValidationResult):
        self.result = result
        errors = "\n".join(str(m) for m in result.errors)
        super().__init__(f"Model validation failed:\n{errors}")
