"""
Domain model - types, fields, relations, and validation.
"""

from __future__ import annotations

from .fields import Field, FieldId
from .model import Model, build_model, compile_model
from .permissions import PermissionProfile, RolesSpecifier
from .relation import Relation, RelationSide
from .types import Type
from .validation import (
    Severity,
    ValidationContext,
    ValidationMessage,
    ValidationResult,
)
from .validator import ModelValidator

__all__ = [
    "Field",
    "FieldId",
    "Model",
    "build_model",
    "compile_model",
    "PermissionProfile",
    "RolesSpecifier",
    "Relation",
    "RelationSide",
    "Type",
    "Severity",
    "ValidationContext",
    "ValidationMessage",
    "ValidationResult",
    "ModelValidator",
]
