"""
Config module - YAML schema documents.
"""

from __future__ import annotations

from .loader import (
    FieldDocument,
    PermissionDocument,
    PermissionsDocument,
    RolesDocument,
    SchemaDocument,
    TypeDocument,
    load_schema,
    load_schema_document,
)

__all__ = [
    "FieldDocument",
    "PermissionDocument",
    "PermissionsDocument",
    "RolesDocument",
    "SchemaDocument",
    "TypeDocument",
    "load_schema",
    "load_schema_document",
]
