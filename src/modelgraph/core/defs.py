"""
Core dataclass definitions for the model configuration.

These describe the declared types, fields, and permission metadata that the
domain model is built from. They are produced by the schema parser (or by
modelgraph.config for YAML documents) and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional


class TypeKind(str, Enum):
    """Discriminant of a declared type."""
    SCALAR = "scalar"
    ENUM = "enum"
    VALUE_OBJECT = "valueObject"
    ENTITY_EXTENSION = "entityExtension"
    CHILD_ENTITY = "childEntity"
    ROOT_ENTITY = "rootEntity"


OBJECT_TYPE_KINDS = frozenset({
    TypeKind.VALUE_OBJECT,
    TypeKind.ENTITY_EXTENSION,
    TypeKind.CHILD_ENTITY,
    TypeKind.ROOT_ENTITY,
})


@dataclass(frozen=True)
class SourceLocation:
    """
    Opaque handle pointing at the declaration a config object came from.

    Example: SourceLocation(source="schema.yaml", path="types[2].fields[0]")
    """
    source: str
    path: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.source}:{self.path}" if self.path else self.source


@dataclass(frozen=True)
class RolesSpecifierConfig:
    """Explicit role lists granting read or read/write access."""
    read: tuple[str, ...] = ()
    read_write: tuple[str, ...] = ()
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class PermissionsConfig:
    """
    Permission metadata of a type or field.

    Either a profile name or explicit roles - combining both is a
    validation error, not a config error.
    """
    permission_profile_name: Optional[str] = None
    roles: Optional[RolesSpecifierConfig] = None
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class PermissionConfig:
    """Single entry of a permission profile."""
    roles: tuple[str, ...]
    access: Literal["read", "readWrite"] = "read"


@dataclass(frozen=True)
class PermissionProfileConfig:
    """Named, reusable permission profile."""
    name: str
    permissions: tuple[PermissionConfig, ...] = ()
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class FieldConfig:
    """Definition of a field on an object type."""
    name: str
    type_name: str  # resolved against the whole model, may be invalid
    is_list: bool = False
    is_reference: bool = False
    is_relation: bool = False
    inverse_of_field_name: Optional[str] = None
    default_value: Any = None  # None means "no default"
    calc_mutation_operators: tuple[str, ...] = ()  # ADD, MULTIPLY, APPEND, ...
    permissions: Optional[PermissionsConfig] = None
    description: Optional[str] = None
    is_system_field: bool = False
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class TypeConfig:
    """Definition of a declared type."""
    name: str
    kind: TypeKind
    fields: tuple[FieldConfig, ...] = ()  # insertion order is significant
    key_field_name: Optional[str] = None  # root entities only
    values: tuple[str, ...] = ()  # enums only
    permissions: Optional[PermissionsConfig] = None
    description: Optional[str] = None
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class ModelConfig:
    """Complete model configuration."""
    types: tuple[TypeConfig, ...]
    permission_profiles: tuple[PermissionProfileConfig, ...] = ()
    validation_messages: tuple[Any, ...] = field(default_factory=tuple)  # pre-existing ValidationMessages
