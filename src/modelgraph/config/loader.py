"""
Schema document loading.

A schema document is YAML (or an equivalent dict) describing permission
profiles and types. It is validated with pydantic and converted into the
frozen ModelConfig dataclasses the domain model is built from.

Example:
    permissionProfiles:
      default:
        - {roles: [users], access: readWrite}
    types:
      - name: Movie
        kind: rootEntity
        keyField: slug
        permissions: {permissionProfile: default}
        fields:
          - {name: slug, type: String}
          - {name: actors, type: Actor, list: true, relation: true}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.defs import (
    FieldConfig,
    ModelConfig,
    PermissionConfig,
    PermissionProfileConfig,
    PermissionsConfig,
    RolesSpecifierConfig,
    SourceLocation,
    TypeConfig,
    TypeKind,
)
from ..core.errors import SchemaDocumentError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "<memory>"

CalcMutationName = Literal["MULTIPLY", "DIVIDE", "ADD", "SUBTRACT", "MODULO", "APPEND", "PREPEND"]


class _Document(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class RolesDocument(_Document):
    read: list[str] = Field(default_factory=list)
    read_write: list[str] = Field(default_factory=list, alias="readWrite")

    def to_config(self, location: SourceLocation) -> RolesSpecifierConfig:
        return RolesSpecifierConfig(
            read=tuple(self.read),
            read_write=tuple(self.read_write),
            location=location,
        )


class PermissionsDocument(_Document):
    permission_profile: Optional[str] = Field(None, alias="permissionProfile")
    roles: Optional[RolesDocument] = None

    def to_config(self, location: SourceLocation) -> PermissionsConfig:
        return PermissionsConfig(
            permission_profile_name=self.permission_profile,
            roles=self.roles.to_config(location) if self.roles is not None else None,
            location=location,
        )


class PermissionDocument(_Document):
    roles: list[str]
    access: Literal["read", "readWrite"] = "read"


class FieldDocument(_Document):
    name: str
    type_name: str = Field(alias="type")
    is_list: bool = Field(False, alias="list")
    is_relation: bool = Field(False, alias="relation")
    is_reference: bool = Field(False, alias="reference")
    inverse_of: Optional[str] = Field(None, alias="inverseOf")
    calc_mutations: list[CalcMutationName] = Field(default_factory=list, alias="calcMutations")
    default_value: Any = Field(None, alias="default")
    permissions: Optional[PermissionsDocument] = None
    description: Optional[str] = None

    def to_config(self, location: SourceLocation) -> FieldConfig:
        return FieldConfig(
            name=self.name,
            type_name=self.type_name,
            is_list=self.is_list,
            is_reference=self.is_reference,
            is_relation=self.is_relation,
            inverse_of_field_name=self.inverse_of,
            default_value=self.default_value,
            calc_mutation_operators=tuple(self.calc_mutations),
            permissions=self.permissions.to_config(_child(location, "permissions")) if self.permissions else None,
            description=self.description,
            location=location,
        )


class TypeDocument(_Document):
    name: str
    kind: TypeKind
    key_field: Optional[str] = Field(None, alias="keyField")
    values: list[str] = Field(default_factory=list)
    fields: list[FieldDocument] = Field(default_factory=list)
    permissions: Optional[PermissionsDocument] = None
    description: Optional[str] = None

    def to_config(self, location: SourceLocation) -> TypeConfig:
        return TypeConfig(
            name=self.name,
            kind=self.kind,
            fields=tuple(
                f.to_config(_child(location, f"fields[{i}]")) for i, f in enumerate(self.fields)
            ),
            key_field_name=self.key_field,
            values=tuple(self.values),
            permissions=self.permissions.to_config(_child(location, "permissions")) if self.permissions else None,
            description=self.description,
            location=location,
        )


class SchemaDocument(_Document):
    permission_profiles: dict[str, list[PermissionDocument]] = Field(default_factory=dict, alias="permissionProfiles")
    types: list[TypeDocument] = Field(default_factory=list)

    def to_config(self, source: str = DEFAULT_SOURCE) -> ModelConfig:
        profiles = tuple(
            PermissionProfileConfig(
                name=name,
                permissions=tuple(PermissionConfig(roles=tuple(p.roles), access=p.access) for p in permissions),
                location=SourceLocation(source, f"permissionProfiles.{name}"),
            )
            for name, permissions in self.permission_profiles.items()
        )
        types = tuple(
            t.to_config(SourceLocation(source, f"types[{i}]")) for i, t in enumerate(self.types)
        )
        return ModelConfig(types=types, permission_profiles=profiles)


def _child(location: SourceLocation, segment: str) -> SourceLocation:
    path = f"{location.path}.{segment}" if location.path else segment
    return SourceLocation(location.source, path)


def load_schema_document(data: Any, source: str = DEFAULT_SOURCE) -> ModelConfig:
    """
    Convert a parsed schema document into a ModelConfig.

    Raises:
        SchemaDocumentError: If the document does not have the expected shape
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SchemaDocumentError(f"Expected a mapping at the top level, got {type(data).__name__}", source)

    try:
        document = SchemaDocument.model_validate(data)
    except ValidationError as e:
        raise SchemaDocumentError(str(e), source) from e

    config = document.to_config(source)
    logger.debug(f"Loaded {len(config.types)} types and {len(config.permission_profiles)} permission profiles from {source}")
    return config


def load_schema(path: Path | str) -> ModelConfig:
    """
    Load a YAML schema document from a file.

    Raises:
        SchemaDocumentError: If the file is missing, is not valid YAML, or has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise SchemaDocumentError("File not found", str(path))

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise SchemaDocumentError(f"Invalid YAML: {e}", str(path)) from e

    return load_schema_document(data, str(path))
