"""
Type records of the domain model.

One Type class tagged by TypeKind replaces a per-kind class hierarchy;
kind-specific behavior dispatches on `kind` where it is needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import SYSTEM_FIELDS
from ..core.defs import OBJECT_TYPE_KINDS, SourceLocation, TypeConfig, TypeKind
from .fields import Field
from .permissions import RolesSpecifier


@dataclass(frozen=True, eq=False)
class Type:
    """A declared type and its ordered fields."""
    name: str
    kind: TypeKind
    fields: tuple[Field, ...] = ()
    key_field_name: Optional[str] = None
    values: tuple[str, ...] = ()
    permission_profile_name: Optional[str] = None
    roles: Optional[RolesSpecifier] = None
    description: Optional[str] = None
    location: Optional[SourceLocation] = None
    is_builtin: bool = False
    _fields_by_name: dict[str, Field] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        by_name: dict[str, Field] = {}
        for f in self.fields:
            # first declaration wins; duplicates are reported by validation
            by_name.setdefault(f.name, f)
        object.__setattr__(self, "_fields_by_name", by_name)

    @classmethod
    def from_config(cls, config: TypeConfig) -> Type:
        fields: list[Field] = []
        if config.kind in (TypeKind.ROOT_ENTITY, TypeKind.CHILD_ENTITY):
            for name, type_name in SYSTEM_FIELDS.items():
                fields.append(Field(
                    name=name,
                    declaring_type_name=config.name,
                    declaring_type_kind=config.kind,
                    type_name=type_name,
                    is_system_field=True,
                    location=config.location,
                ))
        for field_config in config.fields:
            fields.append(Field.from_config(field_config, config.name, config.kind))

        permissions = config.permissions
        return cls(
            name=config.name,
            kind=config.kind,
            fields=tuple(fields),
            key_field_name=config.key_field_name,
            values=tuple(config.values),
            permission_profile_name=permissions.permission_profile_name if permissions else None,
            roles=RolesSpecifier.from_config(permissions.roles) if permissions and permissions.roles else None,
            description=config.description,
            location=config.location,
        )

    @classmethod
    def builtin_scalar(cls, name: str) -> Type:
        return cls(name=name, kind=TypeKind.SCALAR, is_builtin=True)

    def get_field(self, name: str) -> Optional[Field]:
        return self._fields_by_name.get(name)

    @property
    def user_fields(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if not f.is_system_field)

    @property
    def is_object_type(self) -> bool:
        return self.kind in OBJECT_TYPE_KINDS

    @property
    def is_root_entity_type(self) -> bool:
        return self.kind == TypeKind.ROOT_ENTITY

    @property
    def is_child_entity_type(self) -> bool:
        return self.kind == TypeKind.CHILD_ENTITY

    @property
    def is_entity_extension_type(self) -> bool:
        return self.kind == TypeKind.ENTITY_EXTENSION

    @property
    def is_value_object_type(self) -> bool:
        return self.kind == TypeKind.VALUE_OBJECT

    @property
    def is_scalar_type(self) -> bool:
        return self.kind == TypeKind.SCALAR

    @property
    def is_enum_type(self) -> bool:
        return self.kind == TypeKind.ENUM

    def __repr__(self) -> str:
        return f"Type({self.name}, {self.kind.value})"
