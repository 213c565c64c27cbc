"""
Field records of the domain model.

A Field only knows the *names* of its declaring type and target type.
Everything that needs the target type (relation side, inverse field,
permission profile, type validity) is resolved through the Model arena.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from ..core.defs import FieldConfig, SourceLocation, TypeKind
from .permissions import RolesSpecifier


class FieldId(NamedTuple):
    """Stable identifier of a field within the model."""
    type_name: str
    field_name: str

    def __str__(self) -> str:
        return f"{self.type_name}.{self.field_name}"


@dataclass(frozen=True, eq=False)
class Field:
    """
    A field declared on an object type.

    Fields compare and hash by identity, so they can be collected in sets
    (e.g. the affected-field set of a mutation).
    """
    name: str
    declaring_type_name: str
    declaring_type_kind: TypeKind
    type_name: str
    is_list: bool = False
    is_reference: bool = False
    is_relation: bool = False
    is_system_field: bool = False  # maintained by the system, can only be queried
    default_value: Any = None
    calc_mutation_operators: tuple[str, ...] = ()
    inverse_of_field_name: Optional[str] = None
    permission_profile_name: Optional[str] = None
    roles: Optional[RolesSpecifier] = None
    description: Optional[str] = None
    location: Optional[SourceLocation] = None
    permissions_location: Optional[SourceLocation] = None

    @classmethod
    def from_config(cls, config: FieldConfig, declaring_type_name: str, declaring_type_kind: TypeKind) -> Field:
        permissions = config.permissions
        roles = None
        if permissions is not None and permissions.roles is not None:
            roles = RolesSpecifier.from_config(permissions.roles)

        return cls(
            name=config.name,
            declaring_type_name=declaring_type_name,
            declaring_type_kind=declaring_type_kind,
            type_name=config.type_name,
            is_list=config.is_list,
            is_reference=config.is_reference,
            is_relation=config.is_relation,
            is_system_field=config.is_system_field,
            default_value=config.default_value,
            # keep declaration order, drop duplicates
            calc_mutation_operators=tuple(dict.fromkeys(config.calc_mutation_operators)),
            inverse_of_field_name=config.inverse_of_field_name,
            permission_profile_name=permissions.permission_profile_name if permissions else None,
            roles=roles,
            description=config.description,
            location=config.location,
            permissions_location=permissions.location if permissions else None,
        )

    @property
    def id(self) -> FieldId:
        return FieldId(self.declaring_type_name, self.name)

    @property
    def is_read_only(self) -> bool:
        """Whether this field can never be set manually (independent of permissions)."""
        return self.is_system_field

    @property
    def has_default_value(self) -> bool:
        return self.default_value is not None

    def __repr__(self) -> str:
        return f"Field({self.id})"
