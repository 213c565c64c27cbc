"""
Permission profiles and role specifiers.

The model only stores these references; evaluating them against a
principal is the job of the authorization layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.defs import (
    PermissionConfig,
    PermissionProfileConfig,
    RolesSpecifierConfig,
    SourceLocation,
)
from .validation import ValidationContext, ValidationMessage


@dataclass(frozen=True)
class RolesSpecifier:
    """Explicit read / read-write role lists of a type or field."""
    read: tuple[str, ...]
    read_write: tuple[str, ...]
    location: Optional[SourceLocation] = None

    @classmethod
    def from_config(cls, config: RolesSpecifierConfig) -> RolesSpecifier:
        return cls(read=tuple(config.read), read_write=tuple(config.read_write), location=config.location)

    def validate(self, context: ValidationContext) -> None:
        if not self.read and not self.read_write:
            context.add_message(ValidationMessage.warn(
                "No roles with read access are specified. Access is denied for everyone.",
                self.location,
            ))


@dataclass(frozen=True)
class PermissionProfile:
    """Named set of role/access grants."""
    name: str
    permissions: tuple[PermissionConfig, ...]
    location: Optional[SourceLocation] = None

    @classmethod
    def from_config(cls, config: PermissionProfileConfig) -> PermissionProfile:
        return cls(name=config.name, permissions=tuple(config.permissions), location=config.location)

    @property
    def read_roles(self) -> frozenset[str]:
        return frozenset(role for p in self.permissions for role in p.roles)

    @property
    def read_write_roles(self) -> frozenset[str]:
        return frozenset(role for p in self.permissions if p.access == "readWrite" for role in p.roles)

    def validate(self, context: ValidationContext) -> None:
        if not self.permissions:
            context.add_message(ValidationMessage.warn(
                f'Permission profile "{self.name}" does not grant any access.',
                self.location,
            ))
        for permission in self.permissions:
            if not permission.roles:
                context.add_message(ValidationMessage.error(
                    f'Permission profile "{self.name}" contains a permission without roles.',
                    self.location,
                ))
