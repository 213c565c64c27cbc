"""
Model validator - runs the fixed validation pipeline over a built model.

Performs validation:
- Type names, duplicate types/fields, key fields, enum values
- Field names and type existence
- Embedding rules (root entity / entity extension / child entity fields)
- Relations, including explicit and implicit inverse pairing
- References, permissions, default values and calc mutations

All checks accumulate into one ValidationContext; a field may carry
several diagnostics. Checks that dereference the target type are skipped
when the type does not resolve.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from ..core.constants import CALC_MUTATION_OPERATORS, find_calc_mutation_operator
from ..core.defs import SourceLocation, TypeKind
from ..core.errors import ConfigurationError
from ..core.utils import is_uppercase, starts_lowercase, starts_uppercase
from .fields import Field
from .model import Model
from .permissions import RolesSpecifier
from .types import Type
from .validation import ValidationContext, ValidationMessage, ValidationResult

logger = logging.getLogger(__name__)


class ModelValidator:
    """
    Validates a Model and returns every diagnostic in one pass.

    Usage:
        result = ModelValidator(model).validate()
        if result.has_errors:
            ...
    """

    def __init__(self, model: Model):
        self.model = model
        self.context = ValidationContext()

    def validate(self) -> ValidationResult:
        self.context = ValidationContext(self.model.config.validation_messages)

        self._validate_type_names_unique()
        for profile in self.model.permission_profiles:
            profile.validate(self.context)

        for type_ in self.model.types:
            if type_.is_builtin:
                continue
            self._validate_type(type_)
            for field in type_.user_fields:
                self._validate_field(field)

        result = self.context.as_result()
        logger.info(
            f"Validated model: {len(result.errors)} errors, "
            f"{len(result.warnings)} warnings, {len(result.infos)} infos"
        )
        for message in result.errors:
            logger.debug(str(message))
        return result

    def _error(self, message: str, location: Optional[SourceLocation]):
        self.context.add_message(ValidationMessage.error(message, location))

    def _warn(self, message: str, location: Optional[SourceLocation]):
        self.context.add_message(ValidationMessage.warn(message, location))

    def _info(self, message: str, location: Optional[SourceLocation]):
        self.context.add_message(ValidationMessage.info(message, location))

    # =========================================================================
    # Types
    # =========================================================================

    def _validate_type_names_unique(self):
        counts = Counter(t.name for t in self.model.types)
        for type_ in self.model.types:
            if type_.is_builtin or counts[type_.name] < 2:
                continue
            builtin = self.model.get_type(type_.name)
            if builtin is not None and builtin.is_builtin:
                self._error(f'Type name "{type_.name}" is reserved for a built-in type.', type_.location)
            else:
                self._error(f'Duplicate type name: "{type_.name}".', type_.location)

    def _validate_type(self, type_: Type):
        self._validate_type_name(type_)
        self._validate_type_permissions(type_)

        if type_.kind == TypeKind.ENUM:
            self._validate_enum_values(type_)
            return

        if not type_.is_object_type:
            return

        if not type_.user_fields:
            self._error(f'Object type "{type_.name}" does not declare any fields.', type_.location)

        self._validate_field_names_unique(type_)
        self._validate_key_field(type_)

    def _validate_type_name(self, type_: Type):
        if not type_.name:
            self._error("Type name is empty.", type_.location)
            return

        # Leading underscores are reserved for internal names
        if type_.name.startswith("_"):
            self._error("Type names cannot start with an underscore.", type_.location)
            return

        if not starts_uppercase(type_.name):
            self._warn("Type names should start with an uppercase character.", type_.location)

    def _validate_enum_values(self, type_: Type):
        if not type_.values:
            self._error(f'Enum type "{type_.name}" does not declare any values.', type_.location)
            return

        counts = Counter(type_.values)
        for value, count in counts.items():
            if count > 1:
                self._error(f'Enum type "{type_.name}" declares value "{value}" more than once.', type_.location)

        for value in type_.values:
            if not is_uppercase(value):
                self._warn(f'Enum value "{value}" of type "{type_.name}" should be UPPERCASE.', type_.location)

    def _validate_field_names_unique(self, type_: Type):
        system_names = {f.name for f in type_.fields if f.is_system_field}
        counts = Counter(f.name for f in type_.user_fields)

        for field in type_.user_fields:
            if field.name in system_names:
                self._error(
                    f'Field "{field.name}" is a system field and cannot be redefined on "{type_.name}".',
                    field.location,
                )
            elif counts[field.name] > 1:
                self._error(f'Duplicate field name: "{field.name}".', field.location)

    def _validate_key_field(self, type_: Type):
        if type_.key_field_name is None:
            return

        if not type_.is_root_entity_type:
            self._error(
                f'Type "{type_.name}" is not a root entity type and cannot declare a key field.',
                type_.location,
            )
            return

        key_field = type_.get_field(type_.key_field_name)
        if key_field is None:
            self._error(
                f'Key field "{type_.key_field_name}" does not exist on type "{type_.name}".',
                type_.location,
            )
            return

        key_type = self.model.field_type(key_field)
        if key_field.is_list or not (key_type.is_scalar_type or key_type.is_enum_type):
            self._error(
                f'Key field "{type_.name}.{key_field.name}" must be a non-list scalar or enum field.',
                key_field.location,
            )

    def _validate_type_permissions(self, type_: Type):
        if type_.permission_profile_name is None and type_.roles is None:
            return
        self._validate_permission_specs(type_.permission_profile_name, type_.roles, type_.location)

    # =========================================================================
    # Fields
    # =========================================================================

    def _validate_field(self, field: Field):
        self._validate_field_name(field)
        self._validate_field_type(field)
        self._validate_field_permissions(field)
        self._validate_root_entity_type(field)
        self._validate_entity_extension_type(field)
        self._validate_child_entity_type(field)
        self._validate_relation(field)
        self._validate_reference(field)
        self._validate_default_value(field)
        self._validate_calc_mutations(field)

    def _validate_field_name(self, field: Field):
        if not field.name:
            self._error("Field name is empty.", field.location)
            return

        # Leading underscores are reserved for system-maintained properties
        if field.name.startswith("_"):
            self._error("Field names cannot start with an underscore.", field.location)
            return

        # naming conventions
        if "_" in field.name:
            self._warn("Field names should not include underscores.", field.location)
            return

        if not starts_lowercase(field.name):
            self._warn("Field names should start with a lowercase character.", field.location)

    def _validate_field_type(self, field: Field):
        if not self.model.has_valid_type(field):
            self._error(f'Type "{field.type_name}" not found.', field.location)

    def _validate_field_permissions(self, field: Field):
        self._validate_permission_specs(
            field.permission_profile_name,
            field.roles,
            field.permissions_location or field.location,
        )

    def _validate_permission_specs(
        self,
        profile_name: Optional[str],
        roles: Optional[RolesSpecifier],
        location: Optional[SourceLocation],
    ):
        if profile_name is not None and roles is not None:
            self._error("Permission profile and explicit role specifiers cannot be combined.", location)

        if profile_name is not None and self.model.get_permission_profile(profile_name) is None:
            self._error(f'Permission profile "{profile_name}" not found.', location)

        if roles is not None:
            roles.validate(self.context)

    def _validate_root_entity_type(self, field: Field):
        # this does not fit anywhere else properly
        if field.is_reference and field.is_relation:
            self._error("@reference and @relation cannot be combined.", field.location)

        type_ = self.model.field_type(field)
        if type_.kind != TypeKind.ROOT_ENTITY:
            return

        # root entities are not embeddable
        if not field.is_relation and not field.is_reference:
            if field.declaring_type_kind == TypeKind.VALUE_OBJECT:
                self._error(
                    f'Type "{type_.name}" is a root entity type and cannot be embedded. '
                    f'Consider adding @reference.',
                    field.location,
                )
            else:
                self._error(
                    f'Type "{type_.name}" is a root entity type and cannot be embedded. '
                    f'Consider adding @reference or @relation.',
                    field.location,
                )

    def _validate_entity_extension_type(self, field: Field):
        type_ = self.model.field_type(field)
        if type_.kind != TypeKind.ENTITY_EXTENSION:
            return

        if field.declaring_type_kind == TypeKind.VALUE_OBJECT:
            self._error(
                f'Type "{type_.name}" is an entity extension type and cannot be used within value object types. '
                f'Change "{field.declaring_type_name}" to an entity extension type or use a value object type '
                f'for "{field.name}".',
                field.location,
            )
            return

        if field.is_list:
            self._error(
                f'Type "{type_.name}" is an entity extension type and cannot be used in a list. '
                f'Change the field type to "{type_.name}" (without brackets), or use a child entity '
                f'or value object type instead.',
                field.location,
            )

    def _validate_child_entity_type(self, field: Field):
        type_ = self.model.field_type(field)
        if type_.kind != TypeKind.CHILD_ENTITY:
            return

        if field.declaring_type_kind == TypeKind.VALUE_OBJECT:
            self._error(
                f'Type "{type_.name}" is a child entity type and cannot be used within value object types. '
                f'Change "{field.declaring_type_name}" to an entity extension type or use a value object type '
                f'for "{field.name}".',
                field.location,
            )
            return

        if not field.is_list:
            self._error(
                f'Type "{type_.name}" is a child entity type and can only be used in a list. '
                f'Change the field type to "[{type_.name}]", or use an entity extension or value object '
                f'type instead.',
                field.location,
            )

    def _validate_relation(self, field: Field):
        if not field.is_relation:
            return

        if field.declaring_type_kind != TypeKind.ROOT_ENTITY:
            self._error(
                "Relations can only be defined on root entity types. Consider using @reference instead.",
                field.location,
            )

        # do target type validations only if it resolved correctly
        if not self.model.has_valid_type(field):
            return

        type_ = self.model.field_type(field)
        if type_.kind != TypeKind.ROOT_ENTITY:
            self._error(
                f'Type "{type_.name}" cannot be used with @relation because it is not a root entity type.',
                field.location,
            )
            return

        if field.inverse_of_field_name is not None:
            self._validate_explicit_inverse(field, type_)
        else:
            self._validate_implicit_inverse(field, type_)

    def _validate_explicit_inverse(self, field: Field, type_: Type):
        inverse_of = type_.get_field(field.inverse_of_field_name)
        desc = (
            f'Field "{type_.name}.{field.inverse_of_field_name}" used as inverse field of '
            f'"{field.declaring_type_name}.{field.name}"'
        )
        if inverse_of is None:
            self._error(
                f'Field "{field.inverse_of_field_name}" does not exist on type "{type_.name}".',
                field.location,
            )
        elif self.model.has_valid_type(inverse_of) and inverse_of.type_name != field.declaring_type_name:
            self._error(
                f'{desc} has named type "{inverse_of.type_name}" but should be of type '
                f'"{field.declaring_type_name}".',
                field.location,
            )
        elif not inverse_of.is_relation:
            self._error(f"{desc} does not have the @relation directive.", field.location)
        elif inverse_of.inverse_of_field_name is not None:
            self._error(f"{desc} should not declare inverseOf itself.", field.location)

    def _validate_implicit_inverse(self, field: Field, type_: Type):
        # look for fields on the target type declaring inverseOf this field
        inverse_fields = self.model.inverse_field_candidates(field)

        if not inverse_fields:
            # a one-sided relation is fine, but suspicious if the target relates back on its own
            # (look at the declared name, not the resolved inverse, so an invalid inverseOf does not warn)
            matching = next(
                (
                    f for f in type_.fields
                    if f is not field
                    and f.is_relation
                    and f.type_name == field.declaring_type_name
                    and f.inverse_of_field_name is None
                ),
                None,
            )
            if matching is not None:
                self._warn(
                    f'This field and "{matching.declaring_type_name}.{matching.name}" define separate relations. '
                    f'Consider using the "inverseOf" argument to add a backlink to an existing relation.',
                    field.location,
                )
        elif len(inverse_fields) > 1:
            names = ", ".join(f'"{type_.name}.{f.name}"' for f in inverse_fields)
            # report on every inverse field, not only here, so none of them looks valid
            for inverse_field in inverse_fields:
                self._error(
                    f'Multiple fields ({names}) declare inverseOf to "{field.declaring_type_name}.{field.name}".',
                    inverse_field.location,
                )

    def _validate_reference(self, field: Field):
        if not field.is_reference:
            return

        # do target type validations only if it resolved correctly
        if not self.model.has_valid_type(field):
            return

        type_ = self.model.field_type(field)
        if type_.kind != TypeKind.ROOT_ENTITY:
            self._error(
                f'"{type_.name}" cannot be used as @reference type because is not a root entity type.',
                field.location,
            )
            return

        if field.is_list:
            self._error(
                "@reference is not supported with list types. Consider wrapping the reference in a "
                "child entity or value object type.",
                field.location,
            )

        if self.model.key_field(type_) is None:
            self._error(
                f'"{type_.name}" cannot be used as @reference type because it does not have a key field.',
                field.location,
            )

    def _validate_default_value(self, field: Field):
        if not field.has_default_value:
            return

        if field.is_relation:
            self._error("Default values are not supported on relations.", field.location)
            return

        self._info("Take care, there are no type checks for default values yet.", field.location)

    def _validate_calc_mutations(self, field: Field):
        if not field.calc_mutation_operators:
            return

        if field.is_list:
            self._error("Calc mutations are not supported on list fields.", field.location)
            return

        type_name = field.type_name
        supported = [op for op in CALC_MUTATION_OPERATORS if type_name in op.supported_types]
        supported_desc = ", ".join(f'"{op.name}"' for op in supported)

        if not supported:
            self._error(f'Type "{type_name}" does not support any calc mutation operators.', field.location)
            return

        for operator in field.calc_mutation_operators:
            desc = find_calc_mutation_operator(operator)
            if desc is None:
                raise ConfigurationError(f"Unknown calc mutation operator: {operator}")

            if type_name not in desc.supported_types:
                self._error(
                    f'Calc mutation operator "{operator}" is not supported on type "{type_name}" '
                    f'(supported operators: {supported_desc}).',
                    field.location,
                )
