"""
Domain model - the arena of types and fields built from a ModelConfig.

Types and fields are plain records that refer to each other by name.
Cross references (field type, inverse field, relation side, permission
profile) are resolved here as lookups over the arena and memoized per
field object, so repeated lookups return the identical objects.

Usage:
    from modelgraph.model import compile_model

    model = compile_model(config)   # raises ModelValidationError on errors
    movie = model.get_type_or_throw("Movie")
    side = model.relation_side(movie.get_field("actors"))
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from ..core.constants import BUILTIN_SCALAR_TYPES
from ..core.defs import ModelConfig, TypeKind
from ..core.errors import ConfigurationError, ModelValidationError
from .fields import Field
from .permissions import PermissionProfile
from .relation import Relation, RelationSide
from .types import Type
from .validation import ValidationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class Model:
    """
    Immutable graph of types and fields.

    Built once per schema compilation; lazily derived properties are
    cached for the lifetime of the model. The caches are append-only and
    are filled during the single-threaded build/first-use phase.
    """

    def __init__(self, config: ModelConfig):
        self.config = config
        self.types: tuple[Type, ...] = tuple(
            [Type.builtin_scalar(name) for name in BUILTIN_SCALAR_TYPES]
            + [Type.from_config(type_config) for type_config in config.types]
        )
        self.permission_profiles: tuple[PermissionProfile, ...] = tuple(
            PermissionProfile.from_config(p) for p in config.permission_profiles
        )

        self._types_by_name: dict[str, Type] = {}
        for type_ in self.types:
            # first declaration wins; duplicates are reported by validation
            self._types_by_name.setdefault(type_.name, type_)

        self._profiles_by_name: dict[str, PermissionProfile] = {}
        for profile in self.permission_profiles:
            self._profiles_by_name.setdefault(profile.name, profile)

        self._fallback_types: dict[str, Type] = {}
        self._inverse_of_cache: dict[Field, Optional[Field]] = {}
        self._inverse_field_cache: dict[Field, Optional[Field]] = {}
        self._relation_side_cache: dict[Field, Optional[RelationSide]] = {}
        self._relations: dict[tuple[Field, Optional[Field]], Relation] = {}

        logger.debug(
            f"Built model with {len(config.types)} types, "
            f"{sum(len(t.fields) for t in self.types)} fields"
        )

    # =========================================================================
    # Type lookup
    # =========================================================================

    def get_type(self, name: str) -> Optional[Type]:
        return self._types_by_name.get(name)

    def get_type_or_throw(self, name: str) -> Type:
        type_ = self.get_type(name)
        if type_ is None:
            raise ConfigurationError(f'Type "{name}" not found')
        return type_

    def get_type_or_fallback(self, name: str) -> Type:
        """
        Resolve a type name, or return a placeholder scalar type.

        The placeholder keeps kind checks total for fields whose type does not
        exist; validation reports the missing type separately.
        """
        type_ = self.get_type(name)
        if type_ is not None:
            return type_
        if name not in self._fallback_types:
            self._fallback_types[name] = Type(name=name, kind=TypeKind.SCALAR)
        return self._fallback_types[name]

    def _types_of_kind(self, kind: TypeKind) -> tuple[Type, ...]:
        return tuple(t for t in self.types if t.kind == kind)

    @property
    def root_entity_types(self) -> tuple[Type, ...]:
        return self._types_of_kind(TypeKind.ROOT_ENTITY)

    @property
    def child_entity_types(self) -> tuple[Type, ...]:
        return self._types_of_kind(TypeKind.CHILD_ENTITY)

    @property
    def entity_extension_types(self) -> tuple[Type, ...]:
        return self._types_of_kind(TypeKind.ENTITY_EXTENSION)

    @property
    def value_object_types(self) -> tuple[Type, ...]:
        return self._types_of_kind(TypeKind.VALUE_OBJECT)

    @property
    def enum_types(self) -> tuple[Type, ...]:
        return self._types_of_kind(TypeKind.ENUM)

    @property
    def scalar_types(self) -> tuple[Type, ...]:
        return self._types_of_kind(TypeKind.SCALAR)

    def get_permission_profile(self, name: str) -> Optional[PermissionProfile]:
        return self._profiles_by_name.get(name)

    # =========================================================================
    # Field-derived properties
    # =========================================================================

    def field_type(self, field: Field) -> Type:
        return self.get_type_or_fallback(field.type_name)

    def declaring_type(self, field: Field) -> Type:
        return self.get_type_or_throw(field.declaring_type_name)

    def has_valid_type(self, field: Field) -> bool:
        return self.get_type(field.type_name) is not None

    def permission_profile(self, field: Field) -> Optional[PermissionProfile]:
        if field.permission_profile_name is None:
            return None
        return self.get_permission_profile(field.permission_profile_name)

    def inverse_of(self, field: Field) -> Optional[Field]:
        """The field this field declares itself the inverse of, if it resolves."""
        return self._memo(self._inverse_of_cache, field, self._compute_inverse_of)

    def _compute_inverse_of(self, field: Field) -> Optional[Field]:
        if field.inverse_of_field_name is None:
            return None
        type_ = self.field_type(field)
        if not type_.is_object_type:
            return None
        return type_.get_field(field.inverse_of_field_name)

    def inverse_field(self, field: Field) -> Optional[Field]:
        """The field on the target type that declares itself the inverse of this one."""
        return self._memo(self._inverse_field_cache, field, self._compute_inverse_field)

    def _compute_inverse_field(self, field: Field) -> Optional[Field]:
        type_ = self.field_type(field)
        if not type_.is_object_type:
            return None
        for candidate in type_.fields:
            if self.inverse_of(candidate) is field:
                return candidate
        return None

    def inverse_field_candidates(self, field: Field) -> list[Field]:
        """All fields on the target type that declare themselves the inverse of this one."""
        type_ = self.field_type(field)
        if not type_.is_object_type:
            return []
        return [f for f in type_.fields if self.inverse_of(f) is field]

    def relation_side(self, field: Field) -> Optional[RelationSide]:
        return self._memo(self._relation_side_cache, field, self._compute_relation_side)

    def _compute_relation_side(self, field: Field) -> Optional[RelationSide]:
        if not field.is_relation or field.declaring_type_kind != TypeKind.ROOT_ENTITY:
            return None
        target_type = self.field_type(field)
        if not target_type.is_root_entity_type:
            return None
        declaring_type = self.declaring_type(field)

        inverse_of = self.inverse_of(field)
        if inverse_of is not None:
            # this is the to side
            return self._get_relation(target_type, inverse_of, declaring_type, field).to_side

        # this is the from side
        return self._get_relation(declaring_type, field, target_type, self.inverse_field(field)).from_side

    def _get_relation(
        self,
        from_type: Type,
        from_field: Field,
        to_type: Type,
        to_field: Optional[Field],
    ) -> Relation:
        key = (from_field, to_field)
        if key not in self._relations:
            self._relations[key] = Relation(
                from_type=from_type,
                from_field=from_field,
                to_type=to_type,
                to_field=to_field,
            )
        return self._relations[key]

    def relation(self, field: Field) -> Optional[Relation]:
        side = self.relation_side(field)
        return side.relation if side else None

    def get_relation_side_or_throw(self, field: Field) -> RelationSide:
        target_type = self.field_type(field)
        if not target_type.is_root_entity_type:
            raise ConfigurationError(
                f'Expected "{target_type.name}" to be a root entity, but is {target_type.kind.value}'
            )
        if field.declaring_type_kind != TypeKind.ROOT_ENTITY:
            raise ConfigurationError(
                f'Expected "{field.declaring_type_name}" to be a root entity, '
                f'but is {field.declaring_type_kind.value}'
            )
        side = self.relation_side(field)
        if side is None:
            raise ConfigurationError(f'Expected "{field.id}" to be a relation')
        return side

    def get_relation_or_throw(self, field: Field) -> Relation:
        return self.get_relation_side_or_throw(field).relation

    @property
    def relations(self) -> list[Relation]:
        """Every relation of the model once, discovered from its from-side field."""
        relations: list[Relation] = []
        for type_ in self.root_entity_types:
            for field in type_.fields:
                side = self.relation_side(field)
                if side is not None and side.is_from_side:
                    relations.append(side.relation)
        return relations

    # =========================================================================
    # Key fields
    # =========================================================================

    def key_field(self, type_: Type) -> Optional[Field]:
        if not type_.is_root_entity_type or type_.key_field_name is None:
            return None
        return type_.get_field(type_.key_field_name)

    def get_key_field_or_throw(self, type_: Type) -> Field:
        key_field = self.key_field(type_)
        if key_field is None:
            raise ConfigurationError(f'Type "{type_.name}" does not have a key field')
        return key_field

    def get_key_field_type_or_throw(self, type_: Type) -> Type:
        return self.field_type(self.get_key_field_or_throw(type_))

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> ValidationResult:
        from .validator import ModelValidator

        return ModelValidator(self).validate()

    @staticmethod
    def _memo(cache: dict[Field, T], field: Field, compute: Callable[[Field], T]) -> T:
        value = cache.get(field, _UNSET)
        if value is _UNSET:
            value = compute(field)
            cache[field] = value
        return value

    def __repr__(self) -> str:
        return f"Model({len(self.types)} types)"


def build_model(config: ModelConfig) -> Model:
    """Build a model without validating it."""
    return Model(config)


def compile_model(config: ModelConfig) -> Model:
    """
    Build and validate a model.

    Raises:
        ModelValidationError: If validation reports any error

    Returns:
        The validated Model; warnings and infos are logged, not raised
    """
    model = Model(config)
    result = model.validate()

    if result.has_errors:
        logger.warning(f"Model rejected with {len(result.errors)} validation errors")
        raise ModelValidationError(result)

    for message in result.warnings:
        logger.warning(str(message))

    return model
