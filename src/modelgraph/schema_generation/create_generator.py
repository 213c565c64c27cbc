"""
Create input type generation.

Builds the input shape accepted when creating an object of a given type.
Input types are memoized per type, so every request for the same type
returns the identical input type (this also terminates recursion for
self-referencing types, because fields are generated lazily).
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ..core.defs import TypeKind
from ..core.errors import ConfigurationError
from ..core.utils import get_create_input_type_name, get_value_object_input_type_name
from ..model.fields import Field
from ..model.model import Model
from ..model.types import Type
from .input_fields import (
    BasicInputField,
    BasicListInputField,
    InputField,
    ObjectInputField,
    ObjectListInputField,
)
from .input_types import (
    CreateChildEntityInputType,
    CreateObjectInputType,
    CreateRootEntityInputType,
)
from .relation_fields import (
    AddEdgesInputField,
    CreateAndAddEdgesInputField,
    CreateAndSetEdgeInputField,
    SetEdgeInputField,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CreateInputTypeGenerator:
    """
    Generates create input types.

    Usage:
        generator = CreateInputTypeGenerator(model)
        input_type = generator.generate(model.get_type_or_throw("Movie"))
        statements = input_type.get_create_statements(input_type.prepare_value(data))
    """

    def __init__(self, model: Model):
        self.model = model
        self._root_entity_cache: dict[Type, CreateRootEntityInputType] = {}
        self._child_entity_cache: dict[Type, CreateChildEntityInputType] = {}
        self._value_object_cache: dict[Type, CreateObjectInputType] = {}
        self._entity_extension_cache: dict[Type, CreateObjectInputType] = {}

    def generate(self, type_: Type) -> CreateObjectInputType:
        if type_.kind == TypeKind.ROOT_ENTITY:
            return self.generate_for_root_entity_type(type_)
        if type_.kind == TypeKind.CHILD_ENTITY:
            return self.generate_for_child_entity_type(type_)
        if type_.kind == TypeKind.VALUE_OBJECT:
            return self.generate_for_value_object_type(type_)
        if type_.kind == TypeKind.ENTITY_EXTENSION:
            return self.generate_for_entity_extension_type(type_)
        raise ConfigurationError(f"Unsupported type kind {type_.kind.value} for create input type generation")

    def generate_for_root_entity_type(self, type_: Type) -> CreateRootEntityInputType:
        return _memoized(self._root_entity_cache, type_, lambda: CreateRootEntityInputType(
            type_, get_create_input_type_name(type_.name), lambda: self._generate_type_fields(type_),
        ))

    def generate_for_child_entity_type(self, type_: Type) -> CreateChildEntityInputType:
        return _memoized(self._child_entity_cache, type_, lambda: CreateChildEntityInputType(
            type_, get_create_input_type_name(type_.name), lambda: self._generate_type_fields(type_),
        ))

    def generate_for_value_object_type(self, type_: Type) -> CreateObjectInputType:
        return _memoized(self._value_object_cache, type_, lambda: CreateObjectInputType(
            type_, get_value_object_input_type_name(type_.name), lambda: self._generate_type_fields(type_),
        ))

    def generate_for_entity_extension_type(self, type_: Type) -> CreateObjectInputType:
        return _memoized(self._entity_extension_cache, type_, lambda: CreateObjectInputType(
            type_, get_create_input_type_name(type_.name), lambda: self._generate_type_fields(type_),
        ))

    def _generate_type_fields(self, type_: Type) -> list[InputField]:
        input_fields: list[InputField] = []
        for field in type_.fields:
            input_fields.extend(self._generate_fields(field))
        return input_fields

    def _generate_fields(self, field: Field) -> list[InputField]:
        # id and timestamps are filled in by the input type
        if field.is_system_field:
            return []

        field_type = self.model.field_type(field)

        if field_type.is_scalar_type or field_type.is_enum_type:
            if field.is_list:
                return [BasicListInputField(field, field_type.name)]
            return [BasicInputField(field, field_type.name)]

        if field_type.is_value_object_type:
            input_type = self.generate_for_value_object_type(field_type)
            if field.is_list:
                return [ObjectListInputField(field, input_type)]
            return [ObjectInputField(field, input_type)]

        if field_type.is_entity_extension_type:
            return [ObjectInputField(field, self.generate_for_entity_extension_type(field_type))]

        if field_type.is_child_entity_type:
            return [ObjectListInputField(field, self.generate_for_child_entity_type(field_type))]

        if field.is_reference:
            key_type = self.model.get_key_field_type_or_throw(field_type)
            return [BasicInputField(field, key_type.name)]

        if field.is_relation:
            input_type = self.generate_for_root_entity_type(field_type)
            if field.is_list:
                return [
                    AddEdgesInputField(self.model, field, name=field.name),
                    CreateAndAddEdgesInputField(self.model, field, input_type),
                ]
            return [
                SetEdgeInputField(self.model, field),
                CreateAndSetEdgeInputField(self.model, field, input_type),
            ]

        raise ConfigurationError(f'Field "{field.id}" has an unexpected configuration')


def _memoized(cache: dict[Type, T], type_: Type, build: Callable[[], T]) -> T:
    input_type = cache.get(type_)
    if input_type is None:
        input_type = build()
        cache[type_] = input_type
        logger.debug(f"Generated input type {input_type}")
    return input_type
