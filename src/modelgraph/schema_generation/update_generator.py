"""
Update input type generation.

Per field of the updated type:
- id (root/child entities): filter input locating the target
- scalar/enum: setter, plus one input per calc mutation operator
- scalar/enum list: list setter (null becomes [])
- value object (list): setter through the value object's create input
- entity extension: partial update through its own update input
- child entity list: add/update/remove inputs
- reference: setter for the referenced key value
- relation: edge inputs (add/remove/create for lists, set/create otherwise)
"""

from __future__ import annotations

import logging

from ..core.constants import ID_FIELD, find_calc_mutation_operator
from ..core.defs import TypeKind
from ..core.errors import ConfigurationError
from ..core.utils import get_update_all_input_type_name, get_update_input_type_name
from ..model.fields import Field
from ..model.model import Model
from ..model.types import Type
from .create_generator import CreateInputTypeGenerator
from .input_fields import (
    AddChildEntitiesInputField,
    BasicInputField,
    BasicListInputField,
    CalcMutationInputField,
    FilterInputField,
    InputField,
    ObjectInputField,
    ObjectListInputField,
    RemoveChildEntitiesInputField,
    UpdateChildEntitiesInputField,
    UpdateEntityExtensionInputField,
)
from .input_types import (
    UpdateChildEntityInputType,
    UpdateEntityExtensionInputType,
    UpdateObjectInputType,
    UpdateRootEntityInputType,
)
from .relation_fields import (
    AddEdgesInputField,
    CreateAndAddEdgesInputField,
    CreateAndSetEdgeInputField,
    RemoveEdgesInputField,
    SetEdgeInputField,
)

logger = logging.getLogger(__name__)


class UpdateInputTypeGenerator:
    """
    Generates update input types, memoized per type.

    Usage:
        generator = UpdateInputTypeGenerator(model, CreateInputTypeGenerator(model))
        input_type = generator.generate(model.get_type_or_throw("Order"))
    """

    def __init__(self, model: Model, create_generator: CreateInputTypeGenerator | None = None):
        self.model = model
        self.create_generator = create_generator or CreateInputTypeGenerator(model)
        self._root_entity_cache: dict[Type, UpdateRootEntityInputType] = {}
        self._update_all_cache: dict[Type, UpdateRootEntityInputType] = {}
        self._entity_extension_cache: dict[Type, UpdateEntityExtensionInputType] = {}
        self._child_entity_cache: dict[Type, UpdateChildEntityInputType] = {}

    def generate(self, type_: Type) -> UpdateObjectInputType:
        if type_.kind == TypeKind.ROOT_ENTITY:
            return self.generate_for_root_entity_type(type_)
        if type_.kind == TypeKind.ENTITY_EXTENSION:
            return self.generate_for_entity_extension_type(type_)
        if type_.kind == TypeKind.CHILD_ENTITY:
            return self.generate_for_child_entity_type(type_)
        raise ConfigurationError(f"Unsupported type kind {type_.kind.value} for update input type generation")

    def generate_for_root_entity_type(self, type_: Type) -> UpdateRootEntityInputType:
        input_type = self._root_entity_cache.get(type_)
        if input_type is None:
            input_type = UpdateRootEntityInputType(
                type_,
                get_update_input_type_name(type_.name),
                lambda: self._generate_type_fields(type_),
            )
            self._root_entity_cache[type_] = input_type
            logger.debug(f"Generated input type {input_type}")
        return input_type

    def generate_update_all_root_entities_input_type(self, type_: Type) -> UpdateRootEntityInputType:
        """
        Input for updating many entities at once.

        Has no id filter (the entities are selected by the caller) and no
        relation inputs, since edge statements need one known source id.
        """
        input_type = self._update_all_cache.get(type_)
        if input_type is None:
            input_type = UpdateRootEntityInputType(
                type_,
                get_update_all_input_type_name(type_.name),
                lambda: self._generate_type_fields(type_, skip_id=True, skip_relations=True),
                operation="updateAll",
            )
            self._update_all_cache[type_] = input_type
            logger.debug(f"Generated input type {input_type}")
        return input_type

    def generate_for_entity_extension_type(self, type_: Type) -> UpdateEntityExtensionInputType:
        input_type = self._entity_extension_cache.get(type_)
        if input_type is None:
            input_type = UpdateEntityExtensionInputType(
                type_,
                get_update_input_type_name(type_.name),
                lambda: self._generate_type_fields(type_),
            )
            self._entity_extension_cache[type_] = input_type
            logger.debug(f"Generated input type {input_type}")
        return input_type

    def generate_for_child_entity_type(self, type_: Type) -> UpdateChildEntityInputType:
        input_type = self._child_entity_cache.get(type_)
        if input_type is None:
            input_type = UpdateChildEntityInputType(
                type_,
                get_update_input_type_name(type_.name),
                lambda: self._generate_type_fields(type_),
            )
            self._child_entity_cache[type_] = input_type
            logger.debug(f"Generated input type {input_type}")
        return input_type

    def _generate_type_fields(self, type_: Type, skip_id: bool = False, skip_relations: bool = False) -> list[InputField]:
        input_fields: list[InputField] = []
        for field in type_.fields:
            input_fields.extend(self._generate_fields(field, skip_id=skip_id, skip_relations=skip_relations))
        return input_fields

    def _generate_fields(self, field: Field, skip_id: bool = False, skip_relations: bool = False) -> list[InputField]:
        if field.is_system_field:
            if (
                not skip_id
                and field.name == ID_FIELD
                and field.declaring_type_kind in (TypeKind.ROOT_ENTITY, TypeKind.CHILD_ENTITY)
            ):
                return [FilterInputField(field, "ID")]
            return []

        field_type = self.model.field_type(field)

        if field_type.is_scalar_type or field_type.is_enum_type:
            if field.is_list:
                return [BasicListInputField(field, field_type.name)]
            calc_mutation_fields = [
                CalcMutationInputField(field, field_type.name, _get_calc_mutation_operator_or_throw(name))
                for name in field.calc_mutation_operators
            ]
            return [BasicInputField(field, field_type.name), *calc_mutation_fields]

        if field_type.is_value_object_type:
            input_type = self.create_generator.generate_for_value_object_type(field_type)
            if field.is_list:
                return [ObjectListInputField(field, input_type)]
            return [ObjectInputField(field, input_type)]

        if field_type.is_entity_extension_type:
            return [UpdateEntityExtensionInputField(field, self.generate_for_entity_extension_type(field_type))]

        if field_type.is_child_entity_type:
            return [
                AddChildEntitiesInputField(field, self.create_generator.generate_for_child_entity_type(field_type)),
                UpdateChildEntitiesInputField(field, self.generate_for_child_entity_type(field_type)),
                RemoveChildEntitiesInputField(field, field_type.name),
            ]

        if field.is_reference:
            # the referenced entity is not required to exist
            key_type = self.model.get_key_field_type_or_throw(field_type)
            return [BasicInputField(field, key_type.name)]

        if field.is_relation:
            if skip_relations:
                return []
            input_type = self.create_generator.generate_for_root_entity_type(field_type)
            if field.is_list:
                return [
                    AddEdgesInputField(self.model, field),
                    RemoveEdgesInputField(self.model, field),
                    CreateAndAddEdgesInputField(self.model, field, input_type),
                ]
            return [
                SetEdgeInputField(self.model, field),
                CreateAndSetEdgeInputField(self.model, field, input_type),
            ]

        raise ConfigurationError(f'Field "{field.id}" has an unexpected configuration')


def _get_calc_mutation_operator_or_throw(name: str):
    operator = find_calc_mutation_operator(name)
    if operator is None:
        raise ConfigurationError(f'Calc mutation operator "{name}" is not defined')
    return operator
