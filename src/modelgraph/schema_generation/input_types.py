"""
Create and update input object types.

An input object type is the ordered set of named input fields accepted
for one model type. Its fields are generated lazily on first access so
that recursive types can reference their own (memoized) input type.

Usage:
    input_type = update_generator.generate(movie_type)
    prepared = input_type.prepare_value({"id": "42", "title": "Heat"})
    statements = input_type.get_update_statements(prepared)
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Literal, Optional

from ..core.constants import CREATED_AT_FIELD, ID_FIELD, UPDATED_AT_FIELD
from ..core.errors import InputCoercionError
from ..core.utils import decapitalize
from ..model.fields import Field
from ..model.types import Type
from ..query.nodes import (
    BinaryOperationQueryNode,
    BinaryOperator,
    BasicType,
    ConditionalQueryNode,
    CreateEntityQueryNode,
    CurrentTimestampQueryNode,
    EMPTY_LIST,
    EntitiesQueryNode,
    EntityIDQueryNode,
    FieldQueryNode,
    LiteralQueryNode,
    QueryNode,
    SetFieldQueryNode,
    TransformListQueryNode,
    TypeCheckQueryNode,
    UpdateEntitiesQueryNode,
    VariableQueryNode,
)
from .descriptors import InputTypeDescriptor
from .input_fields import ChildEntitiesInputField, InputField

Operation = Literal["create", "update", "updateAll"]


def sort_fields(fields: Iterable[Field]) -> tuple[Field, ...]:
    """Deterministic order for affected-field sets."""
    return tuple(sorted(fields, key=lambda f: (f.declaring_type_name, f.name)))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InputObjectType:
    """Base class of create/update input object types."""

    def __init__(
        self,
        type_: Type,
        name: str,
        fields_factory: Callable[[], Iterable[InputField]],
        operation: Operation,
    ):
        self.type = type_
        self.name = name
        self.operation = operation
        self._fields_factory = fields_factory
        self._fields: Optional[tuple[InputField, ...]] = None
        self._fields_by_name: dict[str, InputField] = {}

    @property
    def fields(self) -> tuple[InputField, ...]:
        if self._fields is None:
            self._fields = tuple(self._fields_factory())
            self._fields_by_name = {f.name: f for f in self._fields}
        return self._fields

    def get_field(self, name: str) -> Optional[InputField]:
        self.fields
        return self._fields_by_name.get(name)

    def prepare_value(self, value: Any) -> dict[str, Any]:
        """
        Coerce a raw input object.

        Raises:
            InputCoercionError: If the value is not an object, names an unknown
                input field, or misses a filter field
        """
        if not isinstance(value, dict):
            raise InputCoercionError(
                f'Expected value for "{self.name}" to be an object, but is "{type(value).__name__}"',
                self.name,
            )

        prepared: dict[str, Any] = {}
        for key, raw in value.items():
            input_field = self.get_field(key)
            if input_field is None:
                raise InputCoercionError(f'Unknown input field "{key}" on "{self.name}"', key)
            prepared[key] = input_field.coerce_value(raw)

        for input_field in self.fields:
            if input_field.is_filter and input_field.name not in prepared:
                raise InputCoercionError(f'Missing value for "{input_field.name}" on "{self.name}"', input_field.name)

        return prepared

    def collect_affected_fields(self, value: dict[str, Any], fields: set[Field]) -> None:
        for key, item in value.items():
            input_field = self.get_field(key)
            if input_field is not None:
                input_field.collect_affected_fields(item, fields)

    def get_relation_statements(self, value: dict[str, Any], source_id_node: QueryNode) -> list[QueryNode]:
        statements: list[QueryNode] = []
        for key, item in value.items():
            input_field = self.get_field(key)
            if input_field is not None and input_field.is_relation_input:
                statements.extend(input_field.get_relation_statements(item, source_id_node))
        return statements

    def _has_relation_inputs(self, value: dict[str, Any]) -> bool:
        for key in value:
            input_field = self.get_field(key)
            if input_field is not None and input_field.is_relation_input:
                return True
        return False

    def describe(self) -> InputTypeDescriptor:
        return InputTypeDescriptor(
            name=self.name,
            type=self.type.name,
            operation=self.operation,
            fields=[f.describe() for f in self.fields],
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


# =============================================================================
# Create
# =============================================================================


class CreateObjectInputType(InputObjectType):
    """Create input of a value object, entity extension or child entity."""

    def __init__(self, type_: Type, name: str, fields_factory: Callable[[], Iterable[InputField]]):
        super().__init__(type_, name, fields_factory, "create")

    def prepare_value(self, value: Any) -> dict[str, Any]:
        prepared = super().prepare_value(value)
        for input_field in self.fields:
            if (
                input_field.field.has_default_value
                and not input_field.is_relation_input
                and input_field.name not in prepared
            ):
                prepared[input_field.name] = copy.deepcopy(input_field.field.default_value)
        prepared.update(self._get_additional_values())
        return prepared

    def _get_additional_values(self) -> dict[str, Any]:
        return {}

    def get_properties(self, value: dict[str, Any]) -> dict[str, Any]:
        """Stored properties of a prepared value (everything but relation inputs)."""
        properties: dict[str, Any] = {}
        for key, item in value.items():
            input_field = self.get_field(key)
            if input_field is None or not input_field.is_relation_input:
                properties[key] = item
        return properties


class CreateChildEntityInputType(CreateObjectInputType):
    def _get_additional_values(self) -> dict[str, Any]:
        now = _now()
        return {
            ID_FIELD: str(uuid.uuid4()),
            CREATED_AT_FIELD: now,
            UPDATED_AT_FIELD: now,
        }


class CreateRootEntityInputType(CreateObjectInputType):
    def _get_additional_values(self) -> dict[str, Any]:
        now = _now()
        return {
            CREATED_AT_FIELD: now,
            UPDATED_AT_FIELD: now,
        }

    def get_create_statements(self, value: dict[str, Any]) -> list[QueryNode]:
        """
        Statements creating one entity from a prepared value.

        The first statement is the CreateEntityQueryNode; its result variable
        holds the new id and is the source of the following edge statements.
        """
        new_entity = VariableQueryNode(f"new{self.type.name}")
        affected: set[Field] = set()
        self.collect_affected_fields(value, affected)

        statements: list[QueryNode] = [CreateEntityQueryNode(
            root_entity_type=self.type,
            object_node=LiteralQueryNode(self.get_properties(value)),
            affected_fields=sort_fields(affected),
            result_variable=new_entity,
        )]
        statements.extend(self.get_relation_statements(value, new_entity))
        return statements


# =============================================================================
# Update
# =============================================================================


class UpdateObjectInputType(InputObjectType):
    """Update input of a root entity, child entity or entity extension."""

    def __init__(
        self,
        type_: Type,
        name: str,
        fields_factory: Callable[[], Iterable[InputField]],
        operation: Operation = "update",
    ):
        super().__init__(type_, name, fields_factory, operation)

    def prepare_value(self, value: Any) -> dict[str, Any]:
        prepared = super().prepare_value(value)
        self._check_exclusive_inputs(prepared)
        return prepared

    def _check_exclusive_inputs(self, value: dict[str, Any]) -> None:
        # a basic setter and calc mutations on one field have no defined combined meaning
        seen: dict[Field, str] = {}
        for key in value:
            input_field = self.get_field(key)
            if input_field is None or not input_field.is_exclusive:
                continue
            other = seen.get(input_field.field)
            if other is not None:
                raise InputCoercionError(
                    f'"{other}" and "{key}" cannot be combined in one update because both set '
                    f'"{input_field.field.id}"',
                    key,
                )
            seen[input_field.field] = key

    def get_properties(self, value: dict[str, Any], current_entity_node: QueryNode) -> tuple[SetFieldQueryNode, ...]:
        """SetField nodes for a prepared value, relative to the current entity expression."""
        properties: list[SetFieldQueryNode] = []
        child_inputs: dict[Field, list[tuple[ChildEntitiesInputField, Any]]] = {}

        for key, item in value.items():
            input_field = self.get_field(key)
            if input_field is None or input_field.is_relation_input:
                continue
            if isinstance(input_field, ChildEntitiesInputField):
                child_inputs.setdefault(input_field.field, []).append((input_field, item))
            else:
                properties.extend(input_field.get_properties(item, current_entity_node))

        # remove, then update, then add
        for field, inputs in child_inputs.items():
            stored = FieldQueryNode(current_entity_node, field)
            list_node: QueryNode = ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.LIST), stored, EMPTY_LIST)
            for input_field, item in sorted(inputs, key=lambda pair: pair[0].apply_order):
                list_node = input_field.apply_to_list(item, list_node)
            properties.append(SetFieldQueryNode(field, list_node))

        properties.extend(self._get_additional_properties())
        return tuple(properties)

    def _get_additional_properties(self) -> tuple[SetFieldQueryNode, ...]:
        updated_at = self.type.get_field(UPDATED_AT_FIELD)
        if updated_at is None or not updated_at.is_system_field:
            return ()
        return (SetFieldQueryNode(updated_at, CurrentTimestampQueryNode()),)


class UpdateEntityExtensionInputType(UpdateObjectInputType):
    pass


class UpdateChildEntityInputType(UpdateObjectInputType):
    pass


class UpdateRootEntityInputType(UpdateObjectInputType):

    def get_update_statements(
        self,
        value: dict[str, Any],
        list_node: Optional[QueryNode] = None,
    ) -> list[QueryNode]:
        """
        Statements applying a prepared value.

        Args:
            value: Prepared input value
            list_node: Entities to update; defaults to the entity whose id is
                given in the value

        Returns:
            The UpdateEntitiesQueryNode followed by edge statements
        """
        entity_id = value.get(ID_FIELD)

        if list_node is None:
            if entity_id is None:
                raise InputCoercionError(f'"{self.name}" requires "{ID_FIELD}" to locate the entity', ID_FIELD)
            item = VariableQueryNode(decapitalize(self.type.name))
            list_node = TransformListQueryNode(
                list_node=EntitiesQueryNode(self.type),
                item_variable=item,
                filter_node=BinaryOperationQueryNode(EntityIDQueryNode(item), BinaryOperator.EQUAL, LiteralQueryNode(entity_id)),
                max_count=1,
            )

        if entity_id is None and self._has_relation_inputs(value):
            raise InputCoercionError(f'Relation inputs on "{self.name}" require "{ID_FIELD}"', ID_FIELD)

        current_entity = VariableQueryNode("currentEntity")
        affected: set[Field] = set()
        self.collect_affected_fields(value, affected)

        statements: list[QueryNode] = [UpdateEntitiesQueryNode(
            root_entity_type=self.type,
            list_node=list_node,
            updates=self.get_properties(value, current_entity),
            current_entity_variable=current_entity,
            affected_fields=sort_fields(affected),
        )]
        if entity_id is not None:
            statements.extend(self.get_relation_statements(value, LiteralQueryNode(entity_id)))
        return statements
