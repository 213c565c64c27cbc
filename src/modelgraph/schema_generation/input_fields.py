"""
Input fields of create/update input types.

Each input field can:
- coerce a raw input value (raising InputCoercionError on a wrong shape)
- emit IR mutation nodes for a coerced value
- collect the fields a coerced value touches

Values passed to get_properties / get_relation_statements /
collect_affected_fields are always already coerced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ..core.constants import ID_FIELD, CalcMutationOperator
from ..core.errors import InputCoercionError
from ..core.utils import (
    decapitalize,
    get_add_child_entities_field_name,
    get_calc_mutation_field_name,
    get_remove_child_entities_field_name,
    get_update_child_entities_field_name,
)
from ..model.fields import Field
from ..query.nodes import (
    EMPTY_LIST,
    EMPTY_OBJECT,
    NULL,
    BasicType,
    BinaryOperationQueryNode,
    BinaryOperator,
    ConcatListsQueryNode,
    ConditionalQueryNode,
    EntityIDQueryNode,
    FieldQueryNode,
    LiteralQueryNode,
    MergeObjectsQueryNode,
    ObjectQueryNode,
    PropertySpecification,
    QueryNode,
    SetFieldQueryNode,
    TransformListQueryNode,
    TypeCheckQueryNode,
    VariableQueryNode,
)
from .descriptors import InputFieldDescriptor, InputFieldKind

if TYPE_CHECKING:
    from .input_types import CreateObjectInputType, UpdateObjectInputType


def coerce_list(value: Any, input_name: str) -> list:
    """
    Coerce a list input.

    null is not a valid list value - it becomes [] so storage never mixes
    null and empty lists.
    """
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InputCoercionError(
            f'Expected value for "{input_name}" to be a list, but is "{type(value).__name__}"',
            input_name,
        )
    return list(value)


def coerce_id_list(value: Any, input_name: str) -> list:
    """Coerce a list of ids; null as a whole becomes [], a null item is rejected."""
    ids = coerce_list(value, input_name)
    if any(item is None for item in ids):
        raise InputCoercionError(f'Expected value for "{input_name}" to contain only ids, but it contains null', input_name)
    return ids


def to_property_specifications(set_field_nodes: tuple[SetFieldQueryNode, ...]) -> ObjectQueryNode:
    """Turn SetField nodes of a nested object into an object expression."""
    return ObjectQueryNode(tuple(
        PropertySpecification(node.field.name, node.value_node) for node in set_field_nodes
    ))


class InputField:
    """Base class of all input fields."""
    kind = InputFieldKind.BASIC
    is_filter = False
    is_relation_input = False
    is_list_coercing = False
    is_recursive = False
    # whether this input replaces the whole stored value of its field
    is_exclusive = False

    def __init__(self, field: Field, value_type_name: str, name: Optional[str] = None):
        self.field = field
        self.value_type_name = value_type_name
        self.name = name or field.name

    def coerce_value(self, value: Any) -> Any:
        return value

    def get_properties(self, value: Any, current_entity_node: QueryNode) -> tuple[SetFieldQueryNode, ...]:
        return ()

    def get_relation_statements(self, value: Any, source_id_node: QueryNode) -> tuple[QueryNode, ...]:
        return ()

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        fields.add(self.field)

    def describe(self) -> InputFieldDescriptor:
        return InputFieldDescriptor(
            name=self.name,
            field=str(self.field.id),
            kind=self.kind,
            value_type=self.value_type_name,
            is_list=self.is_list_coercing,
            is_filter=self.is_filter,
            is_recursive=self.is_recursive,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class FilterInputField(InputField):
    """
    Identity of the entity to update.

    Read-only context for locating the target: never written and never
    reported as affected.
    """
    kind = InputFieldKind.FILTER
    is_filter = True

    def coerce_value(self, value: Any) -> Any:
        if value is None:
            raise InputCoercionError(f'Missing value for "{self.name}"', self.name)
        return value

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        # not updated; it only shows up as regular read access
        return None


class BasicInputField(InputField):
    """Sets a scalar, enum or reference-key value."""
    is_exclusive = True

    def get_properties(self, value: Any, current_entity_node: QueryNode) -> tuple[SetFieldQueryNode, ...]:
        return (SetFieldQueryNode(self.field, LiteralQueryNode(value)),)


class BasicListInputField(BasicInputField):
    kind = InputFieldKind.BASIC_LIST
    is_list_coercing = True

    def coerce_value(self, value: Any) -> Any:
        return coerce_list(super().coerce_value(value), self.name)


class CalcMutationInputField(InputField):
    """Combines the supplied value with the current stored value, e.g. addQuantity."""
    kind = InputFieldKind.CALC_MUTATION
    is_exclusive = True

    def __init__(self, field: Field, value_type_name: str, operator: CalcMutationOperator):
        super().__init__(field, value_type_name, get_calc_mutation_field_name(operator.prefix, field.name))
        self.operator = operator

    def coerce_value(self, value: Any) -> Any:
        if value is None:
            raise InputCoercionError(f'Calc mutation "{self.name}" requires a value', self.name)
        return value

    def get_properties(self, value: Any, current_entity_node: QueryNode) -> tuple[SetFieldQueryNode, ...]:
        current_value = FieldQueryNode(current_entity_node, self.field)
        return (SetFieldQueryNode(
            self.field,
            BinaryOperationQueryNode(
                current_value,
                BinaryOperator[self.operator.binary_operator],
                LiteralQueryNode(value),
            ),
        ),)

    def describe(self) -> InputFieldDescriptor:
        return super().describe().model_copy(update={"operator": self.operator.name})


class ObjectInputField(BasicInputField):
    """Sets a value object (or a new entity extension) coerced through its create input type."""
    kind = InputFieldKind.OBJECT
    is_recursive = True

    def __init__(self, field: Field, object_input_type: CreateObjectInputType):
        super().__init__(field, object_input_type.name)
        self.object_input_type = object_input_type

    def coerce_value(self, value: Any) -> Any:
        if value is None:
            return None
        return self.object_input_type.prepare_value(value)

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        if value is None:
            return
        self.object_input_type.collect_affected_fields(value, fields)


class ObjectListInputField(BasicInputField):
    """Sets a list of value objects (or new child entities)."""
    kind = InputFieldKind.OBJECT_LIST
    is_recursive = True
    is_list_coercing = True

    def __init__(self, field: Field, object_input_type: CreateObjectInputType):
        super().__init__(field, object_input_type.name)
        self.object_input_type = object_input_type

    def coerce_value(self, value: Any) -> Any:
        return [self.object_input_type.prepare_value(item) for item in coerce_list(value, self.name)]

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        for item in coerce_list(value, self.name):
            self.object_input_type.collect_affected_fields(item, fields)


class UpdateEntityExtensionInputField(InputField):
    """Partially updates an entity extension through its update input type."""
    kind = InputFieldKind.ENTITY_EXTENSION
    is_recursive = True
    is_exclusive = True

    def __init__(self, field: Field, update_input_type: UpdateObjectInputType):
        super().__init__(field, update_input_type.name)
        self.update_input_type = update_input_type

    def coerce_value(self, value: Any) -> Any:
        if value is None:
            return None
        return self.update_input_type.prepare_value(value)

    def get_properties(self, value: Any, current_entity_node: QueryNode) -> tuple[SetFieldQueryNode, ...]:
        if value is None:
            return (SetFieldQueryNode(self.field, NULL),)

        stored = FieldQueryNode(current_entity_node, self.field)
        current_value = ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.OBJECT), stored, EMPTY_OBJECT)
        changes = self.update_input_type.get_properties(value, current_value)
        return (SetFieldQueryNode(
            self.field,
            MergeObjectsQueryNode((current_value, to_property_specifications(changes))),
        ),)

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        if value is None:
            return
        self.update_input_type.collect_affected_fields(value, fields)


# =============================================================================
# Child entity collections
# =============================================================================


class ChildEntitiesInputField(InputField):
    """
    Partial mutation of an owned, identity-keyed child entity list.

    The input types apply all child inputs of one field together
    (remove, then update, then add) via apply_to_list.
    """
    is_list_coercing = True
    apply_order = 0

    def apply_to_list(self, value: Any, list_node: QueryNode) -> QueryNode:
        raise NotImplementedError

    def get_properties(self, value: Any, current_entity_node: QueryNode) -> tuple[SetFieldQueryNode, ...]:
        stored = FieldQueryNode(current_entity_node, self.field)
        current_list = ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.LIST), stored, EMPTY_LIST)
        return (SetFieldQueryNode(self.field, self.apply_to_list(value, current_list)),)


class RemoveChildEntitiesInputField(ChildEntitiesInputField):
    kind = InputFieldKind.REMOVE_CHILD_ENTITIES
    apply_order = 0

    def __init__(self, field: Field, child_type_name: str):
        super().__init__(field, "ID", get_remove_child_entities_field_name(field.name))
        self.child_type_name = child_type_name

    def coerce_value(self, value: Any) -> Any:
        return coerce_id_list(value, self.name)

    def apply_to_list(self, value: Any, list_node: QueryNode) -> QueryNode:
        if not value:
            return list_node
        item = VariableQueryNode(decapitalize(self.child_type_name))
        return TransformListQueryNode(
            list_node=list_node,
            item_variable=item,
            filter_node=BinaryOperationQueryNode(EntityIDQueryNode(item), BinaryOperator.NOT_IN, LiteralQueryNode(value)),
        )


class UpdateChildEntitiesInputField(ChildEntitiesInputField):
    kind = InputFieldKind.UPDATE_CHILD_ENTITIES
    is_recursive = True
    apply_order = 1

    def __init__(self, field: Field, update_input_type: UpdateObjectInputType):
        super().__init__(field, update_input_type.name, get_update_child_entities_field_name(field.name))
        self.update_input_type = update_input_type

    def coerce_value(self, value: Any) -> Any:
        return [self.update_input_type.prepare_value(item) for item in coerce_list(value, self.name)]

    def apply_to_list(self, value: Any, list_node: QueryNode) -> QueryNode:
        if not value:
            return list_node
        item = VariableQueryNode(decapitalize(self.update_input_type.type.name))

        # chain of "id matches -> merged item", falling back to the unchanged item
        inner: QueryNode = item
        for update in reversed(value):
            changes = self.update_input_type.get_properties(update, item)
            inner = ConditionalQueryNode(
                BinaryOperationQueryNode(EntityIDQueryNode(item), BinaryOperator.EQUAL, LiteralQueryNode(update[ID_FIELD])),
                MergeObjectsQueryNode((item, to_property_specifications(changes))),
                inner,
            )
        return TransformListQueryNode(list_node=list_node, item_variable=item, inner_node=inner)

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        for item in coerce_list(value, self.name):
            self.update_input_type.collect_affected_fields(item, fields)


class AddChildEntitiesInputField(ChildEntitiesInputField):
    kind = InputFieldKind.ADD_CHILD_ENTITIES
    is_recursive = True
    apply_order = 2

    def __init__(self, field: Field, create_input_type: CreateObjectInputType):
        super().__init__(field, create_input_type.name, get_add_child_entities_field_name(field.name))
        self.create_input_type = create_input_type

    def coerce_value(self, value: Any) -> Any:
        return [self.create_input_type.prepare_value(item) for item in coerce_list(value, self.name)]

    def apply_to_list(self, value: Any, list_node: QueryNode) -> QueryNode:
        if not value:
            return list_node
        return ConcatListsQueryNode((list_node, LiteralQueryNode(value)))

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        for item in coerce_list(value, self.name):
            self.create_input_type.collect_affected_fields(item, fields)
