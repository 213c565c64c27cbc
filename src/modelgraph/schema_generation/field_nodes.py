"""
Field-access compiler - maps a field and a "current object" expression to
the IR subtree that reads it.

Read semantics, in priority order:
- list relation      -> follow edges on the relation side
- to-one relation    -> first of the followed edges
- reference          -> keyed lookup in the referenced entity set, null-safe
- system id field    -> entity id accessor
- entity extension   -> stored value, or {} if it is not an object
- plain list         -> stored value, or [] if it is not a list
- anything else      -> stored value
"""

from __future__ import annotations

from ..core.constants import ID_FIELD
from ..core.defs import TypeKind
from ..model.fields import Field
from ..model.model import Model
from ..query.nodes import (
    EMPTY_LIST,
    EMPTY_OBJECT,
    NULL,
    BasicType,
    BinaryOperationQueryNode,
    BinaryOperator,
    ConditionalQueryNode,
    EntitiesQueryNode,
    EntityIDQueryNode,
    FieldQueryNode,
    FirstOfListQueryNode,
    FollowEdgeQueryNode,
    QueryNode,
    TransformListQueryNode,
    TypeCheckQueryNode,
    VariableQueryNode,
    conjunction,
)


def create_field_node(model: Model, field: Field, source_node: QueryNode) -> QueryNode:
    """
    Build the read expression for `field` on the object `source_node`.

    Args:
        model: Model the field belongs to
        field: Field to read
        source_node: Expression evaluating to the object that declares the field

    Returns:
        QueryNode evaluating to the field's value
    """
    if field.is_relation:
        if field.is_list:
            return _create_to_n_relation_node(model, field, source_node)
        return _create_to_1_relation_node(model, field, source_node)

    if field.is_reference:
        return _create_to_1_reference_node(model, field, source_node)

    if (
        field.is_system_field
        and field.name == ID_FIELD
        and field.declaring_type_kind in (TypeKind.ROOT_ENTITY, TypeKind.CHILD_ENTITY)
    ):
        return EntityIDQueryNode(source_node)

    field_node = FieldQueryNode(source_node, field)

    if model.field_type(field).is_entity_extension_type:
        # historical data may lack the extension object entirely
        return ConditionalQueryNode(TypeCheckQueryNode(field_node, BasicType.OBJECT), field_node, EMPTY_OBJECT)

    if field.is_list:
        return _create_safe_list_node(field_node)

    return field_node


def _create_to_n_relation_node(model: Model, field: Field, source_node: QueryNode) -> QueryNode:
    relation_side = model.get_relation_side_or_throw(field)
    return FollowEdgeQueryNode(relation_side, source_node)


def _create_to_1_relation_node(model: Model, field: Field, source_node: QueryNode) -> QueryNode:
    relation_side = model.get_relation_side_or_throw(field)
    return FirstOfListQueryNode(FollowEdgeQueryNode(relation_side, source_node))


def _create_to_1_reference_node(model: Model, field: Field, source_node: QueryNode) -> QueryNode:
    referenced_type = model.field_type(field)
    key_field = model.get_key_field_or_throw(referenced_type)

    reference_key_node = FieldQueryNode(source_node, field)
    item_variable = VariableQueryNode(field.name)
    item_key_node = create_field_node(model, key_field, item_variable)

    equal_filter = BinaryOperationQueryNode(item_key_node, BinaryOperator.EQUAL, reference_key_node)
    # hint for the backend that items with a null key are irrelevant (allows sparse indices)
    non_null_filter = BinaryOperationQueryNode(item_key_node, BinaryOperator.UNEQUAL, NULL)

    filtered = TransformListQueryNode(
        list_node=EntitiesQueryNode(referenced_type),
        item_variable=item_variable,
        filter_node=conjunction(non_null_filter, equal_filter),
        max_count=1,
    )
    return ConditionalQueryNode(
        TypeCheckQueryNode(reference_key_node, BasicType.NULL),
        NULL,
        FirstOfListQueryNode(filtered),
    )


def _create_safe_list_node(list_node: QueryNode) -> QueryNode:
    # eagerly evaluated list expressions must not fail on non-list values
    return ConditionalQueryNode(TypeCheckQueryNode(list_node, BasicType.LIST), list_node, EMPTY_LIST)
