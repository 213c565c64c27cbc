"""Tests for the field-access compiler."""

from __future__ import annotations

import pytest

from modelgraph.model import Model
from modelgraph.query import (
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
    TransformListQueryNode,
    TypeCheckQueryNode,
    VariableQueryNode,
    walk,
)
from modelgraph.schema_generation import create_field_node


@pytest.fixture
def source() -> VariableQueryNode:
    return VariableQueryNode("object")


def field_of(model: Model, type_name: str, field_name: str):
    return model.get_type_or_throw(type_name).get_field(field_name)


class TestRelationAccess:
    def test_list_relation_follows_edges(self, movie_model: Model, source: VariableQueryNode) -> None:
        actors = field_of(movie_model, "Movie", "actors")
        node = create_field_node(movie_model, actors, source)

        assert isinstance(node, FollowEdgeQueryNode)
        assert node.source_entity_node is source
        assert node.relation_side.is_from_side
        assert node.relation_side.relation.is_one_sided
        assert [f.name for f in movie_model.get_type_or_throw("Actor").user_fields] == ["name"]

    def test_to_one_relation_takes_first(self, shop_model: Model, source: VariableQueryNode) -> None:
        customer = field_of(shop_model, "Order", "customer")
        node = create_field_node(shop_model, customer, source)

        assert isinstance(node, FirstOfListQueryNode)
        assert node.list_node == FollowEdgeQueryNode(shop_model.relation_side(customer), source)

    def test_inverse_side(self, shop_model: Model, source: VariableQueryNode) -> None:
        orders = field_of(shop_model, "Customer", "orders")
        node = create_field_node(shop_model, orders, source)

        assert isinstance(node, FollowEdgeQueryNode)
        assert node.relation_side.is_to_side
        assert node.relation_side.relation is shop_model.relation(field_of(shop_model, "Order", "customer"))


class TestReferenceAccess:
    def test_null_key_short_circuits(self, shop_model: Model, source: VariableQueryNode) -> None:
        reference = field_of(shop_model, "Order", "customerEmail")
        node = create_field_node(shop_model, reference, source)

        assert isinstance(node, ConditionalQueryNode)
        assert node.condition == TypeCheckQueryNode(FieldQueryNode(source, reference), BasicType.NULL)
        assert node.expr1 is NULL
        assert not any(isinstance(n, EntitiesQueryNode) for n in walk(node.condition))

    def test_lookup_is_capped_at_one(self, shop_model: Model, source: VariableQueryNode) -> None:
        reference = field_of(shop_model, "Order", "customerEmail")
        node = create_field_node(shop_model, reference, source)

        lookup = node.expr2
        assert isinstance(lookup, FirstOfListQueryNode)
        transform = lookup.list_node
        assert isinstance(transform, TransformListQueryNode)
        assert transform.max_count == 1
        assert transform.list_node == EntitiesQueryNode(shop_model.get_type_or_throw("Customer"))

        email = field_of(shop_model, "Customer", "email")
        item_key = FieldQueryNode(transform.item_variable, email)
        assert transform.filter_node == BinaryOperationQueryNode(
            BinaryOperationQueryNode(item_key, BinaryOperator.UNEQUAL, NULL),
            BinaryOperator.AND,
            BinaryOperationQueryNode(item_key, BinaryOperator.EQUAL, FieldQueryNode(source, reference)),
        )

    def test_id_key_uses_entity_id(self, order_reference_model: Model, source: VariableQueryNode) -> None:
        reference = field_of(order_reference_model, "Order", "customerId")
        node = create_field_node(order_reference_model, reference, source)

        transform = node.expr2.list_node
        assert EntityIDQueryNode(transform.item_variable) in list(walk(transform.filter_node))


class TestPlainAccess:
    def test_system_id(self, shop_model: Model, source: VariableQueryNode) -> None:
        node = create_field_node(shop_model, field_of(shop_model, "Order", "id"), source)
        assert node == EntityIDQueryNode(source)

    def test_child_entity_id(self, shop_model: Model, source: VariableQueryNode) -> None:
        node = create_field_node(shop_model, field_of(shop_model, "OrderItem", "id"), source)
        assert node == EntityIDQueryNode(source)

    def test_entity_extension_is_guarded(self, shop_model: Model, source: VariableQueryNode) -> None:
        payment = field_of(shop_model, "Order", "payment")
        node = create_field_node(shop_model, payment, source)

        stored = FieldQueryNode(source, payment)
        assert node == ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.OBJECT), stored, EMPTY_OBJECT)

    def test_list_is_guarded(self, shop_model: Model, source: VariableQueryNode) -> None:
        for name in ("tags", "items"):
            field = field_of(shop_model, "Order", name)
            node = create_field_node(shop_model, field, source)

            stored = FieldQueryNode(source, field)
            assert node == ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.LIST), stored, EMPTY_LIST)

    def test_plain_field(self, shop_model: Model, source: VariableQueryNode) -> None:
        for name in ("orderNumber", "status", "shippingAddress", "createdAt"):
            field = field_of(shop_model, "Order", name)
            assert create_field_node(shop_model, field, source) == FieldQueryNode(source, field)
