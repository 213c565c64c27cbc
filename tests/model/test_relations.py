"""Tests for relation resolution."""

from __future__ import annotations

import pytest

from modelgraph.core.errors import ConfigurationError
from modelgraph.core.utils import get_collection_name_for_relation
from modelgraph.model import Model


class TestInverseRelations:
    def test_both_sides_resolve_to_identical_relation(self, shop_model: Model) -> None:
        orders = shop_model.get_type_or_throw("Customer").get_field("orders")
        customer = shop_model.get_type_or_throw("Order").get_field("customer")

        # resolve the to-side first, then the from-side
        to_relation = shop_model.relation(orders)
        from_relation = shop_model.relation(customer)

        assert to_relation is from_relation
        assert from_relation.from_type.name == "Order"
        assert from_relation.from_field is customer
        assert from_relation.to_type.name == "Customer"
        assert from_relation.to_field is orders

    def test_sides(self, shop_model: Model) -> None:
        orders = shop_model.get_type_or_throw("Customer").get_field("orders")
        customer = shop_model.get_type_or_throw("Order").get_field("customer")

        from_side = shop_model.relation_side(customer)
        to_side = shop_model.relation_side(orders)

        assert from_side.is_from_side
        assert to_side.is_to_side
        assert from_side.other_side == to_side
        assert from_side.source_field is customer
        assert from_side.target_field is orders
        assert to_side.source_type.name == "Customer"
        assert to_side.target_type.name == "Order"

    def test_cardinality(self, shop_model: Model) -> None:
        customer = shop_model.get_type_or_throw("Order").get_field("customer")
        side = shop_model.relation_side(customer)
        assert not side.is_to_many
        assert side.is_from_many
        assert side.other_side.is_to_many
        assert not side.other_side.is_from_many

    def test_inverse_lookups(self, shop_model: Model) -> None:
        orders = shop_model.get_type_or_throw("Customer").get_field("orders")
        customer = shop_model.get_type_or_throw("Order").get_field("customer")
        assert shop_model.inverse_of(orders) is customer
        assert shop_model.inverse_field(customer) is orders
        assert shop_model.inverse_field(orders) is None

    def test_relations_are_listed_once(self, shop_model: Model) -> None:
        relations = shop_model.relations
        assert len(relations) == 1
        assert get_collection_name_for_relation(relations[0]) == "orders_customer"


class TestOneSidedRelations:
    def test_one_sided_relation(self, movie_model: Model) -> None:
        actors = movie_model.get_type_or_throw("Movie").get_field("actors")
        side = movie_model.relation_side(actors)

        assert side.is_from_side
        assert side.relation.is_one_sided
        assert side.target_field is None
        assert side.is_to_many
        assert side.is_from_many

    def test_target_gains_no_field(self, movie_model: Model) -> None:
        movie_model.relation(movie_model.get_type_or_throw("Movie").get_field("actors"))
        actor = movie_model.get_type_or_throw("Actor")
        assert [f.name for f in actor.user_fields] == ["name"]


class TestRelationErrors:
    def test_non_relation_field_has_no_side(self, shop_model: Model) -> None:
        order_number = shop_model.get_type_or_throw("Order").get_field("orderNumber")
        assert shop_model.relation_side(order_number) is None

    def test_throw_on_non_relation(self, shop_model: Model) -> None:
        reference = shop_model.get_type_or_throw("Order").get_field("customerEmail")
        with pytest.raises(ConfigurationError, match="to be a relation"):
            shop_model.get_relation_side_or_throw(reference)

    def test_throw_on_non_root_target(self, shop_model: Model) -> None:
        items = shop_model.get_type_or_throw("Order").get_field("items")
        with pytest.raises(ConfigurationError, match="root entity"):
            shop_model.get_relation_or_throw(items)
