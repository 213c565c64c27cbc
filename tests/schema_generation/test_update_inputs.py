"""Tests for update input types."""

from __future__ import annotations

import pytest

from modelgraph.core.defs import FieldConfig, ModelConfig, TypeConfig, TypeKind
from modelgraph.core.errors import ConfigurationError, InputCoercionError
from modelgraph.model import Model, build_model
from modelgraph.query import (
    EMPTY_LIST,
    EMPTY_OBJECT,
    NULL,
    AddEdgesQueryNode,
    BasicType,
    BinaryOperationQueryNode,
    BinaryOperator,
    ConcatListsQueryNode,
    ConditionalQueryNode,
    CreateEntityQueryNode,
    CurrentTimestampQueryNode,
    EdgeIdentifier,
    EntitiesQueryNode,
    EntityIDQueryNode,
    FieldQueryNode,
    ListQueryNode,
    LiteralQueryNode,
    MergeObjectsQueryNode,
    ObjectQueryNode,
    PartialEdgeIdentifier,
    PropertySpecification,
    RemoveEdgesQueryNode,
    SetEdgeQueryNode,
    SetFieldQueryNode,
    TransformListQueryNode,
    TypeCheckQueryNode,
    UpdateEntitiesQueryNode,
)
from modelgraph.schema_generation import (
    BasicInputField,
    CreateAndAddEdgesInputField,
    CreateInputTypeGenerator,
    CreateRootEntityInputType,
    FilterInputField,
    InputFieldKind,
    UpdateInputTypeGenerator,
)


@pytest.fixture
def generator(shop_model: Model) -> UpdateInputTypeGenerator:
    return UpdateInputTypeGenerator(shop_model, CreateInputTypeGenerator(shop_model))


@pytest.fixture
def order_input(shop_model: Model, generator: UpdateInputTypeGenerator):
    return generator.generate(shop_model.get_type_or_throw("Order"))


@pytest.fixture
def customer_input(shop_model: Model, generator: UpdateInputTypeGenerator):
    return generator.generate(shop_model.get_type_or_throw("Customer"))


def order_field(model: Model, name: str):
    return model.get_type_or_throw("Order").get_field(name)


def update_node(input_type, value) -> UpdateEntitiesQueryNode:
    statements = input_type.get_update_statements(input_type.prepare_value(value))
    assert isinstance(statements[0], UpdateEntitiesQueryNode)
    return statements[0]


class TestUpdateInputShape:
    def test_field_names(self, order_input) -> None:
        assert order_input.name == "UpdateOrderInput"
        assert [f.name for f in order_input.fields] == [
            "id",
            "orderNumber",
            "quantity",
            "addQuantity",
            "multiplyWithQuantity",
            "tags",
            "status",
            "shippingAddress",
            "payment",
            "addItems",
            "updateItems",
            "removeItems",
            "customer",
            "createCustomer",
            "customerEmail",
        ]

    def test_list_relation_inputs(self, customer_input) -> None:
        assert [f.name for f in customer_input.fields] == ["id", "email", "addOrders", "removeOrders", "createOrders"]

    def test_id_is_filter(self, order_input) -> None:
        assert isinstance(order_input.get_field("id"), FilterInputField)
        assert order_input.get_field("id").is_filter

    def test_memoized(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        order = shop_model.get_type_or_throw("Order")
        assert generator.generate(order) is generator.generate_for_root_entity_type(order)

        item = shop_model.get_type_or_throw("OrderItem")
        item_input = generator.generate(item)
        assert item_input is generator.generate_for_child_entity_type(item)
        assert item_input.name == "UpdateOrderItemInput"
        assert generator.generate(order).get_field("updateItems").update_input_type is item_input

    def test_value_objects_use_create_input(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        order_input = generator.generate(shop_model.get_type_or_throw("Order"))
        address = shop_model.get_type_or_throw("Address")
        assert (
            order_input.get_field("shippingAddress").object_input_type
            is generator.create_generator.generate_for_value_object_type(address)
        )

    def test_unsupported_kind(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        with pytest.raises(ConfigurationError, match="valueObject"):
            generator.generate(shop_model.get_type_or_throw("Address"))

    def test_unexpected_field_shape(self) -> None:
        model = build_model(ModelConfig(types=(
            TypeConfig("Movie", TypeKind.ROOT_ENTITY, fields=(FieldConfig("director", "Person"),)),
            TypeConfig("Person", TypeKind.ROOT_ENTITY, fields=(FieldConfig("name", "String"),)),
        )))
        input_type = UpdateInputTypeGenerator(model).generate(model.get_type_or_throw("Movie"))
        with pytest.raises(ConfigurationError, match="Movie.director"):
            input_type.fields

    def test_unknown_calc_mutation_operator(self) -> None:
        model = build_model(ModelConfig(types=(
            TypeConfig("Movie", TypeKind.ROOT_ENTITY, fields=(
                FieldConfig("views", "Int", calc_mutation_operators=("POWER",)),
            )),
        )))
        input_type = UpdateInputTypeGenerator(model).generate(model.get_type_or_throw("Movie"))
        with pytest.raises(ConfigurationError, match="POWER"):
            input_type.fields

    def test_describe(self, order_input) -> None:
        descriptor = order_input.describe()
        assert descriptor.name == "UpdateOrderInput"
        assert descriptor.operation == "update"
        by_name = {f.name: f for f in descriptor.fields}
        assert by_name["id"].kind == InputFieldKind.FILTER
        assert by_name["id"].is_filter
        assert by_name["addQuantity"].operator == "ADD"
        assert by_name["addQuantity"].field == "Order.quantity"
        assert by_name["removeItems"].is_list
        assert by_name["updateItems"].is_recursive
        assert by_name["createCustomer"].value_type == "CreateCustomerInput"


class TestReferenceUpdate:
    def test_single_setter_with_key_type(self, order_reference_model: Model) -> None:
        generator = UpdateInputTypeGenerator(order_reference_model)
        order_input = generator.generate(order_reference_model.get_type_or_throw("Order"))

        inputs = [f for f in order_input.fields if f.field.name == "customerId"]
        assert len(inputs) == 1
        assert isinstance(inputs[0], BasicInputField)
        assert inputs[0].name == "customerId"
        assert inputs[0].value_type_name == "ID"

    def test_referenced_entity_is_not_checked(self, order_reference_model: Model) -> None:
        generator = UpdateInputTypeGenerator(order_reference_model)
        order_input = generator.generate(order_reference_model.get_type_or_throw("Order"))
        customer_id = order_reference_model.get_type_or_throw("Order").get_field("customerId")

        update = update_node(order_input, {"id": "o1", "customerId": "no-such-customer"})
        assert update.updates[0] == SetFieldQueryNode(customer_id, LiteralQueryNode("no-such-customer"))


class TestUpdateCoercion:
    def test_missing_id(self, order_input) -> None:
        with pytest.raises(InputCoercionError, match='Missing value for "id"'):
            order_input.prepare_value({"orderNumber": "n1"})

    def test_null_id(self, order_input) -> None:
        with pytest.raises(InputCoercionError):
            order_input.prepare_value({"id": None})

    def test_null_list_is_normalized_and_affected(self, shop_model: Model, order_input) -> None:
        prepared = order_input.prepare_value({"id": "o1", "tags": None})
        assert prepared["tags"] == []

        update = order_input.get_update_statements(prepared)[0]
        tags = order_field(shop_model, "tags")
        assert update.affected_fields == (tags,)
        assert update.updates[0] == SetFieldQueryNode(tags, LiteralQueryNode([]))

    def test_non_list_value_is_rejected(self, order_input) -> None:
        with pytest.raises(InputCoercionError, match='"tags" to be a list'):
            order_input.prepare_value({"id": "o1", "tags": "urgent"})

    def test_setter_and_calc_mutation_cannot_be_combined(self, order_input) -> None:
        with pytest.raises(InputCoercionError, match="cannot be combined"):
            order_input.prepare_value({"id": "o1", "quantity": 1, "addQuantity": 2})

    def test_two_calc_mutations_cannot_be_combined(self, order_input) -> None:
        with pytest.raises(InputCoercionError, match="Order.quantity"):
            order_input.prepare_value({"id": "o1", "addQuantity": 1, "multiplyWithQuantity": 2})

    def test_calc_mutation_requires_value(self, order_input) -> None:
        with pytest.raises(InputCoercionError):
            order_input.prepare_value({"id": "o1", "addQuantity": None})

    def test_no_defaults_on_update(self, order_input) -> None:
        assert order_input.prepare_value({"id": "o1"}) == {"id": "o1"}


class TestUpdateStatements:
    def test_entity_is_located_by_id(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "orderNumber": "n2"})

        assert update.root_entity_type is shop_model.get_type_or_throw("Order")
        assert isinstance(update.list_node, TransformListQueryNode)
        assert update.list_node.list_node == EntitiesQueryNode(update.root_entity_type)
        assert update.list_node.max_count == 1
        assert update.list_node.filter_node == BinaryOperationQueryNode(
            EntityIDQueryNode(update.list_node.item_variable), BinaryOperator.EQUAL, LiteralQueryNode("o1"),
        )

    def test_updated_at_is_refreshed(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "orderNumber": "n2"})
        assert update.updates == (
            SetFieldQueryNode(order_field(shop_model, "orderNumber"), LiteralQueryNode("n2")),
            SetFieldQueryNode(order_field(shop_model, "updatedAt"), CurrentTimestampQueryNode()),
        )
        # the id filter is not a write
        assert [f.name for f in update.affected_fields] == ["orderNumber"]

    def test_calc_mutation_reads_current_value(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "addQuantity": 2})
        quantity = order_field(shop_model, "quantity")
        assert update.updates[0] == SetFieldQueryNode(
            quantity,
            BinaryOperationQueryNode(
                FieldQueryNode(update.current_entity_variable, quantity),
                BinaryOperator.ADD,
                LiteralQueryNode(2),
            ),
        )
        assert update.affected_fields == (quantity,)

    def test_entity_extension_is_merged(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "payment": {"method": "card"}})

        payment = order_field(shop_model, "payment")
        stored = FieldQueryNode(update.current_entity_variable, payment)
        current = ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.OBJECT), stored, EMPTY_OBJECT)
        assert update.updates[0] == SetFieldQueryNode(
            payment,
            MergeObjectsQueryNode((
                current,
                ObjectQueryNode((PropertySpecification("method", LiteralQueryNode("card")),)),
            )),
        )
        assert {str(f.id) for f in update.affected_fields} == {"Order.payment", "PaymentInfo.method"}

    def test_entity_extension_set_to_null(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "payment": None})
        assert update.updates[0] == SetFieldQueryNode(order_field(shop_model, "payment"), NULL)

    def test_value_object_is_replaced(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "shippingAddress": {"city": "Kyiv"}})
        assert update.updates[0] == SetFieldQueryNode(
            order_field(shop_model, "shippingAddress"), LiteralQueryNode({"city": "Kyiv"}),
        )

    def test_child_entities_remove_update_add(self, shop_model: Model, order_input) -> None:
        update = update_node(order_input, {
            "id": "o1",
            "addItems": [{"sku": "new"}],
            "updateItems": [{"id": "i2", "count": 3}],
            "removeItems": ["i1"],
        })

        items = order_field(shop_model, "items")
        assert [u.field.name for u in update.updates] == ["items", "updatedAt"]

        concat = update.updates[0].value_node
        assert isinstance(concat, ConcatListsQueryNode)
        added = concat.list_nodes[1].value
        assert added[0]["sku"] == "new"
        assert "id" in added[0]

        updated = concat.list_nodes[0]
        assert isinstance(updated, TransformListQueryNode)
        item = updated.item_variable
        assert updated.inner_node.condition == BinaryOperationQueryNode(
            EntityIDQueryNode(item), BinaryOperator.EQUAL, LiteralQueryNode("i2"),
        )
        assert updated.inner_node.expr2 is item

        removed = updated.list_node
        assert isinstance(removed, TransformListQueryNode)
        assert removed.filter_node.operator == BinaryOperator.NOT_IN
        assert removed.filter_node.rhs == LiteralQueryNode(["i1"])

        stored = FieldQueryNode(update.current_entity_variable, items)
        assert removed.list_node == ConditionalQueryNode(TypeCheckQueryNode(stored, BasicType.LIST), stored, EMPTY_LIST)

        affected = {str(f.id) for f in update.affected_fields}
        assert affected == {"Order.items", "OrderItem.sku", "OrderItem.count"}

    def test_child_entity_update_requires_id(self, order_input) -> None:
        with pytest.raises(InputCoercionError, match='Missing value for "id"'):
            order_input.prepare_value({"id": "o1", "updateItems": [{"count": 3}]})

    def test_child_entity_calc_mutation(self, order_input) -> None:
        update = update_node(order_input, {"id": "o1", "updateItems": [{"id": "i1", "addCount": 1}]})
        updated = update.updates[0].value_node
        merged = updated.inner_node.expr1
        changes = merged.object_nodes[1]
        assert [p.property_name for p in changes.properties] == ["count", "updatedAt"]
        assert changes.properties[0].value_node.operator == BinaryOperator.ADD


class TestRelationUpdates:
    def test_set_edge(self, shop_model: Model, order_input) -> None:
        statements = order_input.get_update_statements(order_input.prepare_value({"id": "o1", "customer": "c2"}))
        set_edge = statements[1]

        assert isinstance(set_edge, SetEdgeQueryNode)
        assert set_edge.relation is shop_model.relation(order_field(shop_model, "customer"))
        assert set_edge.existing_edge == PartialEdgeIdentifier(from_node=LiteralQueryNode("o1"))
        assert set_edge.new_edge == EdgeIdentifier(LiteralQueryNode("o1"), LiteralQueryNode("c2"))

    def test_set_edge_to_null_removes_edge(self, order_input) -> None:
        statements = order_input.get_update_statements(order_input.prepare_value({"id": "o1", "customer": None}))
        remove = statements[1]

        assert isinstance(remove, RemoveEdgesQueryNode)
        assert remove.from_ids == ListQueryNode((LiteralQueryNode("o1"),))
        assert remove.to_ids is None

    def test_add_edges_on_inverse_side(self, shop_model: Model, customer_input) -> None:
        statements = customer_input.get_update_statements(
            customer_input.prepare_value({"id": "c1", "addOrders": ["o1", "o2"]})
        )
        add = statements[1]

        assert isinstance(add, AddEdgesQueryNode)
        assert add.relation is shop_model.relation(order_field(shop_model, "customer"))
        # edges are stored from Order to Customer
        assert add.edges == (
            EdgeIdentifier(LiteralQueryNode("o1"), LiteralQueryNode("c1")),
            EdgeIdentifier(LiteralQueryNode("o2"), LiteralQueryNode("c1")),
        )

    def test_remove_edges_on_inverse_side(self, customer_input) -> None:
        statements = customer_input.get_update_statements(
            customer_input.prepare_value({"id": "c1", "removeOrders": ["o1"]})
        )
        remove = statements[1]

        assert remove.from_ids == LiteralQueryNode(["o1"])
        assert remove.to_ids == ListQueryNode((LiteralQueryNode("c1"),))

    def test_create_and_add(self, customer_input) -> None:
        statements = customer_input.get_update_statements(
            customer_input.prepare_value({"id": "c1", "createOrders": [{"orderNumber": "n9"}]})
        )
        update, create, add = statements

        assert isinstance(update, UpdateEntitiesQueryNode)
        assert isinstance(create, CreateEntityQueryNode)
        assert create.root_entity_type.name == "Order"
        assert create.object_node.value["quantity"] == 1
        assert add.edges == (EdgeIdentifier(create.result_variable, LiteralQueryNode("c1")),)

    def test_empty_edge_lists_emit_nothing(self, customer_input) -> None:
        statements = customer_input.get_update_statements(
            customer_input.prepare_value({"id": "c1", "addOrders": None, "removeOrders": []})
        )
        assert len(statements) == 1

    def test_null_edge_target_is_rejected(self, customer_input) -> None:
        with pytest.raises(InputCoercionError, match='"addOrders" to contain only ids'):
            customer_input.prepare_value({"id": "c1", "addOrders": ["o1", None]})

    def test_null_edge_removal_is_rejected(self, customer_input) -> None:
        with pytest.raises(InputCoercionError, match='"removeOrders" to contain only ids'):
            customer_input.prepare_value({"id": "c1", "removeOrders": [None]})

    def test_null_child_removal_is_rejected(self, order_input) -> None:
        with pytest.raises(InputCoercionError, match='"removeItems" to contain only ids'):
            order_input.prepare_value({"id": "o1", "removeItems": ["i1", None]})

    def test_create_statement_needs_result_variable(self, shop_model: Model) -> None:
        class UnboundCreateOrderInput(CreateRootEntityInputType):
            def get_create_statements(self, value):
                return [CreateEntityQueryNode(self.type, LiteralQueryNode(value))]

        orders = shop_model.get_type_or_throw("Customer").get_field("orders")
        create_input = UnboundCreateOrderInput(shop_model.get_type_or_throw("Order"), "CreateOrderInput", lambda: ())
        input_field = CreateAndAddEdgesInputField(shop_model, orders, create_input)

        with pytest.raises(ConfigurationError, match="result variable"):
            input_field.get_relation_statements([{"orderNumber": "n1"}], LiteralQueryNode("c1"))


class TestUpdateAll:
    def test_shape(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        order = shop_model.get_type_or_throw("Order")
        input_type = generator.generate_update_all_root_entities_input_type(order)

        assert input_type.name == "UpdateAllOrdersInput"
        assert input_type is generator.generate_update_all_root_entities_input_type(order)
        assert input_type is not generator.generate(order)

        names = [f.name for f in input_type.fields]
        assert "id" not in names
        assert not {"customer", "createCustomer"} & set(names)
        assert "customerEmail" in names
        assert input_type.describe().operation == "updateAll"

    def test_statements_use_given_list(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        order = shop_model.get_type_or_throw("Order")
        input_type = generator.generate_update_all_root_entities_input_type(order)
        entities = EntitiesQueryNode(order)

        statements = input_type.get_update_statements(input_type.prepare_value({"status": "SHIPPED"}), entities)
        assert len(statements) == 1
        assert statements[0].list_node is entities

    def test_statements_require_list_without_id(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        input_type = generator.generate_update_all_root_entities_input_type(shop_model.get_type_or_throw("Order"))
        with pytest.raises(InputCoercionError, match="requires"):
            input_type.get_update_statements(input_type.prepare_value({"status": "SHIPPED"}))

    def test_id_is_not_accepted(self, shop_model: Model, generator: UpdateInputTypeGenerator) -> None:
        input_type = generator.generate_update_all_root_entities_input_type(shop_model.get_type_or_throw("Order"))
        with pytest.raises(InputCoercionError, match="Unknown input field"):
            input_type.prepare_value({"id": "o1"})
