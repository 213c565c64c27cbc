"""Shared pytest fixtures for modelgraph tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from modelgraph.core.defs import (
    FieldConfig,
    ModelConfig,
    PermissionConfig,
    PermissionProfileConfig,
    SourceLocation,
    TypeConfig,
    TypeKind,
)
from modelgraph.model import Model, compile_model


def _loc(path: str) -> SourceLocation:
    return SourceLocation("shop.yaml", path)


@pytest.fixture
def shop_config() -> ModelConfig:
    """A valid model exercising every field shape."""
    return ModelConfig(
        types=(
            TypeConfig(
                name="Customer",
                kind=TypeKind.ROOT_ENTITY,
                key_field_name="email",
                fields=(
                    FieldConfig("email", "String", location=_loc("Customer.email")),
                    FieldConfig(
                        "orders", "Order", is_list=True, is_relation=True,
                        inverse_of_field_name="customer", location=_loc("Customer.orders"),
                    ),
                ),
                location=_loc("Customer"),
            ),
            TypeConfig(
                name="Order",
                kind=TypeKind.ROOT_ENTITY,
                key_field_name="orderNumber",
                fields=(
                    FieldConfig("orderNumber", "String"),
                    FieldConfig("quantity", "Int", calc_mutation_operators=("ADD", "MULTIPLY"), default_value=1),
                    FieldConfig("tags", "String", is_list=True),
                    FieldConfig("status", "OrderStatus"),
                    FieldConfig("shippingAddress", "Address"),
                    FieldConfig("payment", "PaymentInfo"),
                    FieldConfig("items", "OrderItem", is_list=True),
                    FieldConfig("customer", "Customer", is_relation=True, location=_loc("Order.customer")),
                    FieldConfig("customerEmail", "Customer", is_reference=True),
                ),
                location=_loc("Order"),
            ),
            TypeConfig(
                name="OrderItem",
                kind=TypeKind.CHILD_ENTITY,
                fields=(
                    FieldConfig("sku", "String"),
                    FieldConfig("count", "Int", calc_mutation_operators=("ADD",)),
                ),
            ),
            TypeConfig(
                name="Address",
                kind=TypeKind.VALUE_OBJECT,
                fields=(FieldConfig("street", "String"), FieldConfig("city", "String")),
            ),
            TypeConfig(
                name="PaymentInfo",
                kind=TypeKind.ENTITY_EXTENSION,
                fields=(FieldConfig("method", "String"), FieldConfig("transactionId", "String")),
            ),
            TypeConfig(name="OrderStatus", kind=TypeKind.ENUM, values=("OPEN", "SHIPPED")),
        ),
        permission_profiles=(
            PermissionProfileConfig("default", (PermissionConfig(("users",), "readWrite"),)),
        ),
    )


@pytest.fixture
def shop_model(shop_config: ModelConfig) -> Model:
    return compile_model(shop_config)


@pytest.fixture
def movie_model() -> Model:
    """Movie.actors is a one-sided list relation; Actor has no backlink."""
    return compile_model(ModelConfig(types=(
        TypeConfig(
            name="Movie",
            kind=TypeKind.ROOT_ENTITY,
            fields=(
                FieldConfig("title", "String"),
                FieldConfig("actors", "Actor", is_list=True, is_relation=True),
            ),
        ),
        TypeConfig(name="Actor", kind=TypeKind.ROOT_ENTITY, fields=(FieldConfig("name", "String"),)),
    )))


@pytest.fixture
def order_reference_model() -> Model:
    """Order.customerId references Customer by its id."""
    return compile_model(ModelConfig(types=(
        TypeConfig(
            name="Customer",
            kind=TypeKind.ROOT_ENTITY,
            key_field_name="id",
            fields=(FieldConfig("name", "String"),),
        ),
        TypeConfig(
            name="Order",
            kind=TypeKind.ROOT_ENTITY,
            fields=(
                FieldConfig("orderNumber", "String"),
                FieldConfig("customerId", "Customer", is_reference=True),
            ),
        ),
    )))


SHOP_YAML = """\
permissionProfiles:
  default:
    - {roles: [users], access: readWrite}
types:
  - name: Customer
    kind: rootEntity
    keyField: email
    permissions: {permissionProfile: default}
    fields:
      - {name: email, type: String}
      - {name: orders, type: Order, list: true, relation: true, inverseOf: customer}
  - name: Order
    kind: rootEntity
    fields:
      - {name: orderNumber, type: String}
      - {name: quantity, type: Int, calcMutations: [ADD], default: 1}
      - {name: customer, type: Customer, relation: true}
      - name: notes
        type: String
        permissions:
          roles: {read: [support], readWrite: [admins]}
"""


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "shop.yaml"
    path.write_text(SHOP_YAML)
    return path
