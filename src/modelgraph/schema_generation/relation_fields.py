"""
Relation input fields - edge mutations for relation fields.

Edges are stored from the relation's from-side to its to-side, so inputs
on a to-side field swap the ends when building edge identifiers.

List relations:   addX (ids), removeX (ids), createX (new targets, linked)
To-one relations: x (id or null), createX (new target, linked)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ..core.errors import ConfigurationError, InputCoercionError
from ..core.utils import (
    get_add_relation_field_name,
    get_create_related_field_name,
    get_remove_relation_field_name,
)
from ..model.fields import Field
from ..model.model import Model
from ..model.relation import RelationSide
from ..query.nodes import (
    AddEdgesQueryNode,
    CreateEntityQueryNode,
    EdgeIdentifier,
    ListQueryNode,
    LiteralQueryNode,
    PartialEdgeIdentifier,
    QueryNode,
    RemoveEdgesQueryNode,
    SetEdgeQueryNode,
)
from .descriptors import InputFieldKind
from .input_fields import InputField, coerce_id_list, coerce_list

if TYPE_CHECKING:
    from .input_types import CreateRootEntityInputType


def get_edge_identifier(side: RelationSide, source_id: QueryNode, target_id: QueryNode) -> EdgeIdentifier:
    if side.is_from_side:
        return EdgeIdentifier(from_node=source_id, to_node=target_id)
    return EdgeIdentifier(from_node=target_id, to_node=source_id)


def get_partial_edge_identifier(side: RelationSide, source_id: QueryNode) -> PartialEdgeIdentifier:
    if side.is_from_side:
        return PartialEdgeIdentifier(from_node=source_id)
    return PartialEdgeIdentifier(to_node=source_id)


def _coerce_id(value: Any, input_name: str) -> Any:
    if isinstance(value, (list, tuple, dict)):
        raise InputCoercionError(
            f'Expected value for "{input_name}" to be an id, but is "{type(value).__name__}"',
            input_name,
        )
    return value


class RelationInputField(InputField):
    is_relation_input = True

    def __init__(self, model: Model, field: Field, value_type_name: str, name: Optional[str] = None):
        super().__init__(field, value_type_name, name)
        self.relation_side = model.get_relation_side_or_throw(field)

    @property
    def relation(self):
        return self.relation_side.relation


class AddEdgesInputField(RelationInputField):
    kind = InputFieldKind.ADD_EDGES
    is_list_coercing = True

    def __init__(self, model: Model, field: Field, name: Optional[str] = None):
        super().__init__(model, field, "ID", name or get_add_relation_field_name(field.name))

    def coerce_value(self, value: Any) -> Any:
        return [_coerce_id(item, self.name) for item in coerce_id_list(value, self.name)]

    def get_relation_statements(self, value: Any, source_id_node: QueryNode) -> tuple[QueryNode, ...]:
        if not value:
            return ()
        edges = tuple(
            get_edge_identifier(self.relation_side, source_id_node, LiteralQueryNode(target_id))
            for target_id in value
        )
        return (AddEdgesQueryNode(self.relation, edges),)


class RemoveEdgesInputField(RelationInputField):
    kind = InputFieldKind.REMOVE_EDGES
    is_list_coercing = True

    def __init__(self, model: Model, field: Field):
        super().__init__(model, field, "ID", get_remove_relation_field_name(field.name))

    def coerce_value(self, value: Any) -> Any:
        return [_coerce_id(item, self.name) for item in coerce_id_list(value, self.name)]

    def get_relation_statements(self, value: Any, source_id_node: QueryNode) -> tuple[QueryNode, ...]:
        if not value:
            return ()
        source_ids = ListQueryNode((source_id_node,))
        target_ids = LiteralQueryNode(list(value))
        if self.relation_side.is_from_side:
            return (RemoveEdgesQueryNode(self.relation, from_ids=source_ids, to_ids=target_ids),)
        return (RemoveEdgesQueryNode(self.relation, from_ids=target_ids, to_ids=source_ids),)


class SetEdgeInputField(RelationInputField):
    """Replaces the single edge of a to-one relation; null unlinks."""
    kind = InputFieldKind.SET_EDGE

    def __init__(self, model: Model, field: Field):
        super().__init__(model, field, "ID")

    def coerce_value(self, value: Any) -> Any:
        return _coerce_id(value, self.name)

    def get_relation_statements(self, value: Any, source_id_node: QueryNode) -> tuple[QueryNode, ...]:
        if value is None:
            source_ids = ListQueryNode((source_id_node,))
            if self.relation_side.is_from_side:
                return (RemoveEdgesQueryNode(self.relation, from_ids=source_ids),)
            return (RemoveEdgesQueryNode(self.relation, to_ids=source_ids),)

        return (SetEdgeQueryNode(
            self.relation,
            existing_edge=get_partial_edge_identifier(self.relation_side, source_id_node),
            new_edge=get_edge_identifier(self.relation_side, source_id_node, LiteralQueryNode(value)),
        ),)


class CreateAndAddEdgesInputField(RelationInputField):
    """Creates new target entities and links each of them."""
    kind = InputFieldKind.CREATE_AND_ADD_EDGES
    is_list_coercing = True
    is_recursive = True

    def __init__(self, model: Model, field: Field, create_input_type: CreateRootEntityInputType):
        super().__init__(model, field, create_input_type.name, get_create_related_field_name(field.name))
        self.create_input_type = create_input_type

    def coerce_value(self, value: Any) -> Any:
        return [self.create_input_type.prepare_value(item) for item in coerce_list(value, self.name)]

    def get_relation_statements(self, value: Any, source_id_node: QueryNode) -> tuple[QueryNode, ...]:
        statements: list[QueryNode] = []
        for item in value or ():
            create_statements = self.create_input_type.get_create_statements(item)
            statements.extend(create_statements)
            new_id = _result_variable(create_statements)
            statements.append(AddEdgesQueryNode(
                self.relation,
                (get_edge_identifier(self.relation_side, source_id_node, new_id),),
            ))
        return tuple(statements)

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        for item in value or ():
            self.create_input_type.collect_affected_fields(item, fields)


class CreateAndSetEdgeInputField(RelationInputField):
    """Creates a new target entity and makes it the single linked entity."""
    kind = InputFieldKind.CREATE_AND_SET_EDGE
    is_recursive = True

    def __init__(self, model: Model, field: Field, create_input_type: CreateRootEntityInputType):
        super().__init__(model, field, create_input_type.name, get_create_related_field_name(field.name))
        self.create_input_type = create_input_type

    def coerce_value(self, value: Any) -> Any:
        if value is None:
            return None
        return self.create_input_type.prepare_value(value)

    def get_relation_statements(self, value: Any, source_id_node: QueryNode) -> tuple[QueryNode, ...]:
        if value is None:
            return ()
        create_statements = self.create_input_type.get_create_statements(value)
        new_id = _result_variable(create_statements)
        return tuple(create_statements) + (SetEdgeQueryNode(
            self.relation,
            existing_edge=get_partial_edge_identifier(self.relation_side, source_id_node),
            new_edge=get_edge_identifier(self.relation_side, source_id_node, new_id),
        ),)

    def collect_affected_fields(self, value: Any, fields: set[Field]) -> None:
        super().collect_affected_fields(value, fields)
        if value is not None:
            self.create_input_type.collect_affected_fields(value, fields)


def _result_variable(create_statements: list[QueryNode]) -> QueryNode:
    create_node = create_statements[0]
    if not isinstance(create_node, CreateEntityQueryNode) or create_node.result_variable is None:
        raise ConfigurationError(f"Expected a create statement with a result variable, got {create_node.describe()}")
    return create_node.result_variable
