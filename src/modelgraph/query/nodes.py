"""
Query IR - backend-neutral expression nodes for reads and mutations.

The executor/adapter consumes these nodes; this module only defines what
they mean. Nodes are frozen dataclasses. VariableQueryNode compares by
identity because each variable is a distinct binding.

Adding a node kind is the extension point for new read/write capabilities.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional

from ..model.fields import Field
from ..model.relation import Relation, RelationSide
from ..model.types import Type


class BasicType(str, Enum):
    """Runtime value shapes a TypeCheckQueryNode can test for."""
    OBJECT = "object"
    LIST = "list"
    NULL = "null"
    SCALAR = "scalar"


class BinaryOperator(str, Enum):
    AND = "&&"
    OR = "||"
    EQUAL = "=="
    UNEQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    IN = "IN"
    NOT_IN = "NOT IN"
    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS WITH"
    ENDS_WITH = "ENDS WITH"
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    APPEND = "APPEND"
    PREPEND = "PREPEND"


class QueryNode:
    """Base class of all IR nodes."""

    def describe(self) -> str:
        raise NotImplementedError

    def child_nodes(self) -> Iterator[QueryNode]:
        """Direct child nodes, in field order."""
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, QueryNode):
                yield value
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, QueryNode):
                        yield item

    def __str__(self) -> str:
        return self.describe()


def walk(node: QueryNode) -> Iterator[QueryNode]:
    """Yield the node and all of its descendants, depth first."""
    yield node
    for child in node.child_nodes():
        yield from walk(child)


# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class LiteralQueryNode(QueryNode):
    value: Any

    def describe(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class NullQueryNode(QueryNode):
    def describe(self) -> str:
        return "null"


@dataclass(frozen=True)
class ConstBoolQueryNode(QueryNode):
    value: bool

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class CurrentTimestampQueryNode(QueryNode):
    def describe(self) -> str:
        return "now()"


@dataclass(frozen=True)
class ListQueryNode(QueryNode):
    items: tuple[QueryNode, ...] = ()

    def describe(self) -> str:
        return "[" + ", ".join(item.describe() for item in self.items) + "]"


@dataclass(frozen=True)
class PropertySpecification(QueryNode):
    property_name: str
    value_node: QueryNode

    def describe(self) -> str:
        return f"{self.property_name}: {self.value_node.describe()}"


@dataclass(frozen=True)
class ObjectQueryNode(QueryNode):
    properties: tuple[PropertySpecification, ...] = ()

    def describe(self) -> str:
        return "{" + ", ".join(p.describe() for p in self.properties) + "}"


@dataclass(frozen=True)
class MergeObjectsQueryNode(QueryNode):
    """Shallow merge; later objects win."""
    object_nodes: tuple[QueryNode, ...]

    def describe(self) -> str:
        return "merge(" + ", ".join(n.describe() for n in self.object_nodes) + ")"


@dataclass(frozen=True)
class ConcatListsQueryNode(QueryNode):
    list_nodes: tuple[QueryNode, ...]

    def describe(self) -> str:
        return "concat(" + ", ".join(n.describe() for n in self.list_nodes) + ")"


@dataclass(frozen=True, eq=False)
class VariableQueryNode(QueryNode):
    label: Optional[str] = None

    def describe(self) -> str:
        return f"${self.label or 'var'}"


NULL = NullQueryNode()
TRUE = ConstBoolQueryNode(True)
FALSE = ConstBoolQueryNode(False)
EMPTY_OBJECT = ObjectQueryNode()
EMPTY_LIST = ListQueryNode()


# =============================================================================
# Reads
# =============================================================================


@dataclass(frozen=True)
class EntitiesQueryNode(QueryNode):
    """All entities of a root entity type."""
    root_entity_type: Type

    def describe(self) -> str:
        return f"entities({self.root_entity_type.name})"


@dataclass(frozen=True)
class FieldQueryNode(QueryNode):
    """Stored value of a field on an object."""
    object_node: QueryNode
    field: Field

    def describe(self) -> str:
        return f"{self.object_node.describe()}.{self.field.name}"


@dataclass(frozen=True)
class EntityIDQueryNode(QueryNode):
    """Identity of an entity, distinct from ordinary field storage."""
    object_node: QueryNode

    def describe(self) -> str:
        return f"id({self.object_node.describe()})"


@dataclass(frozen=True)
class ConditionalQueryNode(QueryNode):
    condition: QueryNode
    expr1: QueryNode
    expr2: QueryNode

    def describe(self) -> str:
        return f"({self.condition.describe()} ? {self.expr1.describe()} : {self.expr2.describe()})"


@dataclass(frozen=True)
class TypeCheckQueryNode(QueryNode):
    value_node: QueryNode
    type: BasicType

    def describe(self) -> str:
        return f"isOfType({self.value_node.describe()}, {self.type.value})"


@dataclass(frozen=True)
class TransformListQueryNode(QueryNode):
    """
    Filter a list, optionally cap its length and map each item.

    `filter_node` and `inner_node` are evaluated with `item_variable`
    bound to the current item; `inner_node` defaults to the item itself.
    """
    list_node: QueryNode
    item_variable: VariableQueryNode
    filter_node: QueryNode = TRUE
    inner_node: Optional[QueryNode] = None
    max_count: Optional[int] = None

    def describe(self) -> str:
        var = self.item_variable.describe()
        parts = [f"for {var} in {self.list_node.describe()}"]
        if self.filter_node != TRUE:
            parts.append(f"filter {self.filter_node.describe()}")
        if self.max_count is not None:
            parts.append(f"limit {self.max_count}")
        inner = self.inner_node.describe() if self.inner_node is not None else var
        parts.append(f"return {inner}")
        return "(" + " ".join(parts) + ")"


@dataclass(frozen=True)
class FirstOfListQueryNode(QueryNode):
    list_node: QueryNode

    def describe(self) -> str:
        return f"first({self.list_node.describe()})"


@dataclass(frozen=True)
class FollowEdgeQueryNode(QueryNode):
    """All entities connected to the source entity on the given relation side."""
    relation_side: RelationSide
    source_entity_node: QueryNode

    def describe(self) -> str:
        return f"follow({self.relation_side}, {self.source_entity_node.describe()})"


@dataclass(frozen=True)
class BinaryOperationQueryNode(QueryNode):
    lhs: QueryNode
    operator: BinaryOperator
    rhs: QueryNode

    def describe(self) -> str:
        return f"({self.lhs.describe()} {self.operator.value} {self.rhs.describe()})"


def conjunction(*nodes: QueryNode) -> QueryNode:
    """Combine conditions with AND; no conditions mean true."""
    if not nodes:
        return TRUE
    result = nodes[0]
    for node in nodes[1:]:
        result = BinaryOperationQueryNode(result, BinaryOperator.AND, node)
    return result


# =============================================================================
# Mutations
# =============================================================================


@dataclass(frozen=True)
class SetFieldQueryNode(QueryNode):
    """Assign a field of the entity being created or updated."""
    field: Field
    value_node: QueryNode

    def describe(self) -> str:
        return f"set {self.field.name} = {self.value_node.describe()}"


@dataclass(frozen=True)
class EdgeIdentifier(QueryNode):
    """Edge between a from-side entity id and a to-side entity id."""
    from_node: QueryNode
    to_node: QueryNode

    def describe(self) -> str:
        return f"({self.from_node.describe()} -> {self.to_node.describe()})"


@dataclass(frozen=True)
class PartialEdgeIdentifier(QueryNode):
    """Edge pattern; a missing end matches any entity."""
    from_node: Optional[QueryNode] = None
    to_node: Optional[QueryNode] = None

    def describe(self) -> str:
        from_desc = self.from_node.describe() if self.from_node is not None else "?"
        to_desc = self.to_node.describe() if self.to_node is not None else "?"
        return f"({from_desc} -> {to_desc})"


@dataclass(frozen=True)
class AddEdgesQueryNode(QueryNode):
    relation: Relation
    edges: tuple[EdgeIdentifier, ...]

    def describe(self) -> str:
        return f"add edges to {self.relation}: " + ", ".join(e.describe() for e in self.edges)


@dataclass(frozen=True)
class RemoveEdgesQueryNode(QueryNode):
    """
    Remove edges whose from id is in `from_ids` and to id is in `to_ids`.

    Both are list-valued nodes; None matches any id.
    """
    relation: Relation
    from_ids: Optional[QueryNode] = None
    to_ids: Optional[QueryNode] = None

    def describe(self) -> str:
        from_desc = self.from_ids.describe() if self.from_ids is not None else "*"
        to_desc = self.to_ids.describe() if self.to_ids is not None else "*"
        return f"remove edges from {self.relation}: ({from_desc} -> {to_desc})"


@dataclass(frozen=True)
class SetEdgeQueryNode(QueryNode):
    """Replace the edge matching `existing_edge` with `new_edge`."""
    relation: Relation
    existing_edge: PartialEdgeIdentifier
    new_edge: EdgeIdentifier

    def describe(self) -> str:
        return f"replace edge {self.existing_edge.describe()} with {self.new_edge.describe()} in {self.relation}"


@dataclass(frozen=True)
class CreateEntityQueryNode(QueryNode):
    """Create an entity; its id is bound to `result_variable` for later statements."""
    root_entity_type: Type
    object_node: QueryNode
    affected_fields: tuple[Field, ...] = ()
    result_variable: Optional[VariableQueryNode] = None

    def describe(self) -> str:
        target = f"{self.result_variable.describe()} = " if self.result_variable is not None else ""
        return f"{target}create {self.root_entity_type.name} {self.object_node.describe()}"


@dataclass(frozen=True)
class UpdateEntitiesQueryNode(QueryNode):
    """Apply `updates` to every entity in `list_node`, bound to `current_entity_variable`."""
    root_entity_type: Type
    list_node: QueryNode
    updates: tuple[SetFieldQueryNode, ...]
    current_entity_variable: VariableQueryNode
    affected_fields: tuple[Field, ...] = ()

    def describe(self) -> str:
        updates = ", ".join(u.describe() for u in self.updates)
        return (
            f"update {self.root_entity_type.name} "
            f"{self.current_entity_variable.describe()} in {self.list_node.describe()} with [{updates}]"
        )


@dataclass(frozen=True)
class DeleteEntitiesQueryNode(QueryNode):
    root_entity_type: Type
    list_node: QueryNode

    def describe(self) -> str:
        return f"delete {self.root_entity_type.name} in {self.list_node.describe()}"
