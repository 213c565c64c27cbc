"""
Query IR - node vocabulary consumed by executors.
"""

from __future__ import annotations

from .nodes import (
    EMPTY_LIST,
    EMPTY_OBJECT,
    FALSE,
    NULL,
    TRUE,
    AddEdgesQueryNode,
    BasicType,
    BinaryOperationQueryNode,
    BinaryOperator,
    ConcatListsQueryNode,
    ConditionalQueryNode,
    ConstBoolQueryNode,
    CreateEntityQueryNode,
    CurrentTimestampQueryNode,
    DeleteEntitiesQueryNode,
    EdgeIdentifier,
    EntitiesQueryNode,
    EntityIDQueryNode,
    FieldQueryNode,
    FirstOfListQueryNode,
    FollowEdgeQueryNode,
    ListQueryNode,
    LiteralQueryNode,
    MergeObjectsQueryNode,
    NullQueryNode,
    ObjectQueryNode,
    PartialEdgeIdentifier,
    PropertySpecification,
    QueryNode,
    RemoveEdgesQueryNode,
    SetEdgeQueryNode,
    SetFieldQueryNode,
    TransformListQueryNode,
    TypeCheckQueryNode,
    UpdateEntitiesQueryNode,
    VariableQueryNode,
    conjunction,
    walk,
)

__all__ = [
    "EMPTY_LIST",
    "EMPTY_OBJECT",
    "FALSE",
    "NULL",
    "TRUE",
    "AddEdgesQueryNode",
    "BasicType",
    "BinaryOperationQueryNode",
    "BinaryOperator",
    "ConcatListsQueryNode",
    "ConditionalQueryNode",
    "ConstBoolQueryNode",
    "CreateEntityQueryNode",
    "CurrentTimestampQueryNode",
    "DeleteEntitiesQueryNode",
    "EdgeIdentifier",
    "EntitiesQueryNode",
    "EntityIDQueryNode",
    "FieldQueryNode",
    "FirstOfListQueryNode",
    "FollowEdgeQueryNode",
    "ListQueryNode",
    "LiteralQueryNode",
    "MergeObjectsQueryNode",
    "NullQueryNode",
    "ObjectQueryNode",
    "PartialEdgeIdentifier",
    "PropertySpecification",
    "QueryNode",
    "RemoveEdgesQueryNode",
    "SetEdgeQueryNode",
    "SetFieldQueryNode",
    "TransformListQueryNode",
    "TypeCheckQueryNode",
    "UpdateEntitiesQueryNode",
    "VariableQueryNode",
    "conjunction",
    "walk",
]
