"""
Pydantic models describing compiled input shapes.

Executors and callers read these instead of re-deriving input shapes
from the model.

Example:
    InputFieldDescriptor(
        name="addQuantity",
        field="OrderItem.quantity",
        kind="calcMutation",
        value_type="Int",
        operator="ADD",
    )
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class InputFieldKind(str, Enum):
    FILTER = "filter"
    BASIC = "basic"
    BASIC_LIST = "basicList"
    CALC_MUTATION = "calcMutation"
    OBJECT = "object"
    OBJECT_LIST = "objectList"
    ENTITY_EXTENSION = "entityExtension"
    ADD_CHILD_ENTITIES = "addChildEntities"
    UPDATE_CHILD_ENTITIES = "updateChildEntities"
    REMOVE_CHILD_ENTITIES = "removeChildEntities"
    ADD_EDGES = "addEdges"
    REMOVE_EDGES = "removeEdges"
    CREATE_AND_ADD_EDGES = "createAndAddEdges"
    SET_EDGE = "setEdge"
    CREATE_AND_SET_EDGE = "createAndSetEdge"


class InputFieldDescriptor(BaseModel):
    """Shape of one input field of a create/update input type."""
    model_config = ConfigDict(frozen=True)

    name: str
    field: str  # "Type.field" the input writes (or filters by)
    kind: InputFieldKind
    value_type: str  # scalar/enum name, or the nested input type name
    is_list: bool = False  # accepts a list; null is coerced to []
    is_filter: bool = False  # locates the target, never written
    is_recursive: bool = False  # value is coerced through a nested input type
    operator: Optional[str] = None  # calc mutation operator


class InputTypeDescriptor(BaseModel):
    """Shape of a create/update input type."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    operation: Literal["create", "update", "updateAll"]
    fields: list[InputFieldDescriptor] = Field(default_factory=list)
