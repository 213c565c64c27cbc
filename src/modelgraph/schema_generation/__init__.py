"""
Schema generation - field access compilation and mutation input shapes.
"""

from __future__ import annotations

from .create_generator import CreateInputTypeGenerator
from .descriptors import InputFieldDescriptor, InputFieldKind, InputTypeDescriptor
from .field_nodes import create_field_node
from .input_fields import (
    AddChildEntitiesInputField,
    BasicInputField,
    BasicListInputField,
    CalcMutationInputField,
    ChildEntitiesInputField,
    FilterInputField,
    InputField,
    ObjectInputField,
    ObjectListInputField,
    RemoveChildEntitiesInputField,
    UpdateChildEntitiesInputField,
    UpdateEntityExtensionInputField,
)
from .input_types import (
    CreateChildEntityInputType,
    CreateObjectInputType,
    CreateRootEntityInputType,
    InputObjectType,
    UpdateChildEntityInputType,
    UpdateEntityExtensionInputType,
    UpdateObjectInputType,
    UpdateRootEntityInputType,
)
from .relation_fields import (
    AddEdgesInputField,
    CreateAndAddEdgesInputField,
    CreateAndSetEdgeInputField,
    RelationInputField,
    RemoveEdgesInputField,
    SetEdgeInputField,
)
from .update_generator import UpdateInputTypeGenerator

__all__ = [
    "CreateInputTypeGenerator",
    "UpdateInputTypeGenerator",
    "create_field_node",
    "InputFieldDescriptor",
    "InputFieldKind",
    "InputTypeDescriptor",
    # Input fields
    "InputField",
    "FilterInputField",
    "BasicInputField",
    "BasicListInputField",
    "CalcMutationInputField",
    "ObjectInputField",
    "ObjectListInputField",
    "UpdateEntityExtensionInputField",
    "ChildEntitiesInputField",
    "AddChildEntitiesInputField",
    "UpdateChildEntitiesInputField",
    "RemoveChildEntitiesInputField",
    "RelationInputField",
    "AddEdgesInputField",
    "RemoveEdgesInputField",
    "SetEdgeInputField",
    "CreateAndAddEdgesInputField",
    "CreateAndSetEdgeInputField",
    # Input types
    "InputObjectType",
    "CreateObjectInputType",
    "CreateChildEntityInputType",
    "CreateRootEntityInputType",
    "UpdateObjectInputType",
    "UpdateEntityExtensionInputType",
    "UpdateChildEntityInputType",
    "UpdateRootEntityInputType",
]
