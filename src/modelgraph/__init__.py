"""
modelgraph - schema model compiler for graph-document stores.

Builds a validated domain model from declarative type definitions,
resolves relations between entity types, and compiles read access and
create/update inputs into a backend-neutral query IR.

Usage:
    from modelgraph import compile_model, load_schema, UpdateInputTypeGenerator

    model = compile_model(load_schema("schema.yaml"))
    order = model.get_type_or_throw("Order")
    input_type = UpdateInputTypeGenerator(model).generate(order)
    statements = input_type.get_update_statements(
        input_type.prepare_value({"id": "o1", "customerId": "c7"})
    )
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import load_schema, load_schema_document
from .core import (
    ConfigurationError,
    FieldConfig,
    InputCoercionError,
    ModelConfig,
    ModelgraphError,
    ModelValidationError,
    SchemaDocumentError,
    SourceLocation,
    TypeConfig,
    TypeKind,
)
from .model import (
    Field,
    Model,
    ModelValidator,
    Relation,
    RelationSide,
    Severity,
    Type,
    ValidationMessage,
    ValidationResult,
    build_model,
    compile_model,
)
from .schema_generation import (
    CreateInputTypeGenerator,
    UpdateInputTypeGenerator,
    create_field_node,
)

__all__ = [
    "__version__",
    # Config
    "load_schema",
    "load_schema_document",
    "FieldConfig",
    "ModelConfig",
    "SourceLocation",
    "TypeConfig",
    "TypeKind",
    # Errors
    "ConfigurationError",
    "InputCoercionError",
    "ModelgraphError",
    "ModelValidationError",
    "SchemaDocumentError",
    # Model
    "Field",
    "Model",
    "ModelValidator",
    "Relation",
    "RelationSide",
    "Severity",
    "Type",
    "ValidationMessage",
    "ValidationResult",
    "build_model",
    "compile_model",
    # Generation
    "CreateInputTypeGenerator",
    "UpdateInputTypeGenerator",
    "create_field_node",
]
