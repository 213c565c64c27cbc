"""
Core module - configuration definitions, errors, constants, naming.
"""

from __future__ import annotations

from .constants import (
    BUILTIN_SCALAR_TYPES,
    CALC_MUTATION_OPERATORS,
    CREATED_AT_FIELD,
    ID_FIELD,
    SYSTEM_FIELDS,
    UPDATED_AT_FIELD,
    CalcMutationOperator,
    find_calc_mutation_operator,
)
from .defs import (
    FieldConfig,
    ModelConfig,
    PermissionConfig,
    PermissionProfileConfig,
    PermissionsConfig,
    RolesSpecifierConfig,
    SourceLocation,
    TypeConfig,
    TypeKind,
)
from .errors import (
    ConfigurationError,
    InputCoercionError,
    ModelgraphError,
    ModelValidationError,
    SchemaDocumentError,
)

__all__ = [
    # Definitions
    "FieldConfig",
    "ModelConfig",
    "PermissionConfig",
    "PermissionProfileConfig",
    "PermissionsConfig",
    "RolesSpecifierConfig",
    "SourceLocation",
    "TypeConfig",
    "TypeKind",
    # Constants
    "BUILTIN_SCALAR_TYPES",
    "CALC_MUTATION_OPERATORS",
    "CREATED_AT_FIELD",
    "ID_FIELD",
    "SYSTEM_FIELDS",
    "UPDATED_AT_FIELD",
    "CalcMutationOperator",
    "find_calc_mutation_operator",
    # Errors
    "ConfigurationError",
    "InputCoercionError",
    "ModelgraphError",
    "ModelValidationError",
    "SchemaDocumentError",
]
