"""
Static tables shared by the model and the schema generators.
"""

from __future__ import annotations

from dataclasses import dataclass


ID_FIELD = "id"
CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"

# System fields added to root and child entity types, in declaration order
SYSTEM_FIELDS: dict[str, str] = {
    ID_FIELD: "ID",
    CREATED_AT_FIELD: "DateTime",
    UPDATED_AT_FIELD: "DateTime",
}

BUILTIN_SCALAR_TYPES = ("ID", "String", "Int", "Float", "Boolean", "DateTime", "JSON")

NUMERIC_TYPES = ("Int", "Float")


@dataclass(frozen=True)
class CalcMutationOperator:
    """A calc mutation operator and the scalar types it applies to."""
    name: str
    prefix: str  # input field name prefix, e.g. "add" -> addQuantity
    binary_operator: str  # name of the BinaryOperator used in the IR
    supported_types: tuple[str, ...]


CALC_MUTATION_OPERATORS: tuple[CalcMutationOperator, ...] = (
    CalcMutationOperator("MULTIPLY", "multiplyWith", "MULTIPLY", NUMERIC_TYPES),
    CalcMutationOperator("DIVIDE", "divideBy", "DIVIDE", NUMERIC_TYPES),
    CalcMutationOperator("ADD", "add", "ADD", NUMERIC_TYPES),
    CalcMutationOperator("SUBTRACT", "subtract", "SUBTRACT", NUMERIC_TYPES),
    CalcMutationOperator("MODULO", "moduloOf", "MODULO", NUMERIC_TYPES),
    CalcMutationOperator("APPEND", "appendTo", "APPEND", ("String",)),
    CalcMutationOperator("PREPEND", "prependTo", "PREPEND", ("String",)),
)


def find_calc_mutation_operator(name: str) -> CalcMutationOperator | None:
    """Look up an operator by name, or None if it is not in the table."""
    for op in CALC_MUTATION_OPERATORS:
        if op.name == name:
            return op
    return None
