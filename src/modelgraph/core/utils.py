"""
Utility functions for modelgraph.

Includes:
- Case helpers (capitalize/decapitalize, camelCase detection)
- Naive English pluralization for collection and input type names
- Name builders for generated input types and input fields
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.relation import Relation
    from ..model.types import Type


# =============================================================================
# Case utilities
# =============================================================================

_LOWER_INITIAL_PATTERN = re.compile(r'^[a-z]')
_UPPER_INITIAL_PATTERN = re.compile(r'^[A-Z]')


def capitalize(name: str) -> str:
    """
    Upper-case the first character only.

    Examples:
        quantity -> Quantity
        orderItems -> OrderItems
    """
    return name[:1].upper() + name[1:]


def decapitalize(name: str) -> str:
    """
    Lower-case the first character only.

    Examples:
        Movie -> movie
        OrderItem -> orderItem
    """
    return name[:1].lower() + name[1:]


def starts_lowercase(name: str) -> bool:
    return bool(_LOWER_INITIAL_PATTERN.match(name))


def starts_uppercase(name: str) -> bool:
    return bool(_UPPER_INITIAL_PATTERN.match(name))


def is_uppercase(name: str) -> bool:
    """GENRE and SCI_FI are upper case; Drama is not."""
    return name == name.upper()


def pluralize(name: str) -> str:
    """
    Naive English plural, enough for type and collection names.

    Examples:
        Movie -> Movies
        Category -> Categories
        Address -> Addresses
        Day -> Days
    """
    if not name:
        return name
    if name.endswith("y") and name[-2:-1].lower() not in ("a", "e", "i", "o", "u"):
        return name[:-1] + "ies"
    if name.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"


# =============================================================================
# Collection names
# =============================================================================


def get_collection_name_for_root_entity(type_: Type) -> str:
    """Movie -> movies"""
    return decapitalize(pluralize(type_.name))


def get_collection_name_for_relation(relation: Relation) -> str:
    """Movie.actors -> movies_actors"""
    return f"{get_collection_name_for_root_entity(relation.from_type)}_{relation.from_field.name}"


# =============================================================================
# Input type and input field names
# =============================================================================


def get_create_input_type_name(type_name: str) -> str:
    return f"Create{type_name}Input"


def get_value_object_input_type_name(type_name: str) -> str:
    return f"{type_name}Input"


def get_update_input_type_name(type_name: str) -> str:
    return f"Update{type_name}Input"


def get_update_all_input_type_name(type_name: str) -> str:
    return f"UpdateAll{pluralize(type_name)}Input"


def get_add_child_entities_field_name(field_name: str) -> str:
    return f"add{capitalize(field_name)}"


def get_update_child_entities_field_name(field_name: str) -> str:
    return f"update{capitalize(field_name)}"


def get_remove_child_entities_field_name(field_name: str) -> str:
    return f"remove{capitalize(field_name)}"


def get_add_relation_field_name(field_name: str) -> str:
    return f"add{capitalize(field_name)}"


def get_remove_relation_field_name(field_name: str) -> str:
    return f"remove{capitalize(field_name)}"


def get_create_related_field_name(field_name: str) -> str:
    return f"create{capitalize(field_name)}"


def get_calc_mutation_field_name(prefix: str, field_name: str) -> str:
    return f"{prefix}{capitalize(field_name)}"
