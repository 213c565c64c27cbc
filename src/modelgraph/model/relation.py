"""
Relations between root entity types.

A Relation is derived from a pair of relation fields (the to-field may be
absent for one-sided relations). Edges are always stored from the from-side
to the to-side; RelationSide is the directional view used when compiling
access or mutations from one particular endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .fields import Field
from .types import Type


@dataclass(frozen=True)
class Relation:
    from_type: Type
    from_field: Field
    to_type: Type
    to_field: Optional[Field] = None

    @property
    def from_side(self) -> RelationSide:
        return RelationSide(self, is_from_side=True)

    @property
    def to_side(self) -> RelationSide:
        return RelationSide(self, is_from_side=False)

    @property
    def is_one_sided(self) -> bool:
        return self.to_field is None

    def __str__(self) -> str:
        to_field = f".{self.to_field.name}" if self.to_field else ""
        return f"{self.from_type.name}.{self.from_field.name} -> {self.to_type.name}{to_field}"


@dataclass(frozen=True)
class RelationSide:
    """One endpoint's view of a relation."""
    relation: Relation
    is_from_side: bool

    @property
    def source_type(self) -> Type:
        return self.relation.from_type if self.is_from_side else self.relation.to_type

    @property
    def target_type(self) -> Type:
        return self.relation.to_type if self.is_from_side else self.relation.from_type

    @property
    def source_field(self) -> Optional[Field]:
        return self.relation.from_field if self.is_from_side else self.relation.to_field

    @property
    def target_field(self) -> Optional[Field]:
        return self.relation.to_field if self.is_from_side else self.relation.from_field

    @property
    def is_to_side(self) -> bool:
        return not self.is_from_side

    @property
    def other_side(self) -> RelationSide:
        return RelationSide(self.relation, not self.is_from_side)

    @property
    def is_to_many(self) -> bool:
        """Whether one source entity can be linked to many target entities."""
        return bool(self.source_field and self.source_field.is_list)

    @property
    def is_from_many(self) -> bool:
        """
        Whether one target entity can be linked from many source entities.

        A missing inverse field means there is no constraint, so it counts as many.
        """
        target_field = self.target_field
        return target_field is None or target_field.is_list

    def __str__(self) -> str:
        direction = "from" if self.is_from_side else "to"
        return f"{self.relation} ({direction} side)"
