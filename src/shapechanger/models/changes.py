"""Stat change records carried by buff items.

A ChangeRecord is one atomic modifier: "+2 to strength, size bonus" or
"+1 to the carry multiplier". Changes on an active buff are summed per
sub-target; the engine never merges or deduplicates them.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shapechanger.models.enums import Ability, ChangeOperator


CARRY_STRENGTH = "carryStr"
CARRY_MULTIPLIER = "carryMult"
NATURAL_ARMOR = "nac"

CAPACITY_SUB_TARGETS = frozenset({CARRY_STRENGTH, CARRY_MULTIPLIER})


class ChangeRecord(BaseModel):
    """One atomic stat modifier.

    Attributes:
        target: Broad target group ("ability", "ac" or "misc"); None for
            untargeted changes such as carry compensation.
        sub_target: What is modified, e.g. "str", "nac", "carryStr".
        operator: "add" adds to the running total; "set" replaces it.
        modifier: Bonus type ("size", "enh", "untyped", ...).
        priority: Evaluation priority; higher runs first.
        formula: Formula text as the host would display it.
        value: Evaluated numeric value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    target: Literal["ability", "ac", "misc"] | None = Field(default=None)
    sub_target: str = Field(alias="subTarget", min_length=1)
    operator: ChangeOperator = Field(default=ChangeOperator.ADD)
    modifier: str = Field(default="untyped")
    priority: int = Field(default=0)
    formula: str = Field(default="")
    value: float = Field(default=0)

    @model_validator(mode="before")
    @classmethod
    def fill_formula(cls, data: Any) -> Any:
        """Default the formula text to the value when none is given."""
        if isinstance(data, dict) and not data.get("formula") and "value" in data:
            data = {**data, "formula": _format_number(float(data["value"]))}
        return data

    @property
    def is_capacity_term(self) -> bool:
        """Whether this is a carry-compensation change."""
        return self.sub_target in CAPACITY_SUB_TARGETS

    @property
    def ability(self) -> Ability | None:
        """The ability this change modifies, if any."""
        if self.target != "ability":
            return None
        try:
            return Ability(self.sub_target)
        except ValueError:
            return None

    @classmethod
    def ability_change(cls, ability: Ability, value: int, *, modifier: str = "size") -> ChangeRecord:
        """Build an ability score change."""
        return cls(target="ability", sub_target=ability.value, modifier=modifier, value=value)

    @classmethod
    def natural_armor(cls, value: int, *, modifier: str = "enh") -> ChangeRecord:
        """Build a natural armor change."""
        return cls(target="ac", sub_target=NATURAL_ARMOR, modifier=modifier, value=value)


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def strength_delta(changes: list[ChangeRecord]) -> int:
    """Sum the strength adjustments in a change list.

    Args:
        changes: Changes to inspect.

    Returns:
        Net strength change.
    """
    return int(sum(c.value for c in changes if c.ability is Ability.STR))


__all__ = [
    "CARRY_STRENGTH",
    "CARRY_MULTIPLIER",
    "NATURAL_ARMOR",
    "CAPACITY_SUB_TARGETS",
    "ChangeRecord",
    "strength_delta",
]
