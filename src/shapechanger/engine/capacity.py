"""Carry capacity compensation for size-changing effects.

A size change alters both strength and the size encumbrance multiplier,
which would shift the character's encumbrance. Two extra changes cancel
that out:

* ``carryStr`` = user carry bonus - strength delta, so strength used for
  carrying stays where it was;
* ``carryMult`` = M x factor(current) / factor(new) - M, where M is the
  current carry multiplier total, so the size factor is neutralized.

The pair is recomputed from the character every time an effect is built
or rebuilt and is never cached on the buff.
"""

from __future__ import annotations

from shapechanger.core.logging import get_logger
from shapechanger.models.changes import CARRY_MULTIPLIER, CARRY_STRENGTH, ChangeRecord
from shapechanger.models.character import CharacterRecord
from shapechanger.models.enums import Size


logger = get_logger(__name__)


def capacity_changes(
    actor: CharacterRecord,
    new_size: Size,
    strength_delta: int,
) -> list[ChangeRecord]:
    """Build the carry compensation changes for a size change.

    Args:
        actor: Character before the effect is applied.
        new_size: Size the character is changing to.
        strength_delta: Net strength the effect grants (negative for loss).

    Returns:
        A ``carryStr`` change followed by a ``carryMult`` change, both
        untyped, priority 0 additions.
    """
    current = actor.traits.size
    multiplier = actor.carry_multiplier
    bonus_change = actor.carry.bonus_user - strength_delta
    mult_change = (
        multiplier * current.encumbrance_multiplier / new_size.encumbrance_multiplier - multiplier
    )
    logger.debug(
        "Computed capacity compensation",
        actor_id=actor.id,
        from_size=current.value,
        to_size=new_size.value,
        carry_strength=bonus_change,
        carry_multiplier=mult_change,
    )
    return [
        ChangeRecord(sub_target=CARRY_STRENGTH, modifier="untyped", value=bonus_change),
        ChangeRecord(sub_target=CARRY_MULTIPLIER, modifier="untyped", value=mult_change),
    ]


def strip_capacity_changes(changes: list[ChangeRecord]) -> list[ChangeRecord]:
    """Drop carry compensation terms from a change list, keeping order."""
    return [change for change in changes if not change.is_capacity_term]


__all__ = [
    "capacity_changes",
    "strip_capacity_changes",
]
