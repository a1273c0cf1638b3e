"""Size-scaled natural attack damage.

Attack damage is written as a ``sizeRoll`` formula the host evaluates at
roll time against the character's current size, so the same attack deals
more damage if the character grows further. ``size_roll`` evaluates the
same expression locally for previews and tests.

Example:
    >>> size_roll_formula(1, 6, Size.LARGE)
    'sizeRoll(1, 6, @size, 5)'
    >>> size_roll(1, 6, to_index=6, from_index=5)
    '1d8'
"""

from __future__ import annotations

from shapechanger.core.constants import (
    DAMAGE_DIE_ALIASES,
    DAMAGE_DIE_PROGRESSION,
    MEDIUM_SIZE_INDEX,
)
from shapechanger.models.enums import Size


def _average(dice: str) -> float:
    if "d" not in dice:
        return float(dice)
    count, size = dice.split("d")
    return int(count) * (int(size) + 1) / 2


def _slot(dice: str) -> int:
    """Position of ``dice`` on the progression.

    Dice that are neither on the progression nor aliased take the slot with
    the closest average roll.
    """
    dice = DAMAGE_DIE_ALIASES.get(dice, dice)
    if dice in DAMAGE_DIE_PROGRESSION:
        return DAMAGE_DIE_PROGRESSION.index(dice)
    target = _average(dice)
    return min(
        range(len(DAMAGE_DIE_PROGRESSION)),
        key=lambda i: abs(_average(DAMAGE_DIE_PROGRESSION[i]) - target),
    )


def size_roll(
    count: int,
    size: int,
    to_index: int,
    from_index: int = MEDIUM_SIZE_INDEX,
) -> str:
    """Scale ``count``d``size`` from one size category to another.

    Each size category moves the dice one slot along the damage-die
    progression. The result is clamped to the ends of the progression.

    Args:
        count: Number of dice.
        size: Die size.
        to_index: Size index the attack is made at.
        from_index: Size index the dice are quoted at.

    Returns:
        The scaled dice expression, e.g. "2d6".
    """
    if count <= 0 or size <= 0:
        return "0"
    slot = _slot(f"{count}d{size}") + (to_index - from_index)
    slot = max(0, min(slot, len(DAMAGE_DIE_PROGRESSION) - 1))
    return DAMAGE_DIE_PROGRESSION[slot]


def size_roll_formula(count: int, size: int, form_size: Size) -> str:
    """Host formula scaling dice quoted at ``form_size`` to the current size."""
    return f"sizeRoll({count}, {size}, @size, {form_size.index})"


__all__ = [
    "size_roll",
    "size_roll_formula",
]
