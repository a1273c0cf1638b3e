"""Size stepping along the size scale."""

from __future__ import annotations

from shapechanger.models.enums import Size


def new_size(current: Size, steps: int) -> Size:
    """Move ``steps`` categories along the size scale.

    The result is clamped to fine..colossal; this never raises.

    Example:
        >>> new_size(Size.MEDIUM, -1)
        <Size.SMALL: 'small'>
        >>> new_size(Size.HUGE, 10)
        <Size.COLOSSAL: 'colossal'>
    """
    return Size.from_index(current.index + steps)


def crosses_tiny_threshold(current: Size, target: Size) -> bool:
    """Whether a size change moves into or out of tiny-or-smaller."""
    return current.is_tiny_or_smaller != target.is_tiny_or_smaller


__all__ = [
    "new_size",
    "crosses_tiny_threshold",
]
