"""Transformation applier.

Applying a plan is a short sequence of store writes:

1. activate the effect buff (reusing a same-named buff if the character
   has one, otherwise creating it) with the plan's changes plus fresh
   carry compensation;
2. rescale armor and shields when the size change crosses the tiny
   threshold;
3. create the plan's attack items;
4. write the new size and trait overrides;
5. write the snapshot.

Each completed write registers an undo step. If a later write fails the
undo steps run in reverse and the failure is raised as TransformationError,
so a character is never left half transformed. The snapshot is written
last: once it is stored, the transformation is complete.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

from shapechanger.core.config import Settings, get_settings
from shapechanger.core.constants import ARMOR_SCALE_FACTOR
from shapechanger.core.exceptions import AlreadyTransformedError, TransformationError
from shapechanger.core.logging import bind_context, get_logger
from shapechanger.engine.capacity import capacity_changes, strip_capacity_changes
from shapechanger.engine.size import crosses_tiny_threshold
from shapechanger.models.changes import ChangeRecord, strength_delta
from shapechanger.models.character import BuffItem, CharacterRecord
from shapechanger.models.enums import Size
from shapechanger.models.requests import TransformationPlan
from shapechanger.models.snapshot import ArmorRecord, EffectSnapshot
from shapechanger.storage.store import CharacterStore, get_path


logger = get_logger(__name__)

UndoStep = tuple[str, Callable[[], Awaitable[Any]]]


def _dump_changes(changes: list[ChangeRecord]) -> list[dict[str, Any]]:
    return [change.model_dump(mode="json", by_alias=True) for change in changes]


def rescaled_armor_rating(rating: int, current: Size, target: Size) -> int:
    """Armor rating after a size change.

    Ratings double when growing out of tiny-or-smaller and halve (rounding
    down) when shrinking into it; any other change leaves them alone.
    """
    if not crosses_tiny_threshold(current, target):
        return rating
    if current.is_tiny_or_smaller:
        return rating * ARMOR_SCALE_FACTOR
    return rating // ARMOR_SCALE_FACTOR


def existing_source(actor: CharacterRecord, flag_key: str) -> str | None:
    """Source of the transformation a character carries, if any."""
    flag = actor.flags.get(flag_key)
    if flag is None:
        return None
    if isinstance(flag, dict):
        return str(flag.get("source") or flag_key)
    return flag_key


# =============================================================================
# Apply Steps
# =============================================================================


async def _activate_buff(
    store: CharacterStore,
    actor: CharacterRecord,
    plan: TransformationPlan,
    changes: list[ChangeRecord],
    undo: list[UndoStep],
) -> str:
    buff = actor.find_buff(plan.buff_name)
    if buff is not None:
        previous = {"id": buff.id, "changes": _dump_changes(buff.changes), "active": buff.active}
        await store.update_items(
            actor.id, [{"id": buff.id, "changes": _dump_changes(changes), "active": True}]
        )
        undo.append(("restore buff", partial(store.update_items, actor.id, [previous])))
        logger.debug("Reactivated buff", buff_id=buff.id, buff_name=buff.name)
        return buff.id

    template = BuffItem(name=plan.buff_name, img=plan.buff_img, active=True, changes=changes)
    (created,) = await store.create_items(actor.id, [template])
    undo.append(("delete buff", partial(store.delete_items, actor.id, [created.id])))
    logger.debug("Created buff", buff_id=created.id, buff_name=created.name)
    return created.id


async def _rescale_armor(
    store: CharacterStore,
    actor: CharacterRecord,
    plan: TransformationPlan,
    undo: list[UndoStep],
) -> tuple[ArmorRecord, ...]:
    current = actor.traits.size
    if not crosses_tiny_threshold(current, plan.new_size):
        return ()
    records = tuple(
        ArmorRecord(item_id=item.id, original_armor_rating=item.armor_value)
        for item in actor.armor_items
    )
    if not records:
        return ()
    await store.update_items(
        actor.id,
        [
            {
                "id": record.item_id,
                "armorValue": rescaled_armor_rating(
                    record.original_armor_rating, current, plan.new_size
                ),
            }
            for record in records
        ],
    )
    restore = [{"id": r.item_id, "armorValue": r.original_armor_rating} for r in records]
    undo.append(("restore armor", partial(store.update_items, actor.id, restore)))
    logger.debug("Rescaled armor", item_ids=[r.item_id for r in records])
    return records


async def _create_attacks(
    store: CharacterStore,
    actor: CharacterRecord,
    plan: TransformationPlan,
    undo: list[UndoStep],
) -> tuple[str, ...]:
    if not plan.attacks:
        return ()
    created = await store.create_items(actor.id, list(plan.attacks))
    item_ids = tuple(item.id for item in created)
    undo.append(("delete attacks", partial(store.delete_items, actor.id, list(item_ids))))
    return item_ids


async def _write_overrides(
    store: CharacterStore,
    actor: CharacterRecord,
    plan: TransformationPlan,
    undo: list[UndoStep],
) -> dict[str, Any]:
    document = actor.document()
    original = {path: get_path(document, path) for path in plan.overrides}
    await store.update(actor.id, {"traits.size": plan.new_size.value, **plan.overrides})
    restore = {**original, "traits.size": actor.traits.size.value}
    undo.append(("restore traits", partial(store.update, actor.id, restore)))
    return original


async def _rollback(undo: list[UndoStep]) -> None:
    for label, step in reversed(undo):
        try:
            await step()
        except Exception:
            logger.exception("Undo step failed", step=label)


# =============================================================================
# Entry Point
# =============================================================================


async def apply_transformation(
    store: CharacterStore,
    actor_id: str,
    plan: TransformationPlan,
    *,
    settings: Settings | None = None,
) -> EffectSnapshot:
    """Apply a transformation plan to one character.

    Args:
        store: Character store.
        actor_id: Character to transform.
        plan: Resolved writes for the transformation.
        settings: Settings supplying the snapshot flag key.

    Returns:
        The stored snapshot.

    Raises:
        AlreadyTransformedError: If the character already carries a
            snapshot. Nothing is written.
        TransformationError: If a write fails. Completed writes have been
            undone.
    """
    settings = settings or get_settings()
    actor = await store.get(actor_id)
    bind_context(actor_id=actor.id, source=plan.source)

    source = existing_source(actor, settings.flag_key)
    if source is not None:
        raise AlreadyTransformedError(actor.name, source=source, actor_id=actor.id)

    base = strip_capacity_changes(list(plan.changes))
    changes = base + capacity_changes(actor, plan.new_size, strength_delta(base))
    undo: list[UndoStep] = []
    try:
        await _activate_buff(store, actor, plan, changes, undo)
        armor = await _rescale_armor(store, actor, plan, undo)
        items_created = await _create_attacks(store, actor, plan, undo)
        data = await _write_overrides(store, actor, plan, undo)
        snapshot = EffectSnapshot(
            source=plan.source,
            buff_name=plan.buff_name,
            kind=plan.kind,
            size=actor.traits.size,
            armor=armor,
            data=data,
            items_created=items_created,
        )
        await store.update(actor.id, {f"flags.{settings.flag_key}": snapshot.to_flag()})
    except Exception as exc:
        logger.error("Transformation failed, undoing", error=str(exc), steps=len(undo))
        await _rollback(undo)
        raise TransformationError(
            f"Could not apply {plan.source} to {actor.name}: {exc}",
            actor_id=actor.id,
        ) from exc

    logger.info(
        "Transformation applied",
        kind=plan.kind.value,
        from_size=actor.traits.size.value,
        to_size=plan.new_size.value,
        attacks=len(items_created),
    )
    return snapshot


__all__ = [
    "apply_transformation",
    "rescaled_armor_rating",
    "existing_source",
]
