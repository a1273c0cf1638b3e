"""Revert a character to its pre-transformation state.

The snapshot drives everything. Writes happen in this order:

1. armor and shield ratings recorded in the snapshot;
2. overwritten document paths and the original size, as one patch;
3. polymorph effects only: items the transformation created;
4. the effect buff is deactivated (kept, not deleted);
5. the snapshot itself is deleted.

Items the user has deleted since the transformation are skipped. Because
the snapshot goes last, an interrupted revert can simply be run again.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from shapechanger.core.config import Settings, get_settings
from shapechanger.core.exceptions import NotTransformedError, StorageError
from shapechanger.core.logging import bind_context, get_logger
from shapechanger.models.character import CharacterRecord
from shapechanger.models.enums import EffectCategory
from shapechanger.models.snapshot import EffectSnapshot
from shapechanger.storage.store import DELETE, CharacterStore


logger = get_logger(__name__)


def read_snapshot(actor: CharacterRecord, flag_key: str) -> EffectSnapshot | None:
    """The snapshot a character carries, or None.

    Raises:
        StorageError: If the flag holds something that is not a snapshot.
    """
    raw = actor.flags.get(flag_key)
    if raw is None:
        return None
    try:
        return EffectSnapshot.model_validate(raw)
    except PydanticValidationError as exc:
        raise StorageError(
            f"Corrupt transformation snapshot on {actor.name}",
            details={"actor_id": actor.id, "flag_key": flag_key},
        ) from exc


async def revert(
    store: CharacterStore,
    actor_id: str,
    *,
    settings: Settings | None = None,
) -> EffectSnapshot:
    """Undo the transformation a character carries.

    Args:
        store: Character store.
        actor_id: Character to revert.
        settings: Settings supplying the snapshot flag key.

    Returns:
        The snapshot that was reverted.

    Raises:
        NotTransformedError: If the character carries no snapshot.
    """
    settings = settings or get_settings()
    actor = await store.get(actor_id)
    snapshot = read_snapshot(actor, settings.flag_key)
    if snapshot is None:
        raise NotTransformedError(actor.name, actor_id=actor.id)
    bind_context(actor_id=actor.id, source=snapshot.source)

    present = {item.id for item in actor.items}

    armor = [record for record in snapshot.armor if record.item_id in present]
    if len(armor) < len(snapshot.armor):
        logger.warning(
            "Skipping armor deleted since transformation",
            item_ids=[r.item_id for r in snapshot.armor if r.item_id not in present],
        )
    if armor:
        await store.update_items(
            actor.id,
            [{"id": r.item_id, "armorValue": r.original_armor_rating} for r in armor],
        )

    await store.update(actor.id, {**snapshot.data, "traits.size": snapshot.size.value})

    if snapshot.category is EffectCategory.POLYMORPH:
        doomed = [item_id for item_id in snapshot.items_created if item_id in present]
        if doomed:
            await store.delete_items(actor.id, doomed)

    buff = actor.find_buff(snapshot.buff_name)
    if buff is not None and buff.active:
        await store.update_items(actor.id, [{"id": buff.id, "active": False}])

    await store.update(actor.id, {f"flags.{settings.flag_key}": DELETE})
    logger.info("Transformation reverted", kind=snapshot.kind.value, size=snapshot.size.value)
    return snapshot


__all__ = [
    "read_snapshot",
    "revert",
]
