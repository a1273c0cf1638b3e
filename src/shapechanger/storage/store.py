"""Character store interface and document patch semantics.

The engine never holds a character between steps: it reads a fresh
CharacterRecord, then sends partial patches back. A patch maps dotted
document paths to new values; the DELETE sentinel removes a key.

Example:
    >>> doc = {"traits": {"size": "medium", "dr": ""}, "flags": {}}
    >>> apply_patch(doc, {"traits.size": "small", "flags.shapechanger": DELETE})
    {'traits': {'size': 'small', 'dr': ''}, 'flags': {}}
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from shapechanger.core.exceptions import CharacterNotFoundError, StorageError
from shapechanger.core.logging import get_logger
from shapechanger.models.character import CharacterRecord, Item


logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# Patch Semantics
# =============================================================================


class _Delete:
    """Patch value that removes the key at its path."""

    _instance: _Delete | None = None

    def __new__(cls) -> _Delete:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE"

    def __deepcopy__(self, memo: dict[int, Any]) -> _Delete:
        return self


DELETE = _Delete()

_MISSING = object()


def get_path(document: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read the value at a dotted path, or ``default`` if any segment is absent."""
    node: Any = document
    for key in path.split("."):
        if not isinstance(node, Mapping) or key not in node:
            return default
        node = node[key]
    return node


def has_path(document: Mapping[str, Any], path: str) -> bool:
    """Whether a dotted path exists in the document."""
    return get_path(document, path, _MISSING) is not _MISSING


def apply_patch(document: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``document`` with ``patch`` merged in.

    Intermediate mappings are created as needed. Deleting an absent key is
    a no-op.

    Raises:
        StorageError: If a path runs through a non-mapping value.
    """
    result = copy.deepcopy(dict(document))
    for path, value in patch.items():
        *parents, leaf = path.split(".")
        node = result
        for key in parents:
            child = node.setdefault(key, {})
            if not isinstance(child, dict):
                raise StorageError(
                    f"Cannot patch {path!r}: {key!r} is not a mapping",
                    details={"path": path},
                )
            node = child
        if value is DELETE:
            node.pop(leaf, None)
        else:
            node[leaf] = copy.deepcopy(value)
    return result


# =============================================================================
# Store Interface
# =============================================================================


@runtime_checkable
class CharacterStore(Protocol):
    """Async persistence collaborator for character documents.

    Every call may suspend until the backend acknowledges the write.
    """

    async def get(self, actor_id: str) -> CharacterRecord:
        """Load a character.

        Raises:
            CharacterNotFoundError: If the id is unknown.
        """
        ...

    async def update(self, actor_id: str, patch: Mapping[str, Any]) -> CharacterRecord:
        """Merge a dotted-path patch into a character and return the result."""
        ...

    async def create_items(self, actor_id: str, items: Sequence[Item]) -> list[Item]:
        """Embed new items and return them with their assigned ids."""
        ...

    async def update_items(self, actor_id: str, updates: Sequence[Mapping[str, Any]]) -> None:
        """Merge field updates into items; each update carries the item ``id``."""
        ...

    async def delete_items(self, actor_id: str, item_ids: Sequence[str]) -> None:
        """Remove items by id."""
        ...


class DocumentCharacterStore(ABC):
    """CharacterStore over whole JSON documents.

    Subclasses only load and save a document; patching, item edits and
    validation are shared here. Every write is validated as a full
    CharacterRecord before it is saved.

    Each operation runs as one synchronous read-modify-write through
    ``_run``. Stores backed by blocking I/O override ``_run`` to move that
    work off the event loop.
    """

    @abstractmethod
    def _load(self, actor_id: str) -> dict[str, Any] | None:
        """Read the stored document, or None if absent."""

    @abstractmethod
    def _save(self, actor_id: str, document: dict[str, Any]) -> None:
        """Persist a validated document."""

    async def _run(self, func: Callable[..., T], /, *args: Any) -> T:
        return func(*args)

    def _require(self, actor_id: str) -> dict[str, Any]:
        document = self._load(actor_id)
        if document is None:
            raise CharacterNotFoundError(actor_id)
        return document

    def _commit(self, actor_id: str, document: dict[str, Any]) -> CharacterRecord:
        try:
            record = CharacterRecord.model_validate(document)
        except PydanticValidationError as exc:
            raise StorageError(
                f"Write would leave character {actor_id} invalid",
                details={"actor_id": actor_id, "errors": exc.errors(include_url=False)},
            ) from exc
        self._save(actor_id, record.document())
        return record

    async def get(self, actor_id: str) -> CharacterRecord:
        return await self._run(self._get, actor_id)

    async def update(self, actor_id: str, patch: Mapping[str, Any]) -> CharacterRecord:
        return await self._run(self._update, actor_id, patch)

    async def create_items(self, actor_id: str, items: Sequence[Item]) -> list[Item]:
        return await self._run(self._create_items, actor_id, items)

    async def update_items(self, actor_id: str, updates: Sequence[Mapping[str, Any]]) -> None:
        await self._run(self._update_items, actor_id, updates)

    async def delete_items(self, actor_id: str, item_ids: Sequence[str]) -> None:
        await self._run(self._delete_items, actor_id, item_ids)

    # =========================================================================
    # Operation Bodies
    # =========================================================================

    def _get(self, actor_id: str) -> CharacterRecord:
        return CharacterRecord.model_validate(self._require(actor_id))

    def _update(self, actor_id: str, patch: Mapping[str, Any]) -> CharacterRecord:
        document = apply_patch(self._require(actor_id), patch)
        logger.debug("Patched character", actor_id=actor_id, paths=sorted(patch))
        return self._commit(actor_id, document)

    def _create_items(self, actor_id: str, items: Sequence[Item]) -> list[Item]:
        document = self._require(actor_id)
        created: list[Item] = []
        for item in items:
            stored = item.model_copy(update={"id": item.id or uuid4().hex})
            document.setdefault("items", []).append(stored.model_dump(mode="json", by_alias=True))
            created.append(stored)
        self._commit(actor_id, document)
        logger.debug("Created items", actor_id=actor_id, item_ids=[i.id for i in created])
        return created

    def _update_items(self, actor_id: str, updates: Sequence[Mapping[str, Any]]) -> None:
        document = self._require(actor_id)
        items = {item["id"]: item for item in document.get("items", [])}
        for update in updates:
            item_id = update.get("id")
            if item_id not in items:
                raise StorageError(
                    f"Item {item_id!r} not found on character {actor_id}",
                    details={"actor_id": actor_id, "item_id": item_id},
                )
            items[item_id].update({k: copy.deepcopy(v) for k, v in update.items() if k != "id"})
        self._commit(actor_id, document)

    def _delete_items(self, actor_id: str, item_ids: Sequence[str]) -> None:
        document = self._require(actor_id)
        present = {item["id"] for item in document.get("items", [])}
        missing = [item_id for item_id in item_ids if item_id not in present]
        if missing:
            raise StorageError(
                f"Items not found on character {actor_id}: {missing}",
                details={"actor_id": actor_id, "item_ids": missing},
            )
        doomed = set(item_ids)
        document["items"] = [i for i in document.get("items", []) if i["id"] not in doomed]
        self._commit(actor_id, document)
        logger.debug("Deleted items", actor_id=actor_id, item_ids=list(item_ids))


class InMemoryCharacterStore(DocumentCharacterStore):
    """Dictionary-backed store for tests and embedding."""

    def __init__(self, records: Sequence[CharacterRecord] = ()) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        for record in records:
            self.add(record)

    def add(self, record: CharacterRecord) -> None:
        """Insert or replace a character."""
        self._documents[record.id] = record.document()

    def document(self, actor_id: str) -> dict[str, Any]:
        """A copy of the raw stored document."""
        return copy.deepcopy(self._require(actor_id))

    def _load(self, actor_id: str) -> dict[str, Any] | None:
        document = self._documents.get(actor_id)
        return copy.deepcopy(document) if document is not None else None

    def _save(self, actor_id: str, document: dict[str, Any]) -> None:
        self._documents[actor_id] = copy.deepcopy(document)


__all__ = [
    "DELETE",
    "get_path",
    "has_path",
    "apply_patch",
    "CharacterStore",
    "DocumentCharacterStore",
    "InMemoryCharacterStore",
]
