"""Storage collaborators for shapechanger.

Provides:
- The async CharacterStore interface and dotted-path patch semantics
- In-memory and SQLite-backed character stores
- Token image lookup in a local folder
"""

from shapechanger.storage.database import CharacterRow, SQLiteCharacterStore, get_character_store
from shapechanger.storage.images import FolderImageLookup, ImageLookup, sanitize_form_name
from shapechanger.storage.store import (
    DELETE,
    CharacterStore,
    DocumentCharacterStore,
    InMemoryCharacterStore,
    apply_patch,
    get_path,
    has_path,
)

__all__ = [
    "DELETE",
    "apply_patch",
    "get_path",
    "has_path",
    "CharacterStore",
    "DocumentCharacterStore",
    "InMemoryCharacterStore",
    "CharacterRow",
    "SQLiteCharacterStore",
    "get_character_store",
    "ImageLookup",
    "FolderImageLookup",
    "sanitize_form_name",
]
