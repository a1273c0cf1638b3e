"""Token image lookup for polymorph forms.

A form named "Dire Bat" matches an image file ``DireBat.<ext>`` in the
configured folder, for any accepted image extension.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol, runtime_checkable

from shapechanger.core.config import ImageSettings
from shapechanger.core.exceptions import ImageLookupError
from shapechanger.core.logging import get_logger


logger = get_logger(__name__)

_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def sanitize_form_name(form_name: str) -> str:
    """Strip everything but ASCII letters and digits."""
    return _UNSAFE.sub("", form_name)


@runtime_checkable
class ImageLookup(Protocol):
    """Finds a token image for a form."""

    def find_image(self, form_name: str) -> str:
        """Path of a matching image, or "" when there is none.

        Raises:
            ImageLookupError: If the image source cannot be browsed.
        """
        ...


class FolderImageLookup:
    """Looks up images in a local folder.

    Attributes:
        directory: Folder to search; None disables lookup.
        extensions: Accepted extensions, lowercase without dots.
    """

    def __init__(self, directory: Path | None, extensions: tuple[str, ...]) -> None:
        self.directory = directory
        self.extensions = extensions

    @classmethod
    def from_settings(cls, settings: ImageSettings) -> FolderImageLookup:
        return cls(settings.image_path, settings.extensions)

    def find_image(self, form_name: str) -> str:
        if self.directory is None:
            return ""
        wanted = {f"{sanitize_form_name(form_name)}.{ext}" for ext in self.extensions}
        try:
            entries = sorted(self.directory.iterdir())
        except OSError as exc:
            raise ImageLookupError(
                f"Cannot browse image folder: {exc}",
                directory=str(self.directory),
            ) from exc
        for entry in entries:
            if entry.name in wanted:
                logger.debug("Found form image", form=form_name, path=str(entry))
                return str(entry)
        return ""


__all__ = [
    "ImageLookup",
    "FolderImageLookup",
    "sanitize_form_name",
]
