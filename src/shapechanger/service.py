"""Service facade: one entry point per transformation plus revert.

The service owns the user-facing edges the engine leaves out: it picks the
single selected character, turns expected refusals into warnings, and
reports success through the notifier. Persistence failures and catalog
errors propagate to the caller.

Example:
    >>> service = ShapechangerService(store, selection=lambda: [actor])
    >>> result = await service.beast_shape(2, "Wolf")
    >>> result.success
    True
    >>> await service.revert()
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, TypeAdapter

from shapechanger.catalog.forms import get_form
from shapechanger.core.config import Settings, get_settings
from shapechanger.core.exceptions import (
    AlreadyTransformedError,
    CatalogError,
    ImageLookupError,
    NotTransformedError,
    SelectionError,
)
from shapechanger.core.i18n import DictLocalizer, Localizer
from shapechanger.core.logging import clear_context, get_logger
from shapechanger.engine.applier import apply_transformation, existing_source
from shapechanger.engine.buffs import buff_plan
from shapechanger.engine.polymorph import polymorph_plan
from shapechanger.engine.resolver import filter_catalog
from shapechanger.engine.revert import revert as revert_transformation
from shapechanger.models.character import CharacterRecord
from shapechanger.models.enums import SpellKind
from shapechanger.models.forms import FormDefinition
from shapechanger.models.requests import (
    FrightfulAspectRequest,
    PolymorphRequest,
    SizeBuffRequest,
    TransformationPlan,
    TransformationRequest,
)
from shapechanger.models.snapshot import EffectSnapshot
from shapechanger.storage.images import FolderImageLookup, ImageLookup
from shapechanger.storage.store import CharacterStore


logger = get_logger(__name__)

Selection = Callable[[], Sequence[CharacterRecord]]
"""Returns the characters the invoking user owns and has selected."""

_REQUEST_ADAPTER: TypeAdapter[TransformationRequest] = TypeAdapter(TransformationRequest)


# =============================================================================
# Collaborators & Results
# =============================================================================


@runtime_checkable
class Notifier(Protocol):
    """User-visible message sink."""

    def warn(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class LogNotifier:
    """Notifier that writes user messages to the application log."""

    def warn(self, message: str) -> None:
        logger.warning("User warning", message=message)

    def info(self, message: str) -> None:
        logger.info("User notice", message=message)


class OperationResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        success: Whether the character was changed.
        message: The message shown to the user.
        actor_id: Character operated on, when one was selected.
        snapshot: Snapshot written by apply or removed by revert.
        preview_text: Preview of the applied effect.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    actor_id: str | None = None
    snapshot: EffectSnapshot | None = None
    preview_text: str = ""


def select_single_actor(
    selection: Selection,
    localizer: Localizer | None = None,
) -> CharacterRecord:
    """The one selected character.

    Raises:
        SelectionError: If zero or several characters are selected.
    """
    localizer = localizer or DictLocalizer()
    selected = list(selection())
    if not selected:
        raise SelectionError(localizer.localize("Warn.NoSelection"), selected_count=0)
    if len(selected) > 1:
        raise SelectionError(
            localizer.localize("Warn.TooManySelected"),
            selected_count=len(selected),
        )
    return selected[0]


# =============================================================================
# Service
# =============================================================================


class ShapechangerService:
    """Apply and revert transformations on the selected character.

    Attributes:
        store: Character store.
        selection: Selected-character source.
        notifier: User message sink.
        localizer: Display text lookup.
        image_lookup: Token image finder for polymorph forms.
        settings: Application settings.
    """

    def __init__(
        self,
        store: CharacterStore,
        selection: Selection,
        *,
        notifier: Notifier | None = None,
        localizer: Localizer | None = None,
        image_lookup: ImageLookup | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.selection = selection
        self.settings = settings or get_settings()
        self.notifier = notifier or LogNotifier()
        self.localizer = localizer or DictLocalizer()
        self.image_lookup = image_lookup or FolderImageLookup.from_settings(self.settings.images)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def available_forms(self, kind: SpellKind, level: int) -> list[FormDefinition]:
        """Forms a polymorph spell level may choose from, sorted by name."""
        return filter_catalog(kind, level)

    def _find_image(self, form_name: str) -> str:
        try:
            return self.image_lookup.find_image(form_name)
        except ImageLookupError as exc:
            logger.warning("Image lookup failed", form=form_name, error=exc.message)
            self.notifier.warn(self.localizer.localize("Warn.ImagePermission"))
            return ""

    def plan(self, actor: CharacterRecord, request: TransformationRequest) -> TransformationPlan:
        """Build the plan a request resolves to for ``actor``.

        Raises:
            CatalogError: If the form is unknown or not available at the
                requested level.
        """
        if isinstance(request, PolymorphRequest):
            form = get_form(request.form_name)
            if form not in filter_catalog(request.kind, request.level):
                raise CatalogError(
                    f"{form.name} is not available to {request.kind.display_name} "
                    f"at level {request.level}",
                    field_name="form_name",
                    invalid_value=form.name,
                )
            return polymorph_plan(
                actor,
                form,
                request.kind,
                request.level,
                source=request.source,
                image=self._find_image(form.name),
                localizer=self.localizer,
                settings=self.settings,
            )
        caster_level = request.caster_level if isinstance(request, FrightfulAspectRequest) else None
        return buff_plan(
            actor,
            request.kind,
            caster_level=caster_level,
            source=request.source,
            localizer=self.localizer,
        )

    # -------------------------------------------------------------------------
    # Apply & Revert
    # -------------------------------------------------------------------------

    def _refuse(self, message: str, actor_id: str | None = None) -> OperationResult:
        self.notifier.warn(message)
        return OperationResult(success=False, message=message, actor_id=actor_id)

    async def transform(self, request: TransformationRequest | dict) -> OperationResult:
        """Apply a transformation to the selected character.

        Args:
            request: A request model, or its plain-data form.

        Returns:
            The outcome; refusals carry ``success=False``.
        """
        if isinstance(request, dict):
            request = _REQUEST_ADAPTER.validate_python(request)
        try:
            selected = select_single_actor(self.selection, self.localizer)
        except SelectionError as exc:
            return self._refuse(exc.message)

        try:
            actor = await self.store.get(selected.id)
            source = existing_source(actor, self.settings.flag_key)
            if source is not None:
                raise AlreadyTransformedError(actor.name, source=source, actor_id=actor.id)
            plan = self.plan(actor, request)
            snapshot = await apply_transformation(
                self.store, actor.id, plan, settings=self.settings
            )
        except AlreadyTransformedError as exc:
            return self._refuse(
                self.localizer.localize(
                    "Warn.AlreadyTransformed", name=exc.actor_name, source=exc.source
                ),
                selected.id,
            )
        finally:
            clear_context()

        message = self.localizer.localize("Info.Applied", name=actor.name, source=plan.source)
        self.notifier.info(message)
        return OperationResult(
            success=True,
            message=message,
            actor_id=actor.id,
            snapshot=snapshot,
            preview_text=plan.preview_text,
        )

    async def revert(self) -> OperationResult:
        """Revert the selected character's transformation."""
        try:
            selected = select_single_actor(self.selection, self.localizer)
        except SelectionError as exc:
            return self._refuse(exc.message)

        try:
            snapshot = await revert_transformation(self.store, selected.id, settings=self.settings)
        except NotTransformedError as exc:
            return self._refuse(
                self.localizer.localize("Warn.NotTransformed", name=exc.actor_name),
                selected.id,
            )
        finally:
            clear_context()

        message = self.localizer.localize("Info.Reverted", name=selected.name)
        self.notifier.info(message)
        return OperationResult(
            success=True, message=message, actor_id=selected.id, snapshot=snapshot
        )

    # -------------------------------------------------------------------------
    # Per-kind entry points
    # -------------------------------------------------------------------------

    async def beast_shape(
        self, level: int, form_name: str, *, source: str | None = None
    ) -> OperationResult:
        return await self.transform(
            PolymorphRequest(
                kind=SpellKind.BEAST_SHAPE, level=level, form_name=form_name, source=source
            )
        )

    async def elemental_body(
        self, level: int, form_name: str, *, source: str | None = None
    ) -> OperationResult:
        return await self.transform(
            PolymorphRequest(
                kind=SpellKind.ELEMENTAL_BODY, level=level, form_name=form_name, source=source
            )
        )

    async def plant_shape(
        self, level: int, form_name: str, *, source: str | None = None
    ) -> OperationResult:
        return await self.transform(
            PolymorphRequest(
                kind=SpellKind.PLANT_SHAPE, level=level, form_name=form_name, source=source
            )
        )

    async def enlarge_person(self, *, source: str | None = None) -> OperationResult:
        return await self.transform(SizeBuffRequest(kind=SpellKind.ENLARGE_PERSON, source=source))

    async def reduce_person(self, *, source: str | None = None) -> OperationResult:
        return await self.transform(SizeBuffRequest(kind=SpellKind.REDUCE_PERSON, source=source))

    async def animal_growth(self, *, source: str | None = None) -> OperationResult:
        return await self.transform(SizeBuffRequest(kind=SpellKind.ANIMAL_GROWTH, source=source))

    async def legendary_proportions(self, *, source: str | None = None) -> OperationResult:
        return await self.transform(
            SizeBuffRequest(kind=SpellKind.LEGENDARY_PROPORTIONS, source=source)
        )

    async def frightful_aspect(
        self, caster_level: int, *, source: str | None = None
    ) -> OperationResult:
        return await self.transform(
            FrightfulAspectRequest(caster_level=caster_level, source=source)
        )


__all__ = [
    "Selection",
    "Notifier",
    "LogNotifier",
    "OperationResult",
    "select_single_actor",
    "ShapechangerService",
]
