"""The static form catalog.

Forms are declared as plain data and validated once at import through
``load_forms``, so an unknown special-ability tag or a malformed entry
fails loudly at load time instead of at render time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from shapechanger.catalog.gating import gating_for
from shapechanger.core.exceptions import CatalogError, ShapechangerError
from shapechanger.core.logging import get_logger
from shapechanger.models.enums import FormFamily, SpellKind
from shapechanger.models.forms import FormDefinition


logger = get_logger(__name__)


def _attack(name: str, dice: str = "", *special: str, **extra: Any) -> dict[str, Any]:
    """Attack descriptor data from compact notation, e.g. ``_attack("Claw", "1d4", count=2)``."""
    data: dict[str, Any] = {"name": name, "special": list(special), **extra}
    if dice:
        count, size = dice.split("d")
        data["dice_count"] = int(count)
        data["dice_size"] = int(size)
    return data


def _sense(kind: str, range_: int | None = None) -> dict[str, Any]:
    return {"kind": kind, "range": range_}


_LOW_LIGHT = _sense("low_light_vision")
_SCENT = _sense("scent")
_DARKVISION_60 = _sense("darkvision", 60)

# Elemental and plant traits common to a whole family
_ELEMENTAL_IMMUNITIES = [
    "bleed",
    "critical_hits",
    "flanking",
    "paralysis",
    "poison",
    "sleep",
    "sneak_attacks",
    "stun",
]
_PLANT_IMMUNITIES = ["critical_hits", "paralysis", "poison", "polymorph", "sleep", "stun"]


# =============================================================================
# Animals
# =============================================================================


_ANIMALS: list[dict[str, Any]] = [
    {
        "name": "Bat",
        "size": "diminutive",
        "speed": {"land": 5, "fly": 40, "maneuverability": "good"},
        "attacks": [_attack("Bite", "1d3")],
        "senses": [_sense("blindsense", 20), _LOW_LIGHT],
    },
    {
        "name": "Rat",
        "size": "tiny",
        "speed": {"land": 15, "climb": 15, "swim": 15},
        "attacks": [_attack("Bite", "1d3")],
        "senses": [_LOW_LIGHT, _SCENT],
    },
    {
        "name": "Eagle",
        "size": "small",
        "speed": {"land": 10, "fly": 80},
        "attacks": [_attack("Talons", "1d4", count=2), _attack("Bite", "1d4")],
        "senses": [_LOW_LIGHT],
    },
    {
        "name": "Wolf",
        "size": "medium",
        "speed": {"land": 50},
        "attacks": [_attack("Bite", "1d6", "trip")],
        "senses": [_LOW_LIGHT, _SCENT],
    },
    {
        "name": "Leopard",
        "size": "medium",
        "speed": {"land": 30, "climb": 20},
        "attacks": [_attack("Bite", "1d6", "grab"), _attack("Claw", "1d3", count=2)],
        "special_attacks": [_attack("Rake", "1d3", "rake", count=2)],
        "senses": [_LOW_LIGHT, _SCENT],
        "special": ["pounce"],
    },
    {
        "name": "Crocodile",
        "size": "large",
        "speed": {"land": 20, "swim": 30},
        "attacks": [_attack("Bite", "1d8", "grab"), _attack("Tail Slap", "1d12")],
        "senses": [_LOW_LIGHT],
    },
    {
        "name": "Dire Bat",
        "size": "large",
        "speed": {"land": 20, "fly": 40, "maneuverability": "good"},
        "attacks": [_attack("Bite", "1d8")],
        "senses": [_sense("blindsense", 40)],
    },
    {
        "name": "Giant Octopus",
        "size": "large",
        "speed": {"land": 20, "swim": 30},
        "attacks": [
            _attack("Bite", "1d8", "poison"),
            _attack("Tentacle", "1d4", "grab", count=8),
        ],
        "special_attacks": [_attack("Constrict", "1d4", "constrict")],
        "senses": [_LOW_LIGHT],
        "special": ["jet 200ft"],
    },
    {
        "name": "Elephant",
        "size": "huge",
        "speed": {"land": 40},
        "attacks": [_attack("Gore", "2d8"), _attack("Slam", "2d6")],
        "special_attacks": [_attack("Trample", "2d8", "trample", attack_type="save")],
        "senses": [_LOW_LIGHT, _SCENT],
    },
]


# =============================================================================
# Magical Beasts
# =============================================================================


_MAGICAL_BEASTS: list[dict[str, Any]] = [
    {
        "name": "Cockatrice",
        "size": "small",
        "speed": {"land": 20, "fly": 60, "maneuverability": "poor"},
        "attacks": [_attack("Bite", "1d4")],
        "senses": [_DARKVISION_60, _LOW_LIGHT],
    },
    {
        "name": "Blink Dog",
        "size": "medium",
        "speed": {"land": 40},
        "attacks": [_attack("Bite", "1d6")],
        "senses": [_DARKVISION_60, _LOW_LIGHT, _SCENT],
    },
    {
        "name": "Griffon",
        "size": "large",
        "speed": {"land": 30, "fly": 80},
        "attacks": [_attack("Bite", "1d6"), _attack("Talons", "1d6", count=2)],
        "special_attacks": [_attack("Rake", "1d6", "rake", count=2)],
        "senses": [_DARKVISION_60, _LOW_LIGHT, _SCENT],
        "special": ["pounce"],
    },
    {
        "name": "Owlbear",
        "size": "large",
        "speed": {"land": 30},
        "attacks": [_attack("Bite", "1d6"), _attack("Claw", "1d6", "grab", count=2)],
        "senses": [_DARKVISION_60, _LOW_LIGHT, _SCENT],
    },
    {
        "name": "Winter Wolf",
        "size": "large",
        "speed": {"land": 50},
        "attacks": [
            _attack(
                "Bite",
                "1d8",
                "trip",
                non_crit={"formula": "1d6", "types": ["cold"]},
            )
        ],
        "special_attacks": [
            _attack(
                "Breath Weapon",
                "",
                "breath weapon",
                attack_type="save",
                non_crit={"formula": "6d6", "types": ["cold"]},
                range=15,
            )
        ],
        "senses": [_DARKVISION_60, _LOW_LIGHT, _SCENT],
        "vulnerabilities": ["fire"],
        "damage_immunities": ["cold"],
    },
]


# =============================================================================
# Elementals
# =============================================================================


def _elemental(
    element: str,
    size: str,
    speed: dict[str, Any],
    slam: str,
    slams: int = 1,
    *,
    slam_special: tuple[str, ...] = (),
    special: tuple[str, ...] = (),
    **extra: Any,
) -> dict[str, Any]:
    large = size in ("large", "huge")
    data: dict[str, Any] = {
        "name": f"{size.capitalize()} {element.capitalize()} Elemental",
        "family": element,
        "size": size,
        "speed": speed,
        "attacks": [_attack("Slam", slam, *slam_special, count=slams)],
        "senses": [_DARKVISION_60],
        "special": list(special),
        "damage_immunities": list(_ELEMENTAL_IMMUNITIES),
        "damage_reduction": [{"amount": 5, "bypass": "-"}] if large else [],
    }
    for key, value in extra.items():
        data[key] = data.get(key, []) + value if isinstance(value, list) else value
    return data


def _air(size: str, slam: str, slams: int = 1) -> dict[str, Any]:
    return _elemental(
        "air",
        size,
        {"land": 0, "fly": 100, "maneuverability": "perfect"},
        slam,
        slams,
        special=("air mastery", "whirlwind"),
    )


def _earth(size: str, slam: str, slams: int = 1) -> dict[str, Any]:
    return _elemental(
        "earth",
        size,
        {"land": 20, "burrow": 20},
        slam,
        slams,
        special=("earth glide", "earth mastery"),
    )


def _fire(size: str, slam: str, slams: int = 1) -> dict[str, Any]:
    return _elemental(
        "fire",
        size,
        {"land": 50},
        slam,
        slams,
        slam_special=("burn",),
        damage_immunities=["fire"],
        vulnerabilities=["cold"],
    )


def _water(size: str, slam: str, slams: int = 1) -> dict[str, Any]:
    return _elemental(
        "water",
        size,
        {"land": 20, "swim": 90},
        slam,
        slams,
        special=("drench", "vortex", "water mastery"),
    )


_ELEMENTALS: list[dict[str, Any]] = [
    _air("small", "1d4"),
    _air("medium", "1d6"),
    _air("large", "1d8", 2),
    _air("huge", "2d6", 2),
    _earth("small", "1d6"),
    _earth("medium", "1d8"),
    _earth("large", "2d6", 2),
    _earth("huge", "2d8", 2),
    _fire("small", "1d4"),
    _fire("medium", "1d6"),
    _fire("large", "1d8", 2),
    _fire("huge", "2d6", 2),
    _water("small", "1d6"),
    _water("medium", "1d8"),
    _water("large", "2d6", 2),
    _water("huge", "2d8", 2),
]


# =============================================================================
# Plants
# =============================================================================


_PLANTS: list[dict[str, Any]] = [
    {
        "name": "Mandragora",
        "size": "small",
        "speed": {"land": 20, "climb": 20},
        "attacks": [_attack("Bite", "1d4", "poison"), _attack("Slam", "1d4", count=2)],
        "senses": [_DARKVISION_60, _LOW_LIGHT],
    },
    {
        "name": "Twig Blight",
        "size": "small",
        "speed": {"land": 30},
        "attacks": [_attack("Claw", "1d4", count=2)],
        "senses": [_LOW_LIGHT],
        "vulnerabilities": ["fire"],
    },
    {
        "name": "Myceloid",
        "size": "medium",
        "speed": {"land": 20},
        "attacks": [_attack("Slam", "1d6")],
        "senses": [_LOW_LIGHT],
    },
    {
        "name": "Assassin Vine",
        "size": "large",
        "speed": {"land": 5},
        "attacks": [_attack("Slam", "1d8", "grab")],
        "special_attacks": [_attack("Constrict", "1d8", "constrict")],
        "senses": [_sense("blindsight", 30), _LOW_LIGHT],
        "energy_resistances": [{"energy": "cold", "amount": 10}, {"energy": "fire", "amount": 10}],
        "damage_immunities": ["electricity", *_PLANT_IMMUNITIES],
    },
    {
        "name": "Shambling Mound",
        "size": "large",
        "speed": {"land": 20, "swim": 20},
        "attacks": [_attack("Slam", "2d6", "grab", count=2)],
        "special_attacks": [_attack("Constrict", "2d6", "constrict")],
        "senses": [_DARKVISION_60, _LOW_LIGHT],
        "energy_resistances": [{"energy": "fire", "amount": 10}],
        "damage_immunities": ["electricity", *_PLANT_IMMUNITIES],
    },
    {
        "name": "Tendriculos",
        "size": "huge",
        "speed": {"land": 20},
        "attacks": [
            _attack("Bite", "2d6", "grab"),
            _attack("Tentacle", "1d6", "grab", count=2),
        ],
        "senses": [_LOW_LIGHT],
        "damage_immunities": list(_PLANT_IMMUNITIES),
        "regeneration": {"amount": 10, "bypass": ["bludgeoning", "fire"]},
    },
    {
        "name": "Treant",
        "size": "huge",
        "speed": {"land": 30},
        "attacks": [_attack("Slam", "2d6", count=2)],
        "special_attacks": [_attack("Trample", "2d6", "trample", attack_type="save")],
        "senses": [_LOW_LIGHT],
        "vulnerabilities": ["fire"],
        "damage_immunities": list(_PLANT_IMMUNITIES),
        "damage_reduction": [{"amount": 10, "bypass": "slashing"}],
    },
]


# =============================================================================
# Loading & Lookup
# =============================================================================


def load_forms(
    entries: Iterable[Mapping[str, Any]],
    *,
    family: FormFamily | None = None,
) -> tuple[FormDefinition, ...]:
    """Validate raw catalog entries into form definitions.

    Args:
        entries: Raw form data.
        family: Family applied to entries that do not name one.

    Returns:
        The validated forms, in input order.

    Raises:
        CatalogError: If an entry is malformed, names an unknown tag, or
            repeats a form name.
    """
    forms: list[FormDefinition] = []
    seen: set[str] = set()
    for entry in entries:
        data = dict(entry)
        if family is not None:
            data.setdefault("family", family)
        name = data.get("name", "<unnamed>")
        try:
            form = FormDefinition.model_validate(data)
        except ShapechangerError:
            raise
        except PydanticValidationError as exc:
            raise CatalogError(
                f"Invalid catalog entry {name!r}: {exc.error_count()} error(s)",
                field_name="name",
                invalid_value=name,
                details={"errors": exc.errors(include_url=False)},
            ) from exc
        if form.name in seen:
            raise CatalogError(f"Duplicate form name {form.name!r}", field_name="name")
        seen.add(form.name)
        forms.append(form)
    return tuple(forms)


FORMS: tuple[FormDefinition, ...] = (
    load_forms(_ANIMALS, family=FormFamily.ANIMAL)
    + load_forms(_MAGICAL_BEASTS, family=FormFamily.MAGICAL_BEAST)
    + load_forms(_ELEMENTALS)
    + load_forms(_PLANTS, family=FormFamily.PLANT)
)

_FORMS_BY_NAME: dict[str, FormDefinition] = {form.name: form for form in FORMS}


def get_form(name: str) -> FormDefinition:
    """Look up a form by name.

    Raises:
        CatalogError: If no form has that name.
    """
    try:
        return _FORMS_BY_NAME[name]
    except KeyError:
        raise CatalogError(f"Unknown form: {name!r}", field_name="form_name", invalid_value=name) from None


def forms_for_kind(kind: SpellKind) -> tuple[FormDefinition, ...]:
    """All forms any level of a polymorph spell could offer."""
    gating = gating_for(kind)
    families = {family for gate in gating.levels.values() for family in gate.forms}
    return tuple(form for form in FORMS if form.family in families)


logger.debug("Form catalog loaded", forms=len(FORMS))


__all__ = [
    "FORMS",
    "load_forms",
    "get_form",
    "forms_for_kind",
]
