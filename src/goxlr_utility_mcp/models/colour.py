"""Colour values as the daemon expects them: six hex digits, no prefix."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..errors import InvalidColourFormat

DEFAULT_COLOUR = "000000"
COLOUR_LENGTH = 6

_UPPER_DIGITS = frozenset("0123456789ABCDEF")
_LOWER_DIGITS = frozenset("0123456789abcdef")


class ColourCase(Enum):
    """How letter case in a colour string is treated."""

    UPPER = "upper"
    LOWER = "lower"
    ANY = "any"
    NORMALIZE = "normalize"


def _coerce_case(case: object) -> ColourCase:
    try:
        return ColourCase(case)
    except ValueError:
        raise InvalidColourFormat(
            f"Unknown colour case policy {case!r}. Valid: {[c.value for c in ColourCase]}"
        ) from None


def _check(raw: object, case: ColourCase) -> str:
    if not isinstance(raw, str) or len(raw) != COLOUR_LENGTH:
        raise InvalidColourFormat(
            f"Colour must be {COLOUR_LENGTH} hex digits, got {raw!r}"
        )

    if case is ColourCase.UPPER:
        allowed = _UPPER_DIGITS
    elif case is ColourCase.LOWER:
        allowed = _LOWER_DIGITS
    else:
        allowed = _UPPER_DIGITS | _LOWER_DIGITS

    if not set(raw) <= allowed:
        raise InvalidColourFormat(
            f"Colour {raw!r} is not valid hex for case policy '{case.value}'"
        )

    if case is ColourCase.NORMALIZE:
        return raw.upper()
    return raw


@dataclass(frozen=True)
class ColourValue:
    """An RGB colour such as ``FF8800``.

    The strict upper-case policy applies unless another
    :class:`ColourCase` is given.
    """

    hex: str = DEFAULT_COLOUR
    case: ColourCase = field(default=ColourCase.UPPER, compare=False, repr=False)

    def __post_init__(self) -> None:
        case = _coerce_case(self.case)
        object.__setattr__(self, "case", case)
        object.__setattr__(self, "hex", _check(self.hex, case))

    @classmethod
    def parse(cls, raw: str, case: ColourCase = ColourCase.UPPER) -> ColourValue:
        """Validate ``raw`` under ``case`` and return a colour.

        Raises:
            InvalidColourFormat: If ``raw`` is not six hex digits in an
                accepted case.
        """
        return cls(raw, case)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (
            int(self.hex[0:2], 16),
            int(self.hex[2:4], 16),
            int(self.hex[4:6], 16),
        )

    def __str__(self) -> str:
        return self.hex


# Lighting presets used for flag/status colours
NAMED_COLOURS: dict[str, ColourValue] = {
    "off": ColourValue("000000"),
    "red": ColourValue("FF0000"),
    "green": ColourValue("00FF00"),
    "blue": ColourValue("0000FF"),
    "yellow": ColourValue("FFFF00"),
    "white": ColourValue("FFFFFF"),
    "orange": ColourValue("FF8800"),
    "purple": ColourValue("FF00FF"),
}


def resolve_colour(
    value: str | ColourValue, case: ColourCase = ColourCase.UPPER
) -> ColourValue:
    """Accept a :class:`ColourValue`, a named colour, or a hex string."""
    if isinstance(value, ColourValue):
        return value
    if isinstance(value, str) and value.lower() in NAMED_COLOURS:
        return NAMED_COLOURS[value.lower()]
    return ColourValue.parse(value, case)
