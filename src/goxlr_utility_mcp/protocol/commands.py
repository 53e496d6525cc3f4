"""Command catalog, argument shape rules, and high-level command builders.

Each command is a frozen dataclass with typed fields. Its ``name`` is the
key used on the wire and its ``arguments()`` method returns the exact
shape the daemon expects for that command.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from ..errors import InvalidColourFormat, UnknownCommandKind
from ..models.colour import ColourCase, ColourValue, resolve_colour
from .envelope import Arguments, CommandEnvelope, build_envelope, check_serial


class CommandName(str, Enum):
    """Command names as the daemon spells them."""

    SET_VOLUME = "SetVolume"
    LOAD_PROFILE = "LoadProfile"
    SET_BUTTON_COLOURS = "SetButtonColours"
    SET_SIMPLE_COLOUR = "SetSimpleColour"
    SET_GLOBAL_COLOUR = "SetGlobalColour"
    SET_FADER_COLOURS = "SetFaderColours"
    SET_FADER_MUTE_STATE = "SetFaderMuteState"


MIN_VOLUME_LEVEL = 0
MAX_VOLUME_LEVEL = 100

# Trailing flag always sent with LoadProfile. Its meaning on the daemon
# side is unconfirmed, so it is not exposed as a parameter.
LOAD_PROFILE_FLAG = False


def _require_text(field_name: str, value: object) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string, got {value!r}")


def _require_colour(field_name: str, value: object) -> None:
    if not isinstance(value, ColourValue):
        raise InvalidColourFormat(
            f"{field_name} must be a ColourValue, got {type(value).__name__}"
        )


def _require_array(name: CommandName, args: object, *arities: int) -> tuple:
    if not isinstance(args, (list, tuple)) or len(args) not in arities:
        raise ValueError(f"{name.value} expects an array of {arities} elements, got {args!r}")
    return tuple(args)


@dataclass(frozen=True)
class ButtonColourPair:
    """Primary colour and an optional secondary colour for a button.

    Leaving ``secondary`` unset lets the daemon pick the second slot.
    """

    primary: ColourValue
    secondary: ColourValue | None = None

    def __post_init__(self) -> None:
        _require_colour("primary", self.primary)
        if self.secondary is not None:
            _require_colour("secondary", self.secondary)


@dataclass(frozen=True)
class SetVolume:
    name: ClassVar[CommandName] = CommandName.SET_VOLUME

    channel: str
    level: int

    def __post_init__(self) -> None:
        _require_text("channel", self.channel)
        if isinstance(self.level, bool) or not isinstance(self.level, int):
            raise ValueError(f"Volume level must be an integer, got {self.level!r}")
        if not MIN_VOLUME_LEVEL <= self.level <= MAX_VOLUME_LEVEL:
            raise ValueError(
                f"Volume level must be {MIN_VOLUME_LEVEL}-{MAX_VOLUME_LEVEL}, "
                f"got {self.level}"
            )

    def arguments(self) -> Arguments:
        return (self.channel, self.level)

    @classmethod
    def from_arguments(cls, args: Arguments) -> SetVolume:
        channel, level = _require_array(cls.name, args, 2)
        return cls(channel=channel, level=level)


@dataclass(frozen=True)
class LoadProfile:
    name: ClassVar[CommandName] = CommandName.LOAD_PROFILE

    profile_name: str

    def __post_init__(self) -> None:
        _require_text("profile_name", self.profile_name)

    def arguments(self) -> Arguments:
        return (self.profile_name, LOAD_PROFILE_FLAG)

    @classmethod
    def from_arguments(cls, args: Arguments) -> LoadProfile:
        profile_name, flag = _require_array(cls.name, args, 2)
        if flag is not LOAD_PROFILE_FLAG:
            raise ValueError(f"LoadProfile flag must be {LOAD_PROFILE_FLAG}, got {flag!r}")
        return cls(profile_name=profile_name)


@dataclass(frozen=True)
class SetButtonColours:
    name: ClassVar[CommandName] = CommandName.SET_BUTTON_COLOURS

    button_id: str
    colours: ButtonColourPair

    def __post_init__(self) -> None:
        _require_text("button_id", self.button_id)
        if not isinstance(self.colours, ButtonColourPair):
            raise InvalidColourFormat(
                f"colours must be a ButtonColourPair, got {type(self.colours).__name__}"
            )

    def arguments(self) -> Arguments:
        # Arity follows whether a secondary was supplied, not its value
        if self.colours.secondary is None:
            return (self.button_id, self.colours.primary.hex)
        return (
            self.button_id,
            self.colours.primary.hex,
            self.colours.secondary.hex,
        )

    @classmethod
    def from_arguments(cls, args: Arguments) -> SetButtonColours:
        args = _require_array(cls.name, args, 2, 3)
        secondary = ColourValue(args[2]) if len(args) == 3 else None
        return cls(
            button_id=args[0],
            colours=ButtonColourPair(ColourValue(args[1]), secondary),
        )


@dataclass(frozen=True)
class SetSimpleColour:
    name: ClassVar[CommandName] = CommandName.SET_SIMPLE_COLOUR

    target: str
    colour: ColourValue

    def __post_init__(self) -> None:
        _require_text("target", self.target)
        _require_colour("colour", self.colour)

    def arguments(self) -> Arguments:
        return (self.target, self.colour.hex)

    @classmethod
    def from_arguments(cls, args: Arguments) -> SetSimpleColour:
        target, colour = _require_array(cls.name, args, 2)
        return cls(target=target, colour=ColourValue(colour))


@dataclass(frozen=True)
class SetGlobalColour:
    name: ClassVar[CommandName] = CommandName.SET_GLOBAL_COLOUR

    colour: ColourValue

    def __post_init__(self) -> None:
        _require_colour("colour", self.colour)

    def arguments(self) -> Arguments:
        # The only command whose argument is not wrapped in an array
        return self.colour.hex

    @classmethod
    def from_arguments(cls, args: Arguments) -> SetGlobalColour:
        if not isinstance(args, str):
            raise ValueError(f"SetGlobalColour expects a bare string, got {args!r}")
        return cls(colour=ColourValue(args))


@dataclass(frozen=True)
class SetFaderColours:
    name: ClassVar[CommandName] = CommandName.SET_FADER_COLOURS

    fader_name: str
    primary: ColourValue
    secondary: ColourValue

    def __post_init__(self) -> None:
        _require_text("fader_name", self.fader_name)
        _require_colour("primary", self.primary)
        _require_colour("secondary", self.secondary)

    def arguments(self) -> Arguments:
        return (self.fader_name, self.primary.hex, self.secondary.hex)

    @classmethod
    def from_arguments(cls, args: Arguments) -> SetFaderColours:
        fader_name, primary, secondary = _require_array(cls.name, args, 3)
        return cls(
            fader_name=fader_name,
            primary=ColourValue(primary),
            secondary=ColourValue(secondary),
        )


@dataclass(frozen=True)
class SetFaderMuteState:
    name: ClassVar[CommandName] = CommandName.SET_FADER_MUTE_STATE

    fader_name: str
    mute_state: str

    def __post_init__(self) -> None:
        _require_text("fader_name", self.fader_name)
        _require_text("mute_state", self.mute_state)

    def arguments(self) -> Arguments:
        return (self.fader_name, self.mute_state)

    @classmethod
    def from_arguments(cls, args: Arguments) -> SetFaderMuteState:
        fader_name, mute_state = _require_array(cls.name, args, 2)
        return cls(fader_name=fader_name, mute_state=mute_state)


CommandKind = Union[
    SetVolume,
    LoadProfile,
    SetButtonColours,
    SetSimpleColour,
    SetGlobalColour,
    SetFaderColours,
    SetFaderMuteState,
]

# Closed catalog: command name -> command type
COMMAND_TYPES: dict[CommandName, type] = {
    CommandName.SET_VOLUME: SetVolume,
    CommandName.LOAD_PROFILE: LoadProfile,
    CommandName.SET_BUTTON_COLOURS: SetButtonColours,
    CommandName.SET_SIMPLE_COLOUR: SetSimpleColour,
    CommandName.SET_GLOBAL_COLOUR: SetGlobalColour,
    CommandName.SET_FADER_COLOURS: SetFaderColours,
    CommandName.SET_FADER_MUTE_STATE: SetFaderMuteState,
}

# Human-readable argument shapes, published alongside the catalog
COMMAND_SHAPES: dict[CommandName, str] = {
    CommandName.SET_VOLUME: "[channel, level]",
    CommandName.LOAD_PROFILE: "[profile_name, false]",
    CommandName.SET_BUTTON_COLOURS: "[button_id, primary] or [button_id, primary, secondary]",
    CommandName.SET_SIMPLE_COLOUR: "[target, colour]",
    CommandName.SET_GLOBAL_COLOUR: "colour (bare string)",
    CommandName.SET_FADER_COLOURS: "[fader_name, primary, secondary]",
    CommandName.SET_FADER_MUTE_STATE: "[fader_name, mute_state]",
}


def encode(serial: str, command: CommandKind) -> CommandEnvelope:
    """Build the envelope for ``command`` addressed to ``serial``.

    Pure and deterministic: no I/O, and identical inputs always give
    envelopes that serialise to identical bytes.

    Raises:
        EmptySerial: If ``serial`` is empty or blank.
        UnknownCommandKind: If ``command`` is not one of the catalog types.
    """
    check_serial(serial)
    # Exact type match: subclasses could override the shape
    if type(command) not in COMMAND_TYPES.values():
        raise UnknownCommandKind(
            f"Unsupported command {type(command).__name__}. "
            f"Valid: {[n.value for n in COMMAND_TYPES]}"
        )
    return build_envelope(serial, command.name.value, command.arguments())


def build_set_volume(serial: str, channel: str, level: int) -> CommandEnvelope:
    """Build a SetVolume command.

    Args:
        serial: Mixer serial number.
        channel: Channel name, e.g. ``Mic`` or ``Game``.
        level: Volume level 0-100.
    """
    return encode(serial, SetVolume(channel=channel, level=level))


def build_load_profile(serial: str, profile_name: str) -> CommandEnvelope:
    """Build a LoadProfile command."""
    return encode(serial, LoadProfile(profile_name=profile_name))


def build_set_button_colours(
    serial: str,
    button_id: str,
    primary: str | ColourValue,
    secondary: str | ColourValue | None = None,
    case: ColourCase = ColourCase.UPPER,
) -> CommandEnvelope:
    """Build a SetButtonColours command.

    The argument array has two elements when ``secondary`` is omitted and
    three when it is given, even if it equals ``primary``.

    Args:
        serial: Mixer serial number.
        button_id: Button name, e.g. ``Fader1Mute``.
        primary: First colour (hex string or colour name).
        secondary: Optional second colour.
        case: Colour case policy for hex strings.
    """
    colours = ButtonColourPair(
        primary=resolve_colour(primary, case),
        secondary=None if secondary is None else resolve_colour(secondary, case),
    )
    return encode(serial, SetButtonColours(button_id=button_id, colours=colours))


def build_set_simple_colour(
    serial: str,
    target: str,
    colour: str | ColourValue,
    case: ColourCase = ColourCase.UPPER,
) -> CommandEnvelope:
    """Build a SetSimpleColour command for a single-colour target."""
    return encode(
        serial, SetSimpleColour(target=target, colour=resolve_colour(colour, case))
    )


def build_set_global_colour(
    serial: str,
    colour: str | ColourValue,
    case: ColourCase = ColourCase.UPPER,
) -> CommandEnvelope:
    """Build a SetGlobalColour command (argument is a bare string)."""
    return encode(serial, SetGlobalColour(colour=resolve_colour(colour, case)))


def build_set_fader_colours(
    serial: str,
    fader_name: str,
    primary: str | ColourValue,
    secondary: str | ColourValue,
    case: ColourCase = ColourCase.UPPER,
) -> CommandEnvelope:
    """Build a SetFaderColours command. Both colours are required."""
    return encode(
        serial,
        SetFaderColours(
            fader_name=fader_name,
            primary=resolve_colour(primary, case),
            secondary=resolve_colour(secondary, case),
        ),
    )


def build_set_fader_mute_state(
    serial: str, fader_name: str, mute_state: str
) -> CommandEnvelope:
    """Build a SetFaderMuteState command.

    Args:
        serial: Mixer serial number.
        fader_name: Fader identifier, e.g. ``A``.
        mute_state: Daemon mute state name, e.g. ``MutedToAll``.
    """
    return encode(
        serial, SetFaderMuteState(fader_name=fader_name, mute_state=mute_state)
    )
