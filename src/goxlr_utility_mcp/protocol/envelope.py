"""Command envelope: the JSON document posted to the daemon.

Envelope layout::

    {"Command": ["<serial>", {"<CommandName>": <arguments>}]}

- serial: the mixer's serial number, passed through untouched
- CommandName: exactly one key naming the command
- arguments: a positional JSON array for every command except
  ``SetGlobalColour``, whose argument is a bare JSON string
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from ..errors import EmptySerial

COMMAND_KEY = "Command"

# Compact separators keep identical envelopes byte-identical
JSON_SEPARATORS = (",", ":")

Scalar = Union[str, int, bool]
Arguments = Union[tuple[Scalar, ...], str]


@dataclass(frozen=True)
class CommandEnvelope:
    """A single command addressed to one mixer."""

    serial: str
    name: str
    arguments: Arguments

    def __post_init__(self) -> None:
        check_serial(self.serial)

    @property
    def is_scalar(self) -> bool:
        return isinstance(self.arguments, str)

    def to_dict(self) -> dict:
        args = self.arguments if self.is_scalar else list(self.arguments)
        return {COMMAND_KEY: [self.serial, {self.name: args}]}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=JSON_SEPARATORS)

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    def __repr__(self) -> str:
        return f"CommandEnvelope(serial={self.serial!r}, {self.name}={self.arguments!r})"


def check_serial(serial: object) -> str:
    """Return ``serial`` unchanged, or raise if it is empty or blank."""
    if not isinstance(serial, str) or not serial.strip():
        raise EmptySerial(f"Device serial must be a non-empty string, got {serial!r}")
    return serial


def build_envelope(serial: str, name: str, arguments: Arguments) -> CommandEnvelope:
    """Wrap already-shaped arguments in an envelope.

    Args:
        serial: Mixer serial number.
        name: Command name key.
        arguments: A tuple for array-shaped commands or a string for
            scalar-shaped ones.

    Raises:
        EmptySerial: If ``serial`` is empty or blank.
    """
    check_serial(serial)
    if isinstance(arguments, list):
        arguments = tuple(arguments)
    return CommandEnvelope(serial=serial, name=name, arguments=arguments)
