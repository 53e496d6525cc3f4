"""Exception types raised while building commands or talking to the daemon."""

from __future__ import annotations


class CommandError(ValueError):
    """A command could not be built from the given parameters."""


class EmptySerial(CommandError):
    """The device serial was empty or blank."""


class InvalidColourFormat(CommandError):
    """A colour string was not exactly six hex digits in the accepted case."""


class UnknownCommandKind(CommandError):
    """The command object is not part of the supported catalog."""


class DaemonError(RuntimeError):
    """The daemon rejected a command or replied with something unexpected."""

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload
