"""Parsing of daemon replies and of encoded envelopes."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ..models.status import DaemonStatus, MixerStatus
from .commands import COMMAND_TYPES, CommandName, encode
from .envelope import COMMAND_KEY, CommandEnvelope

OK_REPLY = "Ok"
ERROR_KEY = "Error"


@dataclass
class CommandResponse:
    """Parsed reply to a posted command."""

    ok: bool
    message: str = ""
    raw: Any = None

    def __repr__(self) -> str:
        if self.ok:
            return "CommandResponse(ok=True)"
        return f"CommandResponse(ok=False, message={self.message!r})"


def _decode(payload: Any) -> Any:
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except json.JSONDecodeError:
            # Some daemon builds reply with a bare Ok
            return payload.strip()
    return payload


def parse_command_response(payload: Any) -> CommandResponse:
    """Parse the daemon's reply to ``/api/command``.

    The daemon answers ``"Ok"`` on success and ``{"Error": "<message>"}``
    on rejection. Anything else is reported as a failure.
    """
    data = _decode(payload)
    if data == OK_REPLY:
        return CommandResponse(ok=True, raw=data)
    if isinstance(data, dict) and ERROR_KEY in data:
        return CommandResponse(ok=False, message=str(data[ERROR_KEY]), raw=data)
    return CommandResponse(ok=False, message=f"Unexpected reply: {data!r}", raw=data)


def parse_device_status(payload: Any) -> DaemonStatus:
    """Parse a ``/api/get-devices`` response.

    Missing or malformed ``mixers`` and ``files`` sections are treated as
    empty; mixer entries that are not objects are skipped.
    """
    data = _decode(payload)
    if not isinstance(data, dict):
        return DaemonStatus()

    mixers_section = data.get("mixers")
    if not isinstance(mixers_section, dict):
        mixers_section = {}
    mixers = {
        serial: MixerStatus.from_dict(serial, info)
        for serial, info in mixers_section.items()
        if isinstance(info, dict)
    }

    files = data.get("files")
    profiles = files.get("profiles") if isinstance(files, dict) else None
    if not isinstance(profiles, list):
        profiles = []
    return DaemonStatus(mixers=mixers, profiles=[p for p in profiles if isinstance(p, str)])


def parse_envelope(payload: Any) -> CommandEnvelope | None:
    """Decode a JSON envelope back into a :class:`CommandEnvelope`.

    Returns:
        The envelope, or ``None`` if the document is malformed, names a
        command outside the catalog, or its arguments do not have the
        shape and values that command requires.
    """
    try:
        data = _decode(payload)
    except UnicodeDecodeError:
        return None
    if not isinstance(data, dict) or set(data) != {COMMAND_KEY}:
        return None

    body = data[COMMAND_KEY]
    if not isinstance(body, list) or len(body) != 2:
        return None

    serial, command = body
    if not isinstance(command, dict) or len(command) != 1:
        return None

    name, arguments = next(iter(command.items()))
    try:
        kind = COMMAND_TYPES[CommandName(name)]
    except ValueError:
        return None

    try:
        return encode(serial, kind.from_arguments(arguments))
    except ValueError:
        return None
