"""MCP server entry point for the GoXLR Utility daemon.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import DaemonError
from .models.colour import NAMED_COLOURS
from .protocol.commands import (
    COMMAND_SHAPES,
    CommandName,
    build_load_profile,
    build_set_button_colours,
    build_set_fader_colours,
    build_set_fader_mute_state,
    build_set_global_colour,
    build_set_simple_colour,
    build_set_volume,
)
from .protocol.envelope import CommandEnvelope
from .transport.http_connection import DEFAULT_ENDPOINT, DaemonConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "goxlr-utility",
    instructions="MCP server for controlling a GoXLR mixer through GoXLR Utility",
)

# Global connection state
_connection: DaemonConnection | None = None
_serial: str | None = None


def _get_connection() -> DaemonConnection:
    """Get the active daemon connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to the daemon. Use the 'connect' tool first."
        )
    return _connection


def _resolve_serial(serial: str | None) -> str:
    if serial:
        return serial
    if _serial:
        return _serial
    raise RuntimeError(
        "No mixer serial selected. Pass 'serial' or connect with one attached mixer."
    )


def _dispatch(envelope: CommandEnvelope) -> dict[str, Any]:
    conn = _get_connection()
    try:
        conn.send(envelope)
    except DaemonError as e:
        logger.warning("Command rejected: %s", e)
        return {"error": str(e), "command": envelope.to_dict()}
    return {"sent": True, "command": envelope.to_dict()}


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(endpoint: str = DEFAULT_ENDPOINT, serial: str | None = None) -> dict[str, Any]:
    """Connect to the GoXLR Utility daemon.

    Reads the attached mixers. If ``serial`` is not given and exactly one
    mixer is attached, that mixer is selected for later commands.

    Args:
        endpoint: Daemon base URL (default http://localhost:14564).
        serial: Mixer serial number to address.
    """
    global _connection, _serial
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "serial": _serial,
        }

    _connection = DaemonConnection(endpoint=endpoint)
    status = _connection.open()

    _serial = serial or status.single_serial()
    result: dict[str, Any] = {
        "connected": True,
        "endpoint": _connection.endpoint,
        "mixers": sorted(status.mixers),
        "serial": _serial,
    }
    if _serial is None and status.mixers:
        result["message"] = "Multiple mixers attached; pass 'serial' to each command"
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the session with the daemon."""
    global _connection, _serial
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    _serial = None
    return {"disconnected": True}


@mcp.tool()
def get_device_status(serial: str | None = None) -> dict[str, Any]:
    """Read the current profile, volumes and hardware info for a mixer.

    Args:
        serial: Mixer serial (defaults to the selected mixer).
    """
    conn = _get_connection()
    target = _resolve_serial(serial)
    status = conn.get_status()
    mixer = status.mixer(target)
    if mixer is None:
        return {
            "error": f"Serial '{target}' not found",
            "available": sorted(status.mixers),
        }
    return mixer.to_dict()


@mcp.tool()
def list_profiles() -> dict[str, Any]:
    """List the profiles available to the daemon."""
    conn = _get_connection()
    return {"profiles": conn.get_status().profiles}


# ─── COMMAND TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def set_volume(channel: str, level: int, serial: str | None = None) -> dict[str, Any]:
    """Set a channel's volume.

    Args:
        channel: Channel name (e.g. Mic, Game, Chat, Music, System).
        level: Volume level (0-100).
        serial: Mixer serial (defaults to the selected mixer).
    """
    try:
        envelope = build_set_volume(_resolve_serial(serial), channel, level)
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


@mcp.tool()
def get_volume(channel: str, serial: str | None = None) -> dict[str, Any]:
    """Read a channel's current volume.

    Args:
        channel: Channel name (e.g. Mic, Game, Chat, Music, System).
        serial: Mixer serial (defaults to the selected mixer).
    """
    conn = _get_connection()
    target = _resolve_serial(serial)
    level = conn.get_volume(target, channel)
    if level is None:
        return {"error": f"No volume for channel '{channel}' on mixer '{target}'"}
    return {"channel": channel, "level": level}


@mcp.tool()
def adjust_volume(channel: str, delta: int, serial: str | None = None) -> dict[str, Any]:
    """Raise or lower a channel's volume, clamped to 0-100.

    Args:
        channel: Channel name (e.g. Mic, Game, Chat, Music, System).
        delta: Amount to add to the current level; negative lowers it.
        serial: Mixer serial (defaults to the selected mixer).
    """
    conn = _get_connection()
    target = _resolve_serial(serial)
    try:
        level = conn.adjust_volume(target, channel, delta)
    except DaemonError as e:
        logger.warning("Command rejected: %s", e)
        return {"error": str(e)}
    if level is None:
        return {"error": f"No volume for channel '{channel}' on mixer '{target}'"}
    return {"channel": channel, "level": level}


@mcp.tool()
def load_profile(profile_name: str, serial: str | None = None) -> dict[str, Any]:
    """Load a saved profile by name.

    Args:
        profile_name: Profile name as listed by list_profiles.
        serial: Mixer serial (defaults to the selected mixer).
    """
    try:
        envelope = build_load_profile(_resolve_serial(serial), profile_name)
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


@mcp.tool()
def set_button_colours(
    button_id: str,
    primary: str,
    secondary: str | None = None,
    serial: str | None = None,
) -> dict[str, Any]:
    """Set a button's colours.

    Colours are six upper-case hex digits (e.g. FF8800) or a colour name
    (off, red, green, blue, yellow, white, orange, purple).

    Args:
        button_id: Button name (e.g. Fader1Mute, Bleep, Cough).
        primary: First colour.
        secondary: Optional second colour; omitted lets the daemon decide.
        serial: Mixer serial (defaults to the selected mixer).
    """
    try:
        envelope = build_set_button_colours(
            _resolve_serial(serial), button_id, primary, secondary
        )
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


@mcp.tool()
def set_simple_colour(target: str, colour: str, serial: str | None = None) -> dict[str, Any]:
    """Set the colour of a single-colour target (e.g. Scribble1, Logo)."""
    try:
        envelope = build_set_simple_colour(_resolve_serial(serial), target, colour)
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


@mcp.tool()
def set_global_colour(colour: str, serial: str | None = None) -> dict[str, Any]:
    """Set every light on the mixer to one colour."""
    try:
        envelope = build_set_global_colour(_resolve_serial(serial), colour)
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


@mcp.tool()
def set_fader_colours(
    fader_name: str,
    primary: str,
    secondary: str,
    serial: str | None = None,
) -> dict[str, Any]:
    """Set the top and bottom colours of a fader.

    Args:
        fader_name: Fader identifier (A, B, C, D).
        primary: Top colour.
        secondary: Bottom colour.
        serial: Mixer serial (defaults to the selected mixer).
    """
    try:
        envelope = build_set_fader_colours(
            _resolve_serial(serial), fader_name, primary, secondary
        )
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


@mcp.tool()
def set_fader_mute_state(
    fader_name: str, mute_state: str, serial: str | None = None
) -> dict[str, Any]:
    """Set a fader's mute state.

    Args:
        fader_name: Fader identifier (A, B, C, D).
        mute_state: Unmuted, MutedToX or MutedToAll.
        serial: Mixer serial (defaults to the selected mixer).
    """
    try:
        envelope = build_set_fader_mute_state(
            _resolve_serial(serial), fader_name, mute_state
        )
    except ValueError as e:
        return {"error": str(e)}
    return _dispatch(envelope)


# Builder and accepted argument counts per command, for preview_command
_PREVIEW_BUILDERS = {
    CommandName.SET_VOLUME: (build_set_volume, (2,)),
    CommandName.LOAD_PROFILE: (build_load_profile, (1,)),
    CommandName.SET_BUTTON_COLOURS: (build_set_button_colours, (2, 3)),
    CommandName.SET_SIMPLE_COLOUR: (build_set_simple_colour, (2,)),
    CommandName.SET_GLOBAL_COLOUR: (build_set_global_colour, (1,)),
    CommandName.SET_FADER_COLOURS: (build_set_fader_colours, (3,)),
    CommandName.SET_FADER_MUTE_STATE: (build_set_fader_mute_state, (2,)),
}


@mcp.tool()
def preview_command(command: str, args: list[Any], serial: str | None = None) -> dict[str, Any]:
    """Build a command envelope without sending it.

    Args:
        command: Command name, e.g. SetVolume or SetGlobalColour.
        args: Positional arguments for the command, e.g. ["Mic", 80].
        serial: Mixer serial (defaults to the selected mixer, or SERIAL).
    """
    try:
        name = CommandName(command)
    except ValueError:
        return {"error": f"Unknown command '{command}'. Valid: {[n.value for n in CommandName]}"}

    builder, arities = _PREVIEW_BUILDERS[name]
    if len(args) not in arities:
        return {"error": f"{name.value} takes {' or '.join(map(str, arities))} arguments, got {len(args)}"}

    target = serial or _serial or "SERIAL"
    try:
        envelope = builder(target, *args)
    except (TypeError, ValueError) as e:
        return {"error": str(e)}
    return {"command": envelope.to_dict(), "json": envelope.to_json()}


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("goxlr://commands")
def command_catalog() -> str:
    """Supported commands and their argument shapes."""
    return json.dumps(
        {name.value: COMMAND_SHAPES[name] for name in CommandName}, indent=2
    )


@mcp.resource("goxlr://colours")
def colour_catalog() -> str:
    """Named colours accepted by the colour tools."""
    return json.dumps({name: c.hex for name, c in NAMED_COLOURS.items()}, indent=2)


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
