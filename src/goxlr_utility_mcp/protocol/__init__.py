"""Protocol layer: command catalog, envelope encoding, and reply parsing."""

from .envelope import CommandEnvelope, build_envelope
from .commands import CommandName, encode
from .parser import parse_command_response, parse_device_status, parse_envelope
