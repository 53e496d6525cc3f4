"""Data models for colours and device status."""

from .colour import ColourCase, ColourValue, DEFAULT_COLOUR, NAMED_COLOURS, resolve_colour
from .status import DaemonStatus, MixerStatus
