"""Device status as reported by the daemon's ``/api/get-devices`` endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field

# Only the full-size mixer has a fourth fader
FULL_SIZE_MARKER = "Fader4Mute"


def _section(data: object, key: str) -> dict:
    value = data.get(key) if isinstance(data, dict) else None
    return dict(value) if isinstance(value, dict) else {}


@dataclass
class MixerStatus:
    """State of a single attached mixer."""

    serial: str
    profile_name: str = ""
    volumes: dict[str, int] = field(default_factory=dict)
    device_type: str = ""
    colour_way: str = ""
    button_down: dict[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.device_type:
            self.device_type = "Full" if FULL_SIZE_MARKER in self.button_down else "Mini"

    def to_dict(self) -> dict:
        return {
            "serial": self.serial,
            "profile_name": self.profile_name,
            "device_type": self.device_type,
            "colour_way": self.colour_way,
            "volumes": dict(self.volumes),
        }

    @classmethod
    def from_dict(cls, serial: str, data: dict) -> MixerStatus:
        """Build from one ``mixers`` entry; malformed sections read as empty."""
        hardware = _section(data, "hardware")
        levels = _section(data, "levels")
        volumes = {}
        for channel, level in _section(levels, "volumes").items():
            if isinstance(level, bool):
                continue
            try:
                volumes[channel] = int(level)
            except (TypeError, ValueError):
                continue
        return cls(
            serial=hardware.get("serial_number") or serial,
            profile_name=data.get("profile_name") or "",
            volumes=volumes,
            device_type=hardware.get("device_type") or "",
            colour_way=hardware.get("colour_way") or "",
            button_down=_section(data, "button_down"),
        )


@dataclass
class DaemonStatus:
    """All mixers known to the daemon plus its profile library."""

    mixers: dict[str, MixerStatus] = field(default_factory=dict)
    profiles: list[str] = field(default_factory=list)

    def mixer(self, serial: str) -> MixerStatus | None:
        return self.mixers.get(serial)

    def single_serial(self) -> str | None:
        """Return the serial when exactly one mixer is attached."""
        if len(self.mixers) == 1:
            return next(iter(self.mixers))
        return None

    def to_dict(self) -> dict:
        return {
            "mixers": {s: m.to_dict() for s, m in self.mixers.items()},
            "profiles": list(self.profiles),
        }
