"""Tests for daemon reply parsing."""

from goxlr_utility_mcp.protocol.parser import (
    parse_command_response,
    parse_device_status,
)

DEVICES_RESPONSE = {
    "mixers": {
        "S210400001": {
            "profile_name": "Streaming",
            "levels": {"volumes": {"Mic": 200, "Game": 128}},
            "hardware": {
                "serial_number": "S210400001",
                "device_type": "Full",
                "colour_way": "Black",
            },
            "button_down": {"Fader1Mute": False, "Fader4Mute": False},
        }
    },
    "files": {"profiles": ["Default", "Streaming", "Gaming"]},
}


def test_ok_reply():
    result = parse_command_response('"Ok"')
    assert result.ok
    assert result.message == ""


def test_bare_ok_reply():
    """An unquoted Ok body is still a success."""
    assert parse_command_response("Ok").ok
    assert parse_command_response(b'"Ok"\n').ok


def test_error_reply():
    result = parse_command_response({"Error": "Profile not found"})
    assert not result.ok
    assert result.message == "Profile not found"


def test_unexpected_reply():
    result = parse_command_response('{"Status": {}}')
    assert not result.ok
    assert "Unexpected reply" in result.message


def test_parse_device_status():
    status = parse_device_status(DEVICES_RESPONSE)
    assert status.profiles == ["Default", "Streaming", "Gaming"]
    mixer = status.mixer("S210400001")
    assert mixer is not None
    assert mixer.profile_name == "Streaming"
    assert mixer.volumes == {"Mic": 200, "Game": 128}
    assert mixer.device_type == "Full"
    assert mixer.colour_way == "Black"


def test_single_serial():
    status = parse_device_status(DEVICES_RESPONSE)
    assert status.single_serial() == "S210400001"


def test_single_serial_ambiguous():
    """No serial is picked when zero or several mixers are attached."""
    two = {"mixers": {"A": {}, "B": {}}}
    assert parse_device_status(two).single_serial() is None
    assert parse_device_status({}).single_serial() is None


def test_device_type_detected_from_buttons():
    """Without a reported type, the fourth fader marks a full-size mixer."""
    full = parse_device_status({"mixers": {"X": {"button_down": {"Fader4Mute": False}}}})
    mini = parse_device_status({"mixers": {"X": {"button_down": {"Fader3Mute": False}}}})
    assert full.mixer("X").device_type == "Full"
    assert mini.mixer("X").device_type == "Mini"


def test_missing_sections():
    status = parse_device_status("{}")
    assert status.mixers == {}
    assert status.profiles == []
    assert parse_device_status("garbage").mixers == {}


def test_status_to_dict():
    data = parse_device_status(DEVICES_RESPONSE).to_dict()
    assert data["profiles"] == ["Default", "Streaming", "Gaming"]
    assert data["mixers"]["S210400001"]["profile_name"] == "Streaming"


def test_malformed_sections_read_as_empty():
    """Wrongly typed sections never raise."""
    assert parse_device_status({"mixers": ["x"], "files": ["y"]}).mixers == {}
    assert parse_device_status({"files": {"profiles": "Default"}}).profiles == []

    status = parse_device_status({"mixers": {"A": "junk", "B": {"hardware": [1]}}})
    assert list(status.mixers) == ["B"]
    assert status.mixer("B").serial == "B"


def test_unusable_volumes_are_skipped():
    status = parse_device_status(
        {"mixers": {"X": {"levels": {"volumes": {"Mic": None, "Game": "loud", "Chat": 40}}}}}
    )
    assert status.mixer("X").volumes == {"Chat": 40}
    assert parse_device_status({"mixers": {"X": {"levels": {"volumes": [1]}}}}).mixer("X").volumes == {}
