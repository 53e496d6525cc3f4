"""HTTP connection to a locally running GoXLR Utility daemon.

The daemon listens on ``localhost:14564``. Commands are posted as JSON
envelopes to ``/api/command``; the full device state is read from
``/api/get-devices``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import DaemonError
from ..models.status import DaemonStatus
from ..protocol.commands import MAX_VOLUME_LEVEL, MIN_VOLUME_LEVEL, build_set_volume
from ..protocol.envelope import CommandEnvelope
from ..protocol.parser import CommandResponse, parse_command_response, parse_device_status

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:14564"
COMMAND_PATH = "/api/command"
DEVICES_PATH = "/api/get-devices"
REQUEST_TIMEOUT_S = 1.0


class DaemonConnection:
    """Manages the HTTP session with the daemon.

    Usage::

        conn = DaemonConnection()
        status = conn.open()
        conn.send(build_set_volume(status.single_serial(), "Mic", 80))
        conn.close()

    Commands are sent synchronously, one at a time, so envelopes for the
    same mixer reach the daemon in the order they were sent.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = REQUEST_TIMEOUT_S,
        client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def open(self) -> DaemonStatus:
        """Open the session and read the current device state.

        Returns:
            DaemonStatus with every attached mixer.

        Raises:
            ConnectionError: If the daemon cannot be reached.
        """
        if self._client is None:
            self._client = httpx.Client(base_url=self._endpoint, timeout=self._timeout)
            self._owns_client = True

        self._connected = True
        try:
            status = self.get_status()
        except ConnectionError:
            self.close()
            raise

        logger.info(
            "Connected to daemon at %s (%d mixer(s))",
            self._endpoint,
            len(status.mixers),
        )
        return status

    def close(self) -> None:
        """Close the HTTP session."""
        if not self._connected:
            return

        try:
            if self._owns_client and self._client is not None:
                self._client.close()
        except Exception as e:
            logger.warning("Error closing daemon session: %s", e)
        finally:
            if self._owns_client:
                self._client = None
            self._connected = False
            logger.info("Disconnected")

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if not self._connected or self._client is None:
            raise ConnectionError("Not connected to daemon")

        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ConnectionError(
                f"Daemon returned HTTP {e.response.status_code} for {path}: "
                f"{e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise ConnectionError(
                f"Could not reach daemon at {self._endpoint}. "
                f"Ensure GoXLR Utility is running. Last error: {e}"
            ) from e
        return response

    def send(self, envelope: CommandEnvelope) -> CommandResponse:
        """Post a command envelope and parse the daemon's reply.

        Raises:
            ConnectionError: If not connected or the request fails.
            DaemonError: If the daemon rejected the command.
        """
        logger.debug("Sending command: %s", envelope.to_json())
        response = self._request(
            "POST",
            COMMAND_PATH,
            content=envelope.to_bytes(),
            headers={"Content-Type": "application/json"},
        )
        logger.debug("Daemon reply: %s", response.text)

        result = parse_command_response(response.text)
        if not result.ok:
            raise DaemonError(
                f"{envelope.name} rejected by daemon: {result.message}",
                payload=result.raw,
            )
        return result

    def get_status(self) -> DaemonStatus:
        """Fetch and parse ``/api/get-devices``."""
        response = self._request("GET", DEVICES_PATH)
        return parse_device_status(response.text)

    def is_reachable(self) -> bool:
        """Return True if the daemon answers the devices endpoint."""
        try:
            self.get_status()
        except ConnectionError as e:
            logger.debug("Daemon not reachable: %s", e)
            return False
        return True

    def get_volume(self, serial: str, channel: str) -> int | None:
        """Read a channel's current volume.

        Returns:
            The level reported by the daemon, or None if the mixer or
            channel is unknown.
        """
        mixer = self.get_status().mixer(serial)
        if mixer is None:
            logger.debug("Mixer %s not found", serial)
            return None
        level = mixer.volumes.get(channel)
        if level is None:
            logger.debug(
                "Channel %s not found. Available: %s", channel, ", ".join(mixer.volumes)
            )
        return level

    def adjust_volume(self, serial: str, channel: str, delta: int) -> int | None:
        """Move a channel's volume by ``delta`` and send the result.

        The new level is clamped to the accepted volume range.

        Returns:
            The level that was sent, or None if the current level could
            not be read.
        """
        current = self.get_volume(serial, channel)
        if current is None:
            return None

        level = max(MIN_VOLUME_LEVEL, min(MAX_VOLUME_LEVEL, current + delta))
        logger.debug("Adjusting %s from %d to %d", channel, current, level)
        self.send(build_set_volume(serial, channel, level))
        return level
