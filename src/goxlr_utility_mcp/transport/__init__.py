"""Transport to the daemon."""

from .http_connection import DaemonConnection
