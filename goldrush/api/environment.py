"""
Game engine connection.

The game engine is a TCP server. Every turn it sends the player's 5x5
view as 24 bytes (row by row, skipping the player's own cell) and waits
for a single action character in reply. The stream simply ends when the
game is over.
"""

import logging
import socket
from typing import Optional

import numpy as np

from .tiles import VIEW_SIZE, Action, parse_view

logger = logging.getLogger(__name__)

VIEW_BYTES = VIEW_SIZE * VIEW_SIZE - 1


class GameConnection:
    """
    Wrapper around the socket talking to the game engine.

    Example usage:
        with GameConnection("localhost", 31415) as connection:
            while (view := connection.read_view()) is not None:
                connection.send_action(decide(view))
    """

    def __init__(self, host: str = "localhost", port: int = 31415, timeout: Optional[float] = None):
        """
        Initialize the connection. Nothing is opened until connect().

        Args:
            host: Game engine host name
            port: Game engine port
            timeout: Socket timeout in seconds (None blocks forever)
        """
        self.host = host
        self.port = port
        self.timeout = timeout

        self._sock: Optional[socket.socket] = None
        self._views_read: int = 0

    def connect(self) -> None:
        """
        Open the connection.

        Raises:
            ConnectionError: If the game engine can't be reached
        """
        if self._sock is not None:
            return
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            logger.error(f"Failed to connect to {self.host}:{self.port}: {e}")
            raise ConnectionError(f"Could not connect to game engine at {self.host}:{self.port}") from e
        logger.info(f"Connected to game engine at {self.host}:{self.port}")

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("Connection not open. Call connect() first.")
        return self._sock

    def read_view(self) -> Optional[np.ndarray]:
        """
        Read the next view from the game engine.

        Returns:
            Parsed (5, 5) view, or None once the game has ended

        Raises:
            ConnectionError: On socket errors
        """
        sock = self._require_socket()
        buffer = bytearray()

        while len(buffer) < VIEW_BYTES:
            try:
                chunk = sock.recv(VIEW_BYTES - len(buffer))
            except OSError as e:
                raise ConnectionError(f"Lost connection while reading view: {e}") from e
            if not chunk:
                if buffer:
                    logger.warning(f"Stream ended mid-view after {len(buffer)} bytes")
                logger.info(f"Game stream ended after {self._views_read} views")
                return None
            buffer.extend(chunk)

        self._views_read += 1
        return parse_view(bytes(buffer))

    def send_action(self, action: Action) -> None:
        """
        Send one action to the game engine.

        Raises:
            ConnectionError: On socket errors
        """
        sock = self._require_socket()
        try:
            sock.sendall(action.encode())
        except OSError as e:
            raise ConnectionError(f"Lost connection while sending {action.name}: {e}") from e

    def close(self) -> None:
        """Close the connection."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
            logger.info("Connection closed")

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    @property
    def views_read(self) -> int:
        """Number of complete views received so far."""
        return self._views_read

    def __enter__(self) -> "GameConnection":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
