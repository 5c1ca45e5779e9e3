"""Tests for the game engine connection."""

from unittest.mock import MagicMock, patch

import pytest

from goldrush.api.environment import VIEW_BYTES, GameConnection
from goldrush.api.tiles import Action, Tile

VIEW = ("  g  " + "     " + "  " + "  " + "~~~~~" + "*****").encode("ascii")


def make_connection(recv_chunks):
    """Open a GameConnection over a mock socket returning recv_chunks in order."""
    sock = MagicMock()
    sock.recv.side_effect = list(recv_chunks)
    with patch("goldrush.api.environment.socket.create_connection", return_value=sock):
        connection = GameConnection("localhost", 31415)
        connection.connect()
    return connection, sock


class TestGameConnection:
    """Tests for GameConnection."""

    def test_view_size(self):
        assert VIEW_BYTES == 24
        assert len(VIEW) == 24

    def test_read_full_view(self):
        connection, _ = make_connection([VIEW])
        view = connection.read_view()

        assert view.shape == (5, 5)
        assert view[0, 2] is Tile.GOLD
        assert view[3, 0] is Tile.WATER
        assert connection.views_read == 1

    def test_read_view_in_pieces(self):
        connection, sock = make_connection([VIEW[:10], VIEW[10:11], VIEW[11:]])
        view = connection.read_view()

        assert view[4, 4] is Tile.WALL
        assert sock.recv.call_count == 3

    def test_end_of_stream(self):
        connection, _ = make_connection([b""])
        assert connection.read_view() is None
        assert connection.views_read == 0

    def test_end_of_stream_mid_view(self):
        connection, _ = make_connection([VIEW[:5], b""])
        assert connection.read_view() is None

    def test_send_action(self):
        connection, sock = make_connection([])
        connection.send_action(Action.FORWARD)
        sock.sendall.assert_called_once_with(b"F")

    def test_socket_errors_become_connection_errors(self):
        connection, sock = make_connection([])
        sock.recv.side_effect = OSError("reset")
        sock.sendall.side_effect = OSError("broken pipe")

        with pytest.raises(ConnectionError):
            connection.read_view()
        with pytest.raises(ConnectionError):
            connection.send_action(Action.TURN_LEFT)

    def test_connect_failure(self):
        with patch(
            "goldrush.api.environment.socket.create_connection",
            side_effect=ConnectionRefusedError("refused"),
        ):
            with pytest.raises(ConnectionError, match="31415"):
                GameConnection("localhost", 31415).connect()

    def test_use_before_connect(self):
        connection = GameConnection()
        with pytest.raises(RuntimeError, match="connect"):
            connection.read_view()

    def test_context_manager_closes(self):
        sock = MagicMock()
        with patch("goldrush.api.environment.socket.create_connection", return_value=sock):
            with GameConnection() as connection:
                assert connection.is_open

        sock.close.assert_called_once()
        assert not connection.is_open
