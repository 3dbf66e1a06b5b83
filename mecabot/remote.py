"""UDP link sending joystick positions to the robot and reading its replies."""

from __future__ import annotations

import socket

SERVER_IP = "192.168.1.124"
SERVER_PORT = 40000
CLIENT_PORT = 40001
SEND_INTERVAL = 0.01

_MAX_DATAGRAM = 65535


def format_command(left: tuple[float, float], right: tuple[float, float]) -> str:
    """The text sent for the two joystick positions."""
    lx, ly = left
    rx, ry = right
    return f"L:{lx:g},{ly:g}  R:{rx:g},{ry:g}"


def format_status(host: str, port: int, message: str) -> str:
    """The status line shown for a datagram received from the robot."""
    return f"From {host}:{port} → {message}"


class RemoteLink:
    """Holds the latest joystick positions and exchanges datagrams."""

    def __init__(
        self,
        server_ip: str = SERVER_IP,
        server_port: int = SERVER_PORT,
        client_port: int = CLIENT_PORT,
    ) -> None:
        self.server = (server_ip, server_port)
        self.left = (0.0, 0.0)
        self.right = (0.0, 0.0)
        self._sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._receiver.bind(("0.0.0.0", client_port))
        except OSError:
            self.close()
            raise
        self._receiver.setblocking(False)

    @property
    def local_port(self) -> int:
        """The port replies are received on."""
        return self._receiver.getsockname()[1]

    def update_left(self, x: float, y: float) -> None:
        self.left = (float(x), float(y))

    def update_right(self, x: float, y: float) -> None:
        self.right = (float(x), float(y))

    def send(self) -> bytes:
        """Send the current positions to the robot and return the datagram."""
        data = format_command(self.left, self.right).encode("utf-8")
        self._sender.sendto(data, self.server)
        return data

    def poll(self) -> list[str]:
        """Status lines for every datagram waiting, oldest first."""
        statuses = []
        while True:
            try:
                data, (host, port) = self._receiver.recvfrom(_MAX_DATAGRAM)
            except BlockingIOError:
                break
            statuses.append(format_status(host, port, data.decode("utf-8", errors="replace")))
        return statuses

    def close(self) -> None:
        self._sender.close()
        self._receiver.close()

    def __enter__(self) -> RemoteLink:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()