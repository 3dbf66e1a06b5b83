"""Packet-serial driver for RoboClaw dual motor controllers."""

from __future__ import annotations

import enum
from typing import Protocol

import serial

DEFAULT_PORT = "/dev/ttyAMA0"
DEFAULT_BAUDRATE = 38400
FRONT_ADDRESS = 0x80
BACK_ADDRESS = 0x81
READ_TIMEOUT = 1.0

_ACK = b"\xff"
_CRC_POLY = 0x1021


class Command(enum.IntEnum):
    """Packet-serial command codes."""

    READ_M1_SPEED = 18
    READ_M2_SPEED = 19
    RESET_ENCODERS = 20
    M1_DUTY = 32
    M2_DUTY = 33
    M1_M2_DUTY = 34
    M1_SPEED = 35
    M2_SPEED = 36
    M1_M2_SPEED = 37
    M1_M2_ENCODERS = 78


class RoboClawError(Exception):
    """Raised when the controller's reply is missing or corrupt."""


class _Stream(Protocol):
    def write(self, data: bytes) -> int | None: ...

    def read(self, size: int) -> bytes: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


def crc16(data: bytes, init: int = 0) -> int:
    """CRC-16 (polynomial 0x1021) over ``data``, continuing from ``init``."""
    crc = init & 0xFFFF
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ _CRC_POLY) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def _encode(value: int, width: int) -> bytes:
    """Big-endian bytes of ``value``; negative values use two's complement."""
    bits = width * 8
    if not -(1 << (bits - 1)) <= value < (1 << bits):
        raise ValueError(f"value {value} does not fit in {width} bytes")
    return (value & ((1 << bits) - 1)).to_bytes(width, "big")


def build_packet(address: int, command: int, payload: bytes = b"") -> bytes:
    """Frame a command: address, command, payload and a big-endian CRC."""
    body = bytes([address, int(command)]) + bytes(payload)
    return body + crc16(body).to_bytes(2, "big")


class RoboClaw:
    """A RoboClaw controller reached over a serial line.

    ``port`` is either a device path, opened as 8N1 without flow control,
    or an already open serial-like stream.
    """

    def __init__(self, port: str | _Stream = DEFAULT_PORT, baudrate: int = DEFAULT_BAUDRATE) -> None:
        self.baudrate = baudrate
        if isinstance(port, str):
            self.port = port
            self._serial: _Stream = serial.Serial(
                port=port,
                baudrate=baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                rtscts=False,
                xonxoff=False,
                timeout=READ_TIMEOUT,
            )
        else:
            self.port = None
            self._serial = port

    def close(self) -> None:
        self._serial.close()

    def __enter__(self) -> RoboClaw:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _send(self, packet: bytes) -> bool:
        """Write a packet and report whether the controller acknowledged it."""
        self._serial.write(packet)
        self._serial.flush()
        return bytes(self._serial.read(1)) == _ACK

    def _command(self, address: int, command: Command, *fields: tuple[int, int]) -> bool:
        payload = b"".join(_encode(value, width) for value, width in fields)
        return self._send(build_packet(address, command, payload))

    def m1_duty(self, address: int, duty: int) -> bool:
        return self._command(address, Command.M1_DUTY, (duty, 2))

    def m2_duty(self, address: int, duty: int) -> bool:
        return self._command(address, Command.M2_DUTY, (duty, 2))

    def m1m2_duty(self, address: int, duty1: int, duty2: int) -> bool:
        return self._command(address, Command.M1_M2_DUTY, (duty1, 2), (duty2, 2))

    def m1_speed(self, address: int, speed: int) -> bool:
        return self._command(address, Command.M1_SPEED, (speed, 4))

    def m2_speed(self, address: int, speed: int) -> bool:
        return self._command(address, Command.M2_SPEED, (speed, 4))

    def m1m2_speed(self, address: int, speed1: int, speed2: int) -> bool:
        return self._command(address, Command.M1_M2_SPEED, (speed1, 4), (speed2, 4))

    def all_speed(self, speed1: int, speed2: int, speed3: int, speed4: int) -> bool:
        """Set all four motor speeds: front pair first, then back pair."""
        front = self.m1m2_speed(FRONT_ADDRESS, speed1, speed2)
        back = self.m1m2_speed(BACK_ADDRESS, speed3, speed4)
        return front and back

    def all_duty(self, duty1: int, duty2: int, duty3: int, duty4: int) -> bool:
        """Set all four duty cycles: front pair first, then back pair."""
        front = self.m1m2_duty(FRONT_ADDRESS, duty1, duty2)
        back = self.m1m2_duty(BACK_ADDRESS, duty3, duty4)
        return front and back

    def read_command(self, address: int, command: int, n: int) -> bytes:
        """Send a read command and return the ``n - 2`` data bytes of the reply.

        The reply's trailing two bytes are a CRC over the request and data.
        """
        if n < 2:
            raise ValueError("a reply holds at least its two CRC bytes")
        request = bytes([address, int(command)])
        written = self._serial.write(request)
        if written is not None and written != len(request):
            raise RoboClawError("request was not fully written")
        self._serial.flush()
        reply = bytes(self._serial.read(n))
        if len(reply) != n:
            raise RoboClawError(f"expected {n} bytes, got {len(reply)}")
        data, received = reply[:-2], int.from_bytes(reply[-2:], "big")
        if crc16(data, crc16(request)) != received:
            raise RoboClawError("CRC mismatch in reply")
        return data

    def read_encoders(self, address: int) -> tuple[int, int]:
        """Return the two encoder counts as unsigned 32-bit values."""
        data = self.read_command(address, Command.M1_M2_ENCODERS, 10)
        return int.from_bytes(data[0:4], "big"), int.from_bytes(data[4:8], "big")

    def reset_encoders(self, address: int) -> bool:
        return self._command(address, Command.RESET_ENCODERS)

    def read_speeds(self, address: int) -> tuple[int, int]:
        """Return the signed speeds of both motors."""
        speeds = []
        for command in (Command.READ_M1_SPEED, Command.READ_M2_SPEED):
            data = self.read_command(address, command, 7)
            magnitude = int.from_bytes(data[0:4], "big")
            speeds.append(-magnitude if data[4] else magnitude)
        return speeds[0], speeds[1]