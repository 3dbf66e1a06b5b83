import pytest

from mecabot.roboclaw import (
    BACK_ADDRESS,
    FRONT_ADDRESS,
    Command,
    RoboClaw,
    RoboClawError,
    build_packet,
    crc16,
)


class FakeSerial:
    def __init__(self, replies=b""):
        self.written = []
        self.buffer = bytearray(replies)
        self.closed = False
        self.flushes = 0

    def write(self, data):
        self.written.append(bytes(data))
        return len(data)

    def flush(self):
        self.flushes += 1

    def read(self, size):
        chunk = bytes(self.buffer[:size])
        del self.buffer[:size]
        return chunk

    def close(self):
        self.closed = True


def reply(address, command, data):
    body = bytes(data)
    crc = crc16(body, crc16(bytes([address, command])))
    return body + crc.to_bytes(2, "big")


def test_crc16_check_value():
    assert crc16(b"123456789") == 0x31C3


def test_crc16_empty_is_init():
    assert crc16(b"") == 0
    assert crc16(b"", 0x1234) == 0x1234


def test_crc16_chains():
    assert crc16(b"6789", crc16(b"12345")) == crc16(b"123456789")


def test_build_packet_half_speed_from_source_test():
    half_speed = 0x7FFF // 2
    packet = build_packet(0x80, 35, half_speed.to_bytes(4, "big"))
    assert len(packet) == 8
    assert packet[:6] == bytes([0x80, 35, 0x00, 0x00, 0x3F, 0xFF])
    assert int.from_bytes(packet[6:], "big") == crc16(packet[:6])


def test_m1_speed_writes_packet_and_acks():
    port = FakeSerial(b"\xff")
    claw = RoboClaw(port)
    assert claw.m1_speed(FRONT_ADDRESS, 16383) is True
    assert port.written == [build_packet(0x80, Command.M1_SPEED, bytes([0, 0, 0x3F, 0xFF]))]
    assert port.flushes == 1


def test_nack_returns_false():
    claw = RoboClaw(FakeSerial(b"\x00"))
    assert claw.m2_speed(FRONT_ADDRESS, 0) is False


def test_missing_ack_returns_false():
    claw = RoboClaw(FakeSerial())
    assert claw.m1_duty(FRONT_ADDRESS, 100) is False


def test_negative_speed_is_twos_complement():
    port = FakeSerial(b"\xff")
    RoboClaw(port).m1_speed(FRONT_ADDRESS, -1)
    assert port.written[0][2:6] == b"\xff\xff\xff\xff"


def test_out_of_range_speed_rejected():
    with pytest.raises(ValueError):
        RoboClaw(FakeSerial(b"\xff")).m1_speed(FRONT_ADDRESS, 1 << 32)


def test_out_of_range_duty_rejected():
    with pytest.raises(ValueError):
        RoboClaw(FakeSerial(b"\xff")).m2_duty(FRONT_ADDRESS, 1 << 16)


def test_duty_packets():
    port = FakeSerial(b"\xff\xff\xff")
    claw = RoboClaw(port)
    assert claw.m1_duty(FRONT_ADDRESS, 0x1234)
    assert claw.m2_duty(BACK_ADDRESS, 0x00FF)
    assert claw.m1m2_duty(FRONT_ADDRESS, 1, 2)
    assert port.written[0][:4] == bytes([0x80, 32, 0x12, 0x34])
    assert port.written[1][:4] == bytes([0x81, 33, 0x00, 0xFF])
    assert port.written[2][:6] == bytes([0x80, 34, 0, 1, 0, 2])
    assert all(
        int.from_bytes(p[-2:], "big") == crc16(p[:-2]) for p in port.written
    )


def test_m1m2_speed_packet():
    port = FakeSerial(b"\xff")
    RoboClaw(port).m1m2_speed(BACK_ADDRESS, 2000, 0)
    packet = port.written[0]
    assert len(packet) == 12
    assert packet[:10] == bytes([0x81, 37, 0, 0, 0x07, 0xD0, 0, 0, 0, 0])


def test_all_speed_addresses_both_controllers():
    port = FakeSerial(b"\xff\xff")
    assert RoboClaw(port).all_speed(1, 2, 3, 4) is True
    assert [p[0] for p in port.written] == [FRONT_ADDRESS, BACK_ADDRESS]
    assert port.written[1][2:10] == bytes([0, 0, 0, 3, 0, 0, 0, 4])


def test_all_speed_false_if_back_nacks():
    assert RoboClaw(FakeSerial(b"\xff\x00")).all_speed(1, 2, 3, 4) is False


def test_all_duty():
    port = FakeSerial(b"\xff\xff")
    assert RoboClaw(port).all_duty(1, 2, 3, 4) is True
    assert [p[1] for p in port.written] == [34, 34]


def test_reset_encoders_packet():
    port = FakeSerial(b"\xff")
    assert RoboClaw(port).reset_encoders(FRONT_ADDRESS) is True
    packet = port.written[0]
    assert packet[:2] == bytes([0x80, 20])
    assert len(packet) == 4


def test_read_encoders():
    data = bytes([0, 0, 1, 0, 0xFF, 0xFF, 0xFF, 0xFF])
    port = FakeSerial(reply(0x80, 78, data))
    assert RoboClaw(port).read_encoders(FRONT_ADDRESS) == (256, 0xFFFFFFFF)
    assert port.written == [bytes([0x80, 78])]


def test_read_encoders_bad_crc():
    raw = bytearray(reply(0x80, 78, bytes(8)))
    raw[-1] ^= 0x01
    with pytest.raises(RoboClawError):
        RoboClaw(FakeSerial(bytes(raw))).read_encoders(FRONT_ADDRESS)


def test_read_command_short_reply():
    with pytest.raises(RoboClawError):
        RoboClaw(FakeSerial(b"\x00\x01")).read_command(FRONT_ADDRESS, 78, 10)


def test_read_command_returns_data():
    data = b"\x01\x02\x03"
    claw = RoboClaw(FakeSerial(reply(0x81, 18, data)))
    assert claw.read_command(BACK_ADDRESS, Command.READ_M1_SPEED, 5) == data


def test_read_speeds_signed():
    replies = reply(0x80, 18, bytes([0, 0, 0, 100, 0])) + reply(
        0x80, 19, bytes([0, 0, 1, 0, 1])
    )
    assert RoboClaw(FakeSerial(replies)).read_speeds(FRONT_ADDRESS) == (100, -256)


def test_encoders_session_from_source_test():
    replies = (
        b"\xff\xff"
        + reply(0x80, 78, bytes(8))
        + reply(0x81, 78, bytes(8))
        + b"\xff" * 8
        + reply(0x80, 78, bytes([0, 0, 0, 5, 0, 0, 0, 6]))
        + reply(0x81, 78, bytes([0, 0, 0, 7, 0, 0, 0, 8]))
    )
    port = FakeSerial(replies)
    rcl = RoboClaw(port)
    assert rcl.reset_encoders(FRONT_ADDRESS)
    assert rcl.reset_encoders(BACK_ADDRESS)
    assert rcl.read_encoders(FRONT_ADDRESS) == (0, 0)
    assert rcl.read_encoders(BACK_ADDRESS) == (0, 0)
    for address in (FRONT_ADDRESS, BACK_ADDRESS):
        assert rcl.m1_speed(address, 2000)
        assert rcl.m2_speed(address, 2000)
    for address in (FRONT_ADDRESS, BACK_ADDRESS):
        assert rcl.m1_speed(address, 0)
        assert rcl.m2_speed(address, 0)
    assert rcl.read_encoders(FRONT_ADDRESS) == (5, 6)
    assert rcl.read_encoders(BACK_ADDRESS) == (7, 8)
    assert port.written[4][:6] == bytes([0x80, 35, 0, 0, 0x07, 0xD0])


def test_context_manager_closes_port():
    port = FakeSerial()
    with RoboClaw(port) as claw:
        assert claw.port is None
    assert port.closed is True