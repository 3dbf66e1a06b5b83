# mecabot

Control of a four-wheel mecanum robot driven by two RoboClaw motor
controllers, together with a two-stick joystick remote that streams the
stick positions over UDP.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Motor controllers

`mecabot.roboclaw.RoboClaw` speaks the RoboClaw packet-serial protocol. Give
it a device path, which it opens as 8N1 without flow control (defaults:
`/dev/ttyAMA0` at 38400 baud), or any already open serial-like object with
`write`, `read`, `flush` and `close`. It is a context manager that closes
the port on exit.

```python
from mecabot.roboclaw import FRONT_ADDRESS, RoboClaw

with RoboClaw("/dev/ttyAMA0", 38400) as claw:
    claw.reset_encoders(FRONT_ADDRESS)
    claw.m1m2_speed(FRONT_ADDRESS, 2000, 2000)
    left, right = claw.read_encoders(FRONT_ADDRESS)
    claw.m1m2_speed(FRONT_ADDRESS, 0, 0)
```

The write commands (`m1_duty`, `m2_duty`, `m1m2_duty`, `m1_speed`,
`m2_speed`, `m1m2_speed`, `reset_encoders`) return `True` when the
controller answers with its acknowledgement byte and `False` otherwise.
`all_speed` and `all_duty` set four motors at once, the first two on the
front controller (`0x80`) and the last two on the back one (`0x81`), and
return `True` only if both acknowledged. A value that does not fit its
field (2 bytes for duty, 4 for speed) raises `ValueError`.

The read commands return values rather than flags:

- `read_command(address, command, n)` returns the data bytes of an
  `n`-byte reply, without its two CRC bytes;
- `read_encoders(address)` returns both encoder counts as unsigned 32-bit
  integers;
- `read_speeds(address)` returns both motor speeds, signed.

A short reply or a CRC mismatch raises `RoboClawError`.

Command codes are in the `Command` enum. `crc16(data, init=0)` computes the
protocol's CRC-16 (polynomial 0x1021), and `build_packet(address, command,
payload)` frames a packet with its big-endian CRC appended.

## Robot base

`mecabot.base.Base` drives the four wheels through the two controllers and
tracks odometry from the encoders. Wheels are indexed by `Motor`:
front-left, front-right, back-left, back-right. Constructing a `Base` resets
both controllers' encoders and stops all motors; without an argument it
opens `/dev/ttyAMA0` at 38400 baud.

```python
from mecabot.base import Base
from mecabot.roboclaw import RoboClaw

base = Base(RoboClaw("/dev/ttyAMA0", 38400))
base.set_velocity(0.2, 0.0, 0.0)   # vx, vy, rotation
base.send_speed()
base.read_encoders()
print(base.odometry())              # Odometry(x=..., y=..., ang=...)
base.reset_odometry()
```

- `set_velocity(vx, vy, vrad)` stores the four wheel targets, converted to
  encoder pulses; `send_speed()` sends them and returns `True` if both
  controllers acknowledged.
- `read_encoders()` reads both controllers, integrates the change since the
  last read into the pose and returns `True`; if either controller fails to
  answer it returns `False` and leaves the pose as it was.
- `odometry()` returns the pose as an `Odometry(x, y, ang)`;
  `reset_odometry()` zeroes it and resets the encoders.

`inverse_kinematics(vx, vy, vrad)` gives the four wheel speeds for a body
velocity, and `forward_kinematics(wheel_speeds)` turns four wheel speeds
back into `(vx, vy, vrad)`.

## Joystick remote

```
mecabot-remote
```

opens a window with two on-screen joysticks, driven by mouse or touch. Every
10 ms it sends their positions to the robot as one UDP datagram of the form

```
L:<x>,<y>  R:<x>,<y>
```

with each value between -1 and 1. It listens for replies on UDP port 40001
and shows the last one received at the top of the window, as
`From <host>:<port> → <message>`.

Options:

- `--server-ip` — robot address (default `192.168.1.124`)
- `--server-port` — robot port (default `40000`)
- `--client-port` — local port for replies (default `40001`)

The parts it is built from can be used without a window.
`mecabot.joystick.Joystick` handles the stick geometry: `press`, `move`,
`touch` and `release` return the direction as `(x, y)`, and `knob()` says
where the knob is drawn; `clamp_to_radius` keeps an offset within the
circle. `mecabot.remote.RemoteLink` handles the UDP traffic through
`update_left`, `update_right`, `send` (which returns the datagram sent) and
`poll` (which returns a status line for each waiting reply); the text
formats come from `format_command` and `format_status`.

## What this package does not do

There is no program here for the robot side of the link: nothing listens on
port 40000, reads the joystick datagrams and turns them into `Base`
velocities. The remote only sends its datagrams and shows whatever replies
arrive.