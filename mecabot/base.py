"""Kinematics and odometry of a four-wheel mecanum base."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Sequence

from mecabot.roboclaw import BACK_ADDRESS, FRONT_ADDRESS, RoboClaw, RoboClawError

DEVICE = "/dev/ttyAMA0"
BAUD_RATE = 38400

QPPR = 1300
WHEEL_DIAMETER = 0.06
WHEEL_RADIUS = WHEEL_DIAMETER / 2.0
MAX_RPM = 330
LENGTH = 0.32
WIDTH = 0.28
PI = 3.14159

LX = LENGTH / 2.0
LY = WIDTH / 2.0
LXY = LX + LY

QPPR_2_RAD = PI * WHEEL_DIAMETER / QPPR
RAD_2_QPPR = 1.0 / QPPR_2_RAD


class Motor(enum.IntEnum):
    FRONT_LEFT = 0
    FRONT_RIGHT = 1
    BACK_LEFT = 2
    BACK_RIGHT = 3


@dataclass(frozen=True)
class Odometry:
    x: float
    y: float
    ang: float


def forward_kinematics(wheel_speeds: Sequence[float]) -> tuple[float, float, float]:
    """Body velocity (vx, vy, vrad) from wheel speeds ordered FL, FR, BL, BR."""
    fl, fr, bl, br = wheel_speeds
    vx = WHEEL_RADIUS * (-fl + fr + bl - br) / 4.0
    vy = WHEEL_RADIUS * (fl + fr + bl + br) / 4.0
    vrad = WHEEL_RADIUS * (-fl + fr - bl + br) / (4.0 * LXY)
    return vx, vy, vrad


def inverse_kinematics(vx: float, vy: float, vrad: float) -> tuple[float, float, float, float]:
    """Wheel speeds ordered FL, FR, BL, BR for a body velocity."""
    turn = vrad * LXY
    return (
        vx + vy - turn,
        -vx + vy + turn,
        -vx + vy - turn,
        vx + vy + turn,
    )


def _signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


class Base:
    """A mecanum base driven by two controllers, front and back."""

    def __init__(self, roboclaw: RoboClaw | None = None) -> None:
        self._roboclaw = roboclaw if roboclaw is not None else RoboClaw(DEVICE, BAUD_RATE)
        self._target_velocity = [0, 0, 0, 0]
        self._encoder_counts = [0, 0, 0, 0]
        self._x = self._y = self._ang = 0.0
        self._roboclaw.reset_encoders(FRONT_ADDRESS)
        self._roboclaw.reset_encoders(BACK_ADDRESS)
        self._roboclaw.m1m2_speed(FRONT_ADDRESS, 0, 0)
        self._roboclaw.m1m2_speed(BACK_ADDRESS, 0, 0)

    def set_velocity(self, vx: float, vy: float, vrad: float) -> None:
        """Store the wheel targets, in encoder pulses, for a body velocity."""
        self._target_velocity = [
            int(speed * RAD_2_QPPR) for speed in inverse_kinematics(vx, vy, vrad)
        ]

    def send_speed(self) -> bool:
        """Send the stored wheel targets to both controllers."""
        target = self._target_velocity
        front = self._roboclaw.m1m2_speed(
            FRONT_ADDRESS, target[Motor.FRONT_LEFT], target[Motor.FRONT_RIGHT]
        )
        back = self._roboclaw.m1m2_speed(
            BACK_ADDRESS, target[Motor.BACK_LEFT], target[Motor.BACK_RIGHT]
        )
        return bool(front and back)

    def read_encoders(self) -> bool:
        """Integrate the encoder change since the last read into the pose.

        Returns False, leaving the pose untouched, if either controller
        failed to answer.
        """
        try:
            front = self._roboclaw.read_encoders(FRONT_ADDRESS)
            back = self._roboclaw.read_encoders(BACK_ADDRESS)
        except RoboClawError:
            return False

        counts = [front[0], front[1], back[0], back[1]]
        deltas = [
            _signed32(new - old) * QPPR_2_RAD
            for new, old in zip(counts, self._encoder_counts)
        ]
        self._encoder_counts = counts

        d_x, d_y, d_ang = forward_kinematics(deltas)
        heading = self._ang + d_ang / 2
        self._x += d_x * math.cos(heading) - d_y * math.sin(heading)
        self._y += d_x * math.sin(heading) + d_y * math.cos(heading)
        self._ang += d_ang
        return True

    def reset_odometry(self) -> None:
        self._encoder_counts = [0, 0, 0, 0]
        self._x = self._y = self._ang = 0.0
        self._roboclaw.reset_encoders(FRONT_ADDRESS)
        self._roboclaw.reset_encoders(BACK_ADDRESS)

    def odometry(self) -> Odometry:
        return Odometry(self._x, self._y, self._ang)