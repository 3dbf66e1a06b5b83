"""An on-screen joystick: a knob dragged inside a circle."""

from __future__ import annotations

import math

MAX_RADIUS = 80.0
KNOB_RADIUS = 20.0
MIN_SIZE = (200, 200)


def clamp_to_radius(dx: float, dy: float, radius: float) -> tuple[float, float]:
    """Shorten the offset (dx, dy) to ``radius`` if it reaches beyond it."""
    length = math.hypot(dx, dy)
    if length > radius:
        return dx / length * radius, dy / length * radius
    return dx, dy


class Joystick:
    """State of one joystick.

    Pointer positions are given in the same coordinates as the centre.
    Every input that moves the knob returns its direction as (x, y), each
    component in [-1, 1] relative to the radius.
    """

    def __init__(self, radius: float = MAX_RADIUS) -> None:
        if radius <= 0:
            raise ValueError("radius must be positive")
        self.radius = float(radius)
        self.center: tuple[float, float] = (0.0, 0.0)
        self.stick: tuple[float, float] = self.center
        self.dragging = False

    def set_center(self, x: float, y: float) -> None:
        self.center = (float(x), float(y))

    def _aim(self, x: float, y: float) -> tuple[float, float]:
        cx, cy = self.center
        dx, dy = clamp_to_radius(x - cx, y - cy, self.radius)
        self.stick = (cx + dx, cy + dy)
        return dx / self.radius, dy / self.radius

    def press(self, x: float, y: float) -> tuple[float, float]:
        """Grab the knob at a pointer position."""
        self.dragging = True
        return self._aim(x, y)

    def move(self, x: float, y: float) -> tuple[float, float] | None:
        """Drag the knob; returns None when the knob is not held."""
        if not self.dragging:
            return None
        return self._aim(x, y)

    def release(self) -> tuple[float, float]:
        """Let go of the knob, which springs back to the centre."""
        self.dragging = False
        self.stick = self.center
        return 0.0, 0.0

    def touch(self, x: float, y: float, ended: bool = False) -> tuple[float, float]:
        """Handle a touch point; the knob stays held until the touch ends."""
        direction = self._aim(x, y)
        self.dragging = not ended
        return direction

    def knob(self) -> tuple[float, float]:
        """Where the knob is drawn."""
        return self.stick if self.dragging else self.center