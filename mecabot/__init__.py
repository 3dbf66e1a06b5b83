"""Mecanum robot base control over RoboClaw controllers, with a UDP joystick remote."""

__version__ = "0.1.0"
__all__ = ["app", "base", "joystick", "remote", "roboclaw"]