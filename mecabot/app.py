"""Window with two on-screen joysticks that drive the robot over UDP."""

from __future__ import annotations

import argparse
import time
from typing import Sequence

import pygame

from mecabot.joystick import KNOB_RADIUS, Joystick
from mecabot.remote import CLIENT_PORT, SERVER_IP, SERVER_PORT, SEND_INTERVAL, RemoteLink

WINDOW_SIZE = (440, 240)
LABEL_HEIGHT = 30
FRAME_RATE = 100
BACKGROUND = (240, 240, 240)
LIGHT_GRAY = (192, 192, 192)
DARK_GRAY = (128, 128, 128)
TEXT_COLOR = (0, 0, 0)
WAITING = "Waiting for UDP data..."


def joystick_centers(width: int, height: int) -> tuple[tuple[int, int], tuple[int, int]]:
    """Centres of the left and right joysticks in a window of this size.

    The joysticks share the area below the status label, side by side.
    """
    half = width // 2
    y = LABEL_HEIGHT + (height - LABEL_HEIGHT) // 2
    return (half // 2, y), (half + (width - half) // 2, y)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mecabot-remote", description="Drive the robot with two on-screen joysticks."
    )
    parser.add_argument("--server-ip", default=SERVER_IP, help="robot address")
    parser.add_argument("--server-port", type=int, default=SERVER_PORT, help="robot port")
    parser.add_argument("--client-port", type=int, default=CLIENT_PORT, help="port for replies")
    return parser.parse_args(argv)


def _draw(screen: pygame.Surface, font: pygame.font.Font, status: str, sticks) -> None:
    screen.fill(BACKGROUND)
    screen.blit(font.render(status, True, TEXT_COLOR), (8, 6))
    for stick in sticks:
        pygame.draw.circle(screen, LIGHT_GRAY, stick.center, stick.radius)
        pygame.draw.circle(screen, DARK_GRAY, stick.knob(), KNOB_RADIUS)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    pygame.init()
    try:
        screen = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
        pygame.display.set_caption("Joysticks")
        font = pygame.font.Font(None, 24)
        sticks = (Joystick(), Joystick())
        status = WAITING
        with RemoteLink(args.server_ip, args.server_port, args.client_port) as link:
            updaters = (link.update_left, link.update_right)
            pointer: int | None = None
            fingers: dict[int, int] = {}
            clock = pygame.time.Clock()
            next_send = time.monotonic()
            running = True
            while running:
                width, height = screen.get_size()
                for stick, center in zip(sticks, joystick_centers(width, height)):
                    stick.set_center(*center)

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif getattr(event, "touch", False) and event.type in (
                        pygame.MOUSEBUTTONDOWN,
                        pygame.MOUSEMOTION,
                        pygame.MOUSEBUTTONUP,
                    ):
                        continue
                    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        pointer = 0 if event.pos[0] < width // 2 else 1
                        updaters[pointer](*sticks[pointer].press(*event.pos))
                    elif event.type == pygame.MOUSEMOTION and pointer is not None:
                        direction = sticks[pointer].move(*event.pos)
                        if direction is not None:
                            updaters[pointer](*direction)
                    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                        if pointer is not None:
                            updaters[pointer](*sticks[pointer].release())
                            pointer = None
                    elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
                        x, y = event.x * width, event.y * height
                        if event.type == pygame.FINGERDOWN:
                            side = 0 if x < width // 2 else 1
                            if side in fingers.values():
                                continue
                            fingers[event.finger_id] = side
                        side = (
                            fingers.pop(event.finger_id, None)
                            if event.type == pygame.FINGERUP
                            else fingers.get(event.finger_id)
                        )
                        if side is not None:
                            ended = event.type == pygame.FINGERUP
                            updaters[side](*sticks[side].touch(x, y, ended))

                now = time.monotonic()
                if now >= next_send:
                    try:
                        link.send()
                    except OSError:
                        pass
                    next_send = now + SEND_INTERVAL

                statuses = link.poll()
                if statuses:
                    status = statuses[-1]

                _draw(screen, font, status, sticks)
                pygame.display.flip()
                clock.tick(FRAME_RATE)
    finally:
        pygame.quit()
    return 0