"""Polling of the hardware button panel through the sysfs GPIO interface."""

from __future__ import annotations

import logging
from collections.abc import Callable
from os import PathLike
from pathlib import Path

from tetrix.board import Key, TetrixBoard

logger = logging.getLogger(__name__)

SYSFS_GPIO_DIR = "/sys/class/gpio"
POLL_INTERVAL_MS = 200

KEY_START_PIN = 132
KEY_DOWN_PIN = 133
KEY_LEFT_PIN = 134
KEY_RIGHT_PIN = 135
KEY_ROTATE_PIN = 136
BUTTON_PINS = range(132, 139)


def read_gpio_value(gpio: int, base_dir: str | PathLike[str] = SYSFS_GPIO_DIR) -> int:
    """Return 0 if the pin's value file starts with '0', otherwise 1.

    Raises OSError when the value file cannot be read.
    """
    path = Path(base_dir) / f"gpio{gpio}" / "value"
    with path.open("rb") as stream:
        first = stream.read(1)
    return 0 if first == b"0" else 1


class GpioButtons:
    """Reads the button pins and forwards presses to a board."""

    def __init__(
        self, board: TetrixBoard, base_dir: str | PathLike[str] = SYSFS_GPIO_DIR
    ) -> None:
        self.board = board
        self.base_dir = Path(base_dir)
        self._actions: dict[int, tuple[str, Callable[[], object]]] = {
            KEY_START_PIN: ("KEY_START:: run run run", lambda: self.board.start()),
            KEY_DOWN_PIN: (
                "KEY_DOWN :: vvv vvv vvv",
                lambda: self.board.send_kb_key(Key.D),
            ),
            KEY_LEFT_PIN: (
                "KEY_LEFT :: <<< <<< <<<",
                lambda: self.board.send_kb_key(Key.LEFT),
            ),
            KEY_RIGHT_PIN: (
                "KEY_RIGHT :: >>> >>> >>>",
                lambda: self.board.send_kb_key(Key.RIGHT),
            ),
            KEY_ROTATE_PIN: (
                "KEY_ROTATE :: ooo ooo ooo",
                lambda: self.board.send_kb_key(Key.DOWN),
            ),
        }

    def refresh(self) -> list[int]:
        """Read every button pin once; return the pins that were high."""
        pressed: list[int] = []
        for pin in BUTTON_PINS:
            try:
                state = read_gpio_value(pin, self.base_dir)
            except OSError as exc:
                logger.warning("gpio%d get value failed: %s", pin, exc)
                continue
            if state != 1:
                continue
            pressed.append(pin)
            logger.debug("PORT_NUM : %d State: %d", pin, state)
            action = self._actions.get(pin)
            if action is not None:
                message, handler = action
                logger.info(message)
                handler()
        return pressed