"""Button debouncing driven by a 1 ms periodic tick."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Optional

__all__ = ["ButtonMode", "DebounceButton"]

_DEBOUNCE_TICKS = 6
_COUNTER_WRAP = 60000
_COUNTER_RESTART = 50000


class ButtonMode(Enum):
    SINGLEPRESS = 0  # one press per push, holding is ignored
    MULTIPRESS = 1  # holding the button adds presses at increasing rate


class DebounceButton:
    """A debounced button; call :meth:`process` once every millisecond.

    ``is_button_down`` returns the raw hardware state. The optional callbacks
    receive the button: the pressed callback on the first tick the button is
    seen down, the released callback on every tick it is up.
    """

    def __init__(
        self,
        is_button_down: Callable[[], bool] | None,
        pressed_callback: Optional[Callable[[DebounceButton], object]] = None,
        released_callback: Optional[Callable[[DebounceButton], object]] = None,
        mode: ButtonMode = ButtonMode.SINGLEPRESS,
    ) -> None:
        self.is_button_down = is_button_down
        self.pressed_callback = pressed_callback
        self.released_callback = released_callback
        self.mode = mode
        self.counter = 0
        self.status = False
        self.pressed_count = 0

    def _add_press(self) -> None:
        self.pressed_count = (self.pressed_count + 1) & 0xFFFF

    def process(self) -> None:
        """Advance the debouncer by one tick."""
        if self.is_button_down is not None and self.is_button_down():
            if self.counter == 0 and self.pressed_callback is not None:
                self.pressed_callback(self)
            self.counter += 1
            if self.counter == _COUNTER_WRAP:
                self.counter = _COUNTER_RESTART

            counter = self.counter
            if counter == _DEBOUNCE_TICKS:
                self.status = True
                self._add_press()
            elif self.mode is ButtonMode.MULTIPRESS and counter >= 700:
                if counter < 2200:
                    repeat = 200
                elif counter < 4000:
                    repeat = 100
                elif counter < 6000:
                    repeat = 50
                elif counter < 8000:
                    repeat = 10
                else:
                    repeat = 1
                if counter % repeat == 0:
                    self._add_press()
        else:
            self.status = False
            self.counter = 0
            if self.released_callback is not None:
                self.released_callback(self)

    def pull_pressed_count(self) -> int:
        """Return the number of presses so far and clear it."""
        count = self.pressed_count
        self.pressed_count = 0
        return count