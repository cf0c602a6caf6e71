"""Driver for DHT-family temperature and humidity sensors."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

__all__ = [
    "HOST_START_SIGNAL_DOWN_TIME",
    "BUS_MASTER_RELEASED_TIME",
    "READ_TIMEOUT",
    "DHTStage",
    "DHT",
]

HOST_START_SIGNAL_DOWN_TIME = 1000  # us
BUS_MASTER_RELEASED_TIME = 30  # us
READ_TIMEOUT = 6000  # us

PinFn = Callable[[], object]


class DHTStage(Enum):
    IDLE = 0
    HOST_START = 1
    SLAVE_RESPONSE = 2
    DATA = 3
    FINISHED = 4
    ERROR = 5
    INVALID_PARITY = 6


class DHT:
    """DHT sensor on a single data pin.

    ``read_timer`` returns microseconds since the last ``reset_timer`` call.
    :meth:`interrupt_handler_io` must be called on every falling edge of the
    data pin while :meth:`start_reading` is running.
    """

    def __init__(
        self,
        pin_output: PinFn,
        pin_input: PinFn,
        pin_low: PinFn,
        pin_high: PinFn,
        pin_read: Callable[[], int],
        reset_timer: PinFn,
        read_timer: Callable[[], int],
    ) -> None:
        self.pin_output = pin_output
        self.pin_input = pin_input
        self.pin_low = pin_low
        self.pin_high = pin_high
        self.pin_read = pin_read
        self.reset_timer = reset_timer
        self.read_timer = read_timer

        self.stage = DHTStage.IDLE
        self.data = bytearray(5)
        self._mask = 0x80
        self._index = 0

    def start_reading(self) -> None:
        """Send the start signal and block until the transfer ends or fails."""
        self.pin_output()
        self.pin_high()
        self.stage = DHTStage.HOST_START
        self.data = bytearray(5)
        self._mask = 0x80
        self._index = 0
        self.reset_timer()
        self.pin_low()

        while True:
            if self.read_timer() > READ_TIMEOUT:
                self.stage = DHTStage.ERROR
                break
            stage = self.stage
            if stage is DHTStage.HOST_START:
                if self.read_timer() > HOST_START_SIGNAL_DOWN_TIME:
                    self.pin_high()
                    self.reset_timer()
                    while self.read_timer() < BUS_MASTER_RELEASED_TIME:
                        pass
                    self.reset_timer()
                    self.pin_low()
                    while self.read_timer() < 5:
                        pass
                    self.pin_input()
                    self.stage = DHTStage.SLAVE_RESPONSE
            elif stage in (DHTStage.SLAVE_RESPONSE, DHTStage.DATA):
                if self.read_timer() > HOST_START_SIGNAL_DOWN_TIME:
                    self.stage = DHTStage.ERROR
            elif stage in (DHTStage.ERROR, DHTStage.FINISHED):
                break

    def _take_pulse(self) -> int:
        width = self.read_timer() & 0xFF
        self.reset_timer()
        return width

    def interrupt_handler_io(self) -> None:
        """Handle a falling edge on the data pin."""
        if self.stage is DHTStage.DATA:
            width = self._take_pulse()
            if width < 60 or width > 200:
                self.stage = DHTStage.ERROR
                return
            if width > 90:
                self.data[self._index] |= self._mask
            if self._mask == 0x01:
                self._mask = 0x80
                self._index += 1
                if self._index >= 5:
                    self.stage = DHTStage.FINISHED
            else:
                self._mask >>= 1
        elif self.stage is DHTStage.SLAVE_RESPONSE:
            width = self._take_pulse()
            if width < 130 or width > 200:
                self.stage = DHTStage.ERROR
            else:
                self.stage = DHTStage.DATA

    def get_value(self) -> tuple[int, int] | None:
        """Return ``(humidity, temperature)`` in tenths, or None if no reading is complete.

        Raises ValueError if the received parity byte is wrong.
        """
        if self.stage is not DHTStage.FINISHED:
            return None
        if sum(self.data[:4]) & 0xFF != self.data[4]:
            self.stage = DHTStage.INVALID_PARITY
            raise ValueError("DHT parity byte mismatch")
        humidity = ((self.data[0] << 8) + self.data[1]) & 0xFFFF
        temperature = ((self.data[2] & 0x7F) << 8) + self.data[3]
        if self.data[2] & 0x80:
            temperature = -temperature
        return humidity, temperature