"""Bit-banged driver for the CS1237 24-bit sigma-delta ADC."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

__all__ = [
    "CMD_WRITE_CONFIG",
    "CMD_READ_CONFIG",
    "SPEED_SEL_1280HZ",
    "SPEED_SEL_640HZ",
    "SPEED_SEL_40HZ",
    "SPEED_SEL_10HZ",
    "PGA_SEL_128",
    "PGA_SEL_64",
    "PGA_SEL_2",
    "PGA_SEL_1",
    "CH_SEL_CHANNEL_A",
    "CH_SEL_TEMPERATURE",
    "CH_SEL_INTERNAL_SHORT",
    "REF_OUT_OFF",
    "REF_OUT_ON",
    "CS1237Config",
    "CS1237",
]

CMD_WRITE_CONFIG = 0x65
CMD_READ_CONFIG = 0x56

SPEED_SEL_1280HZ = 0b11
SPEED_SEL_640HZ = 0b10
SPEED_SEL_40HZ = 0b01
SPEED_SEL_10HZ = 0b00

PGA_SEL_128 = 0b11
PGA_SEL_64 = 0b10
PGA_SEL_2 = 0b01
PGA_SEL_1 = 0b00

CH_SEL_CHANNEL_A = 0b00
CH_SEL_TEMPERATURE = 0b10
CH_SEL_INTERNAL_SHORT = 0b11

REF_OUT_OFF = 1
REF_OUT_ON = 0

PinFn = Callable[[], object]
PinReadFn = Callable[[], int]
DelayFn = Callable[[int], object]


@dataclass
class CS1237Config:
    """Contents of the 8-bit config register."""

    ch_sel: int = 0
    pga_sel: int = 0
    speed_sel: int = 0
    refo_off: int = 0
    reserved: int = 0

    @classmethod
    def from_value(cls, value: int) -> CS1237Config:
        return cls(
            ch_sel=value & 0b11,
            pga_sel=(value >> 2) & 0b11,
            speed_sel=(value >> 4) & 0b11,
            refo_off=(value >> 6) & 1,
            reserved=(value >> 7) & 1,
        )

    @property
    def value(self) -> int:
        return (
            (self.ch_sel & 0b11)
            | (self.pga_sel & 0b11) << 2
            | (self.speed_sel & 0b11) << 4
            | (self.refo_off & 1) << 6
            | (self.reserved & 1) << 7
        )


class CS1237:
    """CS1237 ADC driven through pin-level callables.

    The constructor resets the converter by powering it down and waking it up.
    """

    def __init__(
        self,
        set_pin_input: PinFn,
        set_pin_output: PinFn,
        set_clk_low: PinFn,
        set_clk_high: PinFn,
        set_dat_low: PinFn,
        set_dat_high: PinFn,
        read_dat: PinReadFn,
        delay_us: DelayFn,
    ) -> None:
        self.set_pin_input = set_pin_input
        self.set_pin_output = set_pin_output
        self.set_clk_low = set_clk_low
        self.set_clk_high = set_clk_high
        self.set_dat_low = set_dat_low
        self.set_dat_high = set_dat_high
        self.read_dat = read_dat
        self.delay_us = delay_us

        self.value = 0
        self.config = CS1237Config()

        self.set_pin_input()
        self.power_down()
        self.delay_us(140)  # at least 100 us to power down
        self.wake_up()

    def power_down(self) -> None:
        self.set_clk_high()

    def wake_up(self) -> None:
        self.set_clk_low()
        self.delay_us(12)  # at least 10 us to wake up

    def data_ready(self) -> bool:
        return self.read_dat() == 0

    def _read_bit(self) -> bool:
        self.set_clk_high()
        bit = bool(self.read_dat())
        self.set_clk_low()
        return bit

    def _write_bit(self, high: bool) -> None:
        if high:
            self.set_dat_high()
        else:
            self.set_dat_low()
        self.set_clk_high()
        self.set_clk_low()

    def adc_read(self) -> int:
        """Clock in one 24-bit conversion and return it as a signed value."""
        raw = 0
        for _ in range(24):
            raw = (raw << 1) | self._read_bit()
        self.value = (raw ^ 0x800000) - 0x800000
        return self.value

    def poll(self) -> int | None:
        """Return a new conversion result, or None if none is ready."""
        self.wake_up()
        if not self.data_ready():
            return None
        value = self.adc_read()
        self._read_bit()  # leaves the data line high
        return value

    def _rw_config(self, write: bool) -> None:
        self.adc_read()
        # bits 25-29: update flags and turnaround
        for _ in range(5):
            self._read_bit()

        self.set_pin_output()
        cmd = CMD_WRITE_CONFIG if write else CMD_READ_CONFIG
        for shift in range(6, -1, -1):
            self._write_bit(bool((cmd >> shift) & 1))

        if write:
            self._read_bit()  # bit 37
            config = self.config.value
            for shift in range(7, -1, -1):
                self._write_bit(bool((config >> shift) & 1))
            self.set_pin_input()
        else:
            self.set_pin_input()
            self._read_bit()  # bit 37, device switches to output
            data = 0
            for _ in range(8):
                data = ((data << 1) & 0xFF) | self._read_bit()
            self.config = CS1237Config.from_value(data)

        self._read_bit()  # bit 46

    def read_config(self) -> CS1237Config:
        self._rw_config(write=False)
        return self.config

    def write_config(self) -> None:
        self._rw_config(write=True)