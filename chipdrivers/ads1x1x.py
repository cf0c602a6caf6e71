"""Driver for the ADS1013/4/5 and ADS1113/4/5 I2C analog-to-digital converters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "I2C_ADDRESS",
    "REG_CONVERSION",
    "REG_CONFIG",
    "REG_LO_THRESHOLD",
    "REG_HI_THRESHOLD",
    "STATUS_BEGIN_CONVERSION",
    "STATUS_PERFORMING_CONVERSION",
    "STATUS_NOT_PERFORMING_CONVERSION",
    "DEFAULT_CONFIG",
    "Variant",
    "AddrPin",
    "Mux",
    "PGA",
    "Mode",
    "ADS101xDataRate",
    "ADS111xDataRate",
    "ComparatorMode",
    "ComparatorPolarity",
    "ComparatorLatching",
    "ComparatorQueue",
    "ADS1X1XConfig",
    "ADS1X1X",
]

I2C_ADDRESS = 0b10010000

REG_CONVERSION = 0b00
REG_CONFIG = 0b01
REG_LO_THRESHOLD = 0b10
REG_HI_THRESHOLD = 0b11

# OS bit; may only be written in power-down mode.
STATUS_BEGIN_CONVERSION = 1
STATUS_PERFORMING_CONVERSION = 0
STATUS_NOT_PERFORMING_CONVERSION = 1

DEFAULT_CONFIG = 0x8583

WriteRegFn = Callable[[int, int, bytes], object]
"""Called as ``write_reg(i2c_address, register, data)``."""
ReadRegFn = Callable[[int, int, int], bytes]
"""Called as ``read_reg(i2c_address, register, count)``; returns the bytes read."""


class Variant(IntEnum):
    ADS1013 = 13  # 12 bit, 3300 sps, 1 channel
    ADS1014 = 14  # 12 bit, 3300 sps, 1 channel, PGA, comparator
    ADS1015 = 15  # 12 bit, 3300 sps, 2 (4) channels, PGA, comparator
    ADS1113 = 113  # 16 bit, 860 sps, 1 channel
    ADS1114 = 114  # 16 bit, 860 sps, 1 channel, PGA, comparator
    ADS1115 = 115  # 16 bit, 860 sps, 2 (4) channels, PGA, comparator


class AddrPin(IntEnum):
    GND = 0b000
    VDD = 0b010
    SDA = 0b100
    SCL = 0b110


class Mux(IntEnum):
    """Input multiplexer (ADS1x15 only)."""

    AIN0_AIN1 = 0b000
    AIN0_AIN3 = 0b001
    AIN1_AIN3 = 0b010
    AIN2_AIN3 = 0b011
    AIN0_GND = 0b100
    AIN1_GND = 0b101
    AIN2_GND = 0b110
    AIN3_GND = 0b111


class PGA(IntEnum):
    """Programmable gain amplifier full-scale range (ADS1x14/ADS1x15 only)."""

    FS_6_144V = 0b000
    FS_4_096V = 0b001
    FS_2_048V = 0b010
    FS_1_024V = 0b011
    FS_0_512V = 0b100
    FS_0_256V = 0b101


class Mode(IntEnum):
    CONTINUOUS = 0
    SINGLE_SHOT = 1


class ADS101xDataRate(IntEnum):
    SPS_128 = 0b000
    SPS_250 = 0b001
    SPS_490 = 0b010
    SPS_920 = 0b011
    SPS_1600 = 0b100
    SPS_2400 = 0b101
    SPS_3300 = 0b110


class ADS111xDataRate(IntEnum):
    SPS_8 = 0b000
    SPS_16 = 0b001
    SPS_32 = 0b010
    SPS_64 = 0b011
    SPS_128 = 0b100
    SPS_250 = 0b101
    SPS_475 = 0b110
    SPS_860 = 0b111


class ComparatorMode(IntEnum):
    TRADITIONAL = 0
    WINDOW = 1


class ComparatorPolarity(IntEnum):
    ACTIVE_LOW = 0
    ACTIVE_HIGH = 1


class ComparatorLatching(IntEnum):
    NON_LATCHING = 0
    LATCHING = 1


class ComparatorQueue(IntEnum):
    ONE_CONVERSION = 0b00
    TWO_CONVERSIONS = 0b01
    FOUR_CONVERSIONS = 0b10
    DISABLE = 0b11


# (name, bit offset, width) of each field in the config register
_FIELDS = (
    ("comp_que", 0, 2),
    ("comp_lat", 2, 1),
    ("comp_pol", 3, 1),
    ("comp_mode", 4, 1),
    ("dr", 5, 3),
    ("mode", 8, 1),
    ("pga", 9, 3),
    ("mux", 12, 3),
    ("os", 15, 1),
)


@dataclass
class ADS1X1XConfig:
    """Contents of the 16-bit config register."""

    comp_que: int = ComparatorQueue.DISABLE
    comp_lat: int = ComparatorLatching.NON_LATCHING
    comp_pol: int = ComparatorPolarity.ACTIVE_LOW
    comp_mode: int = ComparatorMode.TRADITIONAL
    dr: int = 0b100
    mode: int = Mode.SINGLE_SHOT
    pga: int = PGA.FS_2_048V
    mux: int = Mux.AIN0_AIN1
    os: int = 1

    @classmethod
    def from_value(cls, value: int) -> ADS1X1XConfig:
        return cls(
            **{name: (value >> shift) & ((1 << width) - 1) for name, shift, width in _FIELDS}
        )

    @property
    def value(self) -> int:
        result = 0
        for name, shift, width in _FIELDS:
            result |= (int(getattr(self, name)) & ((1 << width) - 1)) << shift
        return result


class ADS1X1X:
    """ADS1x1x converter reached through user-supplied register callables.

    Register contents travel in host (little-endian) byte order.
    """

    def __init__(
        self,
        variant: Variant,
        addr_pin: AddrPin,
        write_reg: WriteRegFn,
        read_reg: ReadRegFn,
    ) -> None:
        self.variant = Variant(variant)
        self.addr = I2C_ADDRESS + int(addr_pin)
        self.write_reg = write_reg
        self.read_reg = read_reg
        self.config = ADS1X1XConfig.from_value(DEFAULT_CONFIG)

    def _write16(self, reg: int, value: int) -> None:
        self.write_reg(self.addr, reg, (value & 0xFFFF).to_bytes(2, "little"))

    def _read16(self, reg: int, signed: bool) -> int:
        data = bytes(self.read_reg(self.addr, reg, 2))
        if len(data) != 2:
            raise OSError(f"short read from register {reg}")
        return int.from_bytes(data, "little", signed=signed)

    def set_lo_threshold(self, val: int) -> None:
        # The low threshold is always padded by 4 bits.
        self._write16(REG_LO_THRESHOLD, val * 16)

    def set_hi_threshold(self, val: int) -> None:
        if self.variant <= Variant.ADS1015:
            val *= 16  # 4-bit padding for the 12-bit converters
        self._write16(REG_HI_THRESHOLD, val)

    def write_config(self) -> None:
        self._write16(REG_CONFIG, self.config.value)

    def read_lo_threshold(self) -> int:
        return self._read16(REG_LO_THRESHOLD, signed=True)

    def read_hi_threshold(self) -> int:
        return self._read16(REG_HI_THRESHOLD, signed=True)

    def read_config(self) -> ADS1X1XConfig:
        self.config = ADS1X1XConfig.from_value(self._read16(REG_CONFIG, signed=False))
        return self.config

    def set_data_rate(self, data_rate: int) -> None:
        self.config.dr = int(data_rate) & 0b111

    def set_pga(self, pga: PGA) -> None:
        self.config.pga = int(pga) & 0b111

    def set_mux(self, mux: Mux) -> None:
        self.config.mux = int(mux) & 0b111

    def set_mode(self, mode: Mode) -> None:
        self.config.mode = int(mode) & 1

    def set_comparator(
        self,
        mode: ComparatorMode,
        polarity: ComparatorPolarity,
        latching: ComparatorLatching,
        queue: ComparatorQueue,
    ) -> None:
        self.config.comp_mode = int(mode) & 1
        self.config.comp_pol = int(polarity) & 1
        self.config.comp_lat = int(latching) & 1
        self.config.comp_que = int(queue) & 0b11

    def start_one_shot(self) -> None:
        self.config.os = STATUS_BEGIN_CONVERSION
        self.config.mode = Mode.SINGLE_SHOT
        self.write_config()

    def start_continuous(self) -> None:
        self.config.mode = Mode.CONTINUOUS
        self.write_config()