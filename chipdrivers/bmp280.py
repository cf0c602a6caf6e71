"""Driver for the BMP280 barometric pressure and temperature sensor."""

from __future__ import annotations

import struct
from collections.abc import Callable
from dataclasses import dataclass

__all__ = [
    "I2C_ADDRESS_LOW",
    "I2C_ADDRESS_HIGH",
    "REG_ID",
    "REG_RESET",
    "REG_STATUS",
    "REG_CTRL_MEAS",
    "REG_CONFIG",
    "REG_PRESS_MSB",
    "REG_TEMP_MSB",
    "REG_DIG_T1",
    "REG_DIG_P1",
    "REG_DIG_P4",
    "REG_DIG_P7",
    "CHIP_IDS",
    "SOFT_RESET",
    "MODE_SLEEP",
    "MODE_FORCED",
    "MODE_NORMAL",
    "STANDBYTIME_0M5",
    "STANDBYTIME_62M5",
    "STANDBYTIME_125M",
    "STANDBYTIME_250M",
    "STANDBYTIME_500M",
    "STANDBYTIME_1000M",
    "STANDBYTIME_2000M",
    "STANDBYTIME_4000M",
    "OVERSAMPLING_SKIPPED",
    "OVERSAMPLING_1X",
    "OVERSAMPLING_2X",
    "OVERSAMPLING_4X",
    "OVERSAMPLING_8X",
    "OVERSAMPLING_16X",
    "FILTER_COEFF_OFF",
    "FILTER_COEFF_2",
    "FILTER_COEFF_4",
    "FILTER_COEFF_8",
    "FILTER_COEFF_16",
    "ULTRA_LOW_POWER_MODE",
    "LOW_POWER_MODE",
    "STANDARD_RESOLUTION_MODE",
    "HIGH_RESOLUTION_MODE",
    "ULTRA_HIGH_RESOLUTION_MODE",
    "WORK_MODE_OVERSAMPLING",
    "DeviceNotFoundError",
    "BMP280Status",
    "BMP280ControlMeas",
    "BMP280Config",
    "BMP280",
]

I2C_ADDRESS_LOW = 0b11101100  # SDO pulled low
I2C_ADDRESS_HIGH = 0b11101110  # SDO pulled high

REG_ID = 0xD0
REG_RESET = 0xE0
REG_STATUS = 0xF3
REG_CTRL_MEAS = 0xF4
REG_CONFIG = 0xF5
REG_PRESS_MSB = 0xF7
REG_PRESS_LSB = 0xF8
REG_PRESS_XLSB = 0xF9
REG_TEMP_MSB = 0xFA
REG_TEMP_LSB = 0xFB
REG_TEMP_XLSB = 0xFC

REG_DIG_T1 = 0x88
REG_DIG_P1 = 0x8E
REG_DIG_P4 = 0x94
REG_DIG_P7 = 0x9A

CHIP_ID1 = 0x56
CHIP_ID2 = 0x57
CHIP_ID3 = 0x58
BME280_CHIP_ID = 0x60
BME680_CHIP_ID = 0x61
CHIP_IDS = frozenset({CHIP_ID1, CHIP_ID2, CHIP_ID3, BME280_CHIP_ID, BME680_CHIP_ID})

SOFT_RESET = 0xB6

MODE_SLEEP = 0b00
MODE_FORCED = 0b01  # same as 0b10
MODE_NORMAL = 0b11

STANDBYTIME_0M5 = 0b000
STANDBYTIME_62M5 = 0b001
STANDBYTIME_125M = 0b010
STANDBYTIME_250M = 0b011
STANDBYTIME_500M = 0b100
STANDBYTIME_1000M = 0b101
STANDBYTIME_2000M = 0b110
STANDBYTIME_4000M = 0b111

OVERSAMPLING_SKIPPED = 0b000
OVERSAMPLING_1X = 0b001
OVERSAMPLING_2X = 0b010
OVERSAMPLING_4X = 0b011
OVERSAMPLING_8X = 0b100
OVERSAMPLING_16X = 0b101

FILTER_COEFF_OFF = 0b000
FILTER_COEFF_2 = 0b001
FILTER_COEFF_4 = 0b010
FILTER_COEFF_8 = 0b011
FILTER_COEFF_16 = 0b100

ULTRA_LOW_POWER_MODE = 0x00
LOW_POWER_MODE = 0x01
STANDARD_RESOLUTION_MODE = 0x02
HIGH_RESOLUTION_MODE = 0x03
ULTRA_HIGH_RESOLUTION_MODE = 0x04

# work mode -> (temperature oversampling, pressure oversampling)
WORK_MODE_OVERSAMPLING = {
    ULTRA_LOW_POWER_MODE: (OVERSAMPLING_1X, OVERSAMPLING_1X),
    LOW_POWER_MODE: (OVERSAMPLING_1X, OVERSAMPLING_2X),
    STANDARD_RESOLUTION_MODE: (OVERSAMPLING_1X, OVERSAMPLING_4X),
    HIGH_RESOLUTION_MODE: (OVERSAMPLING_1X, OVERSAMPLING_8X),
    ULTRA_HIGH_RESOLUTION_MODE: (OVERSAMPLING_2X, OVERSAMPLING_16X),
}

WriteRegFn = Callable[[int, int, bytes], object]
"""Called as ``write_reg(i2c_address, register, data)``."""
ReadRegFn = Callable[[int, int, int], bytes]
"""Called as ``read_reg(i2c_address, register, count)``; returns the bytes read."""
DelayFn = Callable[[int], object]


def _i32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _u32(value: int) -> int:
    return value & 0xFFFFFFFF


class DeviceNotFoundError(OSError):
    """Raised when the chip ID read from the device is not a known one."""


@dataclass(frozen=True)
class BMP280Status:
    """Contents of the status register."""

    im_update: bool = False
    measuring: bool = False

    @classmethod
    def from_value(cls, value: int) -> BMP280Status:
        return cls(im_update=bool(value & 0x01), measuring=bool(value & 0x08))


@dataclass
class BMP280ControlMeas:
    """Contents of the ctrl_meas register."""

    mode: int = 0
    osrs_p: int = 0
    osrs_t: int = 0

    @classmethod
    def from_value(cls, value: int) -> BMP280ControlMeas:
        return cls(mode=value & 0b11, osrs_p=(value >> 2) & 0b111, osrs_t=(value >> 5) & 0b111)

    @property
    def value(self) -> int:
        return (self.mode & 0b11) | (self.osrs_p & 0b111) << 2 | (self.osrs_t & 0b111) << 5


@dataclass
class BMP280Config:
    """Contents of the config register."""

    spi3w_en: int = 0
    filter: int = 0
    t_sb: int = 0

    @classmethod
    def from_value(cls, value: int) -> BMP280Config:
        return cls(spi3w_en=value & 1, filter=(value >> 2) & 0b111, t_sb=(value >> 5) & 0b111)

    @property
    def value(self) -> int:
        return (self.spi3w_en & 1) | (self.filter & 0b111) << 2 | (self.t_sb & 0b111) << 5


class BMP280:
    """BMP280 sensor reached through user-supplied I2C callables.

    Call :meth:`setup` once to verify the chip and load its calibration.
    """

    def __init__(
        self,
        cspin: int,
        write_reg: WriteRegFn,
        read_reg: ReadRegFn,
        delay_ms: DelayFn,
    ) -> None:
        self.addr = I2C_ADDRESS_LOW if cspin == 0 else I2C_ADDRESS_HIGH
        self.write_reg = write_reg
        self.read_reg = read_reg
        self.delay_ms = delay_ms

        self.sensor_id = 0
        self.t_fine = 0
        self.raw_temperature = 0
        self.raw_pressure = 0

        self.dig_T1 = 0
        self.dig_T2 = 0
        self.dig_T3 = 0
        self.dig_P1 = 0
        self.dig_P2 = 0
        self.dig_P3 = 0
        self.dig_P4 = 0
        self.dig_P5 = 0
        self.dig_P6 = 0
        self.dig_P7 = 0
        self.dig_P8 = 0
        self.dig_P9 = 0

    def _read(self, reg: int, count: int) -> bytes:
        data = bytes(self.read_reg(self.addr, reg, count))
        if len(data) != count:
            raise OSError(f"short read from register 0x{reg:02x}")
        return data

    def _read_byte(self, reg: int) -> int:
        return self._read(reg, 1)[0]

    def _write_byte(self, reg: int, value: int) -> None:
        self.write_reg(self.addr, reg, bytes([value & 0xFF]))

    def setup(self) -> None:
        """Verify the chip, load calibration and start normal-mode measuring."""
        if not self.verify_id():
            raise DeviceNotFoundError(f"unknown chip id 0x{self.sensor_id:02x}")
        self.load_compensation_values()
        self.set_config(STANDBYTIME_0M5, FILTER_COEFF_OFF)
        self.set_control_measurement(OVERSAMPLING_16X, OVERSAMPLING_16X, MODE_NORMAL)

    def verify_id(self) -> bool:
        self.sensor_id = self._read_byte(REG_ID)
        return self.sensor_id in CHIP_IDS

    def reset(self) -> None:
        self._write_byte(REG_RESET, SOFT_RESET)

    def get_status(self) -> BMP280Status:
        return BMP280Status.from_value(self._read_byte(REG_STATUS))

    def load_compensation_values(self) -> None:
        self.dig_T1, self.dig_T2, self.dig_T3 = struct.unpack("<Hhh", self._read(REG_DIG_T1, 6))
        self.dig_P1, self.dig_P2, self.dig_P3 = struct.unpack("<Hhh", self._read(REG_DIG_P1, 6))
        self.dig_P4, self.dig_P5, self.dig_P6 = struct.unpack("<hhh", self._read(REG_DIG_P4, 6))
        self.dig_P7, self.dig_P8, self.dig_P9 = struct.unpack("<hhh", self._read(REG_DIG_P7, 6))

    @staticmethod
    def _decode20(data: bytes) -> int:
        return (data[0] << 12) | (data[1] << 4) | ((data[2] >> 4) & 0x0F)

    def read_raw_temperature(self) -> int:
        self.raw_temperature = self._decode20(self._read(REG_TEMP_MSB, 3))
        return self.raw_temperature

    def calc_temperature(self) -> int:
        """Temperature in hundredths of a degree Celsius (2546 = 25.46 C)."""
        raw = self.raw_temperature
        t1 = self.dig_T1
        var1 = _i32(((raw >> 3) - (t1 << 1)) * self.dig_T2) >> 11
        diff = (raw >> 4) - t1
        var2 = _i32((_i32(diff * diff) >> 12) * self.dig_T3) >> 14
        self.t_fine = _i32(var1 + var2)
        return _i32(self.t_fine * 5 + 128) >> 8

    def read_raw_pressure(self) -> int:
        self.raw_pressure = self._decode20(self._read(REG_PRESS_MSB, 3))
        return self.raw_pressure

    def calc_pressure(self) -> int:
        """Pressure in pascals; needs :meth:`calc_temperature` to have run."""
        var1 = _i32((self.t_fine >> 1) - 64000)
        quarter = var1 >> 2
        var2 = _i32((_i32(quarter * quarter) >> 11) * self.dig_P6)
        var2 = _i32(var2 + (_i32(var1 * self.dig_P5) << 1))
        var2 = _i32((var2 >> 2) + (self.dig_P4 << 16))
        var1 = _i32(
            ((_i32(self.dig_P3 * (_i32(quarter * quarter) >> 13)) >> 3)
             + (_i32(self.dig_P2 * var1) >> 1)) >> 18
        )
        var1 = _i32((32768 + var1) * self.dig_P1) >> 15
        if var1 == 0:
            return 0  # avoid division by zero
        p = _u32((_u32(1048576 - self.raw_pressure) - (var2 >> 12)) * 3125)
        divisor = _u32(var1)
        if p < 0x80000000:
            p = _u32(p << 1) // divisor
        else:
            p = _u32((p // divisor) * 2)
        var1 = _i32(self.dig_P9 * _i32(_u32((p >> 3) * (p >> 3)) >> 13)) >> 12
        var2 = _i32(_i32(p >> 2) * self.dig_P8) >> 13
        return _u32(_i32(p) + ((var1 + var2 + self.dig_P7) >> 4))

    def get_altitude(self, sea_level_hpa: float) -> int:
        """Measure and return the altitude in metres for the given sea-level pressure."""
        self.read_raw_temperature()
        self.calc_temperature()
        self.read_raw_pressure()
        pressure_hpa = self.calc_pressure() / 100.0
        altitude = 44330 * (1.0 - (pressure_hpa / sea_level_hpa) ** 0.1903)
        return int(altitude) & 0xFFFF

    def _update_ctrl(self, **fields: int) -> None:
        ctrl = BMP280ControlMeas.from_value(self._read_byte(REG_CTRL_MEAS))
        for name, value in fields.items():
            setattr(ctrl, name, value)
        self._write_byte(REG_CTRL_MEAS, ctrl.value)

    def _update_config(self, **fields: int) -> None:
        config = BMP280Config.from_value(self._read_byte(REG_CONFIG))
        for name, value in fields.items():
            setattr(config, name, value)
        self._write_byte(REG_CONFIG, config.value)

    def set_power_mode(self, power_mode: int) -> None:
        self._update_ctrl(mode=power_mode)

    def set_oversamp_temperature(self, oversample_temp: int) -> None:
        self._update_ctrl(osrs_t=oversample_temp)

    def set_oversamp_pressure(self, oversample_pressure: int) -> None:
        self._update_ctrl(osrs_p=oversample_pressure)

    def set_control_measurement(
        self, oversample_temp: int, oversample_pressure: int, power_mode: int
    ) -> None:
        ctrl = BMP280ControlMeas(mode=power_mode, osrs_p=oversample_pressure, osrs_t=oversample_temp)
        self._write_byte(REG_CTRL_MEAS, ctrl.value)

    def set_filter(self, iir_filter: int) -> None:
        self._update_config(filter=iir_filter)

    def set_standby_time(self, standby_time: int) -> None:
        self._update_config(t_sb=standby_time)

    def set_config(self, standby_time: int, iir_filter: int) -> None:
        self._write_byte(REG_CONFIG, BMP280Config(filter=iir_filter, t_sb=standby_time).value)

    def set_work_mode(self, work_mode: int) -> None:
        """Apply a preset oversampling pair; an unknown mode leaves the register as is."""
        ctrl = BMP280ControlMeas.from_value(self._read_byte(REG_CTRL_MEAS))
        preset = WORK_MODE_OVERSAMPLING.get(work_mode)
        if preset is not None:
            ctrl.osrs_t, ctrl.osrs_p = preset
        self._write_byte(REG_CTRL_MEAS, ctrl.value)