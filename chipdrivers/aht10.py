"""Driver for the AHT10 I2C temperature and humidity sensor."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

__all__ = [
    "I2C_ADDRESS_LOW",
    "I2C_ADDRESS_HIGH",
    "CMD_INIT",
    "CMD_TRIGGER_MEASUREMENT",
    "CMD_SOFT_RESET",
    "AHT10Measurement",
    "AHT10",
]

I2C_ADDRESS_LOW = 0b01110000
I2C_ADDRESS_HIGH = 0b01110010

CMD_INIT = 0b11100001
CMD_TRIGGER_MEASUREMENT = 0b10101100
CMD_SOFT_RESET = 0b10111010

WriteRegFn = Callable[[int, int, bytes], object]
"""Called as ``write_reg(i2c_address, command, data)``; a non-zero int result is an error."""
ReadRegFn = Callable[[int, int, int], bytes]
"""Called as ``read_reg(i2c_address, register, count)``; returns the bytes read."""
DelayFn = Callable[[int], object]


@dataclass(frozen=True)
class AHT10Measurement:
    """Six raw bytes of one measurement."""

    data: bytes

    def __post_init__(self) -> None:
        data = bytes(self.data)
        if len(data) != 6:
            raise ValueError(f"measurement needs 6 bytes, got {len(data)}")
        object.__setattr__(self, "data", data)

    @property
    def is_valid(self) -> bool:
        """True when the sensor is not busy and the humidity data is non-zero."""
        d = self.data
        return not d[0] & 0x80 and not (d[1] == 0 and d[2] == 0 and d[3] == 0)

    def _raw_temperature(self) -> int:
        d = self.data
        return ((d[3] & 0x0F) << 16) | (d[4] << 8) | d[5]

    def _raw_humidity(self) -> int:
        d = self.data
        return (d[1] << 12) | (d[2] << 4) | (d[3] >> 4)

    def temperature_float(self) -> float:
        """Temperature in degrees Celsius."""
        return self._raw_temperature() * 200.0 / 1048576.0 - 50

    def humidity_float(self) -> float:
        """Relative humidity in percent."""
        return self._raw_humidity() * 100.0 / 1048576.0

    def temperature(self) -> int:
        """Temperature in hundredths of a degree Celsius (10000 = 100.00 C)."""
        return ((self._raw_temperature() * 625) >> 15) - 5000

    def humidity(self) -> int:
        """Relative humidity in per mille (890 = 89.0 %)."""
        return (self._raw_humidity() * 125) >> 17


class AHT10:
    """AHT10 sensor reached through user-supplied I2C callables."""

    def __init__(
        self,
        addrpin: int,
        write_reg: WriteRegFn,
        read_reg: ReadRegFn,
        delay_ms: DelayFn,
    ) -> None:
        self.addr = I2C_ADDRESS_LOW if addrpin == 0 else I2C_ADDRESS_HIGH
        self.write_reg = write_reg
        self.read_reg = read_reg
        self.delay_ms = delay_ms

    def setup(self) -> None:
        """Initialise the sensor after power-up; raise OSError if it does not respond."""
        self.delay_ms(20)  # up to 20 ms to reach idle state
        status = self.write_reg(self.addr, CMD_INIT, b"")
        if isinstance(status, int) and status != 0:
            raise OSError(f"AHT10 init command failed with status {status}")
        self.delay_ms(20)
        self.soft_reset()
        self.delay_ms(20)  # soft reset takes up to 20 ms

    def soft_reset(self) -> None:
        self.write_reg(self.addr, CMD_SOFT_RESET, b"")

    def trigger_measurement(self) -> None:
        self.write_reg(self.addr, CMD_TRIGGER_MEASUREMENT, bytes([0b00110011, 0]))

    def read_measurement(self) -> AHT10Measurement | None:
        """Return the finished measurement, or None if it is not ready or invalid."""
        data = bytes(self.read_reg(self.addr, 0, 6))
        if len(data) != 6:
            raise OSError(f"short read from AHT10: {len(data)} bytes")
        measurement = AHT10Measurement(data)
        return measurement if measurement.is_valid else None