"""Transport-agnostic drivers for sensors and ADCs, plus CRC, ring buffer, debouncing and battery helpers."""

__version__ = "0.1.0"