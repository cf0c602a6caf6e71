"""CRC-16 with reflected polynomial 0x8005 and a zero starting seed."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["crc16", "check_crc16"]

_ODD_PARITY = (0, 1, 1, 0, 1, 0, 0, 1, 1, 0, 0, 1, 0, 1, 1, 0)


def crc16(data: Iterable[int]) -> int:
    """Compute the CRC-16 of ``data``."""
    crc = 0
    for byte in bytes(data):
        cdata = (byte ^ crc) & 0xFF
        crc >>= 8
        if _ODD_PARITY[cdata & 0x0F] ^ _ODD_PARITY[cdata >> 4]:
            crc ^= 0xC001
        cdata <<= 6
        crc ^= cdata
        cdata <<= 1
        crc ^= cdata
    return crc & 0xFFFF


def check_crc16(data: Iterable[int], crc_to_check: int) -> bool:
    """Return whether ``data`` has the CRC ``crc_to_check``."""
    return crc16(data) == crc_to_check