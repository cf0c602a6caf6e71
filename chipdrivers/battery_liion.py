"""Charge level estimate for a single Li-ion cell from its voltage."""

from __future__ import annotations

__all__ = ["convert_battery_level"]


def convert_battery_level(voltage: int) -> int:
    """Return the charge level in per mille (890 = 89.0 %) for a voltage in mV.

    The discharge curve is approximated piecewise linearly.
    """
    if voltage > 4150:
        return 1000
    if voltage > 3700:
        return -610 + voltage // 5  # 100-10 %
    if voltage > 3450:
        return -19 + voltage // 50  # 10-5 %
    if voltage > 3240:
        return -26 + voltage // 70  # 5-2 %
    if voltage > 3000:
        return -25 + voltage // 120  # 2-0 %
    return 0