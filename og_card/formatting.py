"""Human-readable formatting of sizes and counts."""

from __future__ import annotations

_THRESHOLD = 1500.0
_U32_MAX = 0xFFFFFFFF


def _check_u32(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"value out of range for an unsigned 32-bit integer: {value}")


def _scale(value: int, base: float, units: tuple[str, ...]) -> tuple[float, str, bool]:
    scaled = float(value)
    index = 0
    while scaled >= _THRESHOLD and index < len(units) - 1:
        scaled /= base
        index += 1
    return scaled, units[index], index == 0


def format_bytes(size: int) -> str:
    """Format a byte count using B, KiB and MiB, switching units at 1500.

    The numeric part is kept to about four characters by varying decimals.
    """
    _check_u32(size)
    value, unit, unscaled = _scale(size, 1024.0, ("B", "KiB", "MiB"))
    if unscaled:
        return f"{size} {unit}"
    if value < 10.0:
        return f"{value:.2f} {unit}"
    if value < 100.0:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"


def format_number(number: int) -> str:
    """Format a count with K and M suffixes, switching suffixes at 1500."""
    _check_u32(number)
    value, unit, unscaled = _scale(number, 1000.0, ("", "K", "M"))
    if unscaled:
        return f"{number}"
    if value < 10.0:
        return f"{value:.1f}{unit}"
    return f"{value:.0f}{unit}"


def format_optional_number(number: int | None) -> str | None:
    """Format *number* like format_number, passing None through unchanged."""
    if number is None:
        return None
    return format_number(number)