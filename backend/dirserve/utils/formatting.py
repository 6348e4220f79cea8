"""Human-readable sizes and timestamps."""

from datetime import datetime

_IEC_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")


def human_size(size: int) -> str:
    """Format a byte count in IEC units (powers of 1024), e.g. '1.5 KiB'."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in _IEC_UNITS[1:]:
        value /= 1024
        if value < 1024 or unit == _IEC_UNITS[-1]:
            break
    if value < 10:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"


def human_time(value: datetime, fmt: str) -> str:
    return value.strftime(fmt)
