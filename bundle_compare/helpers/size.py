from decimal import ROUND_HALF_UP, Decimal
from typing import Union

BYTE_UNITS = ("KB", "MB", "GB")

TWO_PLACES = Decimal("0.01")


def to_fixed(value: Union[int, float], places: Decimal = TWO_PLACES) -> str:
    """
    Rounds like JavaScript's Number.prototype.toFixed: the exact binary value of
    the float is rounded with ties going away from zero, so 0.125 -> "0.13".
    """
    return str(Decimal(value).quantize(places, rounding=ROUND_HALF_UP))


def format_bytes(size: int) -> str:
    """
    Human readable byte count, e.g. 512 -> "512 B", 1536 -> "1.50 KB", 1048576 -> "1 MB"
    """
    magnitude = abs(size)
    if magnitude < 1024:
        return f"{size} B"

    value = magnitude / 1024
    unit = BYTE_UNITS[0]
    for next_unit in BYTE_UNITS[1:]:
        if value < 1024:
            break
        value /= 1024
        unit = next_unit

    signed = -value if size < 0 else value
    rendered = to_fixed(signed)
    if rendered.endswith(".00"):
        rendered = rendered[:-3]
    return f"{rendered} {unit}"


def format_delta(delta: int) -> str:
    if delta == 0:
        return "0 B"
    return f"{'+' if delta > 0 else ''}{format_bytes(delta)}"


def format_percent(base: int, head: int) -> str:
    if base == 0 and head == 0:
        return "0.00%"
    if base == 0:
        return "new"
    delta = ((head - base) / base) * 100
    return f"{'+' if delta > 0 else ''}{to_fixed(delta)}%"


def format_size_pair(base: int, head: int) -> str:
    return f"{format_bytes(base)} -> {format_bytes(head)} ({format_delta(head - base)})"
