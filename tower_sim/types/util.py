"""Define type aliases and small helpers used throughout the tower simulation."""
import math

Callsign = str
Ticks = int


def round_half_up(value: float) -> int:
    """Round to the nearest integer. Exact halves round up, unlike round()."""
    return math.floor(value + 0.5)
