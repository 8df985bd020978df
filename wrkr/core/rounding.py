import math


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    scaled = abs(value) * 100
    rounded = math.floor(scaled + 0.5) / 100
    return math.copysign(rounded, value) if rounded else 0.0


def round2_fixed(value: float) -> float:
    """Two decimals exactly as ``f"{value:.2f}"`` renders them."""
    return float(f"{value:.2f}") + 0.0
