from decimal import Decimal, ROUND_HALF_UP, ROUND_CEILING


def round_half_up(value: float, places: int = 0):
    """Round like a calculator: halves go up, not to the nearest even digit."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def round2(value: float) -> float:
    return round_half_up(value, 2)


def ceil_days(value: float) -> int:
    """Ceiling for day counts, tolerant of float noise like 75.00000000000001."""
    return int(Decimal(repr(round(value, 9))).to_integral_value(rounding=ROUND_CEILING))


def percentage(part: float, whole: float) -> float:
    return part / whole * 100 if whole else 0.0
