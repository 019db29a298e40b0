"""Excel-style number formatting for axis ticks, data labels and tooltips."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from chart_engine.core.config_model import ChartConfiguration, NumberFormat
from chart_engine.core.constants import MAX_DECIMALS, DisplayUnit, NegativeStyle
from chart_engine.core.types import ChartData

DEFAULT_DECIMALS = 2
NEGATIVE_RED = "#ef4444"

_UNITS: dict[DisplayUnit, tuple[float, str]] = {
    DisplayUnit.HUNDREDS: (100.0, " H"),
    DisplayUnit.THOUSANDS: (1_000.0, " K"),
    DisplayUnit.MILLIONS: (1_000_000.0, " M"),
    DisplayUnit.BILLIONS: (1_000_000_000.0, " B"),
}


def plain_number(value: float) -> str:
    """Shortest round-trip text for a number: 45.0 -> '45', 1.5 -> '1.5'."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    # float() drops numpy scalar subclasses whose repr is "np.float64(...)"
    return repr(float(value)) if isinstance(value, float) else str(value)


def _fraction_digits(text: str) -> int:
    if "." not in text:
        return 0
    return len(text.split(".", 1)[1].rstrip("0"))


def _auto_decimals(scaled: float) -> int | None:
    """Decimals to show when a display unit leaves a meaningful fraction behind."""
    fraction = scaled - math.floor(scaled)
    if fraction <= 0.001:
        return None
    significant = min(MAX_DECIMALS, _fraction_digits(f"{fraction:.6f}"))
    return max(1, significant)


def _quantize(value: float, decimals: int) -> Decimal:
    exp = Decimal(1).scaleb(-decimals)
    return Decimal(repr(float(value))).quantize(exp, rounding=ROUND_HALF_UP)


def _fixed_trimmed(value: float, decimals: int) -> str:
    q = _quantize(value, decimals)
    text = format(q.normalize(), "f") if q != 0 else "0"
    return text


def _grouped(value: float, decimals: int) -> str:
    q = _quantize(value, decimals)
    if q == 0:
        q = abs(q)
    return f"{q:,.{decimals}f}"


def effective_decimals(scaled: float, spec: NumberFormat) -> int:
    decimals = spec.decimals if spec.decimals is not None else DEFAULT_DECIMALS
    if spec.display_unit != DisplayUnit.NONE and spec.decimals == 0:
        auto = _auto_decimals(scaled)
        if auto is not None:
            decimals = auto
    return decimals


def format_number(value: float | None, spec: NumberFormat | None = None) -> str:
    """
    Format one value.

    Steps: display unit division, effective decimals, grouping or trimmed
    fixed-point, negative style, then prefix/suffix/unit label. With no
    spec the bare number is returned.
    """
    if value is None:
        return ""
    if spec is None:
        return plain_number(value)

    scaled = float(value)
    unit_label = ""
    if spec.display_unit in _UNITS:
        divisor, label = _UNITS[spec.display_unit]
        scaled = scaled / divisor
        if spec.display_unit_label:
            unit_label = label

    decimals = effective_decimals(scaled, spec)
    if spec.thousands:
        result = _grouped(scaled, decimals)
    else:
        result = _fixed_trimmed(scaled, decimals)

    if value < 0:
        if spec.negative_numbers == NegativeStyle.PARENTHESES:
            result = f"({result.replace('-', '', 1)})"
        elif spec.negative_numbers == NegativeStyle.RED:
            # the caller colors the text via negative_color()
            result = result.replace("-", "", 1)

    return f"{spec.prefix}{result}{spec.suffix}{unit_label}"


def negative_color(value: float, spec: NumberFormat | None) -> str | None:
    if spec is not None and spec.negative_numbers == NegativeStyle.RED and value < 0:
        return NEGATIVE_RED
    return None


def detect_decimals(data: ChartData | None) -> int:
    """Largest number of significant decimals in the data, capped at MAX_DECIMALS."""
    if data is None:
        return 0
    best = 0
    for ds in data.datasets:
        for v in ds.values():
            if not math.isfinite(v) or float(v).is_integer():
                continue
            best = max(best, _fraction_digits(format(_quantize(v, MAX_DECIMALS), "f")))
            if best >= MAX_DECIMALS:
                return MAX_DECIMALS
    return best


def apply_detected_decimals(config: ChartConfiguration, data: ChartData | None) -> ChartConfiguration:
    """
    Copy of `config` whose number format shows the data's decimals.

    Leaves the configuration alone when decimals were set by hand or are already non-zero.
    """
    spec = config.number_format or NumberFormat()
    if spec.decimals_manually_set or (spec.decimals or 0) != 0:
        return config
    detected = detect_decimals(data)
    if detected == 0:
        return config
    return config.updated(number_format=spec.model_copy(update={"decimals": detected}))
