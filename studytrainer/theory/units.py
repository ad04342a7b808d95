from __future__ import annotations

"""Unit conversion tables and formatting.

Every non-temperature unit carries a `to_base` factor into its category's
base unit (metre, kilogram, litre, square metre, m/s, second, byte).
Temperature converts through Celsius.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

HISTORY_CAP = 100


@dataclass(frozen=True)
class Unit:
    name: str
    symbol: str
    to_base: float


CATEGORIES: Dict[str, Tuple[Unit, ...]] = {
    "length": (
        Unit("Millimetres", "mm", 0.001),
        Unit("Centimetres", "cm", 0.01),
        Unit("Metres", "m", 1.0),
        Unit("Kilometres", "km", 1000.0),
        Unit("Inches", "in", 0.0254),
        Unit("Feet", "ft", 0.3048),
        Unit("Yards", "yd", 0.9144),
        Unit("Miles", "mi", 1609.344),
    ),
    "weight": (
        Unit("Milligrams", "mg", 0.000001),
        Unit("Grams", "g", 0.001),
        Unit("Kilograms", "kg", 1.0),
        Unit("Ounces", "oz", 0.0283495),
        Unit("Pounds", "lb", 0.453592),
    ),
    "volume": (
        Unit("Millilitres", "mL", 0.001),
        Unit("Litres", "L", 1.0),
        Unit("Cups", "cup", 0.236588),
        Unit("Pints", "pt", 0.473176),
        Unit("Quarts", "qt", 0.946353),
        Unit("Gallons", "gal", 3.78541),
    ),
    "temperature": (
        Unit("Celsius", "°C", 1.0),
        Unit("Fahrenheit", "°F", 1.0),
        Unit("Kelvin", "K", 1.0),
    ),
    "area": (
        Unit("Square mm", "mm²", 0.000001),
        Unit("Square cm", "cm²", 0.0001),
        Unit("Square m", "m²", 1.0),
        Unit("Square km", "km²", 1_000_000.0),
        Unit("Acres", "ac", 4046.86),
        Unit("Hectares", "ha", 10_000.0),
    ),
    "speed": (
        Unit("Metres/sec", "m/s", 1.0),
        Unit("Km/hour", "km/h", 0.277778),
        Unit("Miles/hour", "mph", 0.44704),
        Unit("Knots", "kn", 0.514444),
    ),
    "time": (
        Unit("Seconds", "sec", 1.0),
        Unit("Minutes", "min", 60.0),
        Unit("Hours", "hr", 3600.0),
        Unit("Days", "day", 86400.0),
        Unit("Weeks", "wk", 604800.0),
    ),
    "data": (
        Unit("Bytes", "B", 1.0),
        Unit("Kilobytes", "KB", 1024.0),
        Unit("Megabytes", "MB", 1_048_576.0),
        Unit("Gigabytes", "GB", 1_073_741_824.0),
        Unit("Terabytes", "TB", 1_099_511_627_776.0),
    ),
}

# ASCII spellings accepted on the command line
_ALIASES = {"C": "°C", "F": "°F", "degC": "°C", "degF": "°F", "mm2": "mm²", "cm2": "cm²", "m2": "m²", "km2": "km²"}


def get_category(category: str) -> Tuple[Unit, ...]:
    try:
        return CATEGORIES[category.lower()]
    except KeyError:
        raise KeyError(f"Unknown unit category: {category}") from None


def find_unit(category: str, token: str) -> Unit:
    """Look a unit up by symbol (exact, then alias) or by name (case-insensitive)."""
    units = get_category(category)
    sym = _ALIASES.get(token, token)
    for u in units:
        if u.symbol == sym:
            return u
    low = token.strip().lower()
    for u in units:
        if u.name.lower() == low or u.symbol.lower() == low:
            return u
    raise KeyError(f"Unknown unit {token!r} in category {category}")


def convert_temperature(value: float, src: str, dst: str) -> float:
    if src == "°F":
        celsius = (value - 32) * 5.0 / 9.0
    elif src == "K":
        celsius = value - 273.15
    else:
        celsius = value
    if dst == "°F":
        return celsius * 9.0 / 5.0 + 32
    if dst == "K":
        return celsius + 273.15
    return celsius


def convert(value: float, src: Unit, dst: Unit, category: str) -> float:
    if category == "temperature":
        return convert_temperature(value, src.symbol, dst.symbol)
    return value * src.to_base / dst.to_base


_TEMPERATURE_FORMULAS = {
    ("°C", "°F"): "°F = (°C x 9/5) + 32",
    ("°F", "°C"): "°C = (°F - 32) x 5/9",
    ("°C", "K"): "K = °C + 273.15",
    ("K", "°C"): "°C = K - 273.15",
    ("°F", "K"): "K = (°F - 32) x 5/9 + 273.15",
    ("K", "°F"): "°F = (K - 273.15) x 9/5 + 32",
}


def formula_description(src: Unit, dst: Unit, category: str) -> str:
    if category == "temperature":
        return _TEMPERATURE_FORMULAS.get((src.symbol, dst.symbol), "Same unit - no conversion needed")
    factor = format_result(src.to_base / dst.to_base)
    return f"{src.symbol} x {factor} = {dst.symbol}\n\n1 {src.name} = {factor} {dst.name}"


def format_result(value: float) -> str:
    if value == 0:
        return "0"
    if abs(value) >= 1_000_000 or abs(value) < 0.001:
        return "%.4g" % value
    return ("%.6f" % value).rstrip("0").rstrip(".")


def conversion_record(category: str, value: float, src: Unit, dst: Unit, result: float,
                      now: Optional[datetime] = None) -> Dict[str, object]:
    return {
        "date": (now or datetime.now(timezone.utc)).isoformat(),
        "category": category,
        "from_value": value,
        "from_unit": src.symbol,
        "to_value": result,
        "to_unit": dst.symbol,
    }


def save_conversion(records, entry: Dict[str, object]) -> List[object]:
    """Push one conversion to the capped history in a RecordStore. Zero inputs are not kept."""
    if not entry.get("from_value"):
        return records.get_list("units.history")
    return records.append_capped("units.history", entry, HISTORY_CAP)
