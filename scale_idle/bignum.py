# Arbitrary-precision helpers built on decimal.Decimal

from decimal import Decimal, getcontext, InvalidOperation, ROUND_FLOOR

# 40 significant digits keeps 1e33-scale distances exact down to well below 1 m
getcontext().prec = 40

ZERO = Decimal(0)
ONE = Decimal(1)

def D(value):
    if isinstance(value, Decimal): return value
    if isinstance(value, bool): raise TypeError("bool is not a number")
    if isinstance(value, float): return Decimal(repr(value))
    return Decimal(value)

def parse_decimal(value):
    """Strict parse for persisted values: finite, non-negative, else ValueError."""
    if isinstance(value, bool) or value is None: raise ValueError(f"not a number: {value!r}")
    try: result = D(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError) as e: raise ValueError(f"not a number: {value!r}") from e
    if not result.is_finite(): raise ValueError(f"not finite: {value!r}")
    if result < 0: raise ValueError(f"negative: {value!r}")
    return result

def floor(value): return D(value).to_integral_value(rounding=ROUND_FLOOR)

def power(base, exponent):
    """base ** exponent for Decimal base; exact when exponent is integral and the result fits."""
    base, exponent = D(base), D(exponent)
    if exponent == 0: return ONE
    return base ** exponent

def sqrt(value): return D(value).sqrt()

# --- Formatting ---
DISTANCE_UNITS = [
    (Decimal(1), "m"),
    (Decimal("1e3"), "km"),
    (Decimal("1.496e11"), "AU"),
    (Decimal("9.461e15"), "ly"),
    (Decimal("3.086e22"), "Mpc"),
]
MASS_UNITS = [
    (Decimal(1), "g"),
    (Decimal("1e3"), "kg"),
    (Decimal("1e6"), "t"),
    (Decimal("5.972e27"), "M⊕"),
    (Decimal("1.989e33"), "M☉"),
]

def to_precision(value, digits=4):
    value = D(value)
    if value == 0: return "0"
    return format(value, f".{digits}g")

def format_with_units(value, units):
    value = D(value)
    scale, name = units[0]
    for unit_value, unit_name in reversed(units):
        if value >= unit_value:
            scale, name = unit_value, unit_name
            break
    return f"{to_precision(value / scale)} {name}"

def format_distance(value): return format_with_units(value, DISTANCE_UNITS)

def format_mass(value): return format_with_units(value, MASS_UNITS)
