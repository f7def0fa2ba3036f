"""
Unit Conversion Module.

Pure, stateless conversions between the thickness encodings used by mills
(gauge numbers, inch fractions, millimetres, decimal inches) and between
metric tons and pounds. Nothing here reads configuration, so every
function is safe to call from any strategy or test.

Tables:
    - GAUGE_TO_DECIMAL: stainless sheet gauge to decimal inches
    - MM_TO_DECIMAL: common plate thicknesses in millimetres
    - FRACTION_TO_DECIMAL: mill-rounded inch fractions
    - STEEL_LBS_PER_SQ_FT: 304 stainless weight per square foot by thickness
"""

import math
import re
from typing import Optional, Union

# Pounds per metric ton
MT_TO_LBS = 2204.62

# 304 stainless density, lb per cubic inch
STAINLESS_DENSITY_LB_PER_CU_IN = 0.2833

MM_PER_INCH = 25.4

GAUGE_TO_DECIMAL = {
    '26GA': 0.018, '26': 0.018,
    '24GA': 0.024, '24': 0.024,
    '22GA': 0.030, '22': 0.030,
    '20GA': 0.036, '20': 0.036,
    '18GA': 0.048, '18': 0.048,
    '16GA': 0.060, '16': 0.060,
    '14GA': 0.075, '14': 0.075,
    '13GA': 0.090, '13': 0.090,
    '12GA': 0.105, '12': 0.105,
    '11GA': 0.120, '11': 0.120,
    '10GA': 0.135, '10': 0.135,
}

MM_TO_DECIMAL = {
    '4.76': 0.188,
    '6.35': 0.250,
    '7.94': 0.313,
    '9.53': 0.375,
    '12.70': 0.500,
    '12.7': 0.500,
}

FRACTION_TO_DECIMAL = {
    '3/16': 0.188,
    '1/4': 0.25,
    '5/16': 0.313,
    '3/8': 0.375,
    '1/2': 0.5,
    '5/8': 0.625,
    '3/4': 0.75,
    '1': 1.0,
}

# Thickness (in) -> lbs/sq ft for 304 stainless, keyed to three decimals.
# Gauges are cold-rolled sheet; 0.188 and up are hot-rolled plate.
STEEL_LBS_PER_SQ_FT = {
    0.015: 0.630,   # 28 ga
    0.018: 0.756,   # 26 ga
    0.024: 1.008,   # 24 ga
    0.030: 1.260,   # 22 ga
    0.036: 1.512,   # 20 ga
    0.042: 1.764,   # 19 ga
    0.048: 2.016,   # 18 ga
    0.060: 2.520,   # 16 ga
    0.075: 3.150,   # 14 ga
    0.090: 3.780,   # 13 ga
    0.105: 4.410,   # 12 ga
    0.120: 5.040,   # 11 ga
    0.135: 5.670,   # 10 ga
    0.187: 7.871,   # 7 ga
    0.188: 8.579,   # 3/16"
    0.250: 11.16,   # 1/4"
    0.313: 13.75,   # 5/16"
    0.375: 16.5,    # 3/8"
    0.500: 21.66,   # 1/2"
    0.625: 26.83,   # 5/8"
    0.750: 32.12,   # 3/4"
    0.875: 37.29,   # 7/8"
    1.000: 42.67,   # 1"
    1.125: 47.83,   # 1-1/8"
    1.250: 53.0,    # 1-1/4"
    1.500: 63.34,   # 1-1/2"
    1.750: 73.67,   # 1-3/4"
    2.000: 84.01,   # 2"
    2.500: 105.1,   # 2-1/2"
    3.000: 126.3,   # 3"
    3.250: 136.6,   # 3-1/4"
    3.500: 147.0,   # 3-1/2"
    3.750: 157.3,   # 3-3/4"
    4.000: 167.6,   # 4"
}

_GAUGE_RE = re.compile(r'^\s*(\d{1,2})\s*(?:GA|GAUGE|G)?\.?\s*$', re.IGNORECASE)
_FRACTION_RE = re.compile(r'^\s*(\d+)\s*/\s*(\d+)\s*$')
_MIXED_FRACTION_RE = re.compile(r'^\s*(\d+)\s*[- ]\s*(\d+)\s*/\s*(\d+)\s*$')


def gauge_to_decimal(gauge: Union[str, int]) -> Optional[float]:
    """
    Convert a gauge code ("22GA", "22", 22) to decimal inches.

    Returns:
        Decimal inches, or None for gauges outside the table.

    Example:
        >>> gauge_to_decimal("22GA")
        0.03
    """
    match = _GAUGE_RE.match(str(gauge))
    if not match:
        return None
    return GAUGE_TO_DECIMAL.get(str(int(match.group(1))))


def fraction_to_decimal(fraction: str) -> Optional[float]:
    """
    Convert an inch fraction to decimal inches.

    The mill-rounded table wins over arithmetic, so "3/16" is 0.188 as on
    the printed lists. Mixed fractions ("1-1/4") and plain integers are
    accepted.

    Example:
        >>> fraction_to_decimal('3/8"')
        0.375
        >>> fraction_to_decimal("1-1/4")
        1.25
    """
    if fraction is None:
        return None
    token = str(fraction).strip().strip('"\'”″').strip()
    token = re.sub(r'\s*/\s*', '/', token)

    if token in FRACTION_TO_DECIMAL:
        return FRACTION_TO_DECIMAL[token]

    mixed = _MIXED_FRACTION_RE.match(token)
    if mixed:
        whole, num, den = (int(g) for g in mixed.groups())
        if den == 0:
            return None
        return whole + num / den

    simple = _FRACTION_RE.match(token)
    if simple:
        num, den = int(simple.group(1)), int(simple.group(2))
        if den == 0:
            return None
        return num / den

    if re.fullmatch(r'\d+', token):
        return float(token)
    return None


def mm_to_decimal(mm: Union[str, float]) -> Optional[float]:
    """
    Convert millimetres to decimal inches.

    Known plate thicknesses use the mill table; anything else is mm / 25.4
    rounded to three places.

    Example:
        >>> mm_to_decimal("9.53")
        0.375
        >>> mm_to_decimal("3.0")
        0.118
    """
    token = str(mm).strip().upper().replace('MM', '').strip()
    if token in MM_TO_DECIMAL:
        return MM_TO_DECIMAL[token]
    try:
        value = float(token)
    except ValueError:
        return None
    if value <= 0:
        return None
    for key, decimal in MM_TO_DECIMAL.items():
        if abs(float(key) - value) < 0.005:
            return decimal
    return round(value / MM_PER_INCH, 3)


def mm_to_inches(mm: float) -> int:
    """Width/length in millimetres to whole inches (1525 -> 60)."""
    return int(round(mm / MM_PER_INCH))


def mt_to_lbs(mt: float) -> int:
    """
    Metric tons to pounds, rounded to whole pounds.

    Example:
        >>> mt_to_lbs(2.112)
        4656
    """
    return int(round(mt * MT_TO_LBS))


def lbs_to_mt(lbs: float) -> float:
    """Pounds to metric tons, unrounded."""
    return lbs / MT_TO_LBS


def format_thickness(thickness: float) -> str:
    """Canonical four-decimal thickness string ("0.3750")."""
    return f"{thickness:.4f}"


def parse_thickness(token: Union[str, float]) -> Optional[float]:
    """
    Parse any supported thickness representation to decimal inches.

    Order of interpretation:
        1. Gauge ("26GA", "26 GA")
        2. Fraction or mixed fraction ("3/8", "1-1/4")
        3. Millimetres ("9.53MM", "9.53mm")
        4. Decimal below 2 is inches ("0.750")
        5. Decimal from 2 to 20 is millimetres ("6.35")

    Returns:
        Decimal inches, or None when the token is not a thickness.
    """
    if token is None:
        return None
    if isinstance(token, (int, float)):
        text = str(token)
    else:
        text = str(token).strip().strip('"\'”').strip()
    if not text:
        return None

    if re.search(r'\d\s*(?:GA|GAUGE)\b', text, re.IGNORECASE):
        return gauge_to_decimal(text)

    if '/' in text:
        return fraction_to_decimal(text)

    if re.search(r'MM\s*$', text, re.IGNORECASE):
        return mm_to_decimal(text)

    try:
        value = float(text)
    except ValueError:
        return None

    if 0 < value < 2:
        return value
    if 2 <= value <= 20:
        return mm_to_decimal(value)
    return None


def _round_half_up(value: float, places: int) -> float:
    scale = 10 ** places
    return math.floor(value * scale + 0.5 + 1e-9) / scale


def lbs_per_sq_ft(thickness: float) -> float:
    """
    Weight per square foot for 304 stainless at a thickness.

    Tries a table hit on the thickness rounded half-up to three decimals
    (0.1875 -> 0.188, 0.3125 -> 0.313), then a two-decimal match in table
    order, then linear interpolation between the neighbouring rows.
    Thicknesses outside the table use the density constant.
    """
    key = _round_half_up(thickness, 3)
    if key in STEEL_LBS_PER_SQ_FT:
        return STEEL_LBS_PER_SQ_FT[key]

    short_key = _round_half_up(thickness, 2)
    for table_key, value in STEEL_LBS_PER_SQ_FT.items():
        if _round_half_up(table_key, 2) == short_key:
            return value

    keys = sorted(STEEL_LBS_PER_SQ_FT)
    if keys[0] < thickness < keys[-1]:
        for lower, upper in zip(keys, keys[1:]):
            if lower <= thickness <= upper:
                ratio = (thickness - lower) / (upper - lower)
                low_value = STEEL_LBS_PER_SQ_FT[lower]
                high_value = STEEL_LBS_PER_SQ_FT[upper]
                return low_value + ratio * (high_value - low_value)

    # 144 sq in per sq ft
    return thickness * 144 * STAINLESS_DENSITY_LB_PER_CU_IN


def theoretical_weight(
    thickness: float,
    width: float,
    length: float,
    pieces: int = 1,
    weight_per_sq_ft: Optional[float] = None
) -> float:
    """
    Theoretical weight in pounds of ``pieces`` sheets of the given size.

    Args:
        thickness: Decimal inches.
        width: Inches.
        length: Inches.
        pieces: Sheet count.
        weight_per_sq_ft: Override for the lbs/sq ft table (manual mapping).
    """
    per_sq_ft = weight_per_sq_ft if weight_per_sq_ft else lbs_per_sq_ft(thickness)
    area_sq_ft = (width * length) / 144.0
    return area_sq_ft * per_sq_ft * max(pieces, 1)
