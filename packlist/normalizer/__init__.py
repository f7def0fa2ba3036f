"""
Unit & Identifier Normalizer Module.

Pure conversions of thickness encodings and mass units, size grammars,
identifier construction and plausibility validators.
"""

from .units import (
    MT_TO_LBS,
    gauge_to_decimal,
    fraction_to_decimal,
    mm_to_decimal,
    mm_to_inches,
    mt_to_lbs,
    lbs_to_mt,
    format_thickness,
    parse_thickness,
    lbs_per_sq_ft,
    theoretical_weight,
)
from .normalizers import (
    ParsedSize,
    SizeMatch,
    SizeParser,
    IdentifierBuilder,
    normalize_finish,
    pad_finish_code,
    is_canonical_lot,
    build_lot_serial,
)
from .validators import DimensionValidator, WeightValidator, WeightCheck, WeightConfidence

__all__ = [
    'MT_TO_LBS',
    'gauge_to_decimal',
    'fraction_to_decimal',
    'mm_to_decimal',
    'mm_to_inches',
    'mt_to_lbs',
    'lbs_to_mt',
    'format_thickness',
    'parse_thickness',
    'lbs_per_sq_ft',
    'theoretical_weight',
    'ParsedSize',
    'SizeMatch',
    'SizeParser',
    'IdentifierBuilder',
    'normalize_finish',
    'pad_finish_code',
    'is_canonical_lot',
    'build_lot_serial',
    'DimensionValidator',
    'WeightValidator',
    'WeightCheck',
    'WeightConfidence',
]
