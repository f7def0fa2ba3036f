"""
Format-Specific Extraction Module.

One extractor per known mill, each an ordered fallback chain of tagged
strategies, plus the document model they produce.
"""

from .packing_list import PackingListItem, ParsedPackingList, UNKNOWN_PO
from .strategy import ChainResult, ExtractionContext, ExtractionStrategy, StrategyChain
from .text_scanner import TextScanner, Token, numbers_in_range
from .ocr_cleanup import OCR_CONFUSIONS, ConfusionRule, clean_ocr_text, repair_thickness
from .header_fields import HeaderFieldExtractor, Section, section_value_at, strip_po
from .base_extractor import BaseExtractor
from .wuu_jing import WuuJingExtractor
from .yuen_chang import YuenChangExtractor
from .yeou_yih import YeouYihExtractor
from .generic import GenericExtractor
from .registry import ExtractionOutcome, ExtractorRegistry

__all__ = [
    'PackingListItem',
    'ParsedPackingList',
    'UNKNOWN_PO',
    'ChainResult',
    'ExtractionContext',
    'ExtractionStrategy',
    'StrategyChain',
    'TextScanner',
    'Token',
    'numbers_in_range',
    'OCR_CONFUSIONS',
    'ConfusionRule',
    'clean_ocr_text',
    'repair_thickness',
    'HeaderFieldExtractor',
    'Section',
    'section_value_at',
    'strip_po',
    'BaseExtractor',
    'WuuJingExtractor',
    'YuenChangExtractor',
    'YeouYihExtractor',
    'GenericExtractor',
    'ExtractionOutcome',
    'ExtractorRegistry',
]
