"""
Steel Packing-List Extraction - Source Package.

Turns mill packing lists (native PDFs, scanned PDFs, spreadsheets) into
structured line items with canonical inventory IDs and lot numbers.

Modules:
    - input_handler: PDF text/raster and spreadsheet grid providers
    - ocr_engine: Per-page Tesseract OCR with accuracy checks
    - classifier: Page scoring and supplier detection
    - extraction: Supplier fallback chains and the document model
    - normalizer: Size grammars, unit conversion, identifiers, validators
    - invoice: Invoice detection, parsing and price correlation
    - pipeline: Orchestration and post-processing
    - inventory: Injectable inventory-ID lookup

Architecture:
    Input → (OCR) → Classification → Extraction → Invoice prices → Post-Processing
"""

__version__ = "1.0.0"

__all__ = [
    'input_handler',
    'ocr_engine',
    'classifier',
    'extraction',
    'normalizer',
    'invoice',
    'pipeline',
    'inventory',
    'suppliers',
    'utils',
]
