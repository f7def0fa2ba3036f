"""
Packing-List Pipeline Module.

Single entry point that turns one uploaded file into a parsed packing
list (or invoice), orchestrating every stage:

    1. Input validation and type routing (PDF or spreadsheet)
    2. Page or sheet text (native text, or OCR when the caller asks)
    3. Invoice detection and page/sheet classification
    4. Supplier detection and PO resolution
    5. Supplier extraction chain
    6. Invoice price correlation and post-processing

Native PDFs without text are never OCR'd implicitly: the outcome comes
back with ``needs_ocr=True`` and the caller decides whether to retry with
``force_ocr=True``.

Usage:
    from packlist.pipeline import PackingListPipeline

    pipeline = PackingListPipeline()
    outcome = pipeline.parse_file(pdf_bytes, "PL_1837.pdf")
    if outcome.needs_ocr:
        outcome = pipeline.parse_file(pdf_bytes, "PL_1837.pdf", force_ocr=True)
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from packlist.classifier import PageClassifier, SupplierDetector
from packlist.extraction import (
    ExtractionContext,
    ExtractionOutcome,
    ExtractorRegistry,
    HeaderFieldExtractor,
    ParsedPackingList,
    UNKNOWN_PO,
)
from packlist.input_handler import InputFile, InputHandler, PDFProcessor, SpreadsheetProcessor
from packlist.inventory import InventoryLookup
from packlist.invoice import InvoiceCorrelator, InvoiceDetector, InvoiceParser, ParsedInvoice
from packlist.normalizer import DimensionValidator, IdentifierBuilder, SizeParser
from packlist.ocr_engine import OCREngine
from packlist.ocr_engine.engine import ProgressCallback
from packlist.suppliers import Supplier
from packlist.utils.exceptions import (
    InvoiceParsingError,
    NoItemsExtractedError,
    OCRRequiredError,
    PackingListError,
)
from packlist.utils.helpers import rows_to_text, text_preview
from packlist.utils.logger import get_logger
from .document_processor import DocumentProcessor
from .parse_result import ParseOutcome

# Initialize module logger
logger = get_logger(__name__)

Grid = List[List[Any]]


class PackingListPipeline:
    """
    Packing-list parsing orchestrator.

    All collaborators can be injected. The OCR engine is only built the
    first time OCR is requested, so a missing Tesseract binary affects
    OCR parses only.

    Attributes:
        inventory: Inventory-ID lookup shared by identifiers and validation.
        input_handler: Type routing and validation.
        pdf_processor: Native text and rasterization provider.
        spreadsheet_processor: Workbook grid provider.
        classifier: Page and sheet scoring.
        supplier_detector: Mill detection.
        registry: Supplier extractors.
        fields: Header field extractor (PO, warehouse).
        invoice_detector: Invoice page vote.
        invoice_parser: Invoice line parser.
        correlator: Invoice price transfer.
        post_processor: Final validation pass.

    Example:
        >>> pipeline = PackingListPipeline(inventory=lookup)
        >>> outcome = pipeline.parse_file(xlsx_bytes, "PL_1726.xlsx")
        >>> outcome.document.po_number
        '1726'
    """

    def __init__(
        self,
        inventory: Optional[InventoryLookup] = None,
        input_handler: Optional[InputHandler] = None,
        pdf_processor: Optional[PDFProcessor] = None,
        spreadsheet_processor: Optional[SpreadsheetProcessor] = None,
        ocr_engine: Optional[OCREngine] = None,
        classifier: Optional[PageClassifier] = None,
        supplier_detector: Optional[SupplierDetector] = None,
        registry: Optional[ExtractorRegistry] = None,
        invoice_detector: Optional[InvoiceDetector] = None,
        invoice_parser: Optional[InvoiceParser] = None,
        correlator: Optional[InvoiceCorrelator] = None,
        post_processor: Optional[DocumentProcessor] = None
    ) -> None:
        self.inventory = inventory if inventory is not None else InventoryLookup.from_config()
        identifiers = IdentifierBuilder(self.inventory)
        sizes = SizeParser()
        dimensions = DimensionValidator()
        self.fields = HeaderFieldExtractor()

        self.input_handler = input_handler or InputHandler()
        self.pdf_processor = pdf_processor or PDFProcessor()
        self.spreadsheet_processor = spreadsheet_processor or SpreadsheetProcessor()
        self._ocr_engine = ocr_engine
        self.classifier = classifier or PageClassifier()
        self.supplier_detector = supplier_detector or SupplierDetector()
        self.registry = registry or ExtractorRegistry(identifiers, sizes, dimensions, self.fields)
        self.invoice_detector = invoice_detector or InvoiceDetector()
        self.invoice_parser = invoice_parser or InvoiceParser(sizes, self.fields, self.supplier_detector)
        self.correlator = correlator or InvoiceCorrelator()
        self.post_processor = post_processor or DocumentProcessor(
            self.inventory, identifiers, dimensions=dimensions
        )

        logger.info(f"PackingListPipeline initialized ({self.inventory.count} inventory IDs loaded)")

    @property
    def ocr_engine(self) -> OCREngine:
        if self._ocr_engine is None:
            self._ocr_engine = OCREngine(rasterizer=self.pdf_processor)
        return self._ocr_engine

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_file(
        self,
        data: bytes,
        filename: str = "",
        po: Optional[str] = None,
        force_ocr: bool = False,
        on_progress: Optional[ProgressCallback] = None
    ) -> ParseOutcome:
        """
        Parse one file.

        Args:
            data: File bytes.
            filename: Name hint for type detection and PO resolution.
            po: Explicit PO, taking precedence over anything found.
            force_ocr: OCR a PDF instead of reading its native text.
            on_progress: Receives OCR progress events.

        Returns:
            ParseOutcome; failures are reported in ``error`` and never raised.
        """
        logger.info(f"Parsing {filename or '<bytes>'}{' (OCR)' if force_ocr else ''}")
        try:
            file_type = self.input_handler.validate(data, filename)
            if file_type == 'pdf':
                outcome = self._parse_pdf(data, filename, po, force_ocr, on_progress)
            else:
                outcome = self._parse_spreadsheet(data, filename, po)
        except OCRRequiredError as e:
            logger.warning(f"{filename or '<bytes>'}: {e.message}")
            return ParseOutcome(filename=filename, needs_ocr=True)
        except PackingListError as e:
            logger.error(f"Failed to parse {filename or '<bytes>'}: {e}")
            return ParseOutcome(filename=filename, error=str(e))

        if outcome.document is not None:
            logger.info(f"Parsed {filename or '<bytes>'}: {outcome.document!r}")
        return outcome

    def parse_files(
        self,
        files: Sequence[InputFile],
        po: Optional[str] = None,
        force_ocr: bool = False,
        on_progress: Optional[ProgressCallback] = None
    ) -> List[ParseOutcome]:
        """Parse files one at a time, in the given order."""
        outcomes = []
        for index, source in enumerate(files, start=1):
            logger.info(f"File {index}/{len(files)}: {source.filename}")
            outcomes.append(self.parse_file(source.data, source.filename, po, force_ocr, on_progress))
        failed = sum(1 for outcome in outcomes if not outcome.success)
        logger.info(f"Parsed {len(outcomes)} file(s), {failed} without a result")
        return outcomes

    # ------------------------------------------------------------------
    # PDF
    # ------------------------------------------------------------------

    def _parse_pdf(
        self,
        data: bytes,
        filename: str,
        po: Optional[str],
        force_ocr: bool,
        on_progress: Optional[ProgressCallback]
    ) -> ParseOutcome:
        if force_ocr:
            return self._parse_pdf_ocr(data, filename, po, on_progress)

        pages = self.pdf_processor.page_texts(data, filename)
        if not self.pdf_processor.has_native_text(pages):
            raise OCRRequiredError(len(pages), self.pdf_processor.min_text_chars)
        return self._parse_pages(pages, filename, po, ocr=False)

    def _parse_pdf_ocr(
        self,
        data: bytes,
        filename: str,
        po: Optional[str],
        on_progress: Optional[ProgressCallback]
    ) -> ParseOutcome:
        engine = self.ocr_engine
        results = engine.run_ocr(data, on_progress)
        accuracy = engine.check_accuracy(results)

        try:
            outcome = self._parse_pages([r.text for r in results], filename, po, ocr=True)
        except PackingListError as e:
            logger.error(f"Failed to parse OCR text of {filename or '<bytes>'}: {e}")
            outcome = ParseOutcome(filename=filename, error=str(e))

        outcome.ocr_confidence = accuracy.average_confidence
        outcome.ocr_warning = accuracy.warning()
        return outcome

    def _parse_pages(self, pages: List[str], filename: str, po: Optional[str], ocr: bool) -> ParseOutcome:
        invoice_indexes = [i for i, text in enumerate(pages) if self.invoice_detector.is_invoice(text)]
        candidates = [(i, text) for i, text in enumerate(pages) if i not in invoice_indexes]
        invoice_texts = [(i, pages[i]) for i in invoice_indexes]

        if not candidates:
            return self._invoice_only(invoice_texts, filename)
        if invoice_indexes:
            logger.info(f"Invoice page(s) {[i + 1 for i in invoice_indexes]} set aside")

        best = self.classifier.select_best_page([text for _, text in candidates])
        ordered = [candidates[best.page_index]] + [
            c for position, c in enumerate(candidates) if position != best.page_index
        ]
        packing_text = "\n".join(text for _, text in candidates)
        po_number = self.fields.resolve_po(explicit=po, filename=filename, text=packing_text)

        if ocr:
            # OCR text scores poorly, so let the item count decide between pages
            page_index, page_text, outcome = ordered[0][0], ordered[0][1], None
            for index, text in ordered:
                attempt = self._extract(text, packing_text, po_number, ocr=True)
                logger.debug(f"OCR page {index + 1}: {len(attempt.result.items)} items")
                if outcome is None or len(attempt.result.items) > len(outcome.result.items):
                    page_index, page_text, outcome = index, text, attempt
        else:
            page_index, page_text = ordered[0]
            outcome = self._extract(page_text, packing_text, po_number, ocr=False)

        document = self._build_document(outcome, po_number, page_index, page_text, ocr)
        invoices = self._parse_invoices(invoice_texts)
        return self._finish(document, invoices, "\n".join(pages), packing_text, filename)

    # ------------------------------------------------------------------
    # Spreadsheet
    # ------------------------------------------------------------------

    def _parse_spreadsheet(self, data: bytes, filename: str, po: Optional[str]) -> ParseOutcome:
        sheets = self.spreadsheet_processor.read_sheets(data, filename)
        positions = {name: index for index, name in enumerate(sheets)}
        texts = {name: rows_to_text(rows) for name, rows in sheets.items()}

        invoice_names = [
            name for name in sheets
            if 'invoice' in name.lower() or self.invoice_detector.is_invoice(texts[name])
        ]
        invoice_texts = [(positions[name], texts[name]) for name in invoice_names]
        packing_sheets: Dict[str, Grid] = {
            name: rows for name, rows in sheets.items() if name not in invoice_names
        }

        if not packing_sheets:
            return self._invoice_only(invoice_texts, filename)

        selected = self.classifier.select_best_sheet(packing_sheets)
        if selected is None:
            raise NoItemsExtractedError(Supplier.UNKNOWN.display_name, "")
        name, rows = selected
        sheet_text = texts[name]
        packing_text = "\n".join(texts[n] for n in packing_sheets)

        po_number = self.fields.resolve_po(explicit=po, filename=filename, text=sheet_text, rows=rows)
        if po_number == UNKNOWN_PO:
            po_number = self._po_from_other_sheets(sheets, name) or UNKNOWN_PO

        outcome = self._extract(sheet_text, packing_text, po_number, ocr=False, rows=rows)
        document = self._build_document(outcome, po_number, positions[name], sheet_text, ocr=False)
        invoices = self._parse_invoices(invoice_texts)
        return self._finish(document, invoices, "\n".join(texts.values()), packing_text, filename)

    def _po_from_other_sheets(self, sheets: Dict[str, Grid], selected: str) -> Optional[str]:
        for name, rows in sheets.items():
            if name == selected:
                continue
            po = self.fields.po_from_grid(rows) or self.fields.po_from_text(rows_to_text(rows))
            if po:
                logger.debug(f"PO {po} found on sheet '{name}'")
                return po
        return None

    # ------------------------------------------------------------------
    # Shared stages
    # ------------------------------------------------------------------

    def _extract(
        self,
        text: str,
        packing_text: str,
        po_number: str,
        ocr: bool,
        rows: Optional[Grid] = None
    ) -> ExtractionOutcome:
        supplier = self.supplier_detector.detect(text)
        if supplier is Supplier.UNKNOWN:
            supplier = self.supplier_detector.detect(packing_text)
        context = ExtractionContext(text=text, po_number=po_number, rows=rows, ocr=ocr)
        return self.registry.extract(context, supplier)

    @staticmethod
    def _build_document(
        outcome: ExtractionOutcome,
        po_number: str,
        source_page: int,
        text: str,
        ocr: bool
    ) -> ParsedPackingList:
        if not outcome.result.items:
            raise NoItemsExtractedError(outcome.supplier.display_name, text_preview(text))
        return ParsedPackingList(
            supplier=outcome.supplier,
            po_number=po_number,
            items=outcome.result.items,
            source_page=source_page,
            strategy=outcome.result.strategy,
            ocr_used=ocr,
        )

    def _parse_invoices(self, invoice_texts: List[Tuple[int, str]]) -> List[ParsedInvoice]:
        invoices = []
        for index, text in invoice_texts:
            try:
                invoices.append(self.invoice_parser.parse(text, source_page=index))
            except InvoiceParsingError as e:
                logger.warning(f"Invoice on page {index + 1} not parsed: {e.message}")
        return invoices

    def _invoice_only(self, invoice_texts: List[Tuple[int, str]], filename: str) -> ParseOutcome:
        logger.info(f"{filename or '<bytes>'} contains only invoices")
        invoices = self._parse_invoices(invoice_texts)
        if not invoices:
            raise InvoiceParsingError(
                "File contains only invoices and none could be parsed",
                {"pages": [index + 1 for index, _ in invoice_texts]}
            )
        return ParseOutcome(
            filename=filename, invoice=invoices[0], invoices=invoices, is_invoice=True
        )

    def _finish(
        self,
        document: ParsedPackingList,
        invoices: List[ParsedInvoice],
        all_text: str,
        packing_text: str,
        filename: str
    ) -> ParseOutcome:
        document.warehouse, document.warehouse_detected = self.fields.warehouse(all_text)

        pos = self.fields.all_pos(packing_text)
        if len(pos) > 1:
            document.warnings.append(f"Multiple POs found: {', '.join(pos)}")
            logger.warning(f"Multiple POs in {filename or '<bytes>'}: {pos}")

        if invoices:
            self.correlator.apply(document, invoices)

        self.post_processor.process(document)
        return ParseOutcome(
            filename=filename,
            document=document,
            invoice=invoices[0] if invoices else None,
            invoices=invoices,
        )
