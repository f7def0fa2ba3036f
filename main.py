#!/usr/bin/env python3
"""
Steel Packing-List Extraction - Main Entry Point.

Command-line access to the packing-list pipeline. Every input file is
parsed in the order given and the results are written as JSON.

Usage:
    Command Line:
        python main.py --input PL_1837.pdf --output results.json
        python main.py --input ./packing_lists/ --po 1837 --inventory inventory.xlsx
        python main.py --input scan.pdf --force-ocr

    Python:
        from main import run_extraction
        outcomes = run_extraction(["PL_1837.pdf"])
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import ConfigurationManager
from packlist.utils.helpers import ensure_directory
from packlist.utils.logger import get_logger, setup_logger_from_config


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Steel Packing-List Extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Parse a packing list:
        python main.py --input PL_1837.pdf --output results.json

    Parse a directory with a known PO:
        python main.py --input ./packing_lists/ --po 1837

    OCR a scanned PDF:
        python main.py --input scan.pdf --force-ocr
        """
    )

    parser.add_argument(
        "--input", "-i",
        nargs="+",
        required=True,
        help="Input files or directories (PDF, XLSX, XLSM)"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="JSON output path (default: print to stdout)"
    )

    parser.add_argument(
        "--po",
        type=str,
        default=None,
        help="PO number applied to every input"
    )

    parser.add_argument(
        "--force-ocr",
        action="store_true",
        help="OCR PDFs instead of reading their native text"
    )

    parser.add_argument(
        "--inventory",
        type=str,
        default=None,
        help="Workbook of known inventory IDs used to validate results"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Load configuration and set up logging.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)
    if args.log_level:
        config.set("logging.level", args.log_level)

    logger = setup_logger_from_config()
    logger.info("=" * 60)
    logger.info("STEEL PACKING-LIST EXTRACTION")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {', '.join(args.input)}")
    return config


def run_extraction(
    inputs: Sequence[str],
    po: Optional[str] = None,
    force_ocr: bool = False,
    inventory_path: Optional[str] = None
) -> list:
    """
    Parse every input file.

    Args:
        inputs: Files or directories.
        po: Explicit PO for all files.
        force_ocr: OCR PDFs instead of reading native text.
        inventory_path: Optional inventory-ID workbook.

    Returns:
        One ParseOutcome per file, in input order.

    Raises:
        PackingListError: If the inventory workbook or an input cannot be read.
    """
    logger = get_logger(__name__)

    from packlist.input_handler import InputHandler
    from packlist.inventory import InventoryLookup
    from packlist.pipeline import PackingListPipeline

    inventory = InventoryLookup.from_config()
    if inventory_path:
        inventory.load_from_workbook(inventory_path)

    input_handler = InputHandler()
    pipeline = PackingListPipeline(inventory=inventory, input_handler=input_handler)

    files = [input_handler.load(path) for path in input_handler.collect_files(inputs)]
    if not files:
        logger.warning("No supported files found")
        return []

    def report_progress(event) -> None:
        logger.debug(f"{event.status} ({event.progress:.0f}%)")

    outcomes = pipeline.parse_files(files, po=po, force_ocr=force_ocr, on_progress=report_progress)

    for outcome in outcomes:
        if outcome.needs_ocr:
            logger.warning(f"{outcome.filename}: no native text, rerun with --force-ocr")
        elif outcome.error:
            logger.error(f"{outcome.filename}: {outcome.error}")
        elif outcome.is_invoice:
            logger.info(f"{outcome.filename}: invoice {outcome.invoice.invoice_number or '(no number)'}")
        else:
            document = outcome.document
            logger.info(
                f"{outcome.filename}: {document.supplier.display_name}, PO {document.po_number}, "
                f"{len(document.items)} items, {document.total_gross_weight_lbs:,.0f} lbs gross"
            )
        if outcome.ocr_warning:
            logger.warning(f"{outcome.filename}: {outcome.ocr_warning}")

    return outcomes


def write_output(outcomes: list, output: Optional[str]) -> None:
    """Write outcomes as JSON to a file, or to stdout."""
    payload = json.dumps([o.to_dict() for o in outcomes], indent=2, ensure_ascii=False)
    if not output:
        print(payload)
        return
    output_path = Path(output)
    ensure_directory(output_path.parent)
    output_path.write_text(payload, encoding='utf-8')
    get_logger(__name__).info(f"Results written to {output_path}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code: 0 when every file parsed, 1 otherwise, 130 on interrupt.
    """
    from packlist.utils.exceptions import PackingListError

    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        outcomes = run_extraction(
            inputs=args.input,
            po=args.po,
            force_ocr=args.force_ocr,
            inventory_path=args.inventory
        )
        if not outcomes:
            logger.error("No files to process")
            return 1

        write_output(outcomes, args.output)

        failed: List[str] = [o.filename for o in outcomes if not o.success]
        logger.info("=" * 60)
        logger.info(f"Extraction complete. {len(outcomes) - len(failed)}/{len(outcomes)} files parsed.")
        logger.info("=" * 60)
        return 1 if failed else 0

    except PackingListError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
