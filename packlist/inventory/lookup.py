"""
Inventory Lookup Module.

An explicitly constructed lookup object handed to the pipeline. It carries
three kinds of reference data:

    - Manual mappings: exact (thickness, width, length) triples whose
      inventory ID and/or weight per square foot are overridden.
    - Thickness display overrides: thicknesses whose identifier prefix is
      written differently from the four-decimal default.
    - Known inventory IDs: the ERP item list, used to flag extracted
      identifiers that do not exist yet.

The pipeline only reads from it. Loading, clearing and persisting are
lifecycle operations owned by the caller.
"""

import difflib
import io
import json
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from config import get_config
from packlist.utils.exceptions import InventoryLoadError
from packlist.utils.helpers import cell_to_text, ensure_directory, format_number
from packlist.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

# Header names accepted for the ID column of an inventory workbook
ID_COLUMN_NAMES = ('inventory id', 'inventoryid', 'item', 'sku')


@dataclass(frozen=True)
class InventoryMapping:
    """
    Override for one dimension triple.

    Attributes:
        inventory_id: Replacement inventory ID, or None to keep the built one.
        lbs_per_sq_ft: Replacement weight per square foot, or None.
    """
    inventory_id: Optional[str] = None
    lbs_per_sq_ft: Optional[float] = None


def dimension_key(thickness: float, width: float, length: float) -> str:
    """Key used by manual mappings: "0.3750-60-120"."""
    return f"{thickness:.4f}-{format_number(width)}-{format_number(length)}"


class InventoryLookup:
    """
    Read-mostly reference data for identifier construction.

    Example:
        >>> lookup = InventoryLookup()
        >>> lookup.add_mapping(0.375, 60, 120, inventory_id="PLATE-375-60-120")
        >>> lookup.lookup(0.375, 60, 120).inventory_id
        'PLATE-375-60-120'
        >>> lookup.is_valid("anything")  # empty ID set accepts everything
        True
    """

    def __init__(
        self,
        mappings: Optional[Dict[str, Dict[str, Any]]] = None,
        thickness_display: Optional[Dict[str, str]] = None,
        inventory_ids: Optional[Iterable[str]] = None
    ) -> None:
        """
        Args:
            mappings: Dimension key -> {"inventory_id", "lbs_per_sq_ft"}.
            thickness_display: Four-decimal thickness -> display string.
            inventory_ids: Initial set of known ERP inventory IDs.
        """
        self._mappings: Dict[str, InventoryMapping] = {}
        for key, value in (mappings or {}).items():
            self._mappings[key] = InventoryMapping(
                inventory_id=value.get('inventory_id'),
                lbs_per_sq_ft=value.get('lbs_per_sq_ft')
            )

        self._thickness_display: Dict[str, str] = {
            f"{float(key):.4f}": str(value)
            for key, value in (thickness_display or {}).items()
        }
        self._ids: Set[str] = set(inventory_ids or [])

        logger.debug(
            f"InventoryLookup initialized ({len(self._mappings)} mappings, "
            f"{len(self._ids)} IDs)"
        )

    @classmethod
    def from_config(cls) -> 'InventoryLookup':
        """Build a lookup from the ``inventory`` section of the settings."""
        return cls(
            mappings=get_config("inventory.mappings", {}) or {},
            thickness_display=get_config("inventory.thickness_display", {}) or {}
        )

    # ------------------------------------------------------------------
    # Dimension overrides
    # ------------------------------------------------------------------

    def add_mapping(
        self,
        thickness: float,
        width: float,
        length: float,
        inventory_id: Optional[str] = None,
        lbs_per_sq_ft: Optional[float] = None
    ) -> None:
        """Register a manual override for one dimension triple."""
        key = dimension_key(thickness, width, length)
        self._mappings[key] = InventoryMapping(inventory_id, lbs_per_sq_ft)

    def lookup(self, thickness: float, width: float, length: float) -> Optional[InventoryMapping]:
        """Exact-match override for a dimension triple, if any."""
        return self._mappings.get(dimension_key(thickness, width, length))

    def thickness_display(self, thickness: float) -> Optional[str]:
        """Display override for a thickness, if any."""
        return self._thickness_display.get(f"{thickness:.4f}")

    # ------------------------------------------------------------------
    # Known inventory IDs
    # ------------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self._ids)

    def all_ids(self) -> List[str]:
        return sorted(self._ids)

    def is_valid(self, inventory_id: str) -> bool:
        """True when the ID is known, or when no IDs are loaded at all."""
        if not self._ids:
            return True
        return inventory_id in self._ids

    def find_closest_match(self, inventory_id: str) -> Optional[str]:
        """
        Closest known ID by sequence similarity.

        Candidates sharing the thickness prefix are preferred; returns None
        when nothing is loaded or nothing is similar enough.
        """
        if not self._ids or not inventory_id:
            return None
        if inventory_id in self._ids:
            return inventory_id

        prefix = inventory_id.split('-', 1)[0]
        same_thickness = [known for known in self._ids if known.startswith(prefix)]
        candidates = sorted(same_thickness or self._ids)
        matches = difflib.get_close_matches(inventory_id, candidates, n=1, cutoff=0.6)
        return matches[0] if matches else None

    def add_ids(self, inventory_ids: Iterable[str]) -> int:
        """Add IDs to the known set; returns how many were new."""
        before = len(self._ids)
        self._ids.update(i.strip() for i in inventory_ids if i and i.strip())
        return len(self._ids) - before

    def clear(self) -> None:
        """Forget all known inventory IDs (mappings are kept)."""
        self._ids.clear()
        logger.info("Inventory IDs cleared")

    def load_from_workbook(self, source: Union[str, Path, bytes]) -> int:
        """
        Load inventory IDs from an .xlsx workbook.

        The first sheet is read. The ID column is the first header cell
        named like "Inventory ID", "InventoryID", "Item" or "SKU"; without
        such a header the first column is used and row one is treated as
        data.

        Args:
            source: Path to the workbook, or its raw bytes.

        Returns:
            Number of IDs added.

        Raises:
            InventoryLoadError: If the workbook cannot be read.
        """
        name = "<bytes>" if isinstance(source, bytes) else str(source)
        try:
            handle = io.BytesIO(source) if isinstance(source, bytes) else source
            workbook = load_workbook(handle, read_only=True, data_only=True)
        except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
            raise InventoryLoadError(name, str(e)) from e

        try:
            rows = [list(row) for row in workbook.worksheets[0].iter_rows(values_only=True)]
        finally:
            workbook.close()

        if not rows:
            return 0

        header = [cell_to_text(cell).lower() for cell in rows[0]]
        column = next((i for i, h in enumerate(header) if h in ID_COLUMN_NAMES), None)
        data_rows = rows[1:] if column is not None else rows
        column = column or 0

        ids = [
            cell_to_text(row[column])
            for row in data_rows
            if len(row) > column and cell_to_text(row[column])
        ]
        added = self.add_ids(ids)
        logger.info(f"Loaded {added} inventory IDs from {name} ({self.count} total)")
        return added

    def load(self, path: Union[str, Path, None] = None) -> int:
        """
        Load IDs persisted by :meth:`persist`.

        Returns:
            Number of IDs added; 0 when the store does not exist yet.
        """
        store = Path(path or get_config("paths.inventory_store", "data/inventory_ids.json"))
        if not store.exists():
            logger.debug(f"No inventory store at {store}")
            return 0
        try:
            with open(store, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InventoryLoadError(str(store), str(e)) from e
        if not isinstance(payload, dict):
            raise InventoryLoadError(str(store), "expected a JSON object with 'inventory_ids'")
        return self.add_ids(payload.get('inventory_ids', []))

    def persist(self, path: Union[str, Path, None] = None) -> Path:
        """Write the known IDs to a JSON store and return its path."""
        store = Path(path or get_config("paths.inventory_store", "data/inventory_ids.json"))
        ensure_directory(store.parent)
        with open(store, 'w', encoding='utf-8') as f:
            json.dump({'inventory_ids': self.all_ids()}, f, indent=2)
        logger.info(f"Persisted {self.count} inventory IDs to {store}")
        return store
