"""
Inventory Module.

Caller-owned inventory-identifier reference data, injected into the
pipeline.
"""

from .lookup import InventoryLookup, InventoryMapping, dimension_key

__all__ = ['InventoryLookup', 'InventoryMapping', 'dimension_key']
