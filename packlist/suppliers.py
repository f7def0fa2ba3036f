"""
Supplier Enumeration.

The closed set of mill formats the pipeline understands. Each member knows
its configured vendor code and default finish code.
"""

from enum import Enum

from config import get_config


class Supplier(Enum):
    """Known packing-list grammars."""

    WUU_JING = "wuu-jing"
    YUEN_CHANG = "yuen-chang"
    YEOU_YIH = "yeou-yih"
    UNKNOWN = "unknown"

    @property
    def config_key(self) -> str:
        return self.name.lower()

    @property
    def display_name(self) -> str:
        if self is Supplier.UNKNOWN:
            return "Unknown"
        return " ".join(part.capitalize() for part in self.value.split("-"))

    @property
    def vendor_code(self) -> str:
        """ERP vendor code, empty when the mill has none assigned."""
        defaults = {
            Supplier.WUU_JING: "V005006",
            Supplier.YUEN_CHANG: "V005010",
        }
        return get_config(
            f"suppliers.vendor_codes.{self.config_key}",
            defaults.get(self, "")
        ) or ""

    @property
    def default_finish(self) -> str:
        """Finish designation used when the document states none."""
        defaults = {Supplier.YUEN_CHANG: "2B"}
        return get_config(
            f"suppliers.finish_codes.{self.config_key}",
            defaults.get(self, "#1")
        )

    @classmethod
    def known(cls):
        """Suppliers with a dedicated extractor, in preference order."""
        return [cls.WUU_JING, cls.YUEN_CHANG, cls.YEOU_YIH]
