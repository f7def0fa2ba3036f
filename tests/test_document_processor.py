"""Tests for the post-processing pass over parsed documents."""

from packlist.extraction import PackingListItem, ParsedPackingList
from packlist.inventory import InventoryLookup
from packlist.normalizer import ParsedSize
from packlist.pipeline import DocumentProcessor
from packlist.suppliers import Supplier

PLATE = ParsedSize(0.375, 60, 120)
PLATE_ID = "0.3750-60__-120__-304/304L-#1____"


def process(*items, supplier=Supplier.WUU_JING, inventory_ids=None):
    inventory = InventoryLookup(mappings={}, thickness_display={}, inventory_ids=inventory_ids or [])
    document = ParsedPackingList(supplier=supplier, po_number="1837", items=list(items))
    return DocumentProcessor(inventory).process(document)


class TestWeights:
    def test_consistent_weight_is_high(self):
        doc = process(PackingListItem(size=PLATE, piece_count=6, net_weight_lbs=4656, gross_weight_lbs=4685))
        assert doc.items[0].weight_confidence == "high"
        assert doc.items[0].warnings == []

    def test_theoretical_weight_fills_missing_weight(self):
        item = process(PackingListItem(size=PLATE, piece_count=2)).items[0]

        assert item.net_weight_lbs == 1650
        assert item.gross_weight_lbs == 1650
        assert item.weight_confidence == "low"
        assert item.warnings == ["No weight found; theoretical weight 1,650 lbs used"]

    def test_large_deviation_flagged(self):
        item = process(PackingListItem(size=PLATE, piece_count=1, net_weight_lbs=3000, gross_weight_lbs=3050)).items[0]

        assert item.weight_confidence == "low"
        assert item.warnings[0].startswith("Weight deviates")
        assert item.net_weight_lbs == 3000

    def test_item_without_size_untouched(self):
        item = process(PackingListItem(net_weight_lbs=10, gross_weight_lbs=12)).items[0]
        assert item.weight_confidence is None
        assert item.warnings == []


class TestChecks:
    def test_gross_below_net(self):
        item = process(PackingListItem(size=PLATE, piece_count=6, net_weight_lbs=4685, gross_weight_lbs=4656)).items[0]
        assert "Gross weight 4656 is below net weight 4685" in item.warnings

    def test_dimension_out_of_range(self):
        item = process(PackingListItem(
            size=ParsedSize(0.375, 60, 20), piece_count=1, net_weight_lbs=263, gross_weight_lbs=265,
        )).items[0]
        assert "Dimension out of range: length 20 outside [96, 180]" in item.warnings

    def test_unknown_inventory_id(self):
        item = process(
            PackingListItem(
                inventory_id="0.3750-60__-144__-304/304L-#1____",
                size=ParsedSize(0.375, 60, 144), piece_count=6,
                net_weight_lbs=5670, gross_weight_lbs=5700,
            ),
            inventory_ids=[PLATE_ID],
        ).items[0]
        assert any("not found" in w and f"closest match: {PLATE_ID}" in w for w in item.warnings)

    def test_known_inventory_id(self):
        item = process(
            PackingListItem(inventory_id=PLATE_ID, size=PLATE, piece_count=6,
                            net_weight_lbs=4656, gross_weight_lbs=4685),
            inventory_ids=[PLATE_ID],
        ).items[0]
        assert item.warnings == []

    def test_lines_resequenced(self):
        doc = ParsedPackingList(items=[PackingListItem(), PackingListItem()])
        doc.items[0].line_number = 7
        DocumentProcessor(InventoryLookup(mappings={}, thickness_display={}, inventory_ids=[])).process(doc)
        assert [i.line_number for i in doc.items] == [1, 2]
