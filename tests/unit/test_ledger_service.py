"""Unit tests for the split ledger"""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from whati8.core.exceptions import ValidationError
from whati8.schemas.ledger import LedgerRecord
from whati8.services.ledger_service import SplitLedger


class TestRecomputation:
    """Test derived state after mutations"""

    def test_pizza_example(self, pizza_ledger):
        """Test A and B sharing a 10.00 pizza with 1.00 tax"""
        ledger, alice, bob, _ = pizza_ledger

        assert ledger.computed_shares == {alice: Decimal("5.50"), bob: Decimal("5.50")}
        assert ledger.total_price == Decimal("11.00")

    def test_new_participant_has_zero_share(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger

        carol = ledger.add_participant("Carol")

        assert ledger.computed_shares[carol] == Decimal("0.00")
        assert ledger.total_price == Decimal("11.00")

    def test_total_matches_shares_after_each_mutation(self, ledger):
        alice = ledger.add_participant("Alice")
        bob = ledger.add_participant("Bob")
        carol = ledger.add_participant("Carol")
        ramen = ledger.add_line_item("Ramen", "13.75", [alice, bob, carol])
        ledger.add_line_item("Gyoza", "7.10", [bob])
        ledger.set_total_tax("2.99")
        ledger.set_line_item_price(ramen, "14.05")
        ledger.remove_line_item_participant(ramen, carol)

        assert ledger.total_price == sum(ledger.computed_shares.values())

    def test_recompute_is_idempotent(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger
        shares, summary = ledger.computed_shares, ledger.summary_text

        ledger.recompute()
        ledger.recompute()

        assert ledger.computed_shares == shares
        assert ledger.summary_text == summary

    def test_summary_tracks_changes(self, pizza_ledger):
        ledger, alice, _, pizza = pizza_ledger

        ledger.rename_line_item(pizza, "Margherita")
        ledger.toggle_payer(alice)

        assert "Margherita: 10.00" in ledger.summary_text
        assert "Alice [PAYER]" in ledger.summary_text

    def test_set_event_details(self, ledger):
        ledger.set_event_name(" Team Lunch ")
        ledger.set_event_date("2026-10-16")

        assert ledger.event_name == "Team Lunch"
        assert "Date: 2026-10-16" in ledger.summary_text

        ledger.set_event_date(None)
        assert "Date:" not in ledger.summary_text


class TestRemoveParticipant:
    """Test participant removal cascade"""

    def test_remove_cascades_to_items_and_shares(self, ledger):
        alice = ledger.add_participant("Alice")
        bob = ledger.add_participant("Bob")
        coffee = ledger.add_line_item("Coffee", "3.00", [alice])

        assert ledger.computed_shares == {alice: Decimal("3.00"), bob: Decimal("0.00")}

        ledger.remove_participant(alice)

        assert alice not in ledger.computed_shares
        assert ledger.line_items.get(coffee).participant_ids == set()
        assert ledger.computed_shares == {bob: Decimal("0.00")}
        assert ledger.total_price == Decimal("0.00")

    def test_remove_keeps_other_shares(self, ledger):
        alice = ledger.add_participant("Alice")
        bob = ledger.add_participant("Bob")
        carol = ledger.add_participant("Carol")
        ledger.add_line_item("Pizza", "12.00", [alice, bob])
        ledger.add_line_item("Salad", "7.00", [carol])

        ledger.remove_participant(alice)

        assert ledger.computed_shares[carol] == Decimal("7.00")
        assert ledger.computed_shares[bob] == Decimal("12.00")

    def test_remove_unknown_is_noop(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger
        ledger.remove_participant("missing")
        assert ledger.total_price == Decimal("11.00")


class TestRejectedMutations:
    """Test rejected operations leave state unchanged"""

    def test_blank_participant_rejected(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger
        before = ledger.snapshot()

        with pytest.raises(ValidationError):
            ledger.add_participant("   ")

        assert ledger.snapshot() == before

    def test_negative_price_rejected(self, pizza_ledger):
        ledger, _, _, pizza = pizza_ledger

        with pytest.raises(ValidationError):
            ledger.set_line_item_price(pizza, "-5")

        assert ledger.total_price == Decimal("11.00")

    def test_negative_tax_rejected(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger

        with pytest.raises(ValidationError):
            ledger.set_total_tax("-1.00")

        assert ledger.total_tax == Decimal("1.00")


class TestMoneyBoundaries:
    """Test amounts outside the money range are rejected without side effects"""

    @pytest.mark.parametrize("price", ["1e30", "NaN", "Infinity", "-0.004"])
    def test_add_line_item_rejected(self, pizza_ledger, price):
        ledger, alice, _, _ = pizza_ledger
        before = ledger.snapshot()

        with pytest.raises(ValidationError):
            ledger.add_line_item("Wine", price, [alice])

        assert ledger.snapshot() == before

    @pytest.mark.parametrize("price", ["1e30", "NaN", "Infinity", "-0.004"])
    def test_set_line_item_price_rejected(self, pizza_ledger, price):
        ledger, _, _, pizza = pizza_ledger
        before = ledger.snapshot()

        with pytest.raises(ValidationError):
            ledger.set_line_item_price(pizza, price)

        assert ledger.snapshot() == before

    @pytest.mark.parametrize("tax", ["1e30", "NaN", "Infinity", "-0.004"])
    def test_set_total_tax_rejected(self, pizza_ledger, tax):
        ledger, _, _, _ = pizza_ledger
        before = ledger.snapshot()

        with pytest.raises(ValidationError):
            ledger.set_total_tax(tax)

        assert ledger.snapshot() == before

    def test_new_ledger_rejects_huge_tax(self):
        with pytest.raises(ValidationError):
            SplitLedger(total_tax="1e30")

    def test_large_amounts_still_balance(self, pizza_ledger):
        ledger, alice, bob, _ = pizza_ledger

        ledger.add_line_item("Yacht", "999999999999.99", [alice, bob])

        shares = ledger.computed_shares
        assert shares[alice] == Decimal("500000000005.50")
        assert shares[bob] == Decimal("500000000005.50")
        assert ledger.total_price == Decimal("1000000000011.00")


class TestSnapshot:
    """Test the ledger snapshot"""

    def test_snapshot_contents(self, pizza_ledger):
        ledger, alice, bob, pizza = pizza_ledger

        snapshot = ledger.snapshot()

        assert snapshot.event_name == "Pizza Night"
        assert [p.id for p in snapshot.participants] == [alice, bob]
        assert snapshot.line_items[0].id == pizza
        assert snapshot.line_items[0].participant_ids == [alice, bob]
        assert snapshot.total_price == Decimal("11.00")
        assert snapshot.summary_text == ledger.summary_text

    def test_snapshot_is_frozen(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger
        snapshot = ledger.snapshot()

        with pytest.raises(SchemaValidationError):
            snapshot.event_name = "Changed"

    def test_nested_record_edits_do_not_reach_ledger(self, pizza_ledger):
        ledger, alice, bob, pizza = pizza_ledger
        snapshot = ledger.snapshot()

        snapshot.participants[0].name = "Mallory"
        snapshot.line_items[0].participant_ids.clear()

        assert ledger.participants.get(alice).name == "Alice"
        assert ledger.line_items.get(pizza).participant_ids == {alice, bob}
        assert ledger.computed_shares[alice] == Decimal("5.50")

    def test_snapshot_does_not_follow_later_mutations(self, pizza_ledger):
        ledger, _, _, _ = pizza_ledger
        snapshot = ledger.snapshot()

        ledger.add_participant("Carol")

        assert len(snapshot.participants) == 2


class TestPersistenceBoundary:
    """Test conversion to and from the serialised form"""

    def test_record_rebuilds_same_ledger(self, pizza_ledger):
        ledger, alice, _, _ = pizza_ledger
        ledger.toggle_payer(alice)
        ledger.set_event_date("2026-10-16")

        restored = SplitLedger.from_record(ledger.to_record())

        assert restored.snapshot() == ledger.snapshot()

    def test_record_uses_string_amounts_in_json(self, pizza_ledger):
        ledger, alice, _, _ = pizza_ledger

        data = ledger.to_record().model_dump(mode="json")

        assert data["total_tax"] == "1.00"
        assert data["computed_shares"][alice] == "5.50"
        assert set(data) >= {"event_name", "participants", "line_items", "summary_text"}

    def test_stored_derived_state_is_recomputed(self, pizza_ledger):
        ledger, alice, bob, _ = pizza_ledger
        record = ledger.to_record().model_copy(
            update={
                "computed_shares": {alice: Decimal("99.00")},
                "total_price": Decimal("99.00"),
                "summary_text": "stale",
            }
        )

        restored = SplitLedger.from_record(record)

        assert restored.computed_shares == {alice: Decimal("5.50"), bob: Decimal("5.50")}
        assert restored.summary_text != "stale"

    def test_record_with_unknown_item_participant(self):
        record = LedgerRecord.model_validate({
            "event_name": "Picnic",
            "participants": [{"id": "a", "name": "A"}],
            "line_items": [
                {"id": "i1", "name": "Bread", "price": "4.00", "participant_ids": ["a", "zz"]}
            ],
        })

        ledger = SplitLedger.from_record(record)

        assert ledger.line_items.get("i1").participant_ids == {"a"}
        assert ledger.computed_shares == {"a": Decimal("4.00")}

    def test_record_with_negative_price_rejected(self):
        record = LedgerRecord.model_validate({
            "line_items": [{"id": "i1", "name": "Bread", "price": "-4.00"}],
        })

        with pytest.raises(ValidationError):
            SplitLedger.from_record(record)
