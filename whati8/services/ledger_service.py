"""Split ledger: event details, registries and derived shares"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional

from whati8.core.exceptions import ValidationError
from whati8.models.line_item import LineItem
from whati8.models.participant import Participant
from whati8.repositories.line_item_registry import LineItemRegistry
from whati8.repositories.participant_registry import ParticipantRegistry
from whati8.schemas.ledger import (LedgerRecord, LedgerSnapshot,
                                   LineItemRecord, ParticipantRecord)
from whati8.services.split_calculator import compute_shares, total_of
from whati8.services.summary_formatter import DEFAULT_TITLE, format_summary
from whati8.utils.decimal_utils import (ZERO, MoneyInput,
                                       to_non_negative_money)

logger = logging.getLogger(__name__)


class SplitLedger:
    """One bill-splitting session.

    Every mutating method recomputes the shares, total price and summary
    text before returning, so ``snapshot()`` is always consistent with
    the registries. A rejected mutation raises ``ValidationError`` and
    leaves the previous state untouched.
    """

    def __init__(
        self,
        event_name: str = "",
        event_date: Optional[str] = None,
        total_tax: MoneyInput = ZERO,
        title: str = DEFAULT_TITLE,
    ):
        self.title = title
        self.event_name = event_name
        self.event_date = event_date
        self.total_tax = _clean_tax(total_tax)
        self.participants = ParticipantRegistry()
        self.line_items = LineItemRegistry(self.participants)

        self._computed_shares: Dict[str, Decimal] = {}
        self._total_price: Decimal = ZERO
        self._summary_text: str = ""
        self.recompute()

    # Derived state

    @property
    def computed_shares(self) -> Dict[str, Decimal]:
        return dict(self._computed_shares)

    @property
    def total_price(self) -> Decimal:
        return self._total_price

    @property
    def summary_text(self) -> str:
        return self._summary_text

    def recompute(self) -> None:
        """Replace shares, total price and summary from current state"""
        shares = compute_shares(
            self.participants.all(), self.line_items.all(), self.total_tax
        )
        self._computed_shares = shares
        self._total_price = total_of(shares)
        self._summary_text = format_summary(self._build_snapshot(), self.title)

    def snapshot(self) -> LedgerSnapshot:
        """Detached copy of the ledger after the latest recomputation"""
        return LedgerSnapshot(
            **self._record_fields(), summary_text=self._summary_text
        )

    def _build_snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(**self._record_fields())

    # Event details

    def set_event_name(self, event_name: str) -> None:
        self.event_name = (event_name or "").strip()
        self.recompute()

    def set_event_date(self, event_date: Optional[str]) -> None:
        self.event_date = event_date or None
        self.recompute()

    def set_total_tax(self, total_tax: MoneyInput) -> None:
        """
        Change the tax for the whole event.

        Raises:
            ValidationError: If tax is negative or not a number
        """
        self.total_tax = _clean_tax(total_tax)
        self.recompute()

    # Participants

    def add_participant(self, name: str) -> str:
        """
        Add a participant.

        Args:
            name: Display name

        Returns:
            Key of the new participant

        Raises:
            ValidationError: If name is empty
        """
        try:
            key = self.participants.add(name)
        except ValidationError as e:
            logger.info("Rejected participant: %s", e.message)
            raise
        self.recompute()
        return key

    def remove_participant(self, key: str) -> None:
        """Remove a participant from the ledger and from every line item"""
        if self.participants.remove(key) is not None:
            self.line_items.discard_participant(key)
        self.recompute()

    def rename_participant(self, key: str, new_name: str) -> None:
        self.participants.rename(key, new_name)
        self.recompute()

    def toggle_payer(self, key: str) -> None:
        self.participants.toggle_payer(key)
        self.recompute()

    def toggle_settled(self, key: str) -> None:
        self.participants.toggle_settled(key)
        self.recompute()

    def set_settled(self, key: str, settled: bool) -> None:
        self.participants.set_settled(key, settled)
        self.recompute()

    # Line items

    def add_line_item(
        self,
        name: str,
        price: MoneyInput,
        participant_ids: Iterable[str] = (),
    ) -> str:
        """
        Add a line item.

        Args:
            name: Item name
            price: Item price
            participant_ids: Participants sharing the item

        Returns:
            Key of the new line item

        Raises:
            ValidationError: If name is empty or price is negative
        """
        try:
            key = self.line_items.add(name, price, participant_ids)
        except ValidationError as e:
            logger.info("Rejected line item: %s", e.message)
            raise
        self.recompute()
        return key

    def remove_line_item(self, key: str) -> None:
        self.line_items.remove(key)
        self.recompute()

    def rename_line_item(self, key: str, new_name: str) -> None:
        self.line_items.rename(key, new_name)
        self.recompute()

    def set_line_item_price(self, key: str, price: MoneyInput) -> None:
        self.line_items.set_price(key, price)
        self.recompute()

    def set_line_item_participants(self, key: str, participant_ids: Iterable[str]) -> None:
        self.line_items.set_participants(key, participant_ids)
        self.recompute()

    def add_line_item_participant(self, key: str, participant_key: str) -> None:
        self.line_items.add_participant(key, participant_key)
        self.recompute()

    def remove_line_item_participant(self, key: str, participant_key: str) -> None:
        self.line_items.remove_participant(key, participant_key)
        self.recompute()

    # Persistence boundary

    def to_record(self) -> LedgerRecord:
        """Serialisable form of the ledger, derived state included"""
        return LedgerRecord(
            **self._record_fields(), summary_text=self._summary_text
        )

    @classmethod
    def from_record(cls, record: LedgerRecord, title: str = DEFAULT_TITLE) -> "SplitLedger":
        """
        Rebuild a ledger from its serialised form.

        Stored shares and summary are ignored and recomputed.

        Raises:
            ValidationError: If the record holds a negative tax or price
        """
        ledger = cls(
            event_name=record.event_name,
            event_date=record.event_date,
            total_tax=record.total_tax,
            title=title,
        )
        ledger.participants = ParticipantRegistry(
            [Participant(**p.model_dump()) for p in record.participants]
        )
        ledger.line_items = LineItemRegistry(
            ledger.participants,
            [_line_item_from_record(item) for item in record.line_items],
        )
        ledger.recompute()
        return ledger

    def _record_fields(self) -> dict:
        participants = self.participants.all()
        order = {p.id: index for index, p in enumerate(participants)}
        return {
            "event_name": self.event_name,
            "event_date": self.event_date,
            "total_tax": self.total_tax,
            "participants": [
                ParticipantRecord(**p.model_dump()) for p in participants
            ],
            "line_items": [
                LineItemRecord(
                    id=item.id,
                    name=item.name,
                    price=item.price,
                    participant_ids=sorted(
                        item.participant_ids, key=lambda pid: order.get(pid, len(order))
                    ),
                )
                for item in self.line_items.all()
            ],
            "computed_shares": dict(self._computed_shares),
            "total_price": self._total_price,
        }

    def __repr__(self) -> str:
        return (
            f"<SplitLedger(event={self.event_name!r}, participants={len(self.participants)}, "
            f"items={len(self.line_items)}, total={self._total_price})>"
        )


def _clean_tax(total_tax: MoneyInput) -> Decimal:
    return to_non_negative_money(total_tax, "Tax")


def _line_item_from_record(record: LineItemRecord) -> LineItem:
    price = to_non_negative_money(record.price, "Price")
    return LineItem(
        id=record.id,
        name=record.name,
        price=price,
        participant_ids=set(record.participant_ids),
    )
