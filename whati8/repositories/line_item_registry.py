"""Line item registry"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from whati8.core.exceptions import ValidationError
from whati8.models.line_item import LineItem
from whati8.repositories.participant_registry import ParticipantRegistry
from whati8.utils.decimal_utils import MoneyInput, to_non_negative_money

logger = logging.getLogger(__name__)


class LineItemRegistry:
    """Ordered arena of line items keyed by id.

    Participant keys handed to any operation are checked against the
    participant registry; unknown ones are dropped silently.
    """

    def __init__(
        self,
        participants: ParticipantRegistry,
        line_items: Optional[List[LineItem]] = None,
    ):
        self._participants = participants
        self._items: Dict[str, LineItem] = {}
        for item in line_items or []:
            item.participant_ids = self._known(item.participant_ids)
            self._items[item.id] = item

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Optional[LineItem]:
        item = self._items.get(key)
        if item is None:
            logger.debug("Line item %s not found", key)
        return item

    def all(self) -> List[LineItem]:
        """Line items in insertion order"""
        return list(self._items.values())

    def items_for(self, participant_key: str) -> List[LineItem]:
        """Line items the participant belongs to, in insertion order"""
        return [
            item for item in self._items.values()
            if participant_key in item.participant_ids
        ]

    def add(
        self,
        name: str,
        price: MoneyInput,
        participant_ids: Iterable[str] = (),
    ) -> str:
        """
        Register a new line item.

        Args:
            name: Item name
            price: Item price, rounded to 2 decimal places
            participant_ids: Initial participant selection

        Returns:
            Key of the new line item

        Raises:
            ValidationError: If name is empty or price is negative
        """
        cleaned = _clean_name(name)
        amount = _clean_price(price)
        item = LineItem(
            name=cleaned,
            price=amount,
            participant_ids=self._known(participant_ids),
        )
        self._items[item.id] = item
        logger.debug("Added line item %s (%s, %s)", item.id, cleaned, amount)
        return item.id

    def remove(self, key: str) -> Optional[LineItem]:
        item = self._items.pop(key, None)
        if item is None:
            logger.debug("Cannot remove line item %s: not found", key)
        return item

    def rename(self, key: str, new_name: str) -> None:
        cleaned = _clean_name(new_name)
        item = self.get(key)
        if item is not None:
            item.name = cleaned

    def set_price(self, key: str, price: MoneyInput) -> None:
        """
        Change the price of a line item.

        Raises:
            ValidationError: If price is negative or not a number
        """
        amount = _clean_price(price)
        item = self.get(key)
        if item is not None:
            item.price = amount

    def set_participants(self, key: str, participant_ids: Iterable[str]) -> None:
        """Replace the participant selection of a line item"""
        item = self.get(key)
        if item is None:
            return
        item.participant_ids = self._known(participant_ids)

    def add_participant(self, key: str, participant_key: str) -> None:
        item = self.get(key)
        if item is None:
            return
        if not self._participants.exists(participant_key):
            logger.debug("Ignoring unknown participant %s for item %s", participant_key, key)
            return
        item.participant_ids.add(participant_key)

    def remove_participant(self, key: str, participant_key: str) -> None:
        item = self.get(key)
        if item is not None:
            item.participant_ids.discard(participant_key)

    def discard_participant(self, participant_key: str) -> None:
        """Drop a participant from every line item"""
        for item in self._items.values():
            item.participant_ids.discard(participant_key)

    def _known(self, participant_ids: Iterable[str]) -> set:
        selected = set()
        for participant_key in participant_ids:
            if self._participants.exists(participant_key):
                selected.add(participant_key)
            else:
                logger.debug("Ignoring unknown participant %s", participant_key)
        return selected


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Line item name cannot be empty")
    return cleaned


def _clean_price(price: MoneyInput) -> Decimal:
    return to_non_negative_money(price, "Price")
