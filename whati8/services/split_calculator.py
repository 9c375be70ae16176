"""Per-participant share calculation"""

from decimal import Decimal
from typing import Dict, List, Set

from whati8.models.line_item import LineItem
from whati8.models.participant import Participant
from whati8.utils.decimal_utils import ZERO, round_decimal, sum_decimals


def item_share(item: LineItem) -> Decimal:
    """
    Even share of a line item for each of its participants.

    Args:
        item: Line item

    Returns:
        Price divided by participant count, rounded to 2 places.
        Zero when the item has no participants.
    """
    count = len(item.participant_ids)
    if count == 0:
        return ZERO
    return round_decimal(item.price / count)


def involved_participants(
    participants: List[Participant], line_items: List[LineItem]
) -> Set[str]:
    """Keys of participants that belong to at least one line item"""
    registered = {p.id for p in participants}
    involved: Set[str] = set()
    for item in line_items:
        involved.update(item.participant_ids & registered)
    return involved


def tax_share(
    total_tax: Decimal, line_items: List[LineItem], involved_count: int
) -> Decimal:
    """
    Tax owed by each involved participant.

    Tax is only distributed when there is tax, at least one line item and
    at least one involved participant.
    """
    if total_tax <= 0 or not line_items or involved_count == 0:
        return ZERO
    return round_decimal(total_tax / involved_count)


def compute_shares(
    participants: List[Participant],
    line_items: List[LineItem],
    total_tax: Decimal,
) -> Dict[str, Decimal]:
    """
    Calculate what every participant owes.

    Each item contributes its rounded even share to each of its
    participants, and the running total is re-rounded after every
    addition. Involved participants then get an equal slice of the tax.

    Args:
        participants: Registered participants
        line_items: Line items
        total_tax: Tax for the whole event

    Returns:
        Mapping of participant key to final share, with an entry for
        every registered participant
    """
    item_totals: Dict[str, Decimal] = {p.id: ZERO for p in participants}

    for item in line_items:
        if not item.participant_ids:
            continue
        share = item_share(item)
        for participant_id in item.participant_ids:
            if participant_id not in item_totals:
                continue
            item_totals[participant_id] = round_decimal(
                item_totals[participant_id] + share
            )

    involved = involved_participants(participants, line_items)
    tax = tax_share(total_tax, line_items, len(involved))

    shares: Dict[str, Decimal] = {}
    for participant in participants:
        if participant.id in involved:
            shares[participant.id] = round_decimal(item_totals[participant.id] + tax)
        else:
            shares[participant.id] = ZERO
    return shares


def total_of(shares: Dict[str, Decimal]) -> Decimal:
    """Total price of the event: the rounded sum of all shares"""
    return round_decimal(sum_decimals(shares.values()))
