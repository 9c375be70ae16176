"""Receipt text for a ledger"""

from whati8.schemas.ledger import LedgerSnapshot
from whati8.utils.decimal_utils import ZERO, format_money

PAYER_TAG = "[PAYER]"
DEFAULT_TITLE = "Whati8"


def format_summary(snapshot: LedgerSnapshot, title: str = DEFAULT_TITLE) -> str:
    """
    Build the receipt text for a ledger.

    Lists event details and totals, then every participant in registry
    order with the line items they share and what they owe.

    Args:
        snapshot: Ledger snapshot with computed shares
        title: Name shown in the header line

    Returns:
        Summary text
    """
    header = f"===== {title} Bill Summary ====="
    lines = [
        header,
        f"Event: {snapshot.event_name}",
    ]
    if snapshot.event_date:
        lines.append(f"Date: {snapshot.event_date}")
    lines.append(f"Total Price: {format_money(snapshot.total_price)}")
    lines.append(f"Total Tax: {format_money(snapshot.total_tax)}")

    for participant in snapshot.participants:
        lines.append("")
        name = participant.name
        if participant.is_payer:
            name = f"{name} {PAYER_TAG}"
        lines.append(name)

        for item in snapshot.line_items:
            if participant.id in item.participant_ids:
                lines.append(f"  - {item.name}: {format_money(item.price)}")

        owed = snapshot.computed_shares.get(participant.id, ZERO)
        lines.append(f"  Total owed: {format_money(owed)}")

    lines.append("=" * len(header))
    return "\n".join(lines)
