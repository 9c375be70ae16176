"""Seed a demo dinner ledger into the configured session store"""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import whati8 modules
sys.path.append(str(Path(__file__).parent.parent))

from whati8.config import get_settings
from whati8.services.ledger_service import SplitLedger
from whati8.services.session_store import RedisSessionStore, get_session_store


async def seed_ledger():
    """Build a three-person dinner and store it"""
    settings = get_settings()
    ledger = SplitLedger(
        event_name="Friday Dinner",
        event_date="2026-10-16",
        total_tax="4.50",
        title=settings.app_name,
    )

    alice = ledger.add_participant("Alice")
    bob = ledger.add_participant("Bob")
    carol = ledger.add_participant("Carol")
    ledger.toggle_payer(alice)

    ledger.add_line_item("Pizza", "24.00", [alice, bob, carol])
    ledger.add_line_item("Wine", "30.00", [alice, bob])
    ledger.add_line_item("Salad", "9.50", [carol])

    store = get_session_store()
    session_id = await store.create(ledger.to_record())

    print(f"✅ Created session {session_id} ({settings.session_backend} store)")
    print()
    print(ledger.summary_text)

    if isinstance(store, RedisSessionStore):
        await store.close()


if __name__ == "__main__":
    asyncio.run(seed_ledger())
