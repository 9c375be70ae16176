"""Dependency injection (session store, ledger loading)"""

from fastapi import Depends

from whati8.config import Settings, get_settings
from whati8.core.exceptions import NotFoundError
from whati8.services.ledger_service import SplitLedger
from whati8.services.session_store import BaseSessionStore, get_session_store


def get_store() -> BaseSessionStore:
    """Session store for the configured backend"""
    return get_session_store()


async def get_ledger(
    session_id: str,
    store: BaseSessionStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> SplitLedger:
    """
    Rebuild the ledger stored for a session.

    Args:
        session_id: Session id from the path
        store: Session store
        settings: Application settings

    Returns:
        Ledger with freshly computed shares

    Raises:
        NotFoundError: If the session does not exist
    """
    record = await store.load(session_id)
    if record is None:
        raise NotFoundError(f"Ledger session {session_id} not found")
    return SplitLedger.from_record(record, title=settings.app_name)
