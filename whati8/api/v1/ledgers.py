"""Ledger session endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from whati8.api.deps import get_ledger, get_store
from whati8.config import Settings, get_settings
from whati8.core.exceptions import NotFoundError
from whati8.schemas.ledger import (LedgerCreate, LedgerResponse, LedgerUpdate,
                                   LineItemCreate, LineItemParticipants,
                                   LineItemUpdate, ParticipantCreate,
                                   ParticipantUpdate, SettledUpdate)
from whati8.services.ledger_service import SplitLedger
from whati8.services.session_store import BaseSessionStore

router = APIRouter(prefix="/ledgers", tags=["Ledgers"])


async def _save(
    store: BaseSessionStore,
    session_id: str,
    ledger: SplitLedger,
    created_id: Optional[str] = None,
) -> LedgerResponse:
    await store.save(session_id, ledger.to_record())
    return LedgerResponse(
        session_id=session_id, created_id=created_id, ledger=ledger.snapshot()
    )


@router.post("", response_model=LedgerResponse, status_code=status.HTTP_201_CREATED)
async def create_ledger(
    ledger_data: LedgerCreate,
    store: BaseSessionStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Start a new bill-splitting session.

    Args:
        ledger_data: Optional event name, date and tax
        store: Session store
        settings: Application settings

    Returns:
        New session id and the empty ledger

    Raises:
        400: If the tax is negative
    """
    ledger = SplitLedger(
        event_name=ledger_data.event_name.strip(),
        event_date=ledger_data.event_date or None,
        total_tax=ledger_data.total_tax,
        title=settings.app_name,
    )
    session_id = await store.create(ledger.to_record())
    return LedgerResponse(session_id=session_id, ledger=ledger.snapshot())


@router.get("/{session_id}", response_model=LedgerResponse)
async def get_ledger_snapshot(
    session_id: str,
    ledger: SplitLedger = Depends(get_ledger),
):
    """Current ledger with computed shares and summary"""
    return LedgerResponse(session_id=session_id, ledger=ledger.snapshot())


@router.get("/{session_id}/summary", response_class=PlainTextResponse)
async def get_summary(ledger: SplitLedger = Depends(get_ledger)):
    """Receipt text for the ledger"""
    return ledger.summary_text


@router.patch("/{session_id}", response_model=LedgerResponse)
async def update_ledger(
    session_id: str,
    ledger_data: LedgerUpdate,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """
    Change event name, date or tax.

    Only fields present in the request body are applied; sending
    ``"event_date": null`` clears the date.

    Raises:
        400: If the tax is negative or out of range
        404: If the session does not exist
    """
    fields = ledger_data.model_fields_set
    if "event_name" in fields and ledger_data.event_name is not None:
        ledger.set_event_name(ledger_data.event_name)
    if "event_date" in fields:
        ledger.set_event_date(ledger_data.event_date)
    if "total_tax" in fields and ledger_data.total_tax is not None:
        ledger.set_total_tax(ledger_data.total_tax)
    return await _save(store, session_id, ledger)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ledger(
    session_id: str,
    store: BaseSessionStore = Depends(get_store),
):
    """Discard a session"""
    if not await store.delete(session_id):
        raise NotFoundError(f"Ledger session {session_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Participants

@router.post(
    "/{session_id}/participants",
    response_model=LedgerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_participant(
    session_id: str,
    participant_data: ParticipantCreate,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """
    Add a participant.

    The new participant's key is returned as ``created_id``.

    Raises:
        400: If the name is empty
    """
    participant_id = ledger.add_participant(participant_data.name)
    return await _save(store, session_id, ledger, created_id=participant_id)


@router.patch("/{session_id}/participants/{participant_id}", response_model=LedgerResponse)
async def rename_participant(
    session_id: str,
    participant_id: str,
    participant_data: ParticipantUpdate,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    ledger.rename_participant(participant_id, participant_data.name)
    return await _save(store, session_id, ledger)


@router.delete("/{session_id}/participants/{participant_id}", response_model=LedgerResponse)
async def remove_participant(
    session_id: str,
    participant_id: str,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """Remove a participant and drop them from every line item"""
    ledger.remove_participant(participant_id)
    return await _save(store, session_id, ledger)


@router.post(
    "/{session_id}/participants/{participant_id}/toggle-payer",
    response_model=LedgerResponse,
)
async def toggle_payer(
    session_id: str,
    participant_id: str,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """Mark or unmark the payer; marking clears any other payer"""
    ledger.toggle_payer(participant_id)
    return await _save(store, session_id, ledger)


@router.post(
    "/{session_id}/participants/{participant_id}/toggle-settled",
    response_model=LedgerResponse,
)
async def toggle_settled(
    session_id: str,
    participant_id: str,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    ledger.toggle_settled(participant_id)
    return await _save(store, session_id, ledger)


@router.put(
    "/{session_id}/participants/{participant_id}/settled",
    response_model=LedgerResponse,
)
async def set_settled(
    session_id: str,
    participant_id: str,
    settled_data: SettledUpdate,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    ledger.set_settled(participant_id, settled_data.settled)
    return await _save(store, session_id, ledger)


# Line items

@router.post(
    "/{session_id}/items",
    response_model=LedgerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_line_item(
    session_id: str,
    item_data: LineItemCreate,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """
    Add a line item, optionally with its participant selection.

    Unknown participant keys are ignored. The new item's key is returned
    as ``created_id``.

    Raises:
        400: If the name is empty or the price is negative
    """
    item_id = ledger.add_line_item(
        item_data.name, item_data.price, item_data.participant_ids
    )
    return await _save(store, session_id, ledger, created_id=item_id)


@router.patch("/{session_id}/items/{item_id}", response_model=LedgerResponse)
async def update_line_item(
    session_id: str,
    item_id: str,
    item_data: LineItemUpdate,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """
    Rename or reprice a line item.

    Raises:
        400: If the name is empty or the price is negative
    """
    if item_data.name is not None:
        ledger.rename_line_item(item_id, item_data.name)
    if item_data.price is not None:
        ledger.set_line_item_price(item_id, item_data.price)
    return await _save(store, session_id, ledger)


@router.delete("/{session_id}/items/{item_id}", response_model=LedgerResponse)
async def remove_line_item(
    session_id: str,
    item_id: str,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    ledger.remove_line_item(item_id)
    return await _save(store, session_id, ledger)


@router.put("/{session_id}/items/{item_id}/participants", response_model=LedgerResponse)
async def set_line_item_participants(
    session_id: str,
    item_id: str,
    selection: LineItemParticipants,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    """Replace who shares a line item"""
    ledger.set_line_item_participants(item_id, selection.participant_ids)
    return await _save(store, session_id, ledger)


@router.put(
    "/{session_id}/items/{item_id}/participants/{participant_id}",
    response_model=LedgerResponse,
)
async def add_line_item_participant(
    session_id: str,
    item_id: str,
    participant_id: str,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    ledger.add_line_item_participant(item_id, participant_id)
    return await _save(store, session_id, ledger)


@router.delete(
    "/{session_id}/items/{item_id}/participants/{participant_id}",
    response_model=LedgerResponse,
)
async def remove_line_item_participant(
    session_id: str,
    item_id: str,
    participant_id: str,
    ledger: SplitLedger = Depends(get_ledger),
    store: BaseSessionStore = Depends(get_store),
):
    ledger.remove_line_item_participant(item_id, participant_id)
    return await _save(store, session_id, ledger)
