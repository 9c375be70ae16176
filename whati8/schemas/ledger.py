"""Ledger schemas"""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParticipantRecord(BaseModel):
    """Serialised participant"""

    id: str
    name: str
    is_payer: bool = False
    settled: bool = False

    model_config = ConfigDict(from_attributes=True)


class LineItemRecord(BaseModel):
    """Serialised line item; participant keys follow participant order"""

    id: str
    name: str
    price: Decimal
    participant_ids: List[str] = []


class LedgerRecord(BaseModel):
    """Serialised ledger for the persistence boundary.

    The derived fields are written for readers of the stored form; loading
    always recomputes them.
    """

    event_name: str = ""
    event_date: Optional[str] = None
    total_tax: Decimal = Decimal("0.00")
    participants: List[ParticipantRecord] = []
    line_items: List[LineItemRecord] = []
    computed_shares: Dict[str, Decimal] = {}
    total_price: Decimal = Decimal("0.00")
    summary_text: str = ""


class LedgerSnapshot(LedgerRecord):
    """Ledger state after its latest recomputation.

    Top-level fields cannot be reassigned. Nested records are copies
    detached from the ledger, so editing them never reaches it.
    """

    model_config = ConfigDict(frozen=True)


class LedgerCreate(BaseModel):
    """Schema for starting a new ledger session"""

    event_name: str = Field(default="", max_length=255)
    event_date: Optional[str] = Field(default=None, max_length=32)
    total_tax: Decimal = Decimal("0.00")


class LedgerUpdate(BaseModel):
    """Schema for changing event details; omitted fields stay as they are"""

    event_name: Optional[str] = Field(default=None, max_length=255)
    event_date: Optional[str] = Field(default=None, max_length=32)
    total_tax: Optional[Decimal] = None


class ParticipantCreate(BaseModel):
    """Schema for adding a participant"""

    name: str = Field(..., max_length=255)


class ParticipantUpdate(BaseModel):
    """Schema for renaming a participant"""

    name: str = Field(..., max_length=255)


class SettledUpdate(BaseModel):
    """Schema for setting settled status explicitly"""

    settled: bool


class LineItemCreate(BaseModel):
    """Schema for adding a line item"""

    name: str = Field(..., max_length=255)
    price: Decimal
    participant_ids: List[str] = []


class LineItemUpdate(BaseModel):
    """Schema for renaming or repricing a line item"""

    name: Optional[str] = Field(default=None, max_length=255)
    price: Optional[Decimal] = None


class LineItemParticipants(BaseModel):
    """Schema for replacing a line item's participant selection"""

    participant_ids: List[str]


class LedgerResponse(BaseModel):
    """Ledger session response"""

    session_id: str
    created_id: Optional[str] = None
    ledger: LedgerSnapshot
