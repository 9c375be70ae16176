"""Line item entity"""
from decimal import Decimal
from typing import Set

from pydantic import BaseModel, Field

from whati8.models.participant import new_key


class LineItem(BaseModel):
    """A priced purchase consumed by a subset of participants"""

    id: str = Field(default_factory=new_key)
    name: str
    price: Decimal = Field(default=Decimal("0.00"), ge=0)
    participant_ids: Set[str] = Field(default_factory=set)

    def __repr__(self) -> str:
        return f"<LineItem(id={self.id}, name={self.name}, price={self.price}, participants={len(self.participant_ids)})>"
