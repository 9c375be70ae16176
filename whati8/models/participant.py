"""Participant entity"""
import uuid

from pydantic import BaseModel, Field


def new_key() -> str:
    """Fresh opaque key for a registry record"""
    return str(uuid.uuid4())


class Participant(BaseModel):
    """A person sharing the bill"""

    id: str = Field(default_factory=new_key)
    name: str
    is_payer: bool = False
    settled: bool = False

    def __repr__(self) -> str:
        return f"<Participant(id={self.id}, name={self.name}, payer={self.is_payer}, settled={self.settled})>"
