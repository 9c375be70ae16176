"""Ledger domain entities"""
from whati8.models.line_item import LineItem
from whati8.models.participant import Participant

__all__ = ["Participant", "LineItem"]
