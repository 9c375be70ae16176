"""Participant registry"""
import logging
from typing import Dict, List, Optional

from whati8.core.exceptions import ValidationError
from whati8.models.participant import Participant

logger = logging.getLogger(__name__)


class ParticipantRegistry:
    """Ordered arena of participants keyed by id.

    Owns the single-payer invariant: at most one participant has
    ``is_payer`` set after any call returns. Operations that reference an
    unknown key are no-ops.
    """

    def __init__(self, participants: Optional[List[Participant]] = None):
        self._participants: Dict[str, Participant] = {}
        for participant in participants or []:
            self._participants[participant.id] = participant
        self._enforce_single_payer()

    def __len__(self) -> int:
        return len(self._participants)

    def exists(self, key: str) -> bool:
        return key in self._participants

    def get(self, key: str) -> Optional[Participant]:
        """
        Get participant by key.

        Args:
            key: Participant key

        Returns:
            Participant if registered, None otherwise
        """
        participant = self._participants.get(key)
        if participant is None:
            logger.debug("Participant %s not found", key)
        return participant

    def all(self) -> List[Participant]:
        """Participants in insertion order"""
        return list(self._participants.values())

    def payer(self) -> Optional[Participant]:
        return next((p for p in self._participants.values() if p.is_payer), None)

    def add(self, name: str) -> str:
        """
        Register a new participant.

        Args:
            name: Display name

        Returns:
            Key of the new participant

        Raises:
            ValidationError: If name is empty or whitespace only
        """
        cleaned = _clean_name(name)
        participant = Participant(name=cleaned)
        self._participants[participant.id] = participant
        logger.debug("Added participant %s (%s)", participant.id, cleaned)
        return participant.id

    def remove(self, key: str) -> Optional[Participant]:
        """
        Remove a participant.

        Cascading into line items is the ledger's job.

        Returns:
            Removed participant, None if the key was unknown
        """
        participant = self._participants.pop(key, None)
        if participant is None:
            logger.debug("Cannot remove participant %s: not found", key)
        return participant

    def rename(self, key: str, new_name: str) -> None:
        cleaned = _clean_name(new_name)
        participant = self.get(key)
        if participant is not None:
            participant.name = cleaned

    def toggle_payer(self, key: str) -> None:
        """
        Toggle payer status of a participant.

        Marking a participant as payer clears the flag on everyone else.
        Unmarking the current payer leaves nobody as payer.
        """
        participant = self.get(key)
        if participant is None:
            return

        if participant.is_payer:
            participant.is_payer = False
            return

        for other in self._participants.values():
            other.is_payer = False
        participant.is_payer = True

    def toggle_settled(self, key: str) -> None:
        participant = self.get(key)
        if participant is not None:
            participant.settled = not participant.settled

    def set_settled(self, key: str, settled: bool) -> None:
        """
        Set settled status explicitly.

        Requesting the state the participant already has is a no-op that
        only leaves a debug log entry.
        """
        participant = self.get(key)
        if participant is None:
            return

        if participant.settled == settled:
            logger.debug(
                "%s is already %s",
                participant.name,
                "settled" if settled else "unsettled",
            )
            return

        participant.settled = settled

    def _enforce_single_payer(self) -> None:
        # Loaded records may carry several payers; the first one wins.
        payer_seen = False
        for participant in self._participants.values():
            if participant.is_payer:
                if payer_seen:
                    logger.info("Clearing extra payer flag on %s", participant.id)
                    participant.is_payer = False
                payer_seen = True


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Participant name cannot be empty")
    return cleaned
