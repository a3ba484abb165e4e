"""Saved participant (address book) domain service."""

import logging
from dataclasses import replace
from datetime import datetime, UTC
from typing import Optional

from splitbill.database.base import Database
from splitbill.domain.entities import SavedParticipant, new_id
from splitbill.domain.errors import NotFoundError, ValidationError, contact_not_found

logger = logging.getLogger(__name__)


def _same_email(left: Optional[str], right: Optional[str]) -> bool:
    return (left or "").strip().lower() == (right or "").strip().lower()


class ParticipantService:
    """Service for remembering participants across bills."""

    def __init__(self, db: Database):
        """Initialize participant service.

        Args:
            db: Database instance
        """
        self.db = db

    def remember_participant(self, name: str, email: Optional[str] = None) -> SavedParticipant:
        """Save a participant, or refresh the existing entry.

        Entries match on case-insensitive name and email.

        Args:
            name: Participant name
            email: Optional email address

        Returns:
            Saved participant entity

        Raises:
            ValidationError: If name is blank
        """
        name = name.strip()
        if not name:
            raise ValidationError("Participant name is required")
        email = (email or "").strip() or None
        now = datetime.now(UTC)

        for existing in self.db.list_saved_participants():
            if existing.name.lower() == name.lower() and _same_email(existing.email, email):
                logger.debug("Refreshing saved participant %s", existing.id)
                return self.db.save_saved_participant(replace(existing, last_used_at=now))

        logger.info("Remembering participant '%s'", name)
        return self.db.save_saved_participant(
            SavedParticipant(
                id=new_id(),
                name=name,
                email=email,
                created_at=now,
                last_used_at=now,
            )
        )

    def get_participant(self, participant_id: str) -> Optional[SavedParticipant]:
        """Get saved participant by ID."""
        return self.db.get_saved_participant(participant_id)

    def list_participants(self) -> list[SavedParticipant]:
        """List saved participants, most recently used first."""
        return self.db.list_saved_participants()

    def search_participants(self, query: str) -> list[SavedParticipant]:
        """Filter saved participants by name or email substring.

        A blank query returns everyone.
        """
        participants = self.list_participants()
        needle = query.strip().lower()
        if not needle:
            return participants
        return [
            p
            for p in participants
            if needle in p.name.lower() or needle in (p.email or "").lower()
        ]

    def touch_participant(self, participant_id: str) -> SavedParticipant:
        """Mark a saved participant as used now.

        Raises:
            NotFoundError: If the participant does not exist
        """
        existing = self.db.get_saved_participant(participant_id)
        if existing is None:
            raise NotFoundError(contact_not_found(participant_id))
        return self.db.save_saved_participant(replace(existing, last_used_at=datetime.now(UTC)))

    def delete_participant(self, participant_id: str) -> None:
        """Delete a saved participant.

        Raises:
            NotFoundError: If the participant does not exist
        """
        self.db.delete_saved_participant(participant_id)
        logger.info("Deleted saved participant %s", participant_id)
