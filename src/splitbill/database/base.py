"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from splitbill.domain.entities import Bill, SavedParticipant


class Database(ABC):
    """Abstract persistence interface for bills and saved participants."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Bill operations
    @abstractmethod
    def create_bill(self, bill: Bill) -> Bill:
        """Store a bill. Creating an existing id replaces it. Returns the stored bill."""
        pass

    @abstractmethod
    def get_bill(self, bill_id: str) -> Optional[Bill]:
        """Get bill by ID."""
        pass

    @abstractmethod
    def list_bills(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Bill]:
        """List bills newest first, optionally within an inclusive date range."""
        pass

    @abstractmethod
    def search_bills(self, query: str) -> list[Bill]:
        """Search bills by title, location, description or participant name."""
        pass

    @abstractmethod
    def update_bill(self, bill: Bill) -> Bill:
        """Replace a stored bill with the given value. Returns the stored bill.

        Raises:
            NotFoundError: If the bill does not exist
        """
        pass

    @abstractmethod
    def delete_bill(self, bill_id: str) -> None:
        """Delete a bill and its participants.

        Raises:
            NotFoundError: If the bill does not exist
        """
        pass

    # Saved participant operations
    @abstractmethod
    def save_saved_participant(self, participant: SavedParticipant) -> SavedParticipant:
        """Insert or replace a saved participant by ID."""
        pass

    @abstractmethod
    def get_saved_participant(self, participant_id: str) -> Optional[SavedParticipant]:
        """Get saved participant by ID."""
        pass

    @abstractmethod
    def list_saved_participants(self) -> list[SavedParticipant]:
        """List saved participants, most recently used first."""
        pass

    @abstractmethod
    def delete_saved_participant(self, participant_id: str) -> None:
        """Delete a saved participant.

        Raises:
            NotFoundError: If the participant does not exist
        """
        pass
