"""Bill domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence, Union

from splitbill.config import get_default_currency
from splitbill.database.base import Database
from splitbill.domain import aggregate
from splitbill.domain.entities import (
    Bill,
    BillEvent,
    BillEventKind,
    BillHeader,
    BillStatistics,
    ManualParticipantAmount,
    MenuItem,
    Participant,
)
from splitbill.domain.errors import NotFoundError, ValidationError, bill_not_found, unbalanced_bill
from splitbill.domain.itemized_split import (
    bill_total,
    can_save,
    is_item_valid,
    resolve_itemized_participants,
)
from splitbill.domain.manual_split import (
    apply_equal_split,
    compute_distributed_amount,
    is_balanced,
    is_form_valid,
    resolve_manual_participants,
    validate_participant,
)
from splitbill.domain.participant import ParticipantService
from splitbill.utils.amount_parser import MAX_AMOUNT, is_supported_amount, parse_amount_lenient
from splitbill.utils.currency import quantize_amount

logger = logging.getLogger(__name__)

BillListener = Callable[[BillEvent], None]


class BillService:
    """Service for creating, settling and browsing bills."""

    def __init__(
        self,
        db: Database,
        contacts: Optional[ParticipantService] = None,
        listeners: Optional[Iterable[BillListener]] = None,
        default_currency: Optional[str] = None,
    ):
        """Initialize bill service.

        Args:
            db: Database instance
            contacts: Optional address book offered every named participant
                after a bill is created
            listeners: Callables notified after each bill change
            default_currency: Currency for bills that name none; defaults to
                SPLITBILL_DEFAULT_CURRENCY
        """
        self.db = db
        self.contacts = contacts
        self.listeners: list[BillListener] = list(listeners or [])
        self.default_currency = default_currency or get_default_currency()

    def subscribe(self, listener: BillListener) -> None:
        """Register a listener for bill changes."""
        self.listeners.append(listener)

    def _publish(self, kind: BillEventKind, bill_id: str, bill: Optional[Bill] = None) -> None:
        event = BillEvent(kind=kind, bill_id=bill_id, bill=bill)
        for listener in self.listeners:
            listener(event)

    def _currency(self, header: BillHeader) -> str:
        return (header.currency or self.default_currency).strip().upper()

    # Creation
    def create_manual_bill(
        self,
        header: BillHeader,
        total: Union[Decimal, str],
        participants: Sequence[ManualParticipantAmount],
        equal_split: bool = False,
    ) -> Bill:
        """Create a bill from an entered total and per-participant amounts.

        Args:
            header: Bill title and descriptive fields
            total: Entered total, as typed or already parsed
            participants: Participants with their amounts as typed
            equal_split: If True, overwrite amounts with an equal share of total

        Returns:
            The stored bill

        Raises:
            ValidationError: If the form is not valid or does not balance
        """
        currency = self._currency(header)
        total_amount = self._parse_total(total)

        if equal_split:
            participants = apply_equal_split(total_amount, participants, currency)

        distributed = compute_distributed_amount(participants)
        balanced = is_balanced(total_amount, distributed, currency)
        if not is_form_valid(header.title, participants, total_amount, balanced):
            raise ValidationError(
                self._manual_form_problem(header, total_amount, participants, distributed)
            )

        bill = aggregate.build_bill(
            header,
            resolve_manual_participants(participants),
            total_amount=total_amount,
            default_currency=currency,
        )
        return self.create_bill(bill)

    def _parse_total(self, total: Union[Decimal, str]) -> Decimal:
        if isinstance(total, Decimal):
            value, is_valid = total, is_supported_amount(total)
        else:
            parsed = parse_amount_lenient(total)
            value, is_valid = parsed.value, parsed.is_valid
        if not is_valid:
            raise ValidationError(
                f"Total amount '{total}' is not a number between zero and {MAX_AMOUNT}"
            )
        return value

    def _manual_form_problem(
        self,
        header: BillHeader,
        total: Decimal,
        participants: Sequence[ManualParticipantAmount],
        distributed: Decimal,
    ) -> str:
        if not header.title.strip():
            return "Bill title is required"
        if total <= 0:
            return "Total amount must be greater than zero"
        if not participants:
            return "At least one participant is required"
        for position, participant in enumerate(participants, start=1):
            if not validate_participant(participant):
                return (
                    f"Participant {position} ('{participant.name.strip()}') needs a name "
                    f"and an amount greater than zero (got '{participant.amount_owed}')"
                )
        return unbalanced_bill(distributed, total)

    def create_itemized_bill(
        self,
        header: BillHeader,
        participants: Sequence[Participant],
        items: Sequence[MenuItem],
    ) -> Bill:
        """Create a bill from menu items shared among participants.

        The bill total is the sum of item prices.

        Raises:
            ValidationError: If the title is blank, there are no items, or an
                item lacks a title, a price up to MAX_AMOUNT or an assigned participant
        """
        if not can_save(header.title, items):
            raise ValidationError(self._itemized_problem(header, items))

        currency = self._currency(header)
        resolved = resolve_itemized_participants(participants, items, currency)
        # Participants without shares owe nothing and are left off the bill
        resolved = [p for p in resolved if p.amount_owed != 0]
        bill = aggregate.build_bill(
            header,
            resolved,
            total_amount=quantize_amount(bill_total(items), currency),
            default_currency=currency,
        )
        return self.create_bill(bill)

    def _itemized_problem(self, header: BillHeader, items: Sequence[MenuItem]) -> str:
        if not header.title.strip():
            return "Bill title is required"
        if not items:
            return "At least one menu item is required"
        invalid = [item.title.strip() or "(untitled)" for item in items if not is_item_valid(item)]
        return (
            f"Every item needs a title, a price between zero and {MAX_AMOUNT} and at least one "
            f"participant: {', '.join(invalid)}"
        )

    def create_bill(self, bill: Bill) -> Bill:
        """Store an already built bill and remember its participants."""
        stored = self.db.create_bill(bill)
        logger.info(
            "Created bill %s '%s' for %s %s",
            stored.id,
            stored.title,
            stored.total_amount,
            stored.currency,
        )
        if self.contacts is not None:
            for participant in stored.participants:
                if participant.name:
                    self.contacts.remember_participant(participant.name, participant.email)
        self._publish(BillEventKind.CREATED, stored.id, stored)
        return stored

    # Queries
    def get_bill(self, bill_id: str) -> Optional[Bill]:
        """Get bill by ID."""
        return self.db.get_bill(bill_id)

    def require_bill(self, bill_id: str) -> Bill:
        """Get bill by ID or raise.

        Raises:
            NotFoundError: If the bill does not exist
        """
        bill = self.db.get_bill(bill_id)
        if bill is None:
            raise NotFoundError(bill_not_found(bill_id))
        return bill

    def list_bills(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[Bill]:
        """List bills newest first."""
        return self.db.list_bills(start_date=start_date, end_date=end_date)

    def search_bills(self, query: str) -> list[Bill]:
        """Search bills by title, location, description or participant name."""
        return self.db.search_bills(query)

    def get_statistics(self) -> BillStatistics:
        """Counts and totals over all stored bills."""
        return aggregate.compute_statistics(self.db.list_bills())

    # Changes
    def update_bill(self, bill: Bill) -> Bill:
        """Replace a stored bill.

        Raises:
            NotFoundError: If the bill does not exist
            ConflictError: If the stored bill is settled and the replacement
                is pending or un-pays a participant
        """
        aggregate.ensure_not_reopened(self.require_bill(bill.id), bill)
        stored = self.db.update_bill(bill)
        logger.info("Updated bill %s", stored.id)
        self._publish(BillEventKind.UPDATED, stored.id, stored)
        return stored

    def settle_bill(self, bill_id: str) -> Bill:
        """Mark a bill and all its participants as paid.

        Raises:
            NotFoundError: If the bill does not exist
        """
        bill = self.require_bill(bill_id)
        if bill.is_settled:
            return bill
        stored = self.db.update_bill(aggregate.settle_bill(bill))
        logger.info("Settled bill %s", bill_id)
        self._publish(BillEventKind.SETTLED, stored.id, stored)
        return stored

    def mark_participant_paid(self, bill_id: str, participant: str, paid: bool = True) -> Bill:
        """Record whether one participant has paid.

        Args:
            bill_id: Bill ID
            participant: Participant ID or name
            paid: False to mark the participant unpaid again

        Raises:
            NotFoundError: If the bill or participant does not exist
            ConflictError: If marking unpaid on a settled bill
        """
        bill = self.require_bill(bill_id)
        updated = aggregate.mark_participant_paid(bill, participant, paid=paid)
        if updated == bill:
            return bill
        stored = self.db.update_bill(updated)
        self._publish(BillEventKind.PAYMENT_CHANGED, stored.id, stored)
        if stored.is_settled and not bill.is_settled:
            logger.info("Bill %s settled after final payment", bill_id)
            self._publish(BillEventKind.SETTLED, stored.id, stored)
        return stored

    def delete_bill(self, bill_id: str) -> None:
        """Delete a bill.

        Raises:
            NotFoundError: If the bill does not exist
        """
        self.db.delete_bill(bill_id)
        logger.info("Deleted bill %s", bill_id)
        self._publish(BillEventKind.DELETED, bill_id)
