"""Bill aggregate construction and settlement transitions."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from splitbill.config import get_default_currency
from splitbill.domain.entities import (
    Bill,
    BillHeader,
    BillParticipant,
    BillStatistics,
    CurrencyTotals,
    new_id,
)
from splitbill.domain.errors import (
    ConflictError,
    NotFoundError,
    bill_already_settled,
    participant_not_found,
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_bill(
    header: BillHeader,
    participants: Sequence[BillParticipant],
    total_amount: Optional[Decimal] = None,
    default_currency: Optional[str] = None,
) -> Bill:
    """Assemble a pending bill from header fields and resolved participants.

    Args:
        header: Title, currency, location, description and optional date
        participants: Resolved per-participant amounts from either split mode
        total_amount: Entered total; defaults to the sum of participant amounts
        default_currency: Currency used when the header names none

    Returns:
        New Bill with fresh ids, every participant unpaid and not settled
    """
    currency = _clean(header.currency) or default_currency or get_default_currency()
    resolved = tuple(
        BillParticipant(
            id=participant.id or new_id(),
            name=participant.name.strip(),
            email=_clean(participant.email),
            amount_owed=participant.amount_owed,
            has_paid=False,
        )
        for participant in participants
    )
    if total_amount is None:
        total_amount = sum((p.amount_owed for p in resolved), Decimal("0"))

    return Bill(
        id=new_id(),
        title=header.title.strip(),
        total_amount=total_amount,
        date=header.date or datetime.now(),
        currency=currency.upper(),
        participants=resolved,
        location=_clean(header.location),
        description=_clean(header.description),
        is_settled=False,
    )


def settle_bill(bill: Bill) -> Bill:
    """Mark every participant paid and the bill settled.

    Settling an already settled bill returns it unchanged.
    """
    if bill.is_settled:
        return bill
    return replace(
        bill,
        participants=tuple(replace(p, has_paid=True) for p in bill.participants),
        is_settled=True,
    )


def find_participant(bill: Bill, participant: str) -> BillParticipant:
    """Find a bill participant by id, or by case-insensitive name.

    Raises:
        NotFoundError: If no participant matches
    """
    for candidate in bill.participants:
        if candidate.id == participant:
            return candidate
    lowered = participant.strip().lower()
    for candidate in bill.participants:
        if candidate.name.lower() == lowered:
            return candidate
    raise NotFoundError(participant_not_found(participant, bill.id))


def mark_participant_paid(bill: Bill, participant: str, paid: bool = True) -> Bill:
    """Record one participant's payment.

    Paying the last outstanding participant settles the bill. There is no
    way back from settled, so marking someone unpaid on a settled bill fails.

    Raises:
        NotFoundError: If the participant is not on the bill
        ConflictError: If un-paying on a settled bill
    """
    target = find_participant(bill, participant)
    if bill.is_settled and not paid:
        raise ConflictError(bill_already_settled(bill.id))

    participants = tuple(
        replace(p, has_paid=paid) if p.id == target.id else p for p in bill.participants
    )
    is_settled = bool(participants) and all(p.has_paid for p in participants)
    return replace(bill, participants=participants, is_settled=is_settled)


def ensure_not_reopened(current: Bill, proposed: Bill) -> None:
    """Reject a replacement that would take a settled bill back to pending.

    Raises:
        ConflictError: If ``current`` is settled and ``proposed`` is not, or a
            participant who had paid is marked unpaid
    """
    if not current.is_settled:
        return
    paid_before = {p.id for p in current.participants if p.has_paid}
    unpaid_now = {p.id for p in proposed.participants if not p.has_paid}
    if not proposed.is_settled or paid_before & unpaid_now:
        raise ConflictError(bill_already_settled(current.id))


def matches_query(bill: Bill, query: str) -> bool:
    """Case-insensitive match on title, location, description or participant names."""
    needle = query.strip().lower()
    if not needle:
        return True
    fields = [bill.title, bill.location or "", bill.description or ""]
    fields.extend(p.name for p in bill.participants)
    return any(needle in value.lower() for value in fields)


def compute_statistics(bills: Iterable[Bill]) -> BillStatistics:
    """Summarize counts over settled and pending bills.

    Amounts are summed separately for each currency, ordered by currency code.
    """
    settled_bills = pending_bills = 0
    settled: dict[str, Decimal] = {}
    pending: dict[str, Decimal] = {}
    for bill in bills:
        if bill.is_settled:
            settled_bills += 1
            bucket = settled
        else:
            pending_bills += 1
            bucket = pending
        bucket[bill.currency] = bucket.get(bill.currency, Decimal("0")) + bill.total_amount

    currencies = tuple(
        CurrencyTotals(
            currency=code,
            settled_amount=settled.get(code, Decimal("0")),
            pending_amount=pending.get(code, Decimal("0")),
        )
        for code in sorted(settled.keys() | pending.keys())
    )
    return BillStatistics(
        total_bills=settled_bills + pending_bills,
        settled_bills=settled_bills,
        pending_bills=pending_bills,
        currencies=currencies,
    )
