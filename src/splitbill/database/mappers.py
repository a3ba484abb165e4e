"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the allocation engine never
sees ORM objects.
"""

from decimal import Decimal

from splitbill.domain import entities as domain
from splitbill.database.models import (
    Bill as ORMBill,
    BillParticipant as ORMBillParticipant,
    SavedParticipant as ORMSavedParticipant,
)


def _normalize(amount) -> Decimal:
    # Numeric(14, 3) pads to three places; keep two unless the third is used
    value = Decimal(amount)
    cents = value.quantize(Decimal("0.01"))
    return cents if cents == value else value


def bill_participant_to_domain(orm_participant: ORMBillParticipant) -> domain.BillParticipant:
    """Convert SQLAlchemy BillParticipant model to domain BillParticipant entity."""
    return domain.BillParticipant(
        id=orm_participant.id,
        name=orm_participant.name,
        email=orm_participant.email,
        amount_owed=_normalize(orm_participant.amount_owed),
        has_paid=orm_participant.has_paid,
    )


def bill_to_domain(orm_bill: ORMBill) -> domain.Bill:
    """Convert SQLAlchemy Bill model to domain Bill entity."""
    return domain.Bill(
        id=orm_bill.id,
        title=orm_bill.title,
        total_amount=_normalize(orm_bill.total_amount),
        date=orm_bill.date,
        currency=orm_bill.currency,
        participants=tuple(bill_participant_to_domain(p) for p in orm_bill.participants),
        location=orm_bill.location,
        description=orm_bill.description,
        is_settled=orm_bill.is_settled,
    )


def bill_participant_to_orm(
    participant: domain.BillParticipant, position: int
) -> ORMBillParticipant:
    """Convert domain BillParticipant entity to a new SQLAlchemy row."""
    return ORMBillParticipant(
        id=participant.id,
        position=position,
        name=participant.name,
        email=participant.email,
        amount_owed=participant.amount_owed,
        has_paid=participant.has_paid,
    )


def apply_bill_to_orm(bill: domain.Bill, orm_bill: ORMBill) -> ORMBill:
    """Copy every field of a domain Bill onto an ORM row, replacing participants."""
    orm_bill.id = bill.id
    orm_bill.title = bill.title
    orm_bill.total_amount = bill.total_amount
    orm_bill.date = bill.date
    orm_bill.currency = bill.currency
    orm_bill.location = bill.location
    orm_bill.description = bill.description
    orm_bill.is_settled = bill.is_settled
    orm_bill.participants = [
        bill_participant_to_orm(p, position) for position, p in enumerate(bill.participants)
    ]
    return orm_bill


def saved_participant_to_domain(orm_saved: ORMSavedParticipant) -> domain.SavedParticipant:
    """Convert SQLAlchemy SavedParticipant model to domain SavedParticipant entity."""
    return domain.SavedParticipant(
        id=orm_saved.id,
        name=orm_saved.name,
        email=orm_saved.email,
        created_at=orm_saved.created_at,
        last_used_at=orm_saved.last_used_at,
    )
