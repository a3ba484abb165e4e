"""Domain model entities for splitbill.

These are pure data classes representing bill-splitting concepts,
independent of database schema. Allocation functions never mutate them;
changes produce new instances via ``dataclasses.replace``.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


def new_id() -> str:
    """Generate a fresh opaque identifier."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Participant:
    """Person included in a bill's cost split."""

    name: str
    email: Optional[str] = None
    id: str = field(default_factory=new_id)

    @property
    def abbreviated_name(self) -> str:
        """Two-letter initials for compact display."""
        components = self.name.strip().split()
        if not components:
            return "?"
        if len(components) == 1:
            return components[0][:2].upper()
        return (components[0][:1] + components[1][:1]).upper()


@dataclass(frozen=True)
class MenuItem:
    """Priced line item divided by integer shares among participants."""

    title: str = ""
    price: Decimal = Decimal("0")
    share_assignments: dict[str, int] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    @property
    def total_shares(self) -> int:
        return sum(self.share_assignments.values())

    @property
    def price_per_share(self) -> Decimal:
        if self.total_shares <= 0:
            return Decimal("0")
        return self.price / Decimal(self.total_shares)

    @property
    def assigned_participant_ids(self) -> list[str]:
        return [pid for pid, count in self.share_assignments.items() if count > 0]


@dataclass(frozen=True)
class ManualParticipantAmount:
    """Participant entry in manual mode with the amount as typed."""

    name: str
    amount_owed: str = ""
    email: Optional[str] = None
    participant_id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class BillParticipant:
    """Resolved participant share stored on a bill."""

    id: str
    name: str
    email: Optional[str]
    amount_owed: Decimal
    has_paid: bool = False


@dataclass(frozen=True)
class BillHeader:
    """Descriptive fields entered alongside an allocation."""

    title: str
    currency: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None


class SettlementStatus(Enum):
    """Settlement state of a bill."""

    PENDING = "pending"
    SETTLED = "settled"


@dataclass(frozen=True)
class Bill:
    """Shared-expense record with per-participant amounts owed."""

    id: str
    title: str
    total_amount: Decimal
    date: datetime
    currency: str
    participants: tuple[BillParticipant, ...]
    location: Optional[str] = None
    description: Optional[str] = None
    is_settled: bool = False

    @property
    def status(self) -> SettlementStatus:
        return SettlementStatus.SETTLED if self.is_settled else SettlementStatus.PENDING

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def settled_participants(self) -> int:
        return sum(1 for p in self.participants if p.has_paid)


@dataclass(frozen=True)
class SavedParticipant:
    """Address-book entry remembered from earlier bills."""

    id: str
    name: str
    email: Optional[str]
    created_at: datetime
    last_used_at: datetime


@dataclass(frozen=True)
class CurrencyTotals:
    """Settled and pending amounts for bills in one currency."""

    currency: str
    settled_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")

    @property
    def total_amount(self) -> Decimal:
        return self.settled_amount + self.pending_amount


@dataclass(frozen=True)
class BillStatistics:
    """Aggregate counts over bill history, with amounts kept per currency."""

    total_bills: int
    settled_bills: int
    pending_bills: int
    currencies: tuple[CurrencyTotals, ...] = ()

    def for_currency(self, currency: str) -> CurrencyTotals:
        """Totals for one currency; zero when no bill uses it."""
        code = currency.strip().upper()
        for totals in self.currencies:
            if totals.currency == code:
                return totals
        return CurrencyTotals(currency=code)


class BillEventKind(Enum):
    """Bill state changes published to listeners."""

    CREATED = "created"
    UPDATED = "updated"
    SETTLED = "settled"
    PAYMENT_CHANGED = "payment_changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class BillEvent:
    """Notification sent to listeners after a bill changes."""

    kind: BillEventKind
    bill_id: str
    bill: Optional[Bill] = None
