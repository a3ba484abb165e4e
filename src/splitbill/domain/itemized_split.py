"""Itemized (menu item) split allocation.

Each menu item is divided into integer shares held by participants. A
participant absent from an item's assignments holds zero shares; a zero
count is never stored. Every operation returns new values.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from splitbill.domain.entities import BillParticipant, MenuItem, Participant
from splitbill.domain.errors import ValidationError, unassigned_items
from splitbill.utils.amount_parser import MAX_AMOUNT, is_supported_amount
from splitbill.utils.currency import quantize_amount, smallest_unit


def price_for_share(item: MenuItem) -> Decimal:
    """Price of one share, or zero when nobody is assigned."""
    return item.price_per_share


def amount_owed_by_participant(participant_id: str, item: MenuItem) -> Decimal:
    """Amount a participant owes for a single item."""
    shares = item.share_assignments.get(participant_id)
    if not shares:
        return Decimal("0")
    return price_for_share(item) * shares


def total_owed_by_participant(participant_id: str, items: Iterable[MenuItem]) -> Decimal:
    """Amount a participant owes across all items, unrounded."""
    return sum(
        (amount_owed_by_participant(participant_id, item) for item in items),
        Decimal("0"),
    )


def participant_totals(
    participant_ids: Iterable[str], items: Sequence[MenuItem]
) -> dict[str, Decimal]:
    """Map each participant id to its unrounded total."""
    return {pid: total_owed_by_participant(pid, items) for pid in participant_ids}


def bill_total(items: Iterable[MenuItem]) -> Decimal:
    """Sum of item prices, including items nobody is assigned to."""
    return sum((item.price for item in items), Decimal("0"))


def unassigned_total(items: Iterable[MenuItem]) -> Decimal:
    """Price of items that count toward the bill total but nobody owes."""
    return sum((item.price for item in items if item.total_shares <= 0), Decimal("0"))


def increment_share(participant_id: str, item: MenuItem) -> MenuItem:
    """Return the item with one more share for the participant."""
    assignments = dict(item.share_assignments)
    assignments[participant_id] = assignments.get(participant_id, 0) + 1
    return replace(item, share_assignments=assignments)


def decrement_share(participant_id: str, item: MenuItem) -> MenuItem:
    """Return the item with one share fewer; the last share removes the entry."""
    assignments = dict(item.share_assignments)
    current = assignments.get(participant_id, 0)
    if current > 1:
        assignments[participant_id] = current - 1
    else:
        assignments.pop(participant_id, None)
    return replace(item, share_assignments=assignments)


def remove_participant(participant_id: str, items: Iterable[MenuItem]) -> list[MenuItem]:
    """Drop a participant from every item's assignments."""
    result = []
    for item in items:
        if participant_id in item.share_assignments:
            assignments = {
                pid: count
                for pid, count in item.share_assignments.items()
                if pid != participant_id
            }
            item = replace(item, share_assignments=assignments)
        result.append(item)
    return result


def is_item_valid(item: MenuItem) -> bool:
    """An item needs a title, a positive storable price and at least one share holder."""
    return (
        bool(item.title.strip())
        and is_supported_amount(item.price)
        and item.price > 0
        and bool(item.assigned_participant_ids)
    )


def can_save(title: str, items: Sequence[MenuItem]) -> bool:
    """Return True if an itemized bill may be saved."""
    return bool(title.strip()) and len(items) > 0 and all(is_item_valid(i) for i in items)


def resolve_itemized_participants(
    participants: Sequence[Participant],
    items: Sequence[MenuItem],
    currency: Optional[str] = None,
) -> list[BillParticipant]:
    """Turn participant totals into bill participants that sum to the bill total.

    Items nobody shares would leave part of the bill unpaid, so they are
    rejected instead of silently dropped. Totals are rounded to the
    currency's minor unit; rounding residue goes to the participants with
    the largest fractional parts, in pool order on ties.

    Raises:
        ValidationError: If any item has no assigned participant, an item
            references someone outside the participant pool, or a price or
            the bill total exceeds MAX_AMOUNT
    """
    oversized = [item.title or item.id for item in items if not is_supported_amount(item.price)]
    if oversized or not is_supported_amount(bill_total(items)):
        raise ValidationError(
            f"Amounts must not exceed {MAX_AMOUNT}: {', '.join(oversized) or 'bill total'}"
        )

    unassigned = [item.title or item.id for item in items if item.total_shares <= 0]
    if unassigned:
        raise ValidationError(unassigned_items(unassigned))

    pool_ids = {p.id for p in participants}
    for item in items:
        strangers = set(item.share_assignments) - pool_ids
        if strangers:
            raise ValidationError(
                f"Item '{item.title}' is assigned to unknown participants: "
                f"{', '.join(sorted(strangers))}"
            )

    unit = smallest_unit(currency)
    exact = participant_totals([p.id for p in participants], items)
    rounded = {pid: quantize_amount(amount, currency) for pid, amount in exact.items()}

    target = quantize_amount(bill_total(items), currency)
    residue_units = int((target - sum(rounded.values(), Decimal("0"))) / unit)
    if residue_units:
        direction = 1 if residue_units > 0 else -1
        order = sorted(
            range(len(participants)),
            key=lambda i: -direction * (exact[participants[i].id] - rounded[participants[i].id]),
        )
        for step in range(abs(residue_units)):
            pid = participants[order[step % len(order)]].id
            rounded[pid] += direction * unit

    return [
        BillParticipant(
            id=p.id,
            name=p.name.strip(),
            email=(p.email or "").strip() or None,
            amount_owed=rounded[p.id],
        )
        for p in participants
    ]
