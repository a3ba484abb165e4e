"""Manual and equal split allocation.

Participants carry the amount they owe as free text. Nothing here raises
for bad input: callers receive flags and decide whether a bill may be saved.
Amounts beyond MAX_AMOUNT count as zero, like unparsable text.
"""

from dataclasses import replace
from decimal import Decimal, ROUND_DOWN
from typing import Optional, Sequence, Union

from splitbill.domain.entities import BillParticipant, ManualParticipantAmount
from splitbill.utils.amount_parser import is_supported_amount, parse_amount_lenient
from splitbill.utils.currency import balance_tolerance, quantize_amount, smallest_unit

AmountLike = Union[Decimal, str, int]


def _as_decimal(amount: AmountLike) -> Decimal:
    if isinstance(amount, str):
        return parse_amount_lenient(amount).value
    value = Decimal(amount)
    # Same treatment as unparsable text: counts as zero and fails validation
    return value if is_supported_amount(value) else Decimal("0")


def compute_distributed_amount(participants: Sequence[ManualParticipantAmount]) -> Decimal:
    """Sum every participant's amount, counting unparsable entries as zero."""
    return sum(
        (parse_amount_lenient(p.amount_owed).value for p in participants),
        Decimal("0"),
    )


def is_balanced(
    total: AmountLike, distributed: AmountLike, currency: Optional[str] = None
) -> bool:
    """Return True if distributed amounts match the total within tolerance.

    The tolerance is the currency's smallest unit (0.01 when no currency is
    given, 1 for zero-decimal currencies such as JPY). The comparison is
    strict, so a difference of exactly one unit does not balance.
    """
    difference = abs(_as_decimal(total) - _as_decimal(distributed))
    return difference < balance_tolerance(currency)


def distribute_equally(
    total: AmountLike, participant_count: int, currency: Optional[str] = None
) -> Decimal:
    """Return the rounded per-participant share used for display.

    Writing this value back to every participant can leave the split one
    unit short or over; use ``allocate_equally`` for amounts that sum exactly.
    """
    if participant_count <= 0:
        return Decimal("0")
    return quantize_amount(_as_decimal(total) / Decimal(participant_count), currency)


def allocate_equally(
    total: AmountLike, participant_count: int, currency: Optional[str] = None
) -> list[Decimal]:
    """Split a total into equal shares whose sum is exactly the total.

    Shares are rounded down to the currency's minor unit and the leftover
    units go one each to the first participants, so 100.00 / 3 becomes
    [33.34, 33.33, 33.33].
    """
    if participant_count <= 0:
        return []

    unit = smallest_unit(currency)
    total_amount = quantize_amount(_as_decimal(total), currency)
    base = (total_amount / Decimal(participant_count)).quantize(unit, rounding=ROUND_DOWN)
    remainder_units = int((total_amount - base * participant_count) / unit)

    # Negative totals round toward zero, so the remainder carries the sign
    step = unit if remainder_units >= 0 else -unit
    shares = [base] * participant_count
    for index in range(abs(remainder_units)):
        shares[index % participant_count] += step
    return shares


def apply_equal_split(
    total: AmountLike,
    participants: Sequence[ManualParticipantAmount],
    currency: Optional[str] = None,
) -> list[ManualParticipantAmount]:
    """Return participants with their amount fields set to an equal share."""
    shares = allocate_equally(total, len(participants), currency)
    return [
        replace(participant, amount_owed=str(share))
        for participant, share in zip(participants, shares)
    ]


def validate_participant(participant: ManualParticipantAmount) -> bool:
    """A participant is valid with a non-blank name and a positive amount."""
    if not participant.name.strip():
        return False
    parsed = parse_amount_lenient(participant.amount_owed)
    return parsed.is_valid and parsed.value > 0


def is_form_valid(
    title: str,
    participants: Sequence[ManualParticipantAmount],
    total: AmountLike,
    is_balanced: bool,
) -> bool:
    """Return True if a manual bill may be saved."""
    return (
        bool(title.strip())
        and _as_decimal(total) > 0
        and len(participants) > 0
        and all(validate_participant(p) for p in participants)
        and is_balanced
    )


def resolve_manual_participants(
    participants: Sequence[ManualParticipantAmount],
) -> list[BillParticipant]:
    """Convert manual entries into bill participants, in input order."""
    resolved = []
    for participant in participants:
        email = (participant.email or "").strip()
        resolved.append(
            BillParticipant(
                id=participant.participant_id,
                name=participant.name.strip(),
                email=email or None,
                amount_owed=parse_amount_lenient(participant.amount_owed).value,
            )
        )
    return resolved
