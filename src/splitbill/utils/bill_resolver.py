"""Utility for resolving bill references to IDs."""

from splitbill.domain.bill import BillService

MIN_PREFIX_LENGTH = 4


def resolve_bill(bill_service: BillService, reference: str) -> str:
    """Resolve a full bill ID or a unique ID prefix to the bill ID.

    Args:
        bill_service: BillService instance
        reference: Full bill ID, or at least four leading characters of one

    Returns:
        Bill ID

    Raises:
        ValueError: If no bill matches or the prefix is ambiguous
    """
    reference = reference.strip()
    if bill_service.get_bill(reference) is not None:
        return reference

    if len(reference) < MIN_PREFIX_LENGTH:
        raise ValueError(f"Bill '{reference}' not found")

    matches = [b.id for b in bill_service.list_bills() if b.id.startswith(reference)]
    if not matches:
        raise ValueError(f"Bill '{reference}' not found")
    if len(matches) > 1:
        raise ValueError(f"Bill prefix '{reference}' is ambiguous ({len(matches)} matches)")
    return matches[0]
