"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested bill, participant or contact does not exist."""


class ConflictError(DomainError):
    """Disallowed state transition, such as un-settling a settled bill."""


def bill_not_found(bill_id: str) -> str:
    """Return message for missing bill."""
    return f"Bill {bill_id} not found"


def participant_not_found(participant: str, bill_id: str) -> str:
    """Return message for a participant that is not part of a bill."""
    return f"Participant '{participant}' not found in bill {bill_id}"


def contact_not_found(contact_id: str) -> str:
    """Return message for missing saved participant."""
    return f"Saved participant {contact_id} not found"


def bill_already_settled(bill_id: str) -> str:
    """Return message when a settled bill would move back to pending."""
    return (
        f"Bill {bill_id} is already settled; "
        "settled bills cannot be marked as unpaid"
    )


def unbalanced_bill(distributed, total) -> str:
    """Return message for a manual split whose amounts do not add up."""
    return f"Participant amounts add up to {distributed}, expected {total}"


def unassigned_items(titles: list[str]) -> str:
    """Return message for itemized bills with items nobody shares."""
    return f"Items without assigned participants: {', '.join(titles)}"
