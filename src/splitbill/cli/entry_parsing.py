"""Parsing of participant and menu item options given on the command line."""

from splitbill.domain.entities import ManualParticipantAmount, MenuItem, Participant
from splitbill.domain.itemized_split import increment_share
from splitbill.utils.amount_parser import parse_amount


def parse_manual_participant(value: str) -> ManualParticipantAmount:
    """Parse ``Name[:amount[:email]]`` into a manual participant entry.

    The amount is kept as typed; validation happens when the bill is saved.
    """
    parts = value.split(":", 2)
    name = parts[0].strip()
    amount = parts[1].strip() if len(parts) > 1 else ""
    email = parts[2].strip() if len(parts) > 2 else ""
    return ManualParticipantAmount(name=name, amount_owed=amount, email=email or None)


def parse_pool_participant(value: str) -> Participant:
    """Parse ``Name[:email]`` into a participant for itemized bills.

    Raises:
        ValueError: If the name is blank
    """
    name, _, email = value.partition(":")
    name = name.strip()
    if not name:
        raise ValueError(f"Participant name is required in '{value}'")
    return Participant(name=name, email=email.strip() or None)


def _find_by_name(pool: list[Participant], name: str) -> Participant:
    lowered = name.strip().lower()
    for participant in pool:
        if participant.name.lower() == lowered:
            return participant
    raise ValueError(f"Unknown participant '{name.strip()}'")


def parse_menu_item(value: str, pool: list[Participant]) -> MenuItem:
    """Parse ``Title:price[:Name*shares,Name,...]`` into a menu item.

    A name without ``*shares`` holds one share; repeating a name adds shares.

    Raises:
        ValueError: If the price, a share count or a participant name is invalid
    """
    parts = value.rsplit(":", 2)
    if len(parts) < 2:
        raise ValueError(f"Menu item '{value}' must look like 'Title:price[:assignments]'")

    title = parts[0].strip()
    price = parse_amount(parts[1])
    item = MenuItem(title=title, price=price)

    assignments = parts[2] if len(parts) > 2 else ""
    for token in assignments.split(","):
        if not token.strip():
            continue
        name, _, count_text = token.partition("*")
        count = 1
        if count_text.strip():
            try:
                count = int(count_text)
            except ValueError:
                raise ValueError(f"Invalid share count '{count_text.strip()}' in '{token.strip()}'")
            if count < 1:
                raise ValueError(f"Share count must be positive in '{token.strip()}'")
        participant = _find_by_name(pool, name)
        for _ in range(count):
            item = increment_share(participant.id, item)

    return item
