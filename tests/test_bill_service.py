"""Tests for bill and saved participant domain services."""

import pytest
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from splitbill.domain.bill import BillService
from splitbill.domain.entities import (
    BillEventKind,
    BillHeader,
    ManualParticipantAmount,
    MenuItem,
    Participant,
)
from splitbill.domain.errors import ConflictError, NotFoundError, ValidationError
from splitbill.domain.itemized_split import increment_share


class TestCreateManualBill:
    """Tests for manual and equal bills."""

    def test_balanced_bill_is_stored(self, bill_service, sample_bill):
        stored = bill_service.require_bill(sample_bill.id)

        assert stored.title == "Dinner at Joe's Pizza"
        assert stored.total_amount == Decimal("85.50")
        assert stored.currency == "USD"
        assert [p.amount_owed for p in stored.participants] == [Decimal("28.50")] * 3
        assert stored.participants[1].email == "jane@example.com"
        assert not stored.is_settled

    def test_participants_are_remembered(self, participant_service, sample_bill):
        names = sorted(p.name for p in participant_service.list_participants())
        assert names == ["Jane", "John", "Mike"]

    def test_unbalanced_bill_is_rejected(self, bill_service, temp_db):
        participants = [
            ManualParticipantAmount(name="John", amount_owed="30.00"),
            ManualParticipantAmount(name="Jane", amount_owed="30.00"),
        ]

        with pytest.raises(ValidationError, match="add up to 60.00"):
            bill_service.create_manual_bill(BillHeader(title="Dinner"), "85.50", participants)

        assert temp_db.list_bills() == []

    def test_invalid_participant_is_reported(self, bill_service):
        participants = [
            ManualParticipantAmount(name="John", amount_owed="85.50"),
            ManualParticipantAmount(name="Jane", amount_owed="lots"),
        ]

        with pytest.raises(ValidationError, match="Participant 2"):
            bill_service.create_manual_bill(BillHeader(title="Dinner"), "85.50", participants)

    def test_missing_title(self, bill_service, dinner_participants):
        with pytest.raises(ValidationError, match="title"):
            bill_service.create_manual_bill(BillHeader(title=" "), "85.50", dinner_participants)

    def test_equal_split_balances_exactly(self, bill_service):
        participants = [ManualParticipantAmount(name=n) for n in ("Ann", "Bob", "Cy")]

        bill = bill_service.create_manual_bill(
            BillHeader(title="Taxi"), Decimal("100.00"), participants, equal_split=True
        )

        assert [p.amount_owed for p in bill.participants] == [
            Decimal("33.34"),
            Decimal("33.33"),
            Decimal("33.33"),
        ]
        assert sum(p.amount_owed for p in bill.participants) == bill.total_amount

    @pytest.mark.parametrize("total", ["1e30", Decimal("1e30"), "-1e30"])
    def test_total_beyond_storable_range_is_rejected(self, bill_service, temp_db, total):
        participants = [ManualParticipantAmount(name=n) for n in ("Ann", "Bob")]

        with pytest.raises(ValidationError, match="between zero and"):
            bill_service.create_manual_bill(
                BillHeader(title="Yacht"), total, participants, equal_split=True
            )

        assert temp_db.list_bills() == []

    def test_largest_storable_total_is_accepted(self, bill_service):
        participants = [ManualParticipantAmount(name="Ann", amount_owed="99999999999.99")]

        bill = bill_service.create_manual_bill(
            BillHeader(title="Yacht"), "99999999999.99", participants
        )

        assert bill.total_amount == Decimal("99999999999.99")

    def test_equal_split_in_yen(self, bill_service):
        participants = [ManualParticipantAmount(name=n) for n in ("Ann", "Bob", "Cy")]

        bill = bill_service.create_manual_bill(
            BillHeader(title="Ramen", currency="JPY"), Decimal("1000"), participants, equal_split=True
        )

        assert bill.currency == "JPY"
        assert sum(p.amount_owed for p in bill.participants) == Decimal("1000")


class TestCreateItemizedBill:
    """Tests for itemized bills."""

    def test_item_shares_become_amounts(self, bill_service):
        ann = Participant(name="Ann")
        bob = Participant(name="Bob")
        pizza = MenuItem(title="Pizza", price=Decimal("30.00"))
        pizza = increment_share(ann.id, increment_share(ann.id, increment_share(bob.id, pizza)))
        soda = increment_share(bob.id, MenuItem(title="Soda", price=Decimal("4.50")))

        bill = bill_service.create_itemized_bill(
            BillHeader(title="Lunch"), [ann, bob], [pizza, soda]
        )

        amounts = {p.name: p.amount_owed for p in bill.participants}
        assert amounts == {"Ann": Decimal("20.00"), "Bob": Decimal("14.50")}
        assert bill.total_amount == Decimal("34.50")

    def test_participants_without_shares_are_left_off(self, bill_service):
        me = Participant(name="Me")
        ann = Participant(name="Ann")
        item = increment_share(ann.id, MenuItem(title="Cake", price=Decimal("6.00")))

        bill = bill_service.create_itemized_bill(BillHeader(title="Dessert"), [me, ann], [item])

        assert [p.name for p in bill.participants] == ["Ann"]

    def test_unassigned_item_blocks_save(self, bill_service):
        ann = Participant(name="Ann")
        items = [
            increment_share(ann.id, MenuItem(title="Pizza", price=Decimal("30.00"))),
            MenuItem(title="Salad", price=Decimal("15.00")),
        ]

        with pytest.raises(ValidationError, match="Salad"):
            bill_service.create_itemized_bill(BillHeader(title="Lunch"), [ann], items)

    def test_oversized_item_price_is_rejected(self, bill_service, temp_db):
        ann = Participant(name="Ann")
        item = increment_share(ann.id, MenuItem(title="Yacht", price=Decimal("1e30")))

        with pytest.raises(ValidationError, match="Yacht"):
            bill_service.create_itemized_bill(BillHeader(title="Toys"), [ann], [item])

        assert temp_db.list_bills() == []

    def test_no_items(self, bill_service):
        with pytest.raises(ValidationError, match="menu item"):
            bill_service.create_itemized_bill(BillHeader(title="Lunch"), [Participant(name="Ann")], [])


class TestBillLifecycle:
    """Tests for settlement, payments, history and events."""

    def test_settle(self, bill_service, sample_bill):
        settled = bill_service.settle_bill(sample_bill.id)

        assert settled.is_settled
        assert all(p.has_paid for p in settled.participants)
        assert bill_service.settle_bill(sample_bill.id) == settled

    def test_settle_missing_bill(self, bill_service):
        with pytest.raises(NotFoundError):
            bill_service.settle_bill("missing")

    def test_payments_settle_bill(self, bill_service, sample_bill):
        bill_service.mark_participant_paid(sample_bill.id, "John")
        bill_service.mark_participant_paid(sample_bill.id, "Jane")
        bill = bill_service.mark_participant_paid(sample_bill.id, sample_bill.participants[2].id)

        assert bill.is_settled

    def test_cannot_unpay_settled_bill(self, bill_service, sample_bill):
        bill_service.settle_bill(sample_bill.id)

        with pytest.raises(ConflictError):
            bill_service.mark_participant_paid(sample_bill.id, "John", paid=False)

    def test_update_cannot_reopen_settled_bill(self, bill_service, sample_bill):
        settled = bill_service.settle_bill(sample_bill.id)
        reopened = replace(
            settled,
            is_settled=False,
            participants=tuple(replace(p, has_paid=False) for p in settled.participants),
        )

        with pytest.raises(ConflictError, match="settled"):
            bill_service.update_bill(reopened)

        stored = bill_service.require_bill(sample_bill.id)
        assert stored.is_settled
        assert all(p.has_paid for p in stored.participants)

    def test_update_settled_bill_details(self, bill_service, sample_bill):
        settled = bill_service.settle_bill(sample_bill.id)

        bill_service.update_bill(replace(settled, title="Pizza night"))

        stored = bill_service.require_bill(sample_bill.id)
        assert stored.title == "Pizza night"
        assert stored.is_settled

    def test_repeated_payment_changes_nothing(self, temp_db, dinner_participants):
        events = []
        service = BillService(temp_db, listeners=[events.append], default_currency="USD")
        bill = service.create_manual_bill(BillHeader(title="Dinner"), "85.50", dinner_participants)
        service.mark_participant_paid(bill.id, "John")
        service.settle_bill(bill.id)
        before = len(events)

        again = service.mark_participant_paid(bill.id, "John")
        service.mark_participant_paid(bill.id, "John")

        assert again.is_settled
        assert len(events) == before
        assert [e.kind for e in events].count(BillEventKind.PAYMENT_CHANGED) == 1

    def test_update_and_delete(self, bill_service, sample_bill):
        updated = bill_service.update_bill(replace(sample_bill, title="Pizza night"))
        assert bill_service.require_bill(sample_bill.id).title == "Pizza night"
        assert updated.title == "Pizza night"

        bill_service.delete_bill(sample_bill.id)
        assert bill_service.get_bill(sample_bill.id) is None
        with pytest.raises(NotFoundError):
            bill_service.require_bill(sample_bill.id)

    def test_search_and_statistics(self, bill_service, sample_bill):
        taxi = bill_service.create_manual_bill(
            BillHeader(title="Uber to Airport", date=datetime(2025, 8, 4)),
            "45.00",
            [ManualParticipantAmount(name=n) for n in ("Kevin", "Lisa", "Mark")],
            equal_split=True,
        )
        bill_service.settle_bill(taxi.id)

        assert [b.id for b in bill_service.search_bills("airport")] == [taxi.id]
        assert [b.id for b in bill_service.list_bills()] == [sample_bill.id, taxi.id]

        stats = bill_service.get_statistics()
        assert stats.total_bills == 2
        assert stats.settled_bills == 1
        usd = stats.for_currency("USD")
        assert usd.pending_amount == Decimal("85.50")
        assert usd.settled_amount == Decimal("45.00")

    def test_listeners_receive_events(self, temp_db, dinner_participants):
        events = []
        late = []
        service = BillService(temp_db, listeners=[events.append], default_currency="EUR")
        service.subscribe(late.append)

        bill = service.create_manual_bill(BillHeader(title="Dinner"), "85.50", dinner_participants)
        for participant in bill.participants:
            service.mark_participant_paid(bill.id, participant.id)
        service.delete_bill(bill.id)

        kinds = [e.kind for e in events]
        assert kinds == [
            BillEventKind.CREATED,
            BillEventKind.PAYMENT_CHANGED,
            BillEventKind.PAYMENT_CHANGED,
            BillEventKind.PAYMENT_CHANGED,
            BillEventKind.SETTLED,
            BillEventKind.DELETED,
        ]
        assert events[0].bill.currency == "EUR"
        assert events[-1].bill is None
        assert late == events


class TestParticipantService:
    """Tests for the saved participant address book."""

    def test_remember_deduplicates_case_insensitively(self, participant_service):
        first = participant_service.remember_participant("Jane", "jane@example.com")
        again = participant_service.remember_participant(" jane ", "JANE@example.com")

        assert again.id == first.id
        assert len(participant_service.list_participants()) == 1

    def test_same_name_different_email_is_separate(self, participant_service):
        participant_service.remember_participant("Jane", "jane@example.com")
        participant_service.remember_participant("Jane")

        assert len(participant_service.list_participants()) == 2

    def test_blank_name(self, participant_service):
        with pytest.raises(ValidationError):
            participant_service.remember_participant("  ")

    def test_search(self, participant_service):
        participant_service.remember_participant("Jane Smith", "jane@example.com")
        participant_service.remember_participant("John Doe")

        assert [p.name for p in participant_service.search_participants("SMITH")] == ["Jane Smith"]
        assert [p.name for p in participant_service.search_participants("example")] == ["Jane Smith"]
        assert len(participant_service.search_participants("")) == 2

    def test_touch_moves_to_front(self, participant_service):
        ann = participant_service.remember_participant("Ann")
        participant_service.remember_participant("Bob")

        participant_service.touch_participant(ann.id)

        assert participant_service.list_participants()[0].name == "Ann"

    def test_delete(self, participant_service):
        ann = participant_service.remember_participant("Ann")

        participant_service.delete_participant(ann.id)

        assert participant_service.get_participant(ann.id) is None
        with pytest.raises(NotFoundError):
            participant_service.touch_participant(ann.id)
