"""
Unit tests for share allocation and reconciliation.

No database involved: expenses and splits are plain unsaved model rows.
"""

import logging
import pytest
from decimal import Decimal

from tripledger.core.exceptions import EmptyParticipants, NegativeAmount
from tripledger.core.splits import Share, allocate, check_splits, group_splits, reconcile, unique_ids


def as_dict(shares):
    return {s.user_id: s.amount for s in shares}


class TestAllocate:

    def test_even_split(self):
        shares = allocate(Decimal("90.00"), ["A", "B", "C"])
        assert shares == [
            Share("A", Decimal("30.00")),
            Share("B", Decimal("30.00")),
            Share("C", Decimal("30.00")),
        ]

    def test_remainder_goes_to_first_participant(self):
        """100.00 over three: the first participant takes the extra cent."""
        shares = allocate(Decimal("100.00"), ["A", "B", "C"])
        assert as_dict(shares) == {
            "A": Decimal("33.34"),
            "B": Decimal("33.33"),
            "C": Decimal("33.33"),
        }

    def test_negative_remainder_also_goes_to_first(self):
        """2.00 / 3 rounds up to 0.67, so the first participant gives a cent back."""
        shares = allocate(Decimal("2.00"), ["A", "B", "C"])
        assert as_dict(shares) == {
            "A": Decimal("0.66"),
            "B": Decimal("0.67"),
            "C": Decimal("0.67"),
        }

    def test_order_follows_input(self):
        shares = allocate(Decimal("10.00"), ["C", "A", "B"])
        assert [s.user_id for s in shares] == ["C", "A", "B"]
        assert shares[0].amount == Decimal("3.34")

    def test_duplicate_participants_are_collapsed(self):
        shares = allocate(Decimal("10.00"), ["A", "B", "A"])
        assert as_dict(shares) == {"A": Decimal("5.00"), "B": Decimal("5.00")}

    def test_single_participant_gets_everything(self):
        assert allocate(Decimal("57.89"), ["A"]) == [Share("A", Decimal("57.89"))]

    def test_zero_amount(self):
        shares = allocate(Decimal("0"), ["A", "B"])
        assert as_dict(shares) == {"A": Decimal("0.00"), "B": Decimal("0.00")}

    def test_tiny_amount_over_many_people_stays_non_negative(self):
        people = [f"u{i}" for i in range(10)]
        shares = allocate(Decimal("0.05"), people)

        assert all(s.amount >= 0 for s in shares)
        assert sum(s.amount for s in shares) == Decimal("0.05")
        assert shares[0].amount == Decimal("0.05")

    @pytest.mark.parametrize("amount,count", [
        ("0.01", 3),
        ("0.10", 7),
        ("1.00", 3),
        ("7.77", 4),
        ("99.99", 6),
        ("1000.00", 7),
        ("12345.67", 11),
    ])
    def test_shares_sum_exactly_to_amount(self, amount, count):
        people = [f"u{i}" for i in range(count)]
        shares = allocate(Decimal(amount), people)

        assert len(shares) == count
        assert sum(s.amount for s in shares) == Decimal(amount)
        assert all(s.amount >= 0 for s in shares)

    def test_empty_participants_rejected(self):
        with pytest.raises(EmptyParticipants):
            allocate(Decimal("10.00"), [])

    def test_negative_amount_rejected(self):
        with pytest.raises(NegativeAmount):
            allocate(Decimal("-1.00"), ["A"])

    def test_float_input_is_rounded_to_cents(self):
        shares = allocate(0.1 + 0.2, ["A", "B"])
        assert sum(s.amount for s in shares) == Decimal("0.30")


class TestReconcile:

    def test_matching_splits_are_kept(self, make_expense, make_split):
        """A custom 60/40 split that adds up is authoritative as entered."""
        expense = make_expense("e1", "100.00", "A")
        splits = [make_split("e1", "A", "60.00"), make_split("e1", "B", "40.00")]

        assert as_dict(reconcile(expense, splits)) == {
            "A": Decimal("60.00"),
            "B": Decimal("40.00"),
        }

    def test_corrupted_splits_are_recomputed(self, make_expense, make_split):
        expense = make_expense("e1", "90.00", "A")
        splits = [make_split("e1", "A", "10.00"), make_split("e1", "B", "10.00")]

        assert reconcile(expense, splits) == [
            Share("A", Decimal("45.00")),
            Share("B", Decimal("45.00")),
        ]

    def test_mismatch_is_logged_not_raised(self, make_expense, make_split, caplog):
        expense = make_expense("e1", "90.00", "A")
        splits = [make_split("e1", "A", "10.00"), make_split("e1", "B", "10.00")]

        with caplog.at_level(logging.WARNING, logger="tripledger.core.splits"):
            reconcile(expense, splits)

        assert "recomputing" in caplog.text

    def test_duplicates_are_summed(self, make_expense, make_split):
        """Two rows for B (a retried insert) still count once, summed."""
        expense = make_expense("e1", "90.00", "A")
        splits = [
            make_split("e1", "A", "30.00"),
            make_split("e1", "B", "30.00"),
            make_split("e1", "B", "30.00"),
        ]

        assert as_dict(reconcile(expense, splits)) == {
            "A": Decimal("30.00"),
            "B": Decimal("60.00"),
        }

    def test_duplicates_that_overshoot_trigger_recompute(self, make_expense, make_split):
        expense = make_expense("e1", "60.00", "A")
        splits = [
            make_split("e1", "A", "30.00"),
            make_split("e1", "B", "30.00"),
            make_split("e1", "B", "30.00"),
        ]

        assert as_dict(reconcile(expense, splits)) == {
            "A": Decimal("30.00"),
            "B": Decimal("30.00"),
        }

    def test_recompute_puts_remainder_on_first_seen_user(self, make_expense, make_split):
        expense = make_expense("e1", "100.00", "A")
        splits = [
            make_split("e1", "C", "1.00"),
            make_split("e1", "A", "1.00"),
            make_split("e1", "B", "1.00"),
        ]

        shares = reconcile(expense, splits)
        assert shares[0] == Share("C", Decimal("33.34"))
        assert sum(s.amount for s in shares) == Decimal("100.00")

    def test_one_cent_off_is_tolerated(self, make_expense, make_split):
        expense = make_expense("e1", "100.00", "A")
        splits = [make_split("e1", "A", "33.33"), make_split("e1", "B", "66.66")]

        assert as_dict(reconcile(expense, splits)) == {
            "A": Decimal("33.33"),
            "B": Decimal("66.66"),
        }

    def test_no_splits_gives_no_shares(self, make_expense):
        assert reconcile(make_expense("e1", "50.00", "A"), []) == []

    def test_negative_split_rejected(self, make_expense, make_split):
        expense = make_expense("e1", "10.00", "A")
        with pytest.raises(NegativeAmount):
            reconcile(expense, [make_split("e1", "A", "-10.00")])

    def test_negative_expense_rejected(self, make_expense, make_split):
        expense = make_expense("e1", "-10.00", "A")
        with pytest.raises(NegativeAmount):
            reconcile(expense, [make_split("e1", "A", "10.00")])

    def test_idempotent(self, make_expense, make_split):
        expense = make_expense("e1", "100.00", "A")
        splits = [make_split("e1", "A", "5.00"), make_split("e1", "B", "5.00"), make_split("e1", "C", "5.00")]

        assert reconcile(expense, splits) == reconcile(expense, splits)


class TestHelpers:

    def test_check_splits_reports_mismatch(self, make_expense, make_split):
        expense = make_expense("e1", "90.00", "A")
        merged, mismatch = check_splits(expense, [make_split("e1", "A", "10.00")])

        assert merged == {"A": Decimal("10.00")}
        assert mismatch.expected == Decimal("90.00")
        assert mismatch.actual == Decimal("10.00")

    def test_group_splits_keeps_order(self, make_split):
        splits = [make_split("e1", "A", "1"), make_split("e2", "B", "2"), make_split("e1", "C", "3")]
        grouped = group_splits(splits)

        assert list(grouped) == ["e1", "e2"]
        assert [s.user_id for s in grouped["e1"]] == ["A", "C"]

    def test_unique_ids(self):
        assert unique_ids(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
