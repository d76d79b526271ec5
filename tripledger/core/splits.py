"""
Share computation for a single expense.

allocate() is the one rule for turning an amount into equal shares and
reconcile() is the one place stored split rows are read from. Everything
that needs "who owes what for this expense" goes through reconcile().
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Sequence

from tripledger.core.exceptions import EmptyParticipants, NegativeAmount, SplitMismatch
from tripledger.core.utils import ZERO, qfloor, qround, to_money, within_tolerance

logger = logging.getLogger(__name__)


class Share(NamedTuple):
    user_id: str
    amount: Decimal


def unique_ids(ids: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for uid in ids:
        if uid not in seen:
            seen.add(uid)
            out.append(uid)
    return out


def allocate(amount: Decimal, participant_ids: Sequence[str]) -> List[Share]:
    """
    Split ``amount`` equally among ``participant_ids``.

    Every participant gets ``round(amount / n)`` and the first one also
    absorbs the rounding remainder, so the shares always add up to the
    amount to the cent: 100.00 over three people is 33.34, 33.33, 33.33.
    """
    amount = to_money(amount)
    if amount < 0:
        raise NegativeAmount(amount)

    participants = unique_ids(participant_ids)
    if not participants:
        raise EmptyParticipants()

    n = len(participants)
    base = qround(amount / n)
    if base * (n - 1) > amount:
        # half-up rounding overshot so far the first share would go negative
        base = qfloor(amount / n)
    remainder = qround(amount - base * n)

    first, rest = participants[0], participants[1:]
    shares = [Share(first, qround(base + remainder))]
    shares.extend(Share(uid, base) for uid in rest)
    return shares


def merge_splits(splits: Iterable) -> Dict[str, Decimal]:
    """Sum split rows per user, keeping the order users first appear in."""
    merged: Dict[str, Decimal] = {}
    for s in splits:
        amt = to_money(s.amount)
        if amt < 0:
            raise NegativeAmount(amt, what=f"share of user {s.user_id}")
        merged[s.user_id] = qround(merged.get(s.user_id, ZERO) + amt)
    return merged


def check_splits(expense, splits: Iterable):
    """
    Return the merged shares of ``expense`` and a SplitMismatch when they do
    not add up to its amount (None when they do).
    """
    amount = to_money(expense.amount)
    if amount < 0:
        raise NegativeAmount(amount, what=f"amount of expense {expense.id}")

    merged = merge_splits(splits)
    total = qround(sum(merged.values(), ZERO))
    if within_tolerance(total, amount):
        return merged, None
    return merged, SplitMismatch(expense.id, amount, total)


def reconcile(expense, splits: Iterable) -> List[Share]:
    """
    Authoritative shares for one expense.

    Duplicate rows for the same user are summed. If the stored shares add up
    to the expense amount (within a cent) they are kept as entered, which
    preserves custom splits. Otherwise they are thrown away and recomputed
    with allocate() over the users found in the rows.
    """
    merged, mismatch = check_splits(expense, splits)
    if mismatch is None:
        return [Share(uid, amt) for uid, amt in merged.items()]

    if not merged:
        logger.warning("Expense %s has no splits; its amount is not shared by anyone", expense.id)
        return []

    logger.warning("%s; recomputing equal shares", mismatch)
    return allocate(mismatch.expected, list(merged))


def group_splits(splits: Iterable) -> Dict[str, list]:
    grouped: Dict[str, list] = {}
    for s in splits:
        grouped.setdefault(s.expense_id, []).append(s)
    return grouped
