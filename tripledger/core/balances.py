import logging
from decimal import Decimal
from typing import Dict, Iterable, Mapping, NamedTuple, Optional

from tripledger.core.exceptions import BalanceInconsistency
from tripledger.core.splits import reconcile
from tripledger.core.utils import ZERO, TOLERANCE, qround, to_money

logger = logging.getLogger(__name__)


class MemberSummary(NamedTuple):
    trip_total: Decimal
    my_spend: Decimal
    my_advanced: Decimal
    balance: Decimal


def is_settled(balance: Decimal) -> bool:
    return abs(balance) <= TOLERANCE


def aggregate(expenses: Iterable, splits_by_expense: Mapping[str, list]) -> Dict[str, Decimal]:
    """
    Net balance per member: what they paid minus what they consumed.

    Positive means the group owes the member, negative means the member owes
    the group. Members appear in the order they are first seen.
    """
    balances: Dict[str, Decimal] = {}

    for e in expenses:
        amount = to_money(e.amount)
        balances[e.payer_id] = qround(balances.get(e.payer_id, ZERO) + amount)

        for share in reconcile(e, splits_by_expense.get(e.id, [])):
            balances[share.user_id] = qround(balances.get(share.user_id, ZERO) - share.amount)

    return balances


def check_conservation(balances: Mapping[str, Decimal]) -> Optional[BalanceInconsistency]:
    credits = qround(sum((b for b in balances.values() if b > 0), ZERO))
    debits = qround(sum((-b for b in balances.values() if b < 0), ZERO))

    if abs(credits - debits) <= TOLERANCE:
        return None

    problem = BalanceInconsistency(credits, debits)
    logger.warning("Balance sheet does not add up: %s", problem)
    return problem


def summarize_member(expenses: Iterable, splits_by_expense: Mapping[str, list], user_id: str) -> MemberSummary:
    # Dashboard figures, read through the same reconciler as the balances
    trip_total = ZERO
    my_spend = ZERO
    my_advanced = ZERO

    for e in expenses:
        amount = to_money(e.amount)
        trip_total = qround(trip_total + amount)
        if e.payer_id == user_id:
            my_advanced = qround(my_advanced + amount)

        for share in reconcile(e, splits_by_expense.get(e.id, [])):
            if share.user_id == user_id:
                my_spend = qround(my_spend + share.amount)

    return MemberSummary(
        trip_total=trip_total,
        my_spend=my_spend,
        my_advanced=my_advanced,
        balance=qround(my_advanced - my_spend),
    )
