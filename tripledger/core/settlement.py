"""
Settle-up planning.

plan() is a greedy matcher: the biggest debtor pays the biggest creditor
until one of them is square, then the next in line takes over. It keeps the
number of transfers small but does not search for the true minimum.
"""
import logging
from collections import deque
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

from tripledger.core.balances import aggregate, check_conservation, is_settled
from tripledger.core.exceptions import BalanceInconsistency
from tripledger.core.splits import group_splits
from tripledger.core.utils import ZERO, TOLERANCE, qround, to_money

logger = logging.getLogger(__name__)


class Transfer(NamedTuple):
    from_id: str
    to_id: str
    amount: Decimal


class SettlementReport(NamedTuple):
    balances: Dict[str, Decimal]
    transfers: List[Transfer]
    inconsistency: Optional[BalanceInconsistency]


def plan(balances: Mapping[str, Decimal]) -> List[Transfer]:
    debtors = []
    creditors = []

    for uid, bal in balances.items():
        bal = to_money(bal)
        if bal < -TOLERANCE:
            debtors.append([uid, bal])
        elif bal > TOLERANCE:
            creditors.append([uid, bal])

    # sorted() is stable, so equal balances keep their input order
    debtors = deque(sorted(debtors, key=lambda x: x[1]))
    creditors = deque(sorted(creditors, key=lambda x: x[1], reverse=True))

    transfers: List[Transfer] = []

    while debtors and creditors:
        debtor = debtors[0]
        creditor = creditors[0]

        pay_amt = qround(min(-debtor[1], creditor[1]))
        if pay_amt > TOLERANCE:
            transfers.append(Transfer(debtor[0], creditor[0], pay_amt))

        debtor[1] = qround(debtor[1] + pay_amt)
        creditor[1] = qround(creditor[1] - pay_amt)

        if is_settled(debtor[1]):
            debtors.popleft()
        if is_settled(creditor[1]):
            creditors.popleft()

    leftover = [(uid, str(bal)) for uid, bal in list(debtors) + list(creditors)]
    if leftover:
        logger.warning("Settlement left unmatched balances: %s", leftover)

    return transfers


def apply_transfers(balances: Mapping[str, Decimal], transfers: Iterable[Transfer]) -> Dict[str, Decimal]:
    after = {uid: to_money(bal) for uid, bal in balances.items()}
    for t in transfers:
        after[t.from_id] = qround(after.get(t.from_id, ZERO) + t.amount)
        after[t.to_id] = qround(after.get(t.to_id, ZERO) - t.amount)
    return after


def settle(expenses: Iterable, splits: Iterable) -> SettlementReport:
    """
    Full pipeline from a ledger snapshot to a settle-up plan.

    A balance sheet that does not add up is reported on the result instead
    of raised, and whatever transfers can be computed are still returned.
    """
    expenses = list(expenses)
    balances = aggregate(expenses, group_splits(splits))
    inconsistency = check_conservation(balances)
    return SettlementReport(
        balances=balances,
        transfers=plan(balances),
        inconsistency=inconsistency,
    )
