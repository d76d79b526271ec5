from sqlalchemy.ext.asyncio import AsyncSession
from tripledger.core.balances import aggregate, check_conservation, is_settled, summarize_member
from tripledger.core.settlement import apply_transfers, settle
from tripledger.core.splits import group_splits
from tripledger.core.utils import fmt_money
from tripledger.services.expense_services import get_trip_snapshot

def _diagnostic(inconsistency):
    return inconsistency.as_dict() if inconsistency else None

async def get_trip_balances(db: AsyncSession, trip_id: str):
    expenses, splits = await get_trip_snapshot(db, trip_id)
    balances = aggregate(expenses, group_splits(splits))

    return {
        "trip_id": trip_id,
        "balances": {
            uid: fmt_money(amount)
            for uid, amount in balances.items()
        },
        "inconsistency": _diagnostic(check_conservation(balances))
    }

async def get_member_summary(
    db: AsyncSession,
    trip_id: str,
    user_id: str
):
    expenses, splits = await get_trip_snapshot(db, trip_id)
    summary = summarize_member(expenses, group_splits(splits), user_id)

    return {
        "trip_id": trip_id,
        "user_id": user_id,
        "trip_total": fmt_money(summary.trip_total),
        "my_spend": fmt_money(summary.my_spend),
        "my_advanced": fmt_money(summary.my_advanced),
        "net_balance": fmt_money(summary.balance)
    }

async def get_settlement_report(db: AsyncSession, trip_id: str):
    expenses, splits = await get_trip_snapshot(db, trip_id)
    report = settle(expenses, splits)

    # Drop settled balances
    net = {
        uid: amt
        for uid, amt in report.balances.items()
        if not is_settled(amt)
    }
    residual = apply_transfers(net, report.transfers)

    return {
        "trip_id": trip_id,
        "net": {
            uid: fmt_money(amt)
            for uid, amt in net.items()
        },
        "settlements": [
            {
                "from_id": t.from_id,
                "to_id": t.to_id,
                "amount": fmt_money(t.amount)
            }
            for t in report.transfers
        ],
        "unsettled": {
            uid: fmt_money(amt)
            for uid, amt in residual.items()
            if not is_settled(amt)
        },
        "inconsistency": _diagnostic(report.inconsistency)
    }
