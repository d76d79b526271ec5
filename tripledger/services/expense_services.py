import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from tripledger.models.expense import Expense
from tripledger.models.expense_split import ExpenseSplit
from tripledger.core.splits import Share, allocate, group_splits, merge_splits, reconcile, unique_ids
from tripledger.core.utils import ZERO, qround, to_money, within_tolerance, fmt_money
from tripledger.core.exceptions import InvalidSplits
from fastapi import HTTPException

logger = logging.getLogger(__name__)

def build_shares(amount, participant_ids=None, splits=None):
    # Explicit custom shares win over an equal split among participants
    if splits:
        user_ids = [s.user_id for s in splits]

        if len(user_ids) != len(set(user_ids)):
            raise InvalidSplits("Duplicate users found in splits")

        merged = merge_splits(splits)
        total = qround(sum(merged.values(), ZERO))
        if not within_tolerance(total, to_money(amount)):
            raise InvalidSplits(f"Sum of split amounts ({total}) must equal total amount ({to_money(amount)})")

        return [Share(uid, amt) for uid, amt in merged.items()]

    return allocate(amount, participant_ids or [])

def serialize_expense(expense: Expense, shares):
    return {
        "id": expense.id,
        "trip_id": expense.trip_id,
        "title": expense.title,
        "category": expense.category,
        "amount": fmt_money(to_money(expense.amount)),
        "payer_id": expense.payer_id,
        "expense_date": expense.expense_date,
        "created_at": expense.created_at,
        "shares": [
            {"user_id": s.user_id, "amount": fmt_money(s.amount)}
            for s in shares
        ]
    }

async def get_trip_snapshot(db: AsyncSession, trip_id: str):
    q = (
        select(Expense)
        .where(Expense.trip_id == trip_id)
        .order_by(Expense.created_at, Expense.id)
    )
    res = await db.execute(q)
    expenses = res.scalars().all()
    return expenses, await _get_splits_for(db, expenses)

async def _get_splits_for(db: AsyncSession, expenses):
    if not expenses:
        return []

    q = (
        select(ExpenseSplit)
        .where(ExpenseSplit.expense_id.in_([e.id for e in expenses]))
        .order_by(ExpenseSplit.id)
    )
    res = await db.execute(q)
    return res.scalars().all()

async def _get_trip_expense(db: AsyncSession, trip_id: str, expense_id: str) -> Expense:
    q = select(Expense).where(Expense.id == expense_id, Expense.trip_id == trip_id)
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    return expense

async def _get_splits(db: AsyncSession, expense_id: str):
    q = (
        select(ExpenseSplit)
        .where(ExpenseSplit.expense_id == expense_id)
        .order_by(ExpenseSplit.id)
    )
    res = await db.execute(q)
    return res.scalars().all()

async def create_expense(db: AsyncSession, trip_id: str, data):
    shares = build_shares(data.amount, data.participant_ids, data.splits)

    expense = Expense(
        trip_id=trip_id,
        title=data.title,
        category=data.category,
        amount=to_money(data.amount),
        payer_id=data.payer_id,
        expense_date=data.expense_date
    )
    db.add(expense)
    await db.flush()  # gives expense.id

    for s in shares:
        db.add(ExpenseSplit(
            expense_id=expense.id,
            user_id=s.user_id,
            amount=s.amount
        ))

    await db.commit()
    await db.refresh(expense)

    logger.info("Created expense %s in trip %s split among %d members", expense.id, trip_id, len(shares))
    return serialize_expense(expense, shares)

async def edit_expense(db: AsyncSession, trip_id: str, expense_id: str, data):
    expense = await _get_trip_expense(db, trip_id, expense_id)
    old_splits = await _get_splits(db, expense_id)

    amount = to_money(data.amount) if data.amount is not None else to_money(expense.amount)
    replace_splits = True

    if data.splits:
        shares = build_shares(amount, splits=data.splits)
    elif data.participant_ids is not None:
        shares = build_shares(amount, participant_ids=data.participant_ids)
    elif amount != to_money(expense.amount):
        # Same people as before, shares recomputed fresh for the new amount
        participants = unique_ids(s.user_id for s in old_splits)
        shares = build_shares(amount, participant_ids=participants)
    else:
        # Nothing money related changed: stored shares, custom ones included, stay
        shares = reconcile(expense, old_splits)
        replace_splits = False

    if data.title is not None:
        expense.title = data.title
    if data.category is not None:
        expense.category = data.category
    if data.payer_id is not None:
        expense.payer_id = data.payer_id
    if data.expense_date is not None:
        expense.expense_date = data.expense_date
    expense.amount = amount

    if replace_splits:
        await db.execute(delete(ExpenseSplit).where(ExpenseSplit.expense_id == expense_id))

        for s in shares:
            db.add(ExpenseSplit(
                expense_id=expense_id,
                user_id=s.user_id,
                amount=s.amount
            ))

    await db.commit()
    await db.refresh(expense)

    logger.info("Updated expense %s in trip %s (splits replaced: %s)", expense_id, trip_id, replace_splits)
    return serialize_expense(expense, shares)

async def delete_expense(db: AsyncSession, trip_id: str, expense_id: str):
    expense = await _get_trip_expense(db, trip_id, expense_id)

    await db.execute(delete(ExpenseSplit).where(ExpenseSplit.expense_id == expense.id))
    await db.execute(delete(Expense).where(Expense.id == expense.id))
    await db.commit()

    logger.info("Deleted expense %s from trip %s", expense_id, trip_id)
    return {"status": "deleted"}

async def get_expense_by_id(db: AsyncSession, trip_id: str, expense_id: str):
    expense = await _get_trip_expense(db, trip_id, expense_id)
    splits = await _get_splits(db, expense_id)
    return serialize_expense(expense, reconcile(expense, splits))

async def get_trip_expenses(
    db: AsyncSession,
    trip_id: str,
    category=None,
    payer_id=None,
    date_from=None,
    date_to=None,
    order="newest"
):
    q = select(Expense).where(Expense.trip_id == trip_id)

    if category is not None:
        q = q.where(Expense.category == category)
    if payer_id is not None:
        q = q.where(Expense.payer_id == payer_id)
    if date_from is not None:
        q = q.where(Expense.expense_date >= date_from)
    if date_to is not None:
        q = q.where(Expense.expense_date <= date_to)

    if order == "oldest":
        q = q.order_by(Expense.expense_date, Expense.created_at, Expense.id)
    else:
        q = q.order_by(Expense.expense_date.desc(), Expense.created_at.desc(), Expense.id.desc())

    res = await db.execute(q)
    expenses = res.scalars().all()
    by_expense = group_splits(await _get_splits_for(db, expenses))

    total = ZERO
    for e in expenses:
        total = qround(total + to_money(e.amount))

    return {
        "count": len(expenses),
        "total": fmt_money(total),
        "expenses": [
            serialize_expense(e, reconcile(e, by_expense.get(e.id, [])))
            for e in expenses
        ]
    }
