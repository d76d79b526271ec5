from datetime import date
from typing import Literal
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from tripledger.db.session import get_db
from tripledger.models.expense import ExpenseCategory
from tripledger.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseOut, ExpenseListOut
from tripledger.services.expense_services import create_expense, delete_expense, edit_expense, get_trip_expenses, get_expense_by_id

router = APIRouter()

@router.post("/", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
async def add_expense(trip_id: str, data: ExpenseCreate, db: AsyncSession = Depends(get_db)):
    return await create_expense(db, trip_id, data)

@router.get("/", response_model=ExpenseListOut)
async def list_expenses(
    trip_id: str,
    category: ExpenseCategory | None = None,
    payer_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    order: Literal["newest", "oldest"] = "newest",
    db: AsyncSession = Depends(get_db),
):
    return await get_trip_expenses(
        db,
        trip_id,
        category=category,
        payer_id=payer_id,
        date_from=date_from,
        date_to=date_to,
        order=order
    )

@router.get("/{expense_id}", response_model=ExpenseOut)
async def fetch(
    trip_id: str,
    expense_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await get_expense_by_id(db, trip_id=trip_id, expense_id=expense_id)

@router.patch("/{expense_id}", response_model=ExpenseOut)
async def edit(trip_id: str, expense_id: str, data: ExpenseUpdate, db: AsyncSession = Depends(get_db)):
    return await edit_expense(db, trip_id, expense_id, data)

@router.delete("/{expense_id}")
async def del_expense(trip_id: str, expense_id: str, db: AsyncSession = Depends(get_db)):
    return await delete_expense(db, trip_id=trip_id, expense_id=expense_id)
