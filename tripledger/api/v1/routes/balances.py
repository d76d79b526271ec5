from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tripledger.db.session import get_db
from tripledger.services.balance_services import get_trip_balances, get_member_summary, get_settlement_report

router = APIRouter()

@router.get("/balances")
async def trip_balances(
    trip_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await get_trip_balances(db, trip_id)


@router.get("/balances/members/{user_id}")
async def member_summary(
    trip_id: str,
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await get_member_summary(db, trip_id, user_id)


@router.get("/settlements")
async def settlements(
    trip_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await get_settlement_report(db, trip_id)
