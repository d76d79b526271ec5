import enum
import uuid
from sqlalchemy import Column, String, DateTime, Date, Numeric, Enum
from sqlalchemy.sql import func
from tripledger.db.session import Base

class ExpenseCategory(str, enum.Enum):
    food = "food"
    transport = "transport"
    accommodation = "accommodation"
    ticket = "ticket"
    shopping = "shopping"
    other = "other"

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(64), nullable=False, index=True)
    title = Column(String, nullable=False)
    category = Column(Enum(ExpenseCategory), nullable=False, default=ExpenseCategory.other)
    amount = Column(Numeric(10, 2), nullable=False)
    payer_id = Column(String(64), nullable=False)
    expense_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
