from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator
from typing import List
from tripledger.models.expense import ExpenseCategory

class SplitInput(BaseModel):
    user_id: str
    amount: Decimal = Field(ge=0, decimal_places=2)

class ExpenseCreate(BaseModel):
    title: str
    amount: Decimal = Field(ge=0, decimal_places=2)
    payer_id: str
    category: ExpenseCategory = ExpenseCategory.other
    expense_date: date | None = None
    participant_ids: List[str] = []
    splits: List[SplitInput] | None = None

    @model_validator(mode="after")
    def needs_participants(self):
        if not self.participant_ids and not self.splits:
            raise ValueError("Either participant_ids or splits is required")
        return self

class ExpenseUpdate(BaseModel):
    title: str | None = None
    amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    payer_id: str | None = None
    category: ExpenseCategory | None = None
    expense_date: date | None = None
    participant_ids: List[str] | None = None
    splits: List[SplitInput] | None = None

class ShareOut(BaseModel):
    user_id: str
    amount: str

class ExpenseOut(BaseModel):
    id: str
    trip_id: str
    title: str
    category: ExpenseCategory
    amount: str
    payer_id: str
    expense_date: date | None = None
    created_at: datetime | None = None
    shares: List[ShareOut]

class ExpenseListOut(BaseModel):
    count: int
    total: str
    expenses: List[ExpenseOut]
