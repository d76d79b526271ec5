from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from tripledger.db.session import Base

class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    # no unique constraint on (expense_id, user_id): duplicate rows are merged on read
    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(String(36), ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
