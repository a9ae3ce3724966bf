from dataclasses import dataclass
from typing import Optional


@dataclass
class Transaction:
    id: int
    type: str               # 'income' | 'expense'
    amount: float
    category: str
    description: str
    date: str               # 'YYYY-MM-DD'
    recurring_id: Optional[int] = None
    created_at: str = ""

    @property
    def is_auto(self) -> bool:
        return self.recurring_id is not None

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == "income" else -self.amount
