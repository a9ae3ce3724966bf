from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RecurringSchedule:
    id: int
    type: str               # 'income' | 'expense'
    amount: float
    category: str
    frequency: str          # 'daily' | 'weekly' | 'monthly' | 'yearly'
    start_date: str         # 'YYYY-MM-DD'
    description: Optional[str] = None
    end_date: Optional[str] = None
    last_generated: Optional[str] = None  # checkpoint: last materialized occurrence
    is_active: bool = True
    created_at: str = ""


@dataclass(frozen=True)
class GeneratedTransaction:
    """One due occurrence, ready to be inserted as a transaction."""
    type: str
    amount: float
    category: str
    description: str
    date: str               # 'YYYY-MM-DD'
    recurring_id: int
