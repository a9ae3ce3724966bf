from dataclasses import dataclass

from utils.constants import BUDGET_ALERT_THRESHOLD


@dataclass
class Budget:
    id: int
    category: str           # lower-cased, unique
    limit_amount: float
    created_at: str = ""
    updated_at: str = ""
    spent_amount: float = 0.0
    alert_threshold: float = BUDGET_ALERT_THRESHOLD

    @property
    def percentage(self) -> float:
        if self.limit_amount <= 0:
            return 0.0
        return self.spent_amount / self.limit_amount

    @property
    def remaining(self) -> float:
        return self.limit_amount - self.spent_amount

    @property
    def status(self) -> str:
        pct = self.percentage
        if pct >= 1.0:
            return "danger"
        if pct >= self.alert_threshold:
            return "warning"
        return "ok"

    @property
    def display_name(self) -> str:
        return self.category.title()
