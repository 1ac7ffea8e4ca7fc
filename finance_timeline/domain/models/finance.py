"""Domain models for monthly income and expense projections."""

from dataclasses import dataclass
from decimal import Decimal

from finance_timeline.domain.constants import EntryKind, ProjectionStatus


@dataclass(frozen=True)
class Entry:
    """Single income or expense contribution to a month."""

    amount: Decimal
    description: str
    kind: EntryKind
    change_id: str


@dataclass(frozen=True)
class MonthlyBucket:
    """Incomes, expenses and net amount for one calendar month.

    Attributes:
        incomes: Income entries in the order they were folded.
        expenses: Expense entries in the order they were folded.
        net: Sum of incomes minus sum of expenses.
    """

    incomes: tuple[Entry, ...] = ()
    expenses: tuple[Entry, ...] = ()
    net: Decimal = Decimal("0")


MonthlyFinances = dict[str, MonthlyBucket]


@dataclass(frozen=True)
class ProjectionScope:
    """Selects which change events a projection folds.

    Attributes:
        request_id: Request whose own entries are always applied.
        active_change_id: Change currently being viewed, if any.
        included_changes: Extra change ids visible in this projection.
    """

    request_id: str
    active_change_id: str | None = None
    included_changes: frozenset[str] | None = None

    def includes(self, change_id: str) -> bool:
        if change_id == self.active_change_id:
            return True
        return bool(self.included_changes) and change_id in self.included_changes


@dataclass(frozen=True)
class Projection:
    """Point-in-time view produced by folding the event log."""

    finances: MonthlyFinances
    request_id: str
    change_id: str | None
    change_status: ProjectionStatus
    version: int
    timestamp: int


__all__ = [
    "Entry",
    "MonthlyBucket",
    "MonthlyFinances",
    "ProjectionScope",
    "Projection",
]
