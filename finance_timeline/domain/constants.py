"""Domain constants for the change timeline."""

from typing import Literal

DEFAULT_REQUEST_ID = "0x01"

EntryKind = Literal["income", "expense"]
ChangeStatus = Literal["draft", "published", "cancelled"]
ProjectionStatus = Literal["completed", "draft", "published", "cancelled"]
VersionType = Literal["published", "cancelled"]

INCOME: EntryKind = "income"
EXPENSE: EntryKind = "expense"

DRAFT: ChangeStatus = "draft"
PUBLISHED: ChangeStatus = "published"
CANCELLED: ChangeStatus = "cancelled"
COMPLETED: ProjectionStatus = "completed"

VERSION_DESCRIPTIONS = {
    PUBLISHED: "Published",
    CANCELLED: "Cancelled",
}

INCOMES_EXPENSES_STORE = "incomes_expenses"
CUMULATIVE_FINANCES_STORE = "cumulative_finances"


__all__ = [
    "DEFAULT_REQUEST_ID",
    "EntryKind",
    "ChangeStatus",
    "ProjectionStatus",
    "VersionType",
    "INCOME",
    "EXPENSE",
    "DRAFT",
    "PUBLISHED",
    "CANCELLED",
    "COMPLETED",
    "VERSION_DESCRIPTIONS",
    "INCOMES_EXPENSES_STORE",
    "CUMULATIVE_FINANCES_STORE",
]
