"""Command payloads validated before they reach the change aggregate."""

from dataclasses import dataclass
from decimal import Decimal

from finance_timeline.domain.constants import EXPENSE, INCOME, EntryKind
from finance_timeline.domain.exceptions import InvalidCommand, MalformedPeriod
from finance_timeline.domain.models.events import ExpenseAdded, IncomeAdded
from finance_timeline.domain.services.calendar import period_from_months
from finance_timeline.utils.decimal_utils import coerce_decimal


@dataclass(frozen=True)
class EntryDraft:
    """Income or expense staged for a change before commit.

    Attributes:
        kind: ``income`` or ``expense``.
        amount: Amount in currency units, as provided by the caller.
        description: Free-form label.
        start_month: First month covered, ``YYYY-MM``.
        end_month: Last month covered, ``YYYY-MM``.
    """

    kind: EntryKind
    amount: Decimal | int | float | str
    description: str
    start_month: str
    end_month: str

    def validate(self) -> "EntryDraft":
        """Return a normalised copy of the draft.

        Raises:
            InvalidCommand: If the kind, amount or months are invalid.
        """
        if self.kind not in (INCOME, EXPENSE):
            raise InvalidCommand(f"Unknown entry kind: {self.kind!r}")
        try:
            amount = coerce_decimal(self.amount)
        except ValueError as exc:
            raise InvalidCommand(str(exc)) from exc
        if not amount.is_finite():
            raise InvalidCommand(f"Amount must be finite: {self.amount!r}")
        try:
            period_from_months(self.start_month, self.end_month)
        except MalformedPeriod as exc:
            raise InvalidCommand(str(exc)) from exc
        return EntryDraft(
            kind=self.kind,
            amount=amount,
            description=(self.description or "").strip(),
            start_month=self.start_month.strip(),
            end_month=self.end_month.strip(),
        )

    def to_event(self, change_id: str, timestamp: int) -> IncomeAdded | ExpenseAdded:
        """Build the entry event for ``change_id`` from a validated draft."""
        draft = self.validate()
        event_cls = IncomeAdded if draft.kind == INCOME else ExpenseAdded
        return event_cls(
            amount=draft.amount,
            description=draft.description,
            belongs_to=change_id,
            period=period_from_months(draft.start_month, draft.end_month),
            timestamp=timestamp,
        )


__all__ = ["EntryDraft"]
