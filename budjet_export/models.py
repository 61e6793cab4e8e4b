"""
Data model for exported statements.

A Transaction is built from one accepted input line; a Category is
created the first time its trimmed name is seen.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Dict, Any

from budjet_export.errors import AmountConsistencyError
from budjet_export.utils.formatting import format_cents, format_iso_date


TRANSFER_CATEGORY = "Transfert"


@dataclass
class Transaction:
    """One financial movement parsed from the statement."""
    id: int
    date: date
    expense: Optional[Decimal]
    income: Optional[Decimal]
    description: str
    category: str
    category_id: Optional[int] = None

    def amount(self) -> Decimal:
        """
        Signed amount of the transaction.

        Expenses are negated, income is kept positive.

        Raises:
            AmountConsistencyError: if neither or both amounts are set
        """
        if self.expense is not None and self.income is None:
            return -self.expense
        if self.expense is None and self.income is not None:
            return self.income
        raise AmountConsistencyError(self)

    def is_transfer(self, transfer_category: str = TRANSFER_CATEGORY) -> bool:
        """Check if this is an internal transfer between accounts."""
        return self.category == transfer_category

    def to_row(self) -> Dict[str, Any]:
        """Convert to a row of the transactions table."""
        return {
            'date': format_iso_date(self.date),
            'title': self.description,
            'amount': format_cents(self.amount()),
            'id': self.id,
            'categoryId': self.category_id,
        }


@dataclass(frozen=True)
class Category:
    """A distinct category name with its stable id."""
    id: int
    name: str

    def to_row(self) -> Dict[str, Any]:
        """Convert to a row of the categories table."""
        return {
            'id': self.id,
            'name': self.name,
        }
