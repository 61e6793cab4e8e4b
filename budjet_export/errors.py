"""
Exceptions raised while exporting a statement.

Only LineParseError and its subclasses are recoverable: the offending
line is reported and dropped. Everything else ends the run.
"""

from typing import Optional


class ExportError(Exception):
    """Base class for all export errors."""


class LineParseError(ExportError, ValueError):
    """A single input line could not be turned into a transaction."""

    def __init__(self, message: str, line: Optional[str] = None, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"line {self.line_number}: {self.message}"
        return self.message


class DateParseError(LineParseError):
    """The date column is not a valid DD/MM/YYYY date."""


class FieldCountError(LineParseError):
    """The line has fewer tab-delimited fields than the layout requires."""


class StartupIOError(ExportError, OSError):
    """The input file cannot be opened or decoded."""


class AmountConsistencyError(ExportError):
    """A transaction has neither or both of expense and income."""

    def __init__(self, transaction):
        super().__init__(
            f"Unknown amount pattern for transaction {transaction.id}: "
            f"expense={transaction.expense!r}, income={transaction.income!r}"
        )
        self.transaction = transaction
