"""
Parser for the bank's tab-separated account export.

Each line holds one movement. Only a handful of the columns are used:

    0   operation date, DD/MM/YYYY
    1   category
    4   label, used as the transaction title
    11  debit, comma decimal separator, empty when the line is a credit
    12  credit, same format, empty when the line is a debit

Columns past the last one used are ignored.
"""

from typing import Iterator

from budjet_export.errors import DateParseError
from budjet_export.formats.base import BaseLineParser
from budjet_export.models import Transaction
from budjet_export.utils.formatting import parse_amount, parse_date


# Column positions in the export
DATE = 0
CATEGORY = 1
DESCRIPTION = 4
EXPENSE = 11
INCOME = 12


class BankTsvParser(BaseLineParser):
    """Parser for the fixed-column TSV account export."""

    delimiter = "\t"
    min_fields = INCOME + 1

    def parse_line(self, line: str, ids: Iterator[int]) -> Transaction:
        """Parse one export line into a Transaction."""
        fields = self._split(line)

        try:
            date = parse_date(fields[DATE])
        except ValueError as e:
            raise DateParseError(str(e), line=line) from e

        # Unparsable amounts are absent, not errors
        expense = parse_amount(fields[EXPENSE])
        income = parse_amount(fields[INCOME])

        return Transaction(
            id=next(ids),
            date=date,
            expense=expense,
            income=income,
            description=fields[DESCRIPTION],
            category=fields[CATEGORY].strip(),
        )
