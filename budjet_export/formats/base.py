"""
Base parser class for line-oriented statement exports.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, List, Optional

from budjet_export.errors import FieldCountError, LineParseError
from budjet_export.models import Transaction

logger = logging.getLogger(__name__)


class BaseLineParser(ABC):
    """
    Abstract base class for parsers that read one transaction per line.

    Transaction ids come from an iterator shared by the caller. A line
    only draws an id once it has parsed successfully, so rejected lines
    leave no gap in the numbering.
    """

    delimiter: str = "\t"
    min_fields: int = 1

    @abstractmethod
    def parse_line(self, line: str, ids: Iterator[int]) -> Transaction:
        """
        Parse one line into a Transaction.

        Args:
            line: Raw line without its terminator
            ids: Source of transaction ids; advanced only on success

        Raises:
            LineParseError: if the line cannot be parsed
        """
        pass

    def iter_transactions(self, lines: Iterable[str], ids: Iterator[int],
                          on_error: Optional[Callable[[LineParseError], None]] = None) -> Iterator[Transaction]:
        """
        Parse lines one at a time, skipping the ones that fail.

        Args:
            lines: Raw lines
            ids: Source of transaction ids
            on_error: Called with each LineParseError, its line_number set

        Yields:
            Accepted transactions, in input order
        """
        for line_number, line in enumerate(lines, 1):
            try:
                transaction = self.parse_line(line, ids)
            except LineParseError as e:
                e.line_number = line_number
                logger.debug("Rejected line %d: %s", line_number, e.message)
                if on_error is not None:
                    on_error(e)
                continue
            yield transaction

    def _split(self, line: str) -> List[str]:
        """Split a line into fields, requiring at least min_fields of them."""
        fields = line.split(self.delimiter)
        if len(fields) < self.min_fields:
            raise FieldCountError(
                f"expected at least {self.min_fields} fields, found {len(fields)}",
                line=line,
            )
        return fields
