"""
StatementExporter - the entry point for converting a statement export.

The pipeline is a single forward pass:
1. Reads the input file line by line
2. Parses each line into a Transaction, reporting rejected lines
3. Attaches a category id to every accepted transaction
4. Builds the dexie document from the accumulated records
"""

import io
import itertools
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Dict, Any, Optional, Union

from budjet_export.categories import CategoryRegistry
from budjet_export.errors import LineParseError, StartupIOError
from budjet_export.formats.bank_tsv import BankTsvParser
from budjet_export.formats.base import BaseLineParser
from budjet_export.models import Category, Transaction, TRANSFER_CATEGORY
from budjet_export.output import DexieDocument, OutputGenerator, DATABASE_NAME, DATABASE_VERSION

logger = logging.getLogger(__name__)

DEFAULT_INPUT_PATH = "./input.tsv"

# Tried in order; utf-8-sig drops a leading BOM, latin-1 accepts any byte sequence
ENCODINGS = ('utf-8-sig', 'cp1252', 'latin-1')


@dataclass
class ExportOptions:
    """Options for an export run."""
    input_path: str = DEFAULT_INPUT_PATH
    excluded_category: str = TRANSFER_CATEGORY
    database_name: str = DATABASE_NAME
    database_version: int = DATABASE_VERSION
    skip_inconsistent_amounts: bool = False   # Drop instead of failing


def read_lines(filepath: Union[str, Path]) -> Iterator[str]:
    """
    Open a text file and return its lines without terminators.

    The file is opened and decoded immediately so that a missing or
    unreadable file fails before anything is produced; lines are then
    handed out one at a time.

    Args:
        filepath: Path to the input file

    Returns:
        Iterator over the lines

    Raises:
        StartupIOError: if the file cannot be read or decoded
    """
    filepath = Path(filepath)
    try:
        raw = filepath.read_bytes()
    except OSError as e:
        raise StartupIOError(f"Cannot open {filepath}: {e.strerror or e}") from e

    for encoding in ENCODINGS:
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        logger.debug("Decoded %s as %s", filepath, encoding)
        return _iter_lines(text)

    raise StartupIOError(f"Could not decode file {filepath} with any known encoding")


def _iter_lines(text: str) -> Iterator[str]:
    for line in io.StringIO(text, newline=None):
        yield line[:-1] if line.endswith('\n') else line


@dataclass
class ExportResult:
    """Result of an export run."""
    transactions: List[Transaction]
    categories: List[Category]
    errors: List[LineParseError] = field(default_factory=list)
    options: ExportOptions = field(default_factory=ExportOptions)

    def output_generator(self) -> OutputGenerator:
        return OutputGenerator(
            self.transactions,
            self.categories,
            excluded_category=self.options.excluded_category,
            database_name=self.options.database_name,
            database_version=self.options.database_version,
            skip_inconsistent=self.options.skip_inconsistent_amounts,
        )

    def to_document(self) -> DexieDocument:
        """
        Build the dexie document.

        Raises:
            AmountConsistencyError: if an emitted transaction has neither
                or both amounts and skipping is not enabled
        """
        return self.output_generator().build()

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.to_document().to_json(indent)

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the parsed transactions."""
        total_income = Decimal(0)
        total_expense = Decimal(0)
        transfers = 0

        for tx in self.transactions:
            if tx.is_transfer(self.options.excluded_category):
                transfers += 1
                continue
            total_income += tx.income or 0
            total_expense += tx.expense or 0

        return {
            'total_transactions': len(self.transactions),
            'transfers': transfers,
            'categories': len(self.categories),
            'total_income': total_income,
            'total_expense': total_expense,
            'net_amount': total_income - total_expense,
            'errors': len(self.errors),
        }


class StatementExporter:
    """
    Drive the conversion of a statement export into a dexie document.

    Usage:
        from budjet_export import StatementExporter

        exporter = StatementExporter()
        result = exporter.export_file("input.tsv")
        print(result.to_json())
    """

    def __init__(self, options: Optional[ExportOptions] = None,
                 line_parser: Optional[BaseLineParser] = None,
                 echo: Optional[Callable[[str], None]] = None):
        """
        Initialize the exporter.

        Args:
            options: ExportOptions for this exporter
            line_parser: Parser for one input line, defaults to BankTsvParser
            echo: Receives the human-readable progress and error messages
        """
        self.options = options or ExportOptions()
        self.line_parser = line_parser or BankTsvParser()
        self.echo = echo

    def export_file(self, filepath: Union[str, Path, None] = None) -> ExportResult:
        """
        Export a statement file.

        Args:
            filepath: Input path, defaults to the configured input path

        Returns:
            ExportResult with the accepted transactions and categories

        Raises:
            StartupIOError: if the file cannot be read
        """
        lines = read_lines(filepath or self.options.input_path)
        return self.export_lines(lines)

    def export_lines(self, lines: Iterable[str]) -> ExportResult:
        """
        Export already split lines.

        Ids and categories start afresh on every call.
        """
        ids = itertools.count(1)
        registry = CategoryRegistry()
        transactions = []
        errors = []

        def on_error(error: LineParseError) -> None:
            errors.append(error)
            self._echo(f"ERROR: {error}")

        for transaction in self.line_parser.iter_transactions(lines, ids, on_error):
            registry.assign(transaction)
            transactions.append(transaction)

        self._echo(f"Parsed {len(transactions)} transactions")

        return ExportResult(
            transactions=transactions,
            categories=registry.categories(),
            errors=errors,
            options=self.options,
        )

    def _echo(self, message: str) -> None:
        if self.echo is not None:
            self.echo(message)
