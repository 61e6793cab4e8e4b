"""
Budjet Export

Converts a tab-separated bank statement export into a dexie bulk-import
document for the budjet web app, assigning transaction ids and category
ids along the way.

Usage:
    from budjet_export import StatementExporter

    exporter = StatementExporter()
    result = exporter.export_file("input.tsv")
    print(result.to_json())
"""

from .exporter import StatementExporter, ExportOptions, ExportResult, read_lines
from .categories import CategoryRegistry
from .models import Transaction, Category
from .output import DexieDocument, OutputGenerator
from .formats.base import BaseLineParser
from .formats.bank_tsv import BankTsvParser
from .errors import (
    ExportError,
    LineParseError,
    DateParseError,
    FieldCountError,
    StartupIOError,
    AmountConsistencyError,
)

__version__ = "0.1.0"
__all__ = [
    "StatementExporter",
    "ExportOptions",
    "ExportResult",
    "read_lines",
    "CategoryRegistry",
    "Transaction",
    "Category",
    "DexieDocument",
    "OutputGenerator",
    "BaseLineParser",
    "BankTsvParser",
    "ExportError",
    "LineParseError",
    "DateParseError",
    "FieldCountError",
    "StartupIOError",
    "AmountConsistencyError",
]
