"""
Output generation for the dexie bulk-import format.

The document is assembled bottom-up: rows first, then the table
declarations sized from the rows actually emitted.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence

from budjet_export.errors import AmountConsistencyError
from budjet_export.models import Category, Transaction, TRANSFER_CATEGORY

logger = logging.getLogger(__name__)

FORMAT_NAME = "dexie"
FORMAT_VERSION = 1
DATABASE_NAME = "budjet"
DATABASE_VERSION = 3

TRANSACTIONS_TABLE = "transactions"
TRANSACTIONS_SCHEMA = "++id,amount,title"
CATEGORIES_TABLE = "categories"
CATEGORIES_SCHEMA = "++id,name"


@dataclass
class Table:
    """One table: its declaration and its rows."""
    name: str
    schema: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    inbound: bool = True

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def declaration(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'schema': self.schema,
            'rowCount': self.row_count,
        }

    def content(self) -> Dict[str, Any]:
        return {
            'tableName': self.name,
            'inbound': self.inbound,
            'rows': self.rows,
        }


@dataclass
class DexieDocument:
    """A complete dexie export document."""
    tables: List[Table]
    database_name: str = DATABASE_NAME
    database_version: int = DATABASE_VERSION

    def table(self, name: str) -> Table:
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-ready export structure."""
        return {
            'formatName': FORMAT_NAME,
            'formatVersion': FORMAT_VERSION,
            'data': {
                'databaseName': self.database_name,
                'databaseVersion': self.database_version,
                'tables': [table.declaration() for table in self.tables],
                'data': [table.content() for table in self.tables],
            },
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """
        Serialize the document.

        Args:
            indent: JSON indentation, None for a single compact line

        Returns:
            The JSON text
        """
        separators = (',', ':') if indent is None else None
        return json.dumps(self.to_dict(), indent=indent, separators=separators, ensure_ascii=False)


class OutputGenerator:
    """Build a DexieDocument from parsed transactions and categories."""

    def __init__(self, transactions: Sequence[Transaction], categories: Sequence[Category],
                 excluded_category: str = TRANSFER_CATEGORY,
                 database_name: str = DATABASE_NAME,
                 database_version: int = DATABASE_VERSION,
                 skip_inconsistent: bool = False):
        """
        Initialize the output generator.

        Args:
            transactions: Transactions with their category ids assigned
            categories: Categories in id order
            excluded_category: Transactions in this category are left out
            database_name: Name of the target database
            database_version: Schema version of the target database
            skip_inconsistent: Drop transactions whose amounts are
                inconsistent instead of raising
        """
        self.transactions = transactions
        self.categories = categories
        self.excluded_category = excluded_category
        self.database_name = database_name
        self.database_version = database_version
        self.skip_inconsistent = skip_inconsistent

    def transaction_rows(self) -> List[Dict[str, Any]]:
        """
        Rows for the transactions table, transfers excluded.

        Raises:
            AmountConsistencyError: if an emitted transaction has neither
                or both amounts and skip_inconsistent is off
        """
        rows = []
        for tx in self.transactions:
            if tx.is_transfer(self.excluded_category):
                logger.debug("Skipping transfer %d", tx.id)
                continue
            try:
                rows.append(tx.to_row())
            except AmountConsistencyError as e:
                if not self.skip_inconsistent:
                    raise
                logger.warning("Skipping transaction: %s", e)
        return rows

    def category_rows(self) -> List[Dict[str, Any]]:
        return [category.to_row() for category in self.categories]

    def build(self) -> DexieDocument:
        """Assemble the export document."""
        return DexieDocument(
            tables=[
                Table(TRANSACTIONS_TABLE, TRANSACTIONS_SCHEMA, self.transaction_rows()),
                Table(CATEGORIES_TABLE, CATEGORIES_SCHEMA, self.category_rows()),
            ],
            database_name=self.database_name,
            database_version=self.database_version,
        )
