"""
Tests for category assignment, the export pipeline and the output document.
"""

import json
import pytest
from decimal import Decimal
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from budjet_export import (
    StatementExporter,
    ExportOptions,
    CategoryRegistry,
    StartupIOError,
    AmountConsistencyError,
    DateParseError,
    FieldCountError,
    read_lines,
)
from budjet_export.output import DexieDocument, Table
from conftest import make_line


class TestCategoryRegistry:
    """Tests for category id assignment."""

    def test_first_seen_order(self):
        """Test that ids follow first-seen order from 0."""
        registry = CategoryRegistry()
        assert registry.resolve("Food") == 0
        assert registry.resolve("Rent") == 1
        assert registry.resolve("Food") == 0
        assert [c.name for c in registry.categories()] == ["Food", "Rent"]
        assert len(registry) == 2

    def test_case_is_significant(self):
        """Test that names differing only in case are distinct."""
        registry = CategoryRegistry()
        assert registry.resolve("Food") != registry.resolve("food")
        assert len(registry) == 2


class TestStatementExporter:
    """Tests for the export pipeline."""

    def test_ids_and_categories(self):
        """Test transaction and category ids over a mixed input."""
        lines = [
            make_line(category="Food", expense="10"),
            make_line(date="header"),
            make_line(category=" Food ", expense="2,5"),
            make_line(category="Salary", income="2000"),
            make_line(category="food", expense="1"),
        ]

        result = StatementExporter().export_lines(lines)

        assert [tx.id for tx in result.transactions] == [1, 2, 3, 4]
        assert [tx.category_id for tx in result.transactions] == [0, 0, 1, 2]
        assert [(c.id, c.name) for c in result.categories] == [(0, "Food"), (1, "Salary"), (2, "food")]
        assert len(result.errors) == 1
        assert result.errors[0].line_number == 2

    def test_rejected_lines_do_not_consume_ids(self):
        """Test that ids stay dense across bad dates and short lines."""
        lines = [
            make_line(expense="1"),
            make_line(date="bad"),
            "too\tshort",
            make_line(income="2"),
            make_line(expense="3"),
        ]

        result = StatementExporter().export_lines(lines)

        assert [tx.id for tx in result.transactions] == [1, 2, 3]
        assert [e.line_number for e in result.errors] == [2, 3]
        assert isinstance(result.errors[0], DateParseError)
        assert isinstance(result.errors[1], FieldCountError)

    def test_large_amount_exported_exactly(self):
        """Test that an oversized amount cell serializes without error."""
        result = StatementExporter().export_lines([make_line(expense="1" + "0" * 30)])
        row = json.loads(result.to_json())["data"]["data"][0]["rows"][0]
        assert row["amount"] == "-1" + "0" * 32

    def test_ids_restart_per_run(self):
        """Test that each run numbers transactions from 1."""
        exporter = StatementExporter()
        exporter.export_lines([make_line(expense="1")])
        result = exporter.export_lines([make_line(expense="1")])
        assert result.transactions[0].id == 1
        assert result.categories[0].id == 0

    def test_echo_messages(self):
        """Test the human-readable progress and error messages."""
        messages = []
        exporter = StatementExporter(echo=messages.append)

        exporter.export_lines([make_line(date="xx"), make_line(expense="1")])

        assert len(messages) == 2
        assert messages[0].startswith("ERROR: line 1:")
        assert messages[1] == "Parsed 1 transactions"

    def test_transfers_excluded_from_rows(self):
        """Test that Transfert rows are dropped and rowCount matches."""
        lines = [
            make_line(category="Food", expense="10"),
            make_line(category=" Transfert", expense="500"),
            make_line(category="Salary", income="2000"),
        ]

        doc = StatementExporter().export_lines(lines).to_document().to_dict()
        tables = doc['data']['tables']
        rows = doc['data']['data'][0]['rows']

        assert [row['id'] for row in rows] == [1, 3]
        assert tables[0]['rowCount'] == len(rows) == 2
        # The transfer category is still registered
        assert tables[1]['rowCount'] == 3
        assert {'id': 1, 'name': 'Transfert'} in doc['data']['data'][1]['rows']

    def test_transfer_amounts_not_checked(self):
        """Test that an excluded transfer with no amount does not abort."""
        lines = [make_line(category="Transfert"), make_line(expense="1")]
        doc = StatementExporter().export_lines(lines).to_document()
        assert doc.table("transactions").row_count == 1

    def test_inconsistent_amount_aborts(self):
        """Test that an emitted transaction without amount raises."""
        result = StatementExporter().export_lines([make_line(expense="", income="")])
        with pytest.raises(AmountConsistencyError):
            result.to_json()

    def test_inconsistent_amount_skipped_when_enabled(self):
        """Test the skip-and-log policy for inconsistent amounts."""
        options = ExportOptions(skip_inconsistent_amounts=True)
        lines = [make_line(expense="1", income="1"), make_line(income="3")]

        doc = StatementExporter(options).export_lines(lines).to_document()

        table = doc.table("transactions")
        assert [row['id'] for row in table.rows] == [2]
        assert table.row_count == 1

    def test_transaction_row(self):
        """Test the shape of one transaction row."""
        lines = [make_line(date="5/3/2024", category="Food", description="BAKERY", expense="3,20")]
        rows = StatementExporter().export_lines(lines).to_document().table("transactions").rows

        assert rows == [{
            'date': '2024-03-05',
            'title': 'BAKERY',
            'amount': '-320',
            'id': 1,
            'categoryId': 0,
        }]

    def test_get_summary(self):
        """Test ExportResult.get_summary()."""
        lines = [
            make_line(category="Food", expense="10,50"),
            make_line(category="Salary", income="100"),
            make_line(category="Transfert", expense="40"),
            make_line(date="bad"),
        ]

        summary = StatementExporter().export_lines(lines).get_summary()

        assert summary['total_transactions'] == 3
        assert summary['transfers'] == 1
        assert summary['categories'] == 3
        assert summary['total_income'] == Decimal("100")
        assert summary['total_expense'] == Decimal("10.50")
        assert summary['net_amount'] == Decimal("89.50")
        assert summary['errors'] == 1


class TestReadLines:
    """Tests for reading the input file."""

    def test_missing_file(self, tmp_path):
        """Test that a missing input fails at startup."""
        with pytest.raises(StartupIOError):
            read_lines(tmp_path / "missing.tsv")

    def test_missing_file_from_exporter(self, tmp_path):
        """Test that export_file reports a missing input."""
        options = ExportOptions(input_path=str(tmp_path / "missing.tsv"))
        with pytest.raises(StartupIOError):
            StatementExporter(options).export_file()

    def test_line_terminators_removed(self, tmp_path):
        """Test that LF and CRLF are stripped but trailing tabs kept."""
        path = tmp_path / "input.tsv"
        path.write_bytes(b"a\t\r\nb\t\nc")
        assert list(read_lines(path)) == ["a\t", "b\t", "c"]

    def test_windows_encoding(self, tmp_path):
        """Test that a cp1252 export is decoded."""
        path = tmp_path / "input.tsv"
        path.write_bytes(make_line(category="Sant\xe9", expense="1").encode("cp1252"))

        result = StatementExporter().export_file(path)

        assert result.categories[0].name == "Sant\xe9"

    def test_utf8_bom_dropped(self, tmp_path):
        """Test that a leading UTF-8 BOM does not spoil the first date."""
        path = tmp_path / "input.tsv"
        path.write_bytes(b"\xef\xbb\xbf" + make_line(expense="1").encode("utf-8"))

        result = StatementExporter().export_file(path)

        assert result.errors == []
        assert len(result.transactions) == 1

    def test_export_file(self, tmp_path):
        """Test exporting from a file."""
        path = tmp_path / "input.tsv"
        path.write_text("\n".join([make_line(expense="1"), make_line(income="2")]) + "\n",
                        encoding="utf-8")

        result = StatementExporter().export_file(path)

        assert len(result.transactions) == 2
        assert result.errors == []


class TestDexieDocument:
    """Tests for the dexie document structure."""

    def test_empty_document(self):
        """Test the fixed schema of the export document."""
        doc = StatementExporter().export_lines([]).to_document()

        assert doc.to_dict() == {
            'formatName': 'dexie',
            'formatVersion': 1,
            'data': {
                'databaseName': 'budjet',
                'databaseVersion': 3,
                'tables': [
                    {'name': 'transactions', 'schema': '++id,amount,title', 'rowCount': 0},
                    {'name': 'categories', 'schema': '++id,name', 'rowCount': 0},
                ],
                'data': [
                    {'tableName': 'transactions', 'inbound': True, 'rows': []},
                    {'tableName': 'categories', 'inbound': True, 'rows': []},
                ],
            },
        }

    def test_to_json_single_line(self):
        """Test compact JSON output with unescaped characters."""
        doc = DexieDocument(tables=[Table("categories", "++id,name", [{'id': 0, 'name': 'Café'}])])
        text = doc.to_json()

        assert "\n" not in text
        assert "Café" in text
        assert json.loads(text)['data']['tables'][0]['rowCount'] == 1

    def test_table_lookup(self):
        """Test looking up a table by name."""
        doc = StatementExporter().export_lines([]).to_document()
        assert doc.table("categories").schema == "++id,name"
        with pytest.raises(KeyError):
            doc.table("accounts")
