"""
Command-line interface for the statement exporter.

Usage:
    budjet-export > export.json
    python -m budjet_export > export.json

Reads ./input.tsv from the current directory and writes the dexie
import document to standard output, after the progress messages.
"""

import argparse
import logging
import sys
from typing import List, Optional

from budjet_export.errors import AmountConsistencyError, StartupIOError
from budjet_export.exporter import StatementExporter, DEFAULT_INPUT_PATH


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='budjet-export',
        description=f'Convert the bank export {DEFAULT_INPUT_PATH} to a dexie import document on stdout'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    exporter = StatementExporter(echo=print)

    try:
        result = exporter.export_file()
        print(result.to_json())
    except (StartupIOError, AmountConsistencyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
