"""
Shared helpers for the exporter tests.
"""

import pytest


def make_line(date="01/02/2023", category="Groceries", description="SUPERMARKET",
              expense="", income="", extra=None):
    """Build one export line with the used columns filled in."""
    fields = [""] * 13
    fields[0] = date
    fields[1] = category
    fields[4] = description
    fields[11] = expense
    fields[12] = income
    if extra:
        fields.extend(extra)
    return "\t".join(fields)


@pytest.fixture
def line():
    return make_line
