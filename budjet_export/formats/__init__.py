"""
Formats package for statement line parsers.
"""

from .base import BaseLineParser
from .bank_tsv import BankTsvParser

__all__ = ['BaseLineParser', 'BankTsvParser']
