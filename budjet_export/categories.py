"""
Category registry: assigns stable ids to category names.
"""

import logging
from typing import Dict, List

from budjet_export.models import Category, Transaction

logger = logging.getLogger(__name__)


class CategoryRegistry:
    """
    Insertion-ordered mapping from category name to Category.

    Ids start at 0 and follow first-seen order. Names are compared
    exactly: "Food" and "food" are two categories.
    """

    def __init__(self):
        self._by_name: Dict[str, Category] = {}

    def __len__(self) -> int:
        return len(self._by_name)

    def resolve(self, name: str) -> int:
        """
        Return the id for a category name, registering it if new.

        Args:
            name: Trimmed category name

        Returns:
            The category id
        """
        category = self._by_name.get(name)
        if category is None:
            category = Category(id=len(self._by_name), name=name)
            self._by_name[name] = category
            logger.debug("New category %d: %r", category.id, name)
        return category.id

    def assign(self, transaction: Transaction) -> Transaction:
        """Attach the category id of a transaction's category."""
        transaction.category_id = self.resolve(transaction.category)
        return transaction

    def categories(self) -> List[Category]:
        """All categories in id order."""
        return list(self._by_name.values())
