"""
Bubble Hierarchy Transform — flat budget items to a root → category → item tree.

The tree drives a circle-packing chart. Leaf colors are derived from a
SHA-256 digest of the label so the same label renders the same color in
every process; Python's ``hash()`` is salted per interpreter and is not
used.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from practicepilot.config import BubbleConfig
from practicepilot.models.budget import BudgetItem
from practicepilot.models.insight import BubbleNode

logger = logging.getLogger("practicepilot.analyzers.bubble")

# Color of the root node
ROOT_COLOR = "#34495e"


class BubbleHierarchyBuilder:
    """
    Build bubble-chart hierarchies.

    Example usage:
        builder = BubbleHierarchyBuilder()
        root = builder.from_items(items)
        payload = root.to_dict()
    """

    def __init__(self, config: BubbleConfig | None = None):
        self.config = config or BubbleConfig()

    def label_color(self, label: str) -> str:
        """Deterministic palette color for ``label``."""
        digest = hashlib.sha256(label.encode("utf-8")).digest()
        index = int.from_bytes(digest[:8], "big") % len(self.config.palette)
        return self.config.palette[index]

    def category_color(self, category: str) -> str:
        return self.config.category_colors.get(category) or self.label_color(category)

    def _root(self, children: list[BubbleNode]) -> BubbleNode:
        return BubbleNode(name=self.config.root_name, color=ROOT_COLOR, children=children)

    @staticmethod
    def _percent_used(item: BudgetItem) -> float | None:
        if item.percent_used is not None:
            return round(max(0.0, item.percent_used), 1)
        spent = item.spent
        allocated = item.allocated
        if spent is None or allocated <= 0:
            return None
        return round(min(100.0, max(0.0, spent) / allocated * 100), 1)

    def from_items(self, items: Iterable[BudgetItem | Mapping[str, Any]]) -> BubbleNode:
        """
        Group items by category, one leaf per item.

        Args:
            items: BudgetItem instances or raw mappings (camelCase or
                snake_case keys).

        Returns:
            Root node; ``children`` is an empty list for empty input.
        """
        categories: dict[str, list[BubbleNode]] = {}
        for raw in items:
            item = raw if isinstance(raw, BudgetItem) else BudgetItem.model_validate(raw)
            leaf = BubbleNode(
                name=item.label,
                color=self.label_color(item.label),
                value=max(0.0, item.allocated),
                percent_used=self._percent_used(item),
            )
            categories.setdefault(item.category, []).append(leaf)

        children = [
            BubbleNode(name=category, color=self.category_color(category), children=leaves)
            for category, leaves in categories.items()
        ]
        logger.debug(f"Bubble hierarchy: {len(children)} categories, {sum(len(v) for v in categories.values())} items")
        return self._root(children)

    def from_category_totals(self, totals: Mapping[str, float]) -> BubbleNode:
        """
        Build a tree from a category → amount map.

        Each category gets a single leaf carrying its amount, so the leaf
        total equals the sum of the map.
        """
        children = [
            BubbleNode(
                name=category,
                color=self.category_color(category),
                children=[
                    BubbleNode(name=category, color=self.label_color(category), value=max(0.0, amount)),
                ],
            )
            for category, amount in totals.items()
        ]
        return self._root(children)
