"""
Navigation tree model for SiteCurator.

Builds a parent/child view over a flat list of navigation items. The tree is
a read model: it never modifies the items it is built from.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..models import NavigationItem

NO_PARENT = "—"


class NavigationCycleError(ValueError):
    """Raised when a parent assignment would make the navigation graph cyclic."""


class NavigationTree:
    """
    Parent/child structure over navigation items, ordered by position.

    Traversal trusts the parent links: callers must not build a tree from
    items whose parent links form a cycle. Use would_create_cycle() before
    assigning a parent.
    """

    def __init__(self, items: List[NavigationItem]):
        """
        Initialize the tree.

        Args:
            items: Flat list of navigation items
        """
        self.items = list(items)
        self._by_id: Dict[str, NavigationItem] = {
            item.id: item for item in self.items if item.id is not None
        }

    def get(self, item_id: str) -> Optional[NavigationItem]:
        return self._by_id.get(item_id)

    def roots(self) -> List[NavigationItem]:
        """Items without a parent, ordered by position."""
        return self._ordered(item for item in self.items if item.parent_id is None)

    def children(self, item_id: str) -> List[NavigationItem]:
        """Direct children of an item, ordered by position."""
        return self._ordered(item for item in self.items if item.parent_id == item_id)

    def has_children(self, item_id: str) -> bool:
        return any(item.parent_id == item_id for item in self.items)

    def walk(self) -> Iterator[Tuple[NavigationItem, int]]:
        """
        Depth-first traversal from the roots.

        Yields:
            (item, depth) pairs, depth 0 for root items
        """
        for root in self.roots():
            yield from self._walk(root, 0)

    def _walk(self, item: NavigationItem, depth: int) -> Iterator[Tuple[NavigationItem, int]]:
        yield item, depth
        for child in self.children(item.id):
            yield from self._walk(child, depth + 1)

    def to_dict(self) -> List[Dict[str, Any]]:
        """Nested representation of the tree for rendering."""
        return [self._node(root) for root in self.roots()]

    def _node(self, item: NavigationItem) -> Dict[str, Any]:
        node: Dict[str, Any] = {"title": item.title, "href": item.href}
        children = self.children(item.id)
        if children:
            node["children"] = [self._node(child) for child in children]
        return node

    def parent_title(self, parent_id: Optional[str]) -> str:
        """Title of a parent item, or NO_PARENT when absent or unknown."""
        if not parent_id:
            return NO_PARENT
        parent = self._by_id.get(parent_id)
        return parent.title if parent else NO_PARENT

    def would_create_cycle(self, item_id: Optional[str], new_parent_id: Optional[str]) -> bool:
        """
        Check whether giving an item a new parent would create a cycle.

        Args:
            item_id: The item being (re)parented, None for a new item
            new_parent_id: The proposed parent

        Returns:
            True if new_parent_id is the item itself or one of its descendants
        """
        if item_id is None or new_parent_id is None:
            return False

        seen = set()
        current = new_parent_id
        while current is not None and current not in seen:
            if current == item_id:
                return True
            seen.add(current)
            parent = self._by_id.get(current)
            current = parent.parent_id if parent else None
        return False

    @staticmethod
    def _ordered(items) -> List[NavigationItem]:
        return sorted(items, key=lambda item: item.position)
