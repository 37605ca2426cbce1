"""
Navigation item operations for SiteCurator.

Wraps navigation writes with parent validation and page synchronization.
"""

import logging
from typing import Any, Optional, Tuple

from ..config import config
from ..database.base import RecordNotFoundError, NAVIGATION_TABLE
from ..models import NavigationItem
from ..repository import SiteRepository
from .sync import PageSynchronizer, SyncResult
from .tree import NavigationTree, NavigationCycleError


class NavigationService:
    """
    Creates, updates and deletes navigation items and keeps their pages in step.

    By default the item write and the page write are two independent calls:
    a failed page write leaves the item in place and is reported through
    SyncResult.error. In transactional mode both writes share one store
    transaction and a page failure rolls back the item and is raised.
    """

    def __init__(
        self,
        repository: SiteRepository,
        synchronizer: Optional[PageSynchronizer] = None,
        transactional: Optional[bool] = None
    ):
        """
        Initialize the navigation service.

        Args:
            repository: Site repository
            synchronizer: Page synchronizer (one is built from the repository if omitted)
            transactional: Share one transaction between item and page writes
                (defaults to the sync.transactional setting)
        """
        self.repository = repository
        self.synchronizer = synchronizer or PageSynchronizer(repository)
        self.transactional = config.transactional_sync if transactional is None else transactional

    def tree(self) -> NavigationTree:
        """Build the navigation tree from the stored items."""
        return NavigationTree(self.repository.list_navigation())

    def create_item(self, item: NavigationItem) -> Tuple[NavigationItem, SyncResult]:
        """
        Store a new navigation item and create its mirrored page.

        An item created without an explicit position is appended after the
        existing items.

        Returns:
            The stored item and the synchronization outcome

        Raises:
            RecordNotFoundError: If the parent does not exist
        """
        tree = self.tree()
        self._check_parent(tree, item.id, item.parent_id)

        if "position" not in item.model_fields_set:
            item = item.model_copy(update={"position": len(tree.items)})

        if self.transactional:
            with self.repository.store.transaction():
                created = self.repository.add_navigation(item)
                result = self.synchronizer.on_create(created, strict=True)
        else:
            created = self.repository.add_navigation(item)
            result = self.synchronizer.on_create(created)

        logging.info(f"Created navigation item '{created.title}' ({created.id})")
        return created, result

    def update_item(self, item_id: str, **fields: Any) -> Tuple[NavigationItem, SyncResult]:
        """
        Update a navigation item. The mirrored page is not touched.

        Raises:
            RecordNotFoundError: If the item or the new parent does not exist
            NavigationCycleError: If the new parent is the item or one of its descendants
            ValueError: If a field is not a navigation item field, or is the id
        """
        unknown = [key for key in fields if key not in NavigationItem.model_fields or key == "id"]
        if unknown:
            raise ValueError(f"Cannot update navigation field(s): {', '.join(sorted(unknown))}")

        tree = self.tree()
        if tree.get(item_id) is None:
            raise RecordNotFoundError(NAVIGATION_TABLE, item_id)
        if "parent_id" in fields:
            self._check_parent(tree, item_id, fields["parent_id"])

        # Validate through the model before writing
        current = tree.get(item_id)
        values = NavigationItem.model_validate({**current.model_dump(), **fields}).model_dump()
        changes = {key: values[key] for key in fields}

        updated = self.repository.update_navigation(item_id, changes)
        return updated, self.synchronizer.on_update(updated)

    def delete_item(self, item_id: str) -> SyncResult:
        """
        Delete a navigation item and the page it mirrors.

        Children are neither deleted nor re-parented: they keep pointing at the
        deleted item and drop out of the tree. Their ids are reported in the
        result.

        Raises:
            RecordNotFoundError: If the item does not exist
        """
        item = self.repository.get_navigation(item_id)
        if item is None:
            raise RecordNotFoundError(NAVIGATION_TABLE, item_id)

        orphaned = [child.id for child in self.tree().children(item_id)]
        if orphaned:
            logging.warning(
                f"Deleting navigation item '{item.title}' orphans {len(orphaned)} child item(s)"
            )

        if self.transactional:
            with self.repository.store.transaction():
                self.repository.delete_navigation(item_id)
                result = self.synchronizer.on_delete(item, strict=True)
        else:
            self.repository.delete_navigation(item_id)
            result = self.synchronizer.on_delete(item)

        result.orphaned_ids = orphaned
        logging.info(f"Deleted navigation item '{item.title}' ({item_id})")
        return result

    def _check_parent(self, tree: NavigationTree, item_id: Optional[str], parent_id: Optional[str]) -> None:
        if parent_id is None:
            return
        if tree.get(parent_id) is None:
            raise RecordNotFoundError(NAVIGATION_TABLE, parent_id)
        if parent_id == item_id or tree.would_create_cycle(item_id, parent_id):
            raise NavigationCycleError(
                f"Navigation item {parent_id} cannot be the parent of {item_id}"
            )
