"""
Tests for navigation item lifecycle and page synchronization.

Covers page mirroring on create and delete, the update no-op, best-effort
failure handling, orphaned children, cycle checks and transactional mode.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from sitecurator.database import DatabaseManager, MemoryStore, RecordNotFoundError
from sitecurator.models import ContentBlock, NavigationItem, Page
from sitecurator.navigation import (
    NavigationCycleError,
    NavigationService,
    PageSynchronizer,
    SyncAction,
)
from sitecurator.repository import SiteRepository


class TestPageSynchronizer(unittest.TestCase):
    """Test the create/delete/update synchronization rules."""

    def setUp(self):
        self.repository = SiteRepository(MemoryStore())
        self.service = NavigationService(
            self.repository,
            PageSynchronizer(self.repository, site_name="Test College"),
            transactional=False
        )

    def test_create_mirrors_draft_page(self):
        """Test that a new internal item gets a draft page."""
        item, result = self.service.create_item(NavigationItem(title="Admissions", href="/admissions"))

        self.assertEqual(result.action, SyncAction.CREATE)
        self.assertTrue(result.ok)
        page = self.repository.find_page_by_slug("admissions")
        self.assertIsNotNone(page)
        self.assertEqual(page.id, result.page_id)
        self.assertEqual(page.title, "Admissions")
        self.assertEqual(page.status, "draft")
        self.assertEqual(page.description, "Admissions - Test College")
        self.assertEqual(page.meta_title, "Admissions")

    def test_create_without_href_uses_title_slug(self):
        item, result = self.service.create_item(NavigationItem(title="School of Arts"))

        self.assertEqual(result.slug, "school-of-arts")
        self.assertIsNone(item.href)
        self.assertIsNotNone(self.repository.find_page_by_slug("school-of-arts"))

    def test_create_external_link_has_no_page(self):
        item, result = self.service.create_item(NavigationItem(title="Partner", href="https://example.com"))

        self.assertEqual(result.action, SyncAction.NOOP)
        self.assertIsNotNone(item.id)
        self.assertEqual(self.repository.list_pages(), [])

    def test_create_is_idempotent_per_slug(self):
        """Test that items sharing a target share one page."""
        self.service.create_item(NavigationItem(title="Contact", href="/page/contact"))
        _, second = self.service.create_item(NavigationItem(title="Reach us", href="/contact"))

        self.assertEqual(second.action, SyncAction.NOOP)
        self.assertEqual(len(self.repository.list_pages()), 1)
        self.assertEqual(len(self.repository.list_navigation()), 2)

    def test_create_appends_position(self):
        first, _ = self.service.create_item(NavigationItem(title="One"))
        second, _ = self.service.create_item(NavigationItem(title="Two"))
        pinned, _ = self.service.create_item(NavigationItem(title="Three", position=0))

        self.assertEqual((first.position, second.position, pinned.position), (0, 1, 0))

    def test_delete_cascades_page_and_blocks(self):
        """Test that deleting an item deletes its page and the page's blocks."""
        item, result = self.service.create_item(NavigationItem(title="Research", href="/research"))
        self.repository.add_block(ContentBlock(page_id=result.page_id, block_type="hero"))
        self.repository.add_block(ContentBlock(page_id=result.page_id, block_type="cta", position=1))

        deleted = self.service.delete_item(item.id)

        self.assertEqual(deleted.action, SyncAction.DELETE)
        self.assertIsNone(self.repository.get_navigation(item.id))
        self.assertIsNone(self.repository.find_page_by_slug("research"))
        self.assertEqual(self.repository.list_blocks(), [])

    def test_delete_without_href_keeps_page(self):
        item, _ = self.service.create_item(NavigationItem(title="School of Arts"))

        result = self.service.delete_item(item.id)

        self.assertEqual(result.action, SyncAction.NOOP)
        self.assertIsNotNone(self.repository.find_page_by_slug("school-of-arts"))

    def test_delete_uses_current_values(self):
        """Test that delete targets the page derived from the edited href."""
        item, _ = self.service.create_item(NavigationItem(title="Library", href="/library"))
        self.repository.add_page(Page(slug="archives", title="Archives"))

        self.service.update_item(item.id, href="/archives")
        self.service.delete_item(item.id)

        self.assertIsNotNone(self.repository.find_page_by_slug("library"))
        self.assertIsNone(self.repository.find_page_by_slug("archives"))

    def test_delete_missing_page_is_noop(self):
        item, _ = self.service.create_item(NavigationItem(title="Partner", href="https://example.com"))
        self.service.update_item(item.id, href="/nowhere")

        result = self.service.delete_item(item.id)

        self.assertEqual(result.action, SyncAction.NOOP)
        self.assertEqual(result.slug, "nowhere")

    def test_update_does_not_sync(self):
        item, _ = self.service.create_item(NavigationItem(title="Events", href="/events"))

        updated, result = self.service.update_item(item.id, title="News & Events", href="/news")

        self.assertEqual(result.action, SyncAction.NOOP)
        self.assertEqual(updated.title, "News & Events")
        self.assertIsNotNone(self.repository.find_page_by_slug("events"))
        self.assertIsNone(self.repository.find_page_by_slug("news"))

    def test_delete_orphans_children(self):
        """Test that children are kept and reported, not re-parented."""
        parent, _ = self.service.create_item(NavigationItem(title="About", href="/about"))
        child, _ = self.service.create_item(NavigationItem(title="History", href="/about/history", parent_id=parent.id))

        result = self.service.delete_item(parent.id)

        self.assertEqual(result.orphaned_ids, [child.id])
        remaining = self.repository.get_navigation(child.id)
        self.assertEqual(remaining.parent_id, parent.id)
        self.assertIsNotNone(self.repository.find_page_by_slug("about/history"))

    def test_delete_unknown_item(self):
        with self.assertRaises(RecordNotFoundError):
            self.service.delete_item("missing")

    def test_update_rejects_unknown_field(self):
        """Test that a misspelled field is named in the error and nothing is written."""
        item, _ = self.service.create_item(NavigationItem(title="Events", href="/events"))

        with self.assertRaises(ValueError) as context:
            self.service.update_item(item.id, titel="News")

        self.assertIn("titel", str(context.exception))
        self.assertEqual(self.repository.get_navigation(item.id).title, "Events")


class TestSyncFailures(unittest.TestCase):
    """Test best-effort handling of page store failures."""

    def setUp(self):
        self.repository = SiteRepository(MemoryStore())
        self.service = NavigationService(self.repository, transactional=False)

    def test_create_failure_keeps_item(self):
        with patch.object(self.repository, "add_page", side_effect=RuntimeError("store unavailable")):
            item, result = self.service.create_item(NavigationItem(title="Alumni", href="/alumni"))

        self.assertTrue(result.partially_applied)
        self.assertEqual(result.action, SyncAction.CREATE)
        self.assertIn("store unavailable", result.error)
        self.assertIsNotNone(self.repository.get_navigation(item.id))
        self.assertEqual(self.repository.list_pages(), [])

    def test_delete_failure_keeps_item_deleted(self):
        item, _ = self.service.create_item(NavigationItem(title="Alumni", href="/alumni"))

        with patch.object(self.repository, "delete_page", side_effect=RuntimeError("store unavailable")):
            result = self.service.delete_item(item.id)

        self.assertTrue(result.partially_applied)
        self.assertIsNone(self.repository.get_navigation(item.id))
        self.assertIsNotNone(self.repository.find_page_by_slug("alumni"))

    def test_item_store_failure_propagates(self):
        with patch.object(self.repository, "add_navigation", side_effect=RuntimeError("down")):
            with self.assertRaises(RuntimeError):
                self.service.create_item(NavigationItem(title="Alumni", href="/alumni"))


class TestParentValidation(unittest.TestCase):
    """Test parent checks on navigation writes."""

    def setUp(self):
        self.repository = SiteRepository(MemoryStore())
        self.service = NavigationService(self.repository, transactional=False)
        self.root, _ = self.service.create_item(NavigationItem(title="About", href="/about"))
        self.child, _ = self.service.create_item(
            NavigationItem(title="History", href="/about/history", parent_id=self.root.id)
        )

    def test_cycle_rejected(self):
        with self.assertRaises(NavigationCycleError):
            self.service.update_item(self.root.id, parent_id=self.child.id)
        with self.assertRaises(NavigationCycleError):
            self.service.update_item(self.root.id, parent_id=self.root.id)

    def test_unknown_parent_rejected(self):
        with self.assertRaises(RecordNotFoundError):
            self.service.create_item(NavigationItem(title="Lost", parent_id="missing"))

    def test_reparent_to_root(self):
        updated, _ = self.service.update_item(self.child.id, parent_id=None)

        self.assertIsNone(updated.parent_id)
        self.assertEqual(len(self.service.tree().roots()), 2)


class TestTransactionalSync(unittest.TestCase):
    """Test transactional mode against DuckDB."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db = DatabaseManager(str(Path(self.temp_dir) / "sync.db"))
        self.db.connect()
        self.db.initialize_database()
        self.repository = SiteRepository(self.db)
        self.service = NavigationService(self.repository, transactional=True)

    def tearDown(self):
        self.db.disconnect()
        for path in Path(self.temp_dir).iterdir():
            path.unlink()
        os.rmdir(self.temp_dir)

    def test_create_commits_item_and_page(self):
        item, result = self.service.create_item(NavigationItem(title="Campus Life", href="/campus-life"))

        self.assertTrue(result.ok)
        self.assertIsNotNone(self.repository.get_navigation(item.id))
        self.assertIsNotNone(self.repository.find_page_by_slug("campus-life"))

    def test_page_failure_rolls_back_item(self):
        with patch.object(self.repository, "add_page", side_effect=RuntimeError("store unavailable")):
            with self.assertRaises(RuntimeError):
                self.service.create_item(NavigationItem(title="Campus Life", href="/campus-life"))

        self.assertEqual(self.repository.list_navigation(), [])

    def test_delete_commits_both(self):
        item, _ = self.service.create_item(NavigationItem(title="Campus Life", href="/campus-life"))

        result = self.service.delete_item(item.id)

        self.assertEqual(result.action, SyncAction.DELETE)
        self.assertEqual(self.repository.list_navigation(), [])
        self.assertEqual(self.repository.list_pages(), [])


if __name__ == '__main__':
    unittest.main()
