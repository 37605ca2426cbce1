"""
Tests for the merge policies and the CSV import/export orchestration.
"""

import unittest
from unittest.mock import patch

from sitecurator.codec import DecodedBlock, TabularRow, decode_blocks, encode_blocks
from sitecurator.database import MemoryStore
from sitecurator.models import ContentBlock, NavigationItem, Page
from sitecurator.pages import ContentService
from sitecurator.reconcile import (
    ContentImporter,
    MergePolicy,
    field_merge_local,
    replace_all_blocks,
    replace_all_navigation,
    upsert_by_key,
)
from sitecurator.repository import SiteRepository


class ReconciliationTestCase(unittest.TestCase):
    """Shared fixtures: one page with a hero and a keyed features block."""

    def setUp(self):
        self.repository = SiteRepository(MemoryStore())
        self.page = self.repository.add_page(Page(slug="arts", title="School of Arts"))
        self.hero = self.repository.add_block(ContentBlock(
            page_id=self.page.id, block_type="hero", position=0, content={"title": "Welcome"}
        ))
        self.features = self.repository.add_block(ContentBlock(
            page_id=self.page.id, block_type="features", block_key="top", position=1,
            content={"items": [{"name": "A"}, {"name": "B"}]}
        ))
        self.importer = ContentImporter(self.repository)


class TestReplaceAll(ReconciliationTestCase):
    """Test the Replace-All policy."""

    def test_replaces_every_block(self):
        out_of_band = self.repository.add_block(ContentBlock(
            page_id=self.page.id, block_type="cta", position=2, content={"title": "Apply"}
        ))
        decoded = [DecodedBlock(block_type="hero", block_key=None, position=0, content={"title": "Hello"})]

        result = replace_all_blocks(self.repository, self.page.id, decoded)

        self.assertEqual((result.deleted, result.inserted), (3, 1))
        blocks = self.repository.list_blocks(self.page.id)
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].content, {"title": "Hello"})
        self.assertNotEqual(blocks[0].id, self.hero.id)
        self.assertIsNone(self.repository.get_block(out_of_band.id))

    def test_leaves_other_pages_alone(self):
        other = self.repository.add_page(Page(slug="science", title="Science"))
        self.repository.add_block(ContentBlock(page_id=other.id, block_type="hero"))

        replace_all_blocks(self.repository, self.page.id, [])

        self.assertEqual(self.repository.list_blocks(self.page.id), [])
        self.assertEqual(len(self.repository.list_blocks(other.id)), 1)

    def test_is_idempotent(self):
        text = self.importer.export_page(self.page.id)

        self.importer.import_page(text, self.page.id, MergePolicy.REPLACE_ALL)
        self.importer.import_page(text, self.page.id, MergePolicy.REPLACE_ALL)

        blocks = self.repository.list_blocks(self.page.id)
        self.assertEqual([(b.block_type, b.block_key, b.position) for b in blocks],
                         [("hero", None, 0), ("features", "top", 1)])

    def test_navigation_replace_remaps_parents(self):
        self.repository.add_navigation(NavigationItem(title="Old"))
        imported = [
            NavigationItem(id="a", title="About", href="/about", position=0),
            NavigationItem(id="b", title="History", href="/about/history", parent_id="a", position=0),
        ]

        result = replace_all_navigation(self.repository, imported)

        self.assertEqual((result.deleted, result.inserted), (1, 2))
        items = {item.title: item for item in self.repository.list_navigation()}
        self.assertEqual(set(items), {"About", "History"})
        self.assertEqual(items["History"].parent_id, items["About"].id)
        self.assertNotEqual(items["About"].id, "a")


class TestFieldMergeLocal(ReconciliationTestCase):
    """Test the Field-Merge-Local policy."""

    def test_overwrites_single_fields(self):
        blocks = self.repository.list_blocks(self.page.id)
        rows = [
            TabularRow(block_type="hero", block_key=None, position=0, field_name="subtitle", value="New"),
            TabularRow(block_type="hero", block_key=None, position=0, field_name="title", value="Hi"),
        ]

        merged, result = field_merge_local(blocks, rows)

        self.assertEqual(result.merged, 2)
        self.assertEqual(merged[0].content, {"title": "Hi", "subtitle": "New"})
        # Inputs are untouched and nothing is persisted
        self.assertEqual(blocks[0].content, {"title": "Welcome"})
        self.assertEqual(self.repository.get_block(self.hero.id).content, {"title": "Welcome"})

    def test_unmatched_rows_are_ignored(self):
        blocks = self.repository.list_blocks(self.page.id)
        rows = [
            TabularRow(block_type="hero", block_key=None, position=5, field_name="title", value="X"),
            TabularRow(block_type="cta", block_key=None, position=0, field_name="title", value="Y"),
        ]

        merged, result = field_merge_local(blocks, rows)

        self.assertEqual((result.merged, result.skipped), (0, 2))
        self.assertEqual(len(merged), 2)
        self.assertEqual([b.content for b in merged], [b.content for b in blocks])

    def test_key_is_type_and_position(self):
        """Test that block_key is ignored and position decides the match."""
        blocks = self.repository.list_blocks(self.page.id)
        rows = [
            TabularRow(block_type="features", block_key="other", position=1, field_name="title", value="T"),
            TabularRow(block_type="features", block_key="top", position=2, field_name="title", value="U"),
        ]

        merged, result = field_merge_local(blocks, rows)

        self.assertEqual((result.merged, result.skipped), (1, 1))
        self.assertEqual(merged[1].content["title"], "T")

    def test_merge_then_save(self):
        blocks = self.repository.list_blocks(self.page.id)
        text = '"block_type","block_key","position","field_name","value"\n"hero","","0","title","Saved"'

        merged, _ = self.importer.merge_into(blocks, text)
        ContentService(self.repository).save_blocks(merged)

        self.assertEqual(self.repository.get_block(self.hero.id).content, {"title": "Saved"})


class TestUpsertByKey(ReconciliationTestCase):
    """Test the Upsert-by-Key policy."""

    def test_position_is_not_part_of_key(self):
        decoded = [DecodedBlock(block_type="features", block_key="top", position=7,
                                content={"title": "Moved"})]

        result = upsert_by_key(self.repository, decoded, page_id=self.page.id)

        self.assertEqual((result.updated, result.inserted), (1, 0))
        stored = self.repository.get_block(self.features.id)
        self.assertEqual(stored.position, 7)
        self.assertEqual(stored.content, {"title": "Moved"})

    def test_block_key_distinguishes_records(self):
        decoded = [DecodedBlock(block_type="features", block_key="bottom", position=1,
                                content={"title": "Second grid"})]

        result = upsert_by_key(self.repository, decoded, page_id=self.page.id)

        self.assertEqual((result.updated, result.inserted), (0, 1))
        self.assertEqual(self.repository.get_block(self.features.id).content,
                         {"items": [{"name": "A"}, {"name": "B"}]})
        self.assertEqual(len(self.repository.list_blocks(self.page.id)), 3)

    def test_empty_and_missing_key_match(self):
        decoded = [DecodedBlock(block_type="hero", block_key="", position=0, content={"title": "Again"})]

        upsert_by_key(self.repository, decoded, page_id=self.page.id)

        self.assertEqual(self.repository.get_block(self.hero.id).content, {"title": "Again"})
        self.assertEqual(len(self.repository.list_blocks(self.page.id)), 2)

    def test_ambiguous_match_picks_first_by_position(self):
        duplicate = self.repository.add_block(ContentBlock(
            page_id=self.page.id, block_type="hero", position=5, content={"title": "Dup"}
        ))
        decoded = [DecodedBlock(block_type="hero", block_key=None, position=0, content={"title": "One"})]

        upsert_by_key(self.repository, decoded, page_id=self.page.id)

        self.assertEqual(self.repository.get_block(self.hero.id).content, {"title": "One"})
        self.assertEqual(self.repository.get_block(duplicate.id).content, {"title": "Dup"})

    def test_unknown_page_slug_skipped(self):
        decoded = [DecodedBlock(page_slug="missing", block_type="hero", block_key=None, position=0,
                                content={"title": "Lost"})]

        result = upsert_by_key(self.repository, decoded)

        self.assertEqual(result.skipped, 1)
        self.assertEqual(len(self.repository.list_blocks()), 2)

    def test_site_import_round_trip_is_idempotent(self):
        other = self.repository.add_page(Page(slug="science", title="Science"))
        self.repository.add_block(ContentBlock(page_id=other.id, block_type="cta", content={"title": "Apply"}))
        text = self.importer.export_site()

        first = self.importer.import_site(text)
        second = self.importer.import_site(text)

        self.assertTrue(first.success)
        self.assertEqual((second.updated, second.inserted), (3, 0))
        self.assertEqual(len(self.repository.list_blocks()), 3)
        self.assertEqual(self.repository.get_block(self.features.id).content["items"],
                         [{"name": "A"}, {"name": "B"}])


class TestContentImporter(ReconciliationTestCase):
    """Test export/import orchestration and reporting."""

    def test_end_to_end_page_round_trip(self):
        text = self.importer.export_page(self.page.id)
        fresh = self.repository.add_page(Page(slug="copy", title="Copy"))

        result = self.importer.import_page(text, fresh.id, MergePolicy.UPSERT_BY_KEY)

        self.assertTrue(result.success)
        self.assertEqual(result.message, "import succeeded")
        blocks = self.repository.list_blocks(fresh.id)
        self.assertEqual(len(blocks), 2)
        hero, features = blocks
        self.assertEqual((hero.block_type, hero.block_key, hero.content), ("hero", None, {"title": "Welcome"}))
        self.assertEqual(features.block_key, "top")
        self.assertEqual(features.content["items"], [{"name": "A"}, {"name": "B"}])

    def test_site_export_ignored_page_slug_on_page_import(self):
        text = self.importer.export_site()
        fresh = self.repository.add_page(Page(slug="copy", title="Copy"))

        result = self.importer.import_page(text, fresh.id, MergePolicy.REPLACE_ALL)

        self.assertEqual(result.inserted, 2)
        self.assertEqual(len(self.repository.list_blocks(self.page.id)), 2)

    def test_store_failure_reported(self):
        text = self.importer.export_page(self.page.id)

        with patch.object(self.repository, "add_block", side_effect=RuntimeError("disk full")):
            result = self.importer.import_page(text, self.page.id, MergePolicy.REPLACE_ALL)

        self.assertFalse(result.success)
        self.assertEqual(result.message, "import failed: disk full")

    def test_unknown_page(self):
        result = self.importer.import_page("", "missing", MergePolicy.UPSERT_BY_KEY)

        self.assertFalse(result.success)
        self.assertIn("not found", result.message)

    def test_field_merge_local_is_not_a_store_import(self):
        with self.assertRaises(ValueError):
            self.importer.import_page("", self.page.id, MergePolicy.FIELD_MERGE_LOCAL)

    def test_import_with_dispatch(self):
        text = encode_blocks(
            [ContentBlock(page_id=self.page.id, block_type="cta", content={"title": "Apply"})],
            page_slugs={self.page.id: "arts"}
        )

        rejected = self.importer.import_with(MergePolicy.REPLACE_ALL, text)
        accepted = self.importer.import_with(MergePolicy.UPSERT_BY_KEY, text)

        self.assertFalse(rejected.success)
        self.assertTrue(accepted.success)
        self.assertEqual(accepted.inserted, 1)

    def test_navigation_round_trip(self):
        self.repository.add_navigation(NavigationItem(title="About", href="/about"))
        text = self.importer.export_navigation()

        result = self.importer.import_navigation(text)

        self.assertTrue(result.success)
        items = self.repository.list_navigation()
        self.assertEqual([(i.title, i.href) for i in items], [("About", "/about")])

    def test_decoded_structure_matches_export(self):
        decoded = decode_blocks(self.importer.export_page(self.page.id))

        self.assertEqual([b.content for b in decoded], [self.hero.content, self.features.content])


class TestContentService(unittest.TestCase):
    """Test page editor operations."""

    def setUp(self):
        self.repository = SiteRepository(MemoryStore())
        self.service = ContentService(self.repository)

    def test_create_page_normalizes_slug(self):
        page = self.service.create_page("Campus Life", "Campus Life")

        self.assertEqual(page.slug, "campus-life")
        self.assertEqual(page.status, "draft")

    def test_add_block_appends_with_defaults(self):
        page = self.service.create_page("Arts", "arts")

        first = self.service.add_block(page.id, "cta")
        second = self.service.add_block(page.id, "content")

        self.assertEqual((first.position, second.position), (0, 1))
        self.assertEqual(second.content, {"body": ""})
        with self.assertRaises(ValueError):
            self.service.add_block(page.id, "carousel")

    def test_save_blocks_persists_css_and_position(self):
        page = self.service.create_page("Arts", "arts")
        block = self.service.add_block(page.id, "custom_html")
        edited = block.model_copy(update={"custom_css": ".x { color: red; }", "position": 4,
                                          "content": {"html": "<p>Hi</p>", "css": ""}})

        self.assertEqual(self.service.save_blocks([edited]), 1)

        stored = self.repository.get_block(block.id)
        self.assertEqual(stored.custom_css, ".x { color: red; }")
        self.assertEqual(stored.position, 4)
        self.assertEqual(stored.content["html"], "<p>Hi</p>")

    def test_delete_page_cascades(self):
        page = self.service.create_page("Arts", "arts")
        self.service.add_block(page.id, "hero")

        self.assertEqual(self.service.delete_page(page.id), 1)
        self.assertEqual(self.repository.list_blocks(), [])


if __name__ == '__main__':
    unittest.main()
