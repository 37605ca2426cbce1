#!/usr/bin/env python3
"""
SiteCurator - Site Content Management Core

Command line entry point for the admin tasks around the content store:
navigation maintenance and CSV export/import of navigation and page content.
"""

import logging
import sys
import argparse
from pathlib import Path
from typing import Optional

from sitecurator.config import config
from sitecurator.database import DatabaseManager
from sitecurator.models import NavigationItem, MenuLocation
from sitecurator.navigation import NavigationService
from sitecurator.reconcile import ContentImporter, MergePolicy, ImportResult
from sitecurator.repository import SiteRepository

# Shown by show-nav for items without a link
NO_HREF = "no link"


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def write_export(text: str, output: Optional[str], default_name: str) -> Path:
    """
    Write exported CSV to a file.

    Args:
        text: CSV content
        output: Explicit output path, or None for the configured export directory
        default_name: File name used inside the export directory

    Returns:
        The path written
    """
    path = Path(output) if output else Path(config.export_directory) / default_name
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    logging.info(f"Exported {path}")
    return path


def read_import(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def report(result: ImportResult) -> int:
    """Print an import result and return the process exit code."""
    print(result.message)
    print(
        f"  inserted={result.inserted} updated={result.updated} deleted={result.deleted} "
        f"merged={result.merged} skipped={result.skipped}"
    )
    return 0 if result.success else 1


def run_command(args, db: DatabaseManager) -> int:
    """Execute one subcommand against an open database."""
    repository = SiteRepository(db)
    importer = ContentImporter(repository)
    navigation = NavigationService(repository)

    if args.command == "init":
        db.initialize_database()
        print(f"Database ready: {db.db_path}")
        return 0

    if args.command == "export-page":
        page = repository.find_page_by_slug(args.slug)
        if page is None:
            print(f"Page not found: {args.slug}")
            return 1
        write_export(importer.export_page(page.id), args.output, f"{page.slug.replace('/', '_')}-content.csv")
        return 0

    if args.command == "export-site":
        write_export(importer.export_site(), args.output, "pages-content.csv")
        return 0

    if args.command == "export-nav":
        write_export(importer.export_navigation(), args.output, "navigation.csv")
        return 0

    if args.command == "import-page":
        page = repository.find_page_by_slug(args.slug)
        if page is None:
            print(f"Page not found: {args.slug}")
            return 1
        return report(importer.import_page(read_import(args.file), page.id, MergePolicy(args.policy)))

    if args.command == "import-site":
        return report(importer.import_site(read_import(args.file)))

    if args.command == "import-nav":
        return report(importer.import_navigation(read_import(args.file)))

    if args.command == "add-nav":
        item, sync = navigation.create_item(NavigationItem(
            title=args.title,
            href=args.href,
            parent_id=args.parent,
            menu_location=args.menu,
            icon=args.icon,
        ))
        print(f"Created navigation item {item.id}")
        if sync.partially_applied:
            print(f"Warning: page for '{sync.slug}' was not created: {sync.error}")
        return 0

    if args.command == "delete-nav":
        sync = navigation.delete_item(args.id)
        if sync.orphaned_ids:
            print(f"Warning: {len(sync.orphaned_ids)} child item(s) are now orphaned")
        if sync.partially_applied:
            print(f"Warning: page '{sync.slug}' was not deleted: {sync.error}")
        print(f"Deleted navigation item {args.id}")
        return 0

    if args.command == "show-nav":
        tree = navigation.tree()
        for item, depth in tree.walk():
            marker = "" if item.is_active else " (hidden)"
            print(f"{'  ' * depth}- {item.title} [{item.href or NO_HREF}]{marker}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="SiteCurator - Site Content Management Core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py init                                        # Create the database tables
  python main.py add-nav "School of Arts"                    # Add a menu entry and its draft page
  python main.py export-page school-of-arts                  # Export one page's blocks
  python main.py import-page school-of-arts blocks.csv --policy replace_all
  python main.py import-site exports/pages-content.csv       # Upsert blocks across pages
        """
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the DuckDB database (default: database.filename from config.yaml)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="SiteCurator 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create the database tables")

    export_page = subparsers.add_parser("export-page", help="Export the blocks of one page")
    export_page.add_argument("slug", help="Slug of the page")
    export_page.add_argument("-o", "--output", help="Output file")

    export_site = subparsers.add_parser("export-site", help="Export the blocks of every page")
    export_site.add_argument("-o", "--output", help="Output file")

    export_nav = subparsers.add_parser("export-nav", help="Export the navigation")
    export_nav.add_argument("-o", "--output", help="Output file")

    import_page = subparsers.add_parser("import-page", help="Import blocks into one page")
    import_page.add_argument("slug", help="Slug of the page")
    import_page.add_argument("file", help="CSV file to import")
    import_page.add_argument(
        "--policy",
        choices=[MergePolicy.REPLACE_ALL.value, MergePolicy.UPSERT_BY_KEY.value],
        default=MergePolicy.UPSERT_BY_KEY.value,
        help="Merge policy (default: upsert_by_key)"
    )

    import_site = subparsers.add_parser("import-site", help="Upsert blocks from a site-wide export")
    import_site.add_argument("file", help="CSV file to import")

    import_nav = subparsers.add_parser("import-nav", help="Replace the navigation from CSV")
    import_nav.add_argument("file", help="CSV file to import")

    add_nav = subparsers.add_parser("add-nav", help="Add a navigation item")
    add_nav.add_argument("title", help="Menu title")
    add_nav.add_argument("--href", help="Internal path or external URL")
    add_nav.add_argument("--parent", help="Id of the parent item")
    add_nav.add_argument(
        "--menu",
        choices=[location.value for location in MenuLocation],
        default=MenuLocation.PRIMARY.value,
        help="Menu location (default: primary)"
    )
    add_nav.add_argument("--icon", help="Icon name")

    delete_nav = subparsers.add_parser("delete-nav", help="Delete a navigation item and its page")
    delete_nav.add_argument("id", help="Id of the navigation item")

    subparsers.add_parser("show-nav", help="Print the navigation tree")

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    db_path = args.db or config.database_filename

    try:
        with DatabaseManager(db_path) as db:
            db.initialize_database()
            exit_code = run_command(args, db)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print("\nInterrupted.")
        exit_code = 1

    except Exception as e:
        logging.error(f"Command '{args.command}' failed: {e}")
        print(f"\nCommand failed: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
