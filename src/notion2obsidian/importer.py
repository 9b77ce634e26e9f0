"""Database importer: Notion pages -> Obsidian notes + .base file."""

import logging
import sys

from notion2obsidian.context import ImportContext
from notion2obsidian.exceptions import (
    ConversionError,
    ImportFailedError,
    SchemaEmissionError,
    TransportError,
)
from notion2obsidian.models import Database, ImportRequest, ImportResult, PropertySchema, Record
from notion2obsidian.notion.client import NotionClient
from notion2obsidian.notion.pagination import iter_pages
from notion2obsidian.notion.schema import ActivePropertyTally
from notion2obsidian.obsidian.base import base_filename, render_base
from notion2obsidian.obsidian.markdown import render_document, resolve_title
from notion2obsidian.obsidian.vault import Vault

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


class DatabaseImporter:
    """Imports one Notion database into a vault folder.

    Pages are fetched one query page at a time and each page's records are
    written before the next request is sent. Property usage is tallied along
    the way so the .base file, written last, only lists columns with data.
    """

    def __init__(self, client: NotionClient, vault: Vault, context: ImportContext):
        self.client = client
        self.vault = vault
        self.context = context

    def convert_record(self, record: Record, tally: ActivePropertyTally, folder: str) -> str | None:
        """
        Tally a page's properties and write it as a note.

        Returns the written file name, or None if the page was skipped.
        """
        schema = tally.schema
        name = record.id
        try:
            tally.update(record)
            name = resolve_title(record, schema)
            content = render_document(record, schema, name)
            path = self.vault.write_document(folder, name, content)
            return path.name
        except Exception as e:
            error = ConversionError(record.id, name, e)
            logger.error(f"  Error: {error}")
            self.context.report_failed(name, error)
            return None

    def write_base_file(self, database: Database, tally: ActivePropertyTally, folder: str) -> str | None:
        """Write the .base view file; returns its name, or None on failure."""
        try:
            content = render_base(database.title, tally.names)
            path = self.vault.write_base(folder, database.title, content)
            return path.name
        except Exception as e:
            error = SchemaEmissionError(base_filename(database.title), e)
            logger.error(f"  Error: {error}")
            self.context.report_failed(error.name, error)
            return None

    async def run(self, request: ImportRequest) -> ImportResult:
        """
        Import the database named by the request.

        Raises ImportFailedError if Notion cannot be reached; notes written
        before the failure are left in place.
        """
        result = ImportResult()
        label = request.database_id

        try:
            self.context.status("Fetching database details...")
            raw = await self.client.get_database(request.database_id)
            database = Database.from_notion(raw)
            schema = PropertySchema.from_notion(raw)
            label = database.title
            logger.info(f"Importing '{database.title}' ({len(schema.types)} properties)")

            if self.context.is_cancelled():
                result.cancelled = True
                return result

            self.context.status("Fetching database pages...")
            tally = ActivePropertyTally(schema)
            extra = 1 if request.create_base_file else 0

            async def fetch_page(cursor: str | None):
                return await self.client.query_database(request.database_id, start_cursor=cursor)

            async for page in iter_pages(fetch_page, self.context):
                result.fetched += len(page.results)

                for record in page.results:
                    if self.context.is_cancelled():
                        break

                    file_name = self.convert_record(record, tally, request.output_folder)
                    if file_name:
                        result.files.append(file_name)
                        self.context.report_note_success(file_name)
                    else:
                        result.failures.append(record.id)

                    done = len(result.files) + len(result.failures)
                    self.context.report_progress(done, result.fetched + extra)

        except TransportError as e:
            logger.error(f"Import failed: {e}")
            self.context.report_failed(label, e)
            raise ImportFailedError(label, e) from e

        if self.context.is_cancelled():
            logger.info("Import cancelled")
            result.cancelled = True
            return result

        if request.create_base_file:
            self.context.status("Creating Obsidian Base file...")
            result.base_file = self.write_base_file(database, tally, request.output_folder)
            if result.base_file:
                self.context.report_note_success(result.base_file)
            self.context.report_progress(result.fetched + 1, result.fetched + 1)

        self.context.status("Import completed successfully!")
        logger.info(f"\nImport of '{database.title}' complete:")
        logger.info(f"  Notes written: {result.count}")
        logger.info(f"  Skipped: {len(result.failures)}")
        logger.info(f"  Base file: {result.base_file or '-'}")

        return result
