"""CLI for notion2obsidian."""

import asyncio
from pathlib import Path

import click

from notion2obsidian import __version__
from notion2obsidian.config import Settings, get_settings
from notion2obsidian.context import ImportContext
from notion2obsidian.exceptions import ConfigurationError, ImportFailedError
from notion2obsidian.importer import DatabaseImporter
from notion2obsidian.models import Database, PropertySchema
from notion2obsidian.notion.client import NotionClient
from notion2obsidian.notion.properties import extract_property_value, format_value
from notion2obsidian.obsidian.vault import Vault


def _require_settings(ctx: click.Context) -> Settings:
    settings: Settings | None = ctx.obj.get("settings")
    if settings is None:
        click.echo(f"Error loading settings: {ctx.obj.get('settings_error')}", err=True)
        ctx.exit(1)
    return settings


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Import Notion databases into an Obsidian vault."""
    ctx.ensure_object(dict)

    # Load settings
    try:
        settings = get_settings()
        ctx.obj["settings"] = settings
    except Exception as e:
        ctx.obj["settings_error"] = str(e)


@main.command()
@click.pass_context
def databases(ctx: click.Context) -> None:
    """List databases shared with the integration."""
    settings = _require_settings(ctx)

    async def run() -> list[Database]:
        client = NotionClient(settings.notion_token, notion_version=settings.notion_version)
        try:
            return await client.search_databases()
        finally:
            await client.close()

    try:
        found = asyncio.run(run())
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if not found:
        click.echo("No databases found. Share a database with your integration first.")
        return

    for db in found:
        click.echo(f"{db.id}  {db.title} ({len(db.properties)} properties)")


@main.command()
@click.argument("database_id", required=False)
@click.pass_context
def schema(ctx: click.Context, database_id: str | None) -> None:
    """Show a database's properties and a sample page."""
    settings = _require_settings(ctx)
    database_id = database_id or settings.database_id
    if not database_id:
        click.echo("Error: pass DATABASE_ID or set NOTION_DATABASE_ID", err=True)
        ctx.exit(1)

    async def run() -> None:
        client = NotionClient(settings.notion_token, notion_version=settings.notion_version)
        try:
            raw = await client.get_database(database_id)
            database = Database.from_notion(raw)
            prop_schema = PropertySchema.from_notion(raw)

            click.echo(f"{database.title} has {len(prop_schema.types)} properties:\n")
            for prop_name, prop_type in prop_schema.types.items():
                click.echo(f"  {prop_name}: {prop_type}")

            # Also show the first page to see actual data
            click.echo("\n" + "=" * 50)
            click.echo("Sample page (first entry):")
            click.echo("=" * 50 + "\n")

            page = await client.query_database(database_id, page_size=1)
            if page.results:
                for prop_name, prop_value in page.results[0].properties.items():
                    value = extract_property_value(prop_value)
                    if value is not None:
                        click.echo(f"  {prop_name}: {format_value(value)}")
        finally:
            await client.close()

    try:
        asyncio.run(run())
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@main.command("import")
@click.argument("database_id", required=False)
@click.option("--vault", "vault_root", type=click.Path(file_okay=False, path_type=Path), default=Path("."), help="Vault root directory")
@click.option("--output", "output_folder", help="Folder inside the vault (default: NOTION_OUTPUT_DIR)")
@click.option("--no-base", is_flag=True, help="Skip the Obsidian .base file")
@click.pass_context
def import_database(
    ctx: click.Context,
    database_id: str | None,
    vault_root: Path,
    output_folder: str | None,
    no_base: bool,
) -> None:
    """Import a Notion database as Markdown notes.

    Each page becomes one note with its properties as frontmatter. Unless
    --no-base is given, a .base file with table and card views is written
    next to the notes.
    """
    settings = _require_settings(ctx)

    try:
        request = settings.to_import_request(
            database_id=database_id,
            output_folder=output_folder,
            create_base_file=False if no_base else None,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    context = ImportContext()

    async def run():
        client = NotionClient(request.token, notion_version=settings.notion_version)
        importer = DatabaseImporter(client, Vault(vault_root), context)
        try:
            return await importer.run(request)
        finally:
            await client.close()

    try:
        result = asyncio.run(run())
    except KeyboardInterrupt:
        click.echo("\nImport interrupted by user")
        ctx.exit(130)
    except ImportFailedError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    # Summary
    click.echo("\n" + "=" * 50)
    click.echo("IMPORT CANCELLED" if result.cancelled else "IMPORT COMPLETE")
    click.echo("=" * 50)
    click.echo(f"\nPages fetched: {result.fetched}")
    click.echo(f"Notes written: {result.count}")
    click.echo(f"Skipped: {len(result.failures)}")
    if request.create_base_file and not result.cancelled:
        click.echo(f"Base file: {result.base_file or 'not created'}")
    if context.failed:
        click.echo("\nError details:")
        for name, error in context.failed[:5]:  # Show first 5
            click.echo(f"  - {name}: {error}")
        if len(context.failed) > 5:
            click.echo(f"  ... and {len(context.failed) - 5} more")


if __name__ == "__main__":
    main()
