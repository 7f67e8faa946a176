"""Command line interface for Garden Publisher."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from garden_publisher import __version__
from garden_publisher.core.config import PublisherConfig
from garden_publisher.core.models import PublishError
from garden_publisher.core.publisher import Publisher, create_publisher_from_config

DEFAULT_CONFIG = "garden.yaml"


def _load_config(config_path: Optional[Path], vault: Optional[Path]) -> PublisherConfig:
    if config_path is None and Path(DEFAULT_CONFIG).is_file():
        config_path = Path(DEFAULT_CONFIG)
    config = PublisherConfig.from_yaml(config_path) if config_path else PublisherConfig()
    if vault is not None:
        config.vault_path = vault
    return config


@click.group()
@click.version_option(__version__, prog_name="garden-publisher")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=f"Path to the YAML config (defaults to ./{DEFAULT_CONFIG} if present)",
)
@click.option(
    "--vault",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Vault directory, overriding vault_path from the config",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], vault: Optional[Path], verbose: bool):
    """Publish vault notes to a digital garden repository."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = _load_config(config_path, vault)
    except PublishError as e:
        raise click.ClickException(str(e))
    ctx.obj = create_publisher_from_config(config)


@cli.command("list")
@click.pass_obj
def list_notes(publisher: Publisher):
    """List notes marked for publishing."""
    try:
        notes = publisher.discovery.get_files_marked_for_publishing()
    except PublishError as e:
        raise click.ClickException(str(e))
    for note in notes:
        click.echo(note.context.vault_path_str)
    click.echo(f"{len(notes)} note(s) marked for publishing", err=True)


@cli.command()
@click.argument("note")
@click.pass_obj
def render(publisher: Publisher, note: str):
    """Print the publishable markdown of NOTE."""
    metadata = publisher.discovery.get_note(note)
    if metadata is None:
        raise click.ClickException(f"Note not found: {note}")
    published = asyncio.run(publisher.render(metadata))
    click.echo(published.content)


@cli.command()
@click.argument("notes", nargs=-1)
@click.option("--dry-run", is_flag=True, help="Transform notes without uploading")
@click.pass_obj
def publish(publisher: Publisher, notes: Tuple[str, ...], dry_run: bool):
    """Publish NOTES, or every note marked for publishing."""

    async def run():
        async with publisher:
            return await publisher.publish_all(list(notes) or None, dry_run=dry_run)

    try:
        result = asyncio.run(run())
    except PublishError as e:
        raise click.ClickException(str(e))

    verb = "Would publish" if dry_run else "Published"
    for title in result.published_titles:
        click.echo(f"{verb}: {title}")
    for title in result.skipped_titles:
        click.echo(f"Skipped: {title}")
    for failure in result.failures:
        click.echo(f"Failed: {failure.title or failure.path}: {failure.error}", err=True)

    if result.failures:
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
