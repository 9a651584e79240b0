"""
Main CLI dispatcher for hugobros.

Usage:
    hugobros validate
    hugobros site
    hugobros posts [list|show|create|delete|set|unset|tag]
    hugobros pages [list|show]
    hugobros drafts [list|show|create|publish]
    hugobros images [list|delete]
    hugobros schema [show|generate]
    hugobros hugo [run|build|serve]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from hugobros import __version__
from hugobros.core.config import get_layout, load_site_config
from hugobros.core.errors import HugoBrosError, ValidationError

console = Console()


class Context:
    """Shared context for all commands."""

    def __init__(self, verbose: bool = False, root: Path | None = None):
        self.verbose = verbose
        self.root = root
        self.console = console

    @property
    def site_root(self) -> Path:
        """Resolved site root.

        Raises:
            ValidationError: If the root is not a usable Hugo site
        """
        layout = get_layout(self.root)
        layout.validate()
        return layout.root


def configure_logging(verbose: bool) -> None:
    """Route hugobros log records through rich on stderr."""
    logger = logging.getLogger("hugobros")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


@click.group()
@click.version_option(version=__version__, prog_name="hugobros")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Hugo site root (auto-detected if omitted)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, root: Path | None) -> None:
    """Hugo site content tools.

    Manage posts, pages, drafts, and images in a Hugo site.
    """
    configure_logging(verbose)
    ctx.obj = Context(verbose=verbose, root=root)


@main.command()
@click.pass_obj
def validate(ctx) -> None:
    """Check that the site root is a usable Hugo project."""
    try:
        layout = get_layout(ctx.site_root)
    except ValidationError as e:
        console.print(f"[red]Invalid Hugo project:[/red] {escape(e.message)}")
        raise SystemExit(1)

    table = Table(title="Hugo project", show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Path")
    table.add_row("Root", str(layout.root))
    table.add_row("Config", str(layout.find_config_path()))
    table.add_row("Content", str(layout.content_dir))
    table.add_row("Posts", str(layout.posts_dir))
    table.add_row("Drafts", str(layout.drafts_dir))
    table.add_row("Static", str(layout.static_dir))
    console.print(table)
    console.print("[green]OK[/green]")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def site(ctx, as_json: bool) -> None:
    """Show the site's Hugo configuration."""
    try:
        layout = get_layout(ctx.site_root)
        config_path = layout.find_config_path()
        if config_path is None:
            raise ValidationError(f"Hugo config not found in {layout.root}")
        config = load_site_config(config_path)
    except HugoBrosError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(config.to_dict(), indent=2, default=str))
        return

    table = Table(title=str(config.path), show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("title", config.title)
    table.add_row("baseURL", config.base_url)
    table.add_row("languageCode", config.language_code)
    for key, value in config.params.items():
        table.add_row(f"params.{key}", str(value))
    console.print(table)


# Import and register command groups (imports after main definition intentional)
from hugobros.content.commands import drafts, images, pages, schema  # noqa: E402
from hugobros.hugo.commands import hugo  # noqa: E402
from hugobros.posts.commands import posts  # noqa: E402

main.add_command(posts)
main.add_command(pages)
main.add_command(drafts)
main.add_command(images)
main.add_command(schema)
main.add_command(hugo)


if __name__ == "__main__":
    main()
