"""CLI commands for pages, drafts, images, and the frontmatter field config."""

from __future__ import annotations

import json as json_module
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from hugobros.core.config import get_layout
from hugobros.core.errors import HugoBrosError

if TYPE_CHECKING:
    from hugobros.content.model import ContentItem
    from hugobros.content.scanner import ContentScanner

console = Console()


# ---------------------------------------------------------------------------
# Helper functions (shared with posts commands)
# ---------------------------------------------------------------------------


def site_root_from(ctx) -> Path:
    """Site root from the CLI context, falling back to auto-detection."""
    if ctx is not None:
        return ctx.site_root
    return get_layout().root


def make_scanner(ctx) -> ContentScanner:
    from hugobros.content.scanner import ContentScanner

    return ContentScanner(site_root_from(ctx))


def fail(error: HugoBrosError) -> None:
    console.print(f"[red]{escape(error.message)}[/red]")
    raise SystemExit(1)


def filter_items(
    items: list[ContentItem],
    query: str | None = None,
    tags: tuple[str, ...] = (),
    categories: tuple[str, ...] = (),
) -> list[ContentItem]:
    """Apply the common list filters."""
    if query:
        needle = query.lower()
        items = [it for it in items if needle in it.title.lower() or needle in it.body.lower()]
    if tags:
        tag_set = set(tags)
        items = [it for it in items if tag_set & set(it.tags)]
    if categories:
        cat_set = set(categories)
        items = [it for it in items if cat_set & set(it.categories)]
    return items


def print_items(items: list[ContentItem], title: str, as_json: bool = False) -> None:
    """Render items as a table or a JSON array."""
    if as_json:
        click.echo(json_module.dumps([it.to_dict() for it in items], indent=2, default=str))
        return

    if not items:
        console.print(f"[yellow]No {title.lower()} found.[/yellow]")
        return

    table = Table(title=f"{title} ({len(items)})")
    table.add_column("Date", style="cyan", width=12)
    table.add_column("Title", no_wrap=False)
    table.add_column("Id", style="dim")
    table.add_column("Tags", style="dim")

    for it in items:
        tags_str = ", ".join(it.tags[:4])
        if len(it.tags) > 4:
            tags_str += f" +{len(it.tags) - 4}"
        table.add_row(it.date[:10], it.title, it.id, tags_str)

    console.print(table)


def print_item(item: ContentItem, as_json: bool = False) -> None:
    """Show one item's frontmatter and body."""
    if as_json:
        click.echo(json_module.dumps(item.to_dict(), indent=2, default=str))
        return

    table = Table(title=item.id, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in item.frontmatter.to_mapping().items():
        table.add_row(str(key), str(value))
    console.print(table)
    if item.used_default_frontmatter:
        console.print("[yellow]No frontmatter block found; showing defaults.[/yellow]")
    console.print()
    console.print(item.body, markup=False, highlight=False)


# ---------------------------------------------------------------------------
# hugobros pages
# ---------------------------------------------------------------------------


@click.group(name="pages")
def pages() -> None:
    """List standalone pages and section index pages."""
    pass


@pages.command(name="list")
@click.option("-q", "--query", default=None, help="Full-text search in title/body")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON array")
@click.pass_obj
def list_pages(ctx, query: str | None, as_json: bool) -> None:
    """List pages, most recently modified first."""
    try:
        items = make_scanner(ctx).list_pages()
    except HugoBrosError as e:
        fail(e)
    print_items(filter_items(items, query=query), "Pages", as_json=as_json)


@pages.command(name="show")
@click.argument("item_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def show_page(ctx, item_id: str, as_json: bool) -> None:
    """Show a page by id (path relative to the site root)."""
    try:
        item = make_scanner(ctx).get("page", item_id)
    except HugoBrosError as e:
        fail(e)
    print_item(item, as_json=as_json)


# ---------------------------------------------------------------------------
# hugobros drafts
# ---------------------------------------------------------------------------


@click.group(name="drafts")
def drafts() -> None:
    """Manage drafts (content/drafts/ or draft: true)."""
    pass


@drafts.command(name="list")
@click.option("-q", "--query", default=None, help="Full-text search in title/body")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON array")
@click.pass_obj
def list_drafts(ctx, query: str | None, as_json: bool) -> None:
    """List drafts, most recently modified first."""
    try:
        items = make_scanner(ctx).list_drafts()
    except HugoBrosError as e:
        fail(e)
    print_items(filter_items(items, query=query), "Drafts", as_json=as_json)


@drafts.command(name="show")
@click.argument("item_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def show_draft(ctx, item_id: str, as_json: bool) -> None:
    """Show a draft by id."""
    try:
        item = make_scanner(ctx).get("draft", item_id)
    except HugoBrosError as e:
        fail(e)
    print_item(item, as_json=as_json)


@drafts.command(name="create")
@click.option("--title", required=True, help="Draft title")
@click.pass_obj
def create_draft(ctx, title: str) -> None:
    """Create a new draft in content/drafts/."""
    try:
        item = make_scanner(ctx).create("draft", title)
    except HugoBrosError as e:
        fail(e)
    console.print(f"[green]Created:[/green] {item.id}")


@drafts.command(name="publish")
@click.argument("item_id")
@click.pass_obj
def publish_draft(ctx, item_id: str) -> None:
    """Publish a draft: clear its flag and move it into the posts directory."""
    try:
        item = make_scanner(ctx).publish(item_id)
    except HugoBrosError as e:
        fail(e)
    console.print(f"[green]Published[/green] [cyan]{item.id}[/cyan]")


# ---------------------------------------------------------------------------
# hugobros images
# ---------------------------------------------------------------------------


@click.group(name="images")
def images() -> None:
    """Browse images in static/."""
    pass


@images.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON array")
@click.pass_obj
def list_images_cmd(ctx, as_json: bool) -> None:
    """List images, newest first."""
    from hugobros.content.assets import list_images

    try:
        found = list_images(site_root_from(ctx))
    except HugoBrosError as e:
        fail(e)

    if as_json:
        click.echo(json_module.dumps([img.to_dict() for img in found], indent=2))
        return

    if not found:
        console.print("[yellow]No images found.[/yellow]")
        return

    table = Table(title=f"Images ({len(found)})")
    table.add_column("URL", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Dimensions", style="dim")
    for img in found:
        dims = f"{img.width}x{img.height}" if img.width and img.height else "-"
        table.add_row(img.url, str(img.size), dims)
    console.print(table)


@images.command(name="delete")
@click.argument("image_path")
@click.option("-y", "--yes", is_flag=True, help="Delete without confirmation")
@click.pass_obj
def delete_image_cmd(ctx, image_path: str, yes: bool) -> None:
    """Delete an image by its path under static/."""
    from hugobros.content.assets import delete_image

    if not yes and not Confirm.ask(f"Delete {image_path}?"):
        console.print("[dim]Cancelled.[/dim]")
        return
    try:
        delete_image(site_root_from(ctx), image_path)
    except HugoBrosError as e:
        fail(e)
    console.print(f"[green]Deleted[/green] {image_path}")


# ---------------------------------------------------------------------------
# hugobros schema
# ---------------------------------------------------------------------------


@click.group(name="schema")
def schema() -> None:
    """Describe custom frontmatter fields for editors."""
    pass


@schema.command(name="show")
@click.pass_obj
def show_schema(ctx) -> None:
    """Print the saved field config (or the default)."""
    from hugobros.content.schema import load_frontmatter_config

    try:
        config = load_frontmatter_config(site_root_from(ctx))
    except HugoBrosError as e:
        fail(e)
    click.echo(json_module.dumps(config.to_dict(), indent=2))


@schema.command(name="generate")
@click.option("--write", is_flag=True, help="Save to .hugobros/frontmatter-config.json")
@click.pass_obj
def generate_schema(ctx, write: bool) -> None:
    """Infer a field config from the custom fields used in posts."""
    from hugobros.content.schema import generate_frontmatter_config, save_frontmatter_config

    try:
        root = site_root_from(ctx)
        config = generate_frontmatter_config(root)
        if write:
            path = save_frontmatter_config(root, config)
            console.print(f"[green]Wrote[/green] {path}")
            return
    except HugoBrosError as e:
        fail(e)
    click.echo(json_module.dumps(config.to_dict(), indent=2))
