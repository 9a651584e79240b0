"""
CLI commands for managing posts.

Posts are the non-index markdown files directly inside content/posts/ (or
content/post/). A post can be named by its id (``content/posts/hello.md``)
or just its slug (``hello``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.prompt import Confirm

from hugobros.content.commands import (
    fail,
    filter_items,
    make_scanner,
    print_item,
    print_items,
)
from hugobros.core.errors import HugoBrosError, NotFoundError

if TYPE_CHECKING:
    from hugobros.content.model import ContentItem
    from hugobros.content.scanner import ContentScanner

console = Console()


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def _coerce_value(value: str):
    """Coerce a string value to its most specific Python type.

    ``"true"``/``"false"`` -> ``bool``; integers; floats; else ``str``.
    """
    low = value.lower()
    if low == "true":
        return True
    if low == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _field_value(field: str, value: str):
    """Value to store for ``posts set``: text fields keep the raw string."""
    from hugobros.content.model import LIST_FIELDS, OPTIONAL_TEXT_FIELDS

    if field in OPTIONAL_TEXT_FIELDS or field in ("title", "date"):
        return value
    if field in LIST_FIELDS:
        return [v.strip() for v in value.split(",") if v.strip()]
    return _coerce_value(value)


def _post_id(scanner: ContentScanner, ref: str) -> str:
    """Turn a slug or id into a post id."""
    from hugobros.core.config import MARKDOWN_SUFFIX

    if "/" in ref:
        return ref
    name = ref if ref.endswith(MARKDOWN_SUFFIX) else f"{ref}{MARKDOWN_SUFFIX}"
    return scanner.make_id(scanner.layout.posts_dir / name)


def _load_post(scanner: ContentScanner, ref: str) -> ContentItem:
    from hugobros.content.model import ContentKind

    item = scanner.get(ContentKind.POST, _post_id(scanner, ref))
    if scanner.location_kind(item.file_path) is not ContentKind.POST:
        raise NotFoundError(f"Not a post: {ref}", path=item.file_path)
    return item


# ---------------------------------------------------------------------------
# Click command group
# ---------------------------------------------------------------------------


@click.group(name="posts")
def posts() -> None:
    """Manage blog posts.

    Works directly on the markdown files -- no database.
    """
    pass


# ---------------------------------------------------------------------------
# hugobros posts list
# ---------------------------------------------------------------------------


@posts.command(name="list")
@click.option("-q", "--query", default=None, help="Full-text search in title/body")
@click.option("-t", "--tag", multiple=True, help="Filter by tag (can repeat)")
@click.option("-c", "--category", multiple=True, help="Filter by category (can repeat)")
@click.option("--limit", type=int, default=None, help="Show at most N posts")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON array")
@click.pass_obj
def list_posts(
    ctx,
    query: str | None,
    tag: tuple[str, ...],
    category: tuple[str, ...],
    limit: int | None,
    as_json: bool,
) -> None:
    """List published posts, most recently modified first."""
    try:
        items = make_scanner(ctx).list_posts()
    except HugoBrosError as e:
        fail(e)

    items = filter_items(items, query=query, tags=tag, categories=category)
    if limit is not None:
        items = items[:limit]
    print_items(items, "Posts", as_json=as_json)


# ---------------------------------------------------------------------------
# hugobros posts show
# ---------------------------------------------------------------------------


@posts.command(name="show")
@click.argument("ref")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def show_post(ctx, ref: str, as_json: bool) -> None:
    """Show a post by slug or id."""
    try:
        item = _load_post(make_scanner(ctx), ref)
    except HugoBrosError as e:
        fail(e)
    print_item(item, as_json=as_json)


# ---------------------------------------------------------------------------
# hugobros posts create
# ---------------------------------------------------------------------------


@posts.command(name="create")
@click.option("--title", required=True, help="Post title")
@click.option("-t", "--tag", multiple=True, help="Tag (can repeat)")
@click.option("-c", "--category", multiple=True, help="Category (can repeat)")
@click.option("--description", default=None, help="Card preview text")
@click.option("--draft", is_flag=True, help="Create with draft: true")
@click.pass_obj
def create_post(
    ctx,
    title: str,
    tag: tuple[str, ...],
    category: tuple[str, ...],
    description: str | None,
    draft: bool,
) -> None:
    """Create a new post in the posts directory."""
    try:
        scanner = make_scanner(ctx)
        item = scanner.create("post", title)
        if tag or category or description or draft:
            fm = item.frontmatter
            fm.tags = list(tag)
            fm.categories = list(category)
            fm.description = description
            fm.draft = True if draft else None
            scanner.save(item)
    except HugoBrosError as e:
        fail(e)

    console.print(f"[green]Created:[/green] {item.id}")


# ---------------------------------------------------------------------------
# hugobros posts delete
# ---------------------------------------------------------------------------


@posts.command(name="delete")
@click.argument("ref")
@click.option("-y", "--yes", is_flag=True, help="Delete without confirmation")
@click.pass_obj
def delete_post(ctx, ref: str, yes: bool) -> None:
    """Delete a post file."""
    try:
        scanner = make_scanner(ctx)
        item = _load_post(scanner, ref)
    except HugoBrosError as e:
        fail(e)

    if not yes and not Confirm.ask(f"Delete '{item.title}' ({item.id})?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    try:
        scanner.delete(item.id)
    except HugoBrosError as e:
        fail(e)
    console.print(f"[green]Deleted[/green] {item.id}")


# ---------------------------------------------------------------------------
# hugobros posts set
# ---------------------------------------------------------------------------


@posts.command(name="set")
@click.argument("ref")
@click.argument("field")
@click.argument("value")
@click.pass_obj
def set_field(ctx, ref: str, field: str, value: str) -> None:
    """Set a front matter field on a post.

    Text fields keep the value as given; tags/categories take a comma-separated
    list; other values are auto-coerced: true/false -> bool, integers, floats,
    else string.
    """
    from hugobros.content.frontmatter import with_field

    try:
        scanner = make_scanner(ctx)
        item = _load_post(scanner, ref)
        coerced = _field_value(field, value)
        item.frontmatter = with_field(item.frontmatter, field, coerced)
        scanner.save(item)
    except HugoBrosError as e:
        fail(e)

    console.print(f"[green]Set[/green] {field}={coerced!r} on [cyan]{item.id}[/cyan]")


# ---------------------------------------------------------------------------
# hugobros posts unset
# ---------------------------------------------------------------------------


@posts.command(name="unset")
@click.argument("ref")
@click.argument("field")
@click.pass_obj
def unset_field(ctx, ref: str, field: str) -> None:
    """Remove a front matter field from a post."""
    try:
        scanner = make_scanner(ctx)
        item = _load_post(scanner, ref)
    except HugoBrosError as e:
        fail(e)

    if not item.frontmatter.unset(field):
        console.print(f"[yellow]Field '{field}' not present on {item.id}[/yellow]")
        return

    try:
        scanner.save(item)
    except HugoBrosError as e:
        fail(e)
    console.print(f"[green]Removed[/green] '{field}' from [cyan]{item.id}[/cyan]")


# ---------------------------------------------------------------------------
# hugobros posts tag
# ---------------------------------------------------------------------------


@posts.command(name="tag")
@click.argument("ref")
@click.option("--add", multiple=True, help="Add tag(s)")
@click.option("--remove", multiple=True, help="Remove tag(s)")
@click.option("--set", "set_tags", default=None, help="Replace all tags (comma-separated)")
@click.pass_obj
def manage_tags(
    ctx,
    ref: str,
    add: tuple[str, ...],
    remove: tuple[str, ...],
    set_tags: str | None,
) -> None:
    """Manage tags on a post."""
    try:
        scanner = make_scanner(ctx)
        item = _load_post(scanner, ref)
    except HugoBrosError as e:
        fail(e)

    fm = item.frontmatter
    if set_tags is not None:
        fm.tags = [t.strip() for t in set_tags.split(",") if t.strip()]
    else:
        for t in add:
            if t not in fm.tags:
                fm.tags.append(t)
        fm.tags = [t for t in fm.tags if t not in remove]

    try:
        scanner.save(item)
    except HugoBrosError as e:
        fail(e)
    console.print(f"[green]Updated tags[/green] on [cyan]{item.id}[/cyan]: {fm.tags}")
