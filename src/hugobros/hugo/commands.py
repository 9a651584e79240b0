"""CLI commands that drive the hugo executable."""

from __future__ import annotations

import json as json_module

import click
from rich.console import Console

from hugobros.content.commands import fail, site_root_from
from hugobros.core.errors import HugoBrosError
from hugobros.hugo.runner import HugoRunner, ServerRegistry

console = Console()

# Servers started from this process
servers = ServerRegistry()


def _report(output, as_json: bool) -> None:
    if as_json:
        click.echo(json_module.dumps(output.to_dict(), indent=2))
    else:
        if output.stdout:
            click.echo(output.stdout, nl=False)
        if output.stderr:
            click.echo(output.stderr, nl=False, err=True)
    if not output.success:
        if not as_json:
            console.print(f"[red]hugo exited with status {output.exit_code}[/red]")
        raise SystemExit(output.exit_code or 1)


@click.group(name="hugo")
def hugo() -> None:
    """Run hugo inside the site root."""
    pass


@hugo.command(name="run", context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("--timeout", type=float, default=None, help="Give up after N seconds")
@click.option("--json", "as_json", is_flag=True, help="Output the captured result as JSON")
@click.pass_obj
def run_hugo(ctx, args: tuple[str, ...], timeout: float | None, as_json: bool) -> None:
    """Run ``hugo ARGS...`` and print its output."""
    try:
        output = HugoRunner(site_root_from(ctx)).run(list(args), timeout=timeout)
    except HugoBrosError as e:
        fail(e)
    _report(output, as_json)


@hugo.command(name="build")
@click.option("--drafts", is_flag=True, help="Include drafts (--buildDrafts)")
@click.option("--json", "as_json", is_flag=True, help="Output the captured result as JSON")
@click.pass_obj
def build_site(ctx, drafts: bool, as_json: bool) -> None:
    """Build the site with hugo."""
    args = ["--buildDrafts"] if drafts else []
    try:
        output = HugoRunner(site_root_from(ctx)).run(args)
    except HugoBrosError as e:
        fail(e)
    _report(output, as_json)
    if not as_json:
        console.print("[green]Build finished.[/green]")


@hugo.command(name="serve")
@click.option("--drafts", is_flag=True, help="Include drafts (--buildDrafts)")
@click.pass_obj
def serve_site(ctx, drafts: bool) -> None:
    """Run ``hugo server`` until interrupted."""
    try:
        runner = HugoRunner(site_root_from(ctx), registry=servers)
        server_id = runner.start_server(
            ["--buildDrafts"] if drafts else [],
            stdout=None,
            stderr=None,
        )
    except HugoBrosError as e:
        fail(e)

    console.print(f"[green]Serving[/green] {server_id} [dim](Ctrl-C to stop)[/dim]")
    process = runner.registry.get(server_id)
    try:
        process.wait()
    except KeyboardInterrupt:
        console.print("[dim]Stopping...[/dim]")
    finally:
        if runner.is_running():
            runner.stop_server(server_id)
