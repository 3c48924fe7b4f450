"""CLI interface for og-audit."""

import json
import logging
import signal
import sys
import threading

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from . import __version__
from .config import Settings
from .inventory import InventoryStore
from .models import AuditResult, OGInventory, Status, ValidationResult
from .site_audit import audit_site, site_origin, summarize, PERFECT_SCORE, GOOD_SCORE
from .validator import normalize_url, validate_og


console = Console()

COMMANDS = ["validate", "audit", "init", "inventory", "--help", "--version", "--debug"]


def status_style(status: Status) -> str:
    """Get Rich style for a check status."""
    return {
        Status.PASS: "green",
        Status.WARN: "yellow",
        Status.FAIL: "red",
    }.get(status, "white")


def status_icon(status: Status) -> str:
    return {
        Status.PASS: "✓",
        Status.WARN: "!",
        Status.FAIL: "✗",
    }.get(status, "•")


def score_color(score: int) -> str:
    """Get color for a score value."""
    if score >= PERFECT_SCORE:
        return "green"
    elif score >= GOOD_SCORE:
        return "yellow"
    else:
        return "red"


def print_score_bar(score: int, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = int((score / 100) * width)
    empty = width - filled
    color = score_color(score)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * empty, style="dim")
    bar.append(f" {score}/100", style=f"bold {color}")
    return bar


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length - 3] + "..."


def print_result(result: ValidationResult) -> None:
    """Print a single-page validation result."""
    console.print()
    console.print(Panel(
        f"[bold]{result.url}[/bold]",
        title="OG Validation",
        border_style="blue",
    ))
    console.print()

    for check in result.checks:
        style = status_style(check.status)
        console.print(f"  [{style}]{status_icon(check.status)}[/] [bold]{check.name}[/bold]")
        console.print(f"    {escape(check.message)}")
        if check.recommendation:
            console.print(f"    [cyan]→ {escape(check.recommendation)}[/cyan]")
        console.print()

    console.print("  Score: ", end="")
    console.print(print_score_bar(result.score, width=25))
    console.print()


def print_summary(pages: list[AuditResult]) -> None:
    summary = summarize(pages)

    console.print()
    console.print("[bold]Summary[/bold]")
    console.print(f"  Total pages:    {summary.total}")
    console.print(f"  Average score:  {summary.average_score}/100")
    console.print()
    console.print(f"  [green]●[/green] Perfect (90+):  {summary.perfect}")
    console.print(f"  [yellow]●[/yellow] Good (70-89):   {summary.good}")
    console.print(f"  [red]●[/red] Needs work:     {len(summary.needs_work)}")

    if summary.needs_work:
        console.print("\n[bold]Pages needing attention:[/bold]")
        for page in summary.needs_work:
            console.print(f"  • {truncate(page.url, 40)} ({page.score}/100)")
            if page.issues:
                console.print(f"    [dim]Issues: {', '.join(page.issues)}[/dim]")
    console.print()


def print_inventory(inventory: OGInventory) -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Path", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Issues")

    for page in inventory.pages:
        table.add_row(
            page.path,
            f"[{score_color(page.score)}]{page.score}[/]",
            ", ".join(page.issues) or "[green]OK[/green]",
        )

    console.print()
    console.print(Panel(
        f"[bold]{inventory.base_url or '(no base URL)'}[/bold]\n"
        f"[dim]Audited {inventory.audited_at}[/dim]",
        title="OG Inventory",
        border_style="blue",
    ))
    console.print(table)
    console.print(f"  {inventory.total_pages} pages, average score {inventory.average_score}/100")
    console.print()


def ask_for_paths(origin: str) -> str:
    """Ask which paths to audit when the site has no sitemap."""
    console.print(f"\n[yellow]![/yellow] No sitemap found at {origin}/sitemap.xml")
    console.print("  [dim]Consider adding one for better SEO![/dim]\n")
    console.print("  Enter paths to audit (comma-separated), or press Enter for just the homepage:")
    console.print("  [dim]Example: /, /about, /docs, /pricing[/dim]\n")
    return click.prompt("  Paths", default="", show_default=False)


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx, debug: bool):
    """og-audit - Open Graph tag validation and site audit.

    \b
    Quick start:
        og-audit validate example.com
        og-audit audit example.com

    \b
    Commands:
        validate   Validate the OG tags of one page
        audit      Audit every page of a site
        init       Register paths in the inventory
        inventory  Show the saved inventory
    """
    setup_logging(debug)
    try:
        ctx.obj = Settings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e))

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("url")
@click.option("-t", "--timeout", type=float, help="Request timeout in seconds")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_obj
def validate(settings: Settings, url: str, timeout: float | None, json_output: bool):
    """Validate the OG tags of a page.

    Exits with status 1 when the score is below 70.

    \b
    Examples:
        og-audit validate example.com
        og-audit validate https://example.com/blog --json
    """
    settings = settings.override(timeout=timeout)
    url = normalize_url(url)

    try:
        with console.status(f"[bold blue]Validating {url}...[/bold blue]"):
            result = validate_og(url, settings=settings)
    except httpx.InvalidURL as e:
        raise click.UsageError(f"Invalid URL {url}: {e}")

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_result(result)

    if result.score < settings.pass_threshold:
        sys.exit(1)


@cli.command()
@click.argument("url")
@click.option("-t", "--timeout", type=float, help="Request timeout in seconds")
@click.option("-w", "--workers", type=click.IntRange(min=1), help="Pages validated in parallel")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Inventory file")
@click.pass_obj
def audit(settings: Settings, url: str, timeout: float | None, workers: int | None, output: str | None):
    """Audit every page of a site and save the inventory.

    \b
    Examples:
        og-audit audit example.com
        og-audit audit example.com --workers 4 -o reports/og.json
    """
    settings = settings.override(timeout=timeout, workers=workers, inventory_path=output)
    cancel = threading.Event()

    def on_page(page: AuditResult) -> None:
        if page.issues == ("Failed to fetch",):
            console.print(f"  {truncate(page.url, 50)} [red]Failed[/red]")
        else:
            color = score_color(page.score)
            console.print(f"  {truncate(page.url, 50)} [{color}]{page.score}[/]/100")

    def interrupt(signum, frame):
        console.print("\n[yellow]Stopping after the current page...[/yellow]")
        cancel.set()

    def prompt(origin: str) -> str:
        # Ctrl-C at the prompt aborts instead of cancelling
        current = signal.signal(signal.SIGINT, previous)
        try:
            return ask_for_paths(origin)
        finally:
            signal.signal(signal.SIGINT, current)

    console.print(f"\n  Auditing [bold]{site_origin(url)}[/bold]...\n")

    previous = signal.signal(signal.SIGINT, interrupt)
    try:
        inventory = audit_site(
            url,
            settings=settings,
            prompt_paths=prompt,
            cancel=cancel,
            on_page=on_page,
        )
    finally:
        signal.signal(signal.SIGINT, previous)

    if inventory is None:
        console.print(f"[yellow]Audit cancelled, {settings.inventory_path} left unchanged[/yellow]")
        raise click.Abort()

    console.print(f"\n[green]✓[/green] Saved inventory to [cyan]{settings.inventory_path}[/cyan]")
    print_summary(inventory.pages)


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("-b", "--base-url", help="Site URL, used when no inventory exists yet")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Inventory file")
@click.pass_obj
def init(settings: Settings, paths: tuple[str, ...], base_url: str | None, output: str | None):
    """Register paths in the inventory without auditing them.

    \b
    Examples:
        og-audit init / /about /docs --base-url example.com
    """
    settings = settings.override(inventory_path=output)
    store = InventoryStore(settings.inventory_path)
    before = store.load()
    known = before.total_pages if before else 0

    inventory = store.register_paths(paths, base_url=site_origin(base_url) if base_url else None)

    added = inventory.total_pages - known
    console.print(
        f"[green]✓[/green] Added {added} path{'s' if added != 1 else ''} "
        f"to [cyan]{settings.inventory_path}[/cyan] ({inventory.total_pages} total)"
    )


@cli.command()
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Inventory file")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_obj
def inventory(settings: Settings, output: str | None, json_output: bool):
    """Show the saved inventory."""
    settings = settings.override(inventory_path=output)
    loaded = InventoryStore(settings.inventory_path).load()
    if loaded is None:
        console.print(f"[red]No inventory found at {settings.inventory_path}[/red]")
        console.print("Run [cyan]og-audit audit <url>[/cyan] or [cyan]og-audit init <paths>[/cyan] first.")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(loaded.to_dict(), indent=2))
    else:
        print_inventory(loaded)


# Convenience: allow `og-audit URL` as shortcut for `og-audit validate URL`
def main():
    """Entry point that handles both `og-audit URL` and `og-audit validate URL`."""
    args = sys.argv[1:]

    if args and not args[0].startswith('-') and args[0] not in COMMANDS:
        if '.' in args[0] or args[0].startswith('localhost'):
            sys.argv.insert(1, 'validate')

    cli()


if __name__ == "__main__":
    main()
