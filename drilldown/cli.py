from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .errors import FetchError
from .logging import setup_logging
from .navigation import NavigationController, NavigationEvent, build_topic_chain, chain_levels, initialize
from .settings import Settings, load_settings
from .tui.components import render_error
from .tui.host import TerminalHost
from .tui.keymap import build_keymap

app = typer.Typer(
    add_completion=False,
    help="drilldown: browse topics, partitions and messages one screen at a time",
    rich_markup_mode="rich",
)
console = Console()


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def _viewport(settings: Settings, width: int | None, height: int | None) -> tuple[int, int]:
    """Pick the viewport size: CLI flag, then settings, then the terminal."""
    term_w, term_h = console.size
    w = width or settings.DRILLDOWN_VIEWPORT_WIDTH or term_w
    h = height or settings.DRILLDOWN_VIEWPORT_HEIGHT or term_h
    return int(w), int(h)


def _start(settings: Settings, width: int | None, height: int | None, topics: int | None) -> NavigationController:
    """Fetch the root page, exiting with code 1 if that fails."""
    root = build_topic_chain(
        topic_count=topics if topics is not None else settings.DRILLDOWN_MOCK_TOPICS,
        message_count=settings.DRILLDOWN_MOCK_MESSAGES,
    )
    w, h = _viewport(settings, width, height)
    try:
        return initialize(w, h, root)
    except FetchError as e:
        render_error(console, "Could not load the first page", str(e), "Check the data source and try again")
        raise typer.Exit(code=1)


def _find_row(controller: NavigationController, key: str) -> tuple[int, int] | None:
    """(sub-page, row index) of the first row matching `key`, active sub-page first.

    Keys are matched before display text.
    """
    page = controller.stack.top()
    order = [page.current_sub_page] + [i for i in range(page.sub_page_count) if i != page.current_sub_page]
    for match in (lambda r: r.key == key, lambda r: r.display == key):
        for sub in order:
            index = next((i for i, r in enumerate(page.sub_pages[sub]) if match(r)), None)
            if index is not None:
                return sub, index
    return None


def _print_view(controller: NavigationController) -> None:
    view = controller.current_view()
    t = Table(title=f"[bold]{escape(view.header)}[/bold]", show_header=False)
    t.add_column("", width=1)
    t.add_column("Row")
    for i, row in enumerate(view.rows):
        t.add_row("›" if i == view.cursor else "", Text(row.display))
    console.print(t)
    console.print(f"[dim]{escape(view.breadcrumbs)}[/dim]")
    if view.sub_page_count > 1:
        console.print(f"[dim]Row-list {view.sub_page + 1} of {view.sub_page_count}[/dim]")


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN CALLBACK
# ═══════════════════════════════════════════════════════════════════════════════

@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context):
    """
    [bold]drilldown[/bold]: a drill-down browser over topics, partitions and messages.

    [dim]Run without arguments to launch the interactive browser.[/dim]

    [bold]Quick Commands:[/bold]
      drilldown browse      Interactive browser
      drilldown chain       Show the levels of the hierarchy
      drilldown peek KEY    Select keys in order and print the page
    """
    if ctx.invoked_subcommand is None:
        browse(width=None, height=None, topics=None)
        raise typer.Exit(code=0)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════════

@app.command("browse", help="[bold cyan]B[/bold cyan]rowse interactively")
def browse(
    width: Optional[int] = typer.Option(None, "--width", "-w", min=1, help="Viewport width (default: terminal)"),
    height: Optional[int] = typer.Option(None, "--height", "-H", min=1, help="Viewport height (default: terminal)"),
    topics: Optional[int] = typer.Option(None, "--topics", "-t", min=0, help="Number of mock topics"),
):
    """Launch the interactive browser."""
    settings = load_settings()
    setup_logging(settings)
    controller = _start(settings, width, height, topics)

    fixed = None
    if width or height or settings.DRILLDOWN_VIEWPORT_WIDTH or settings.DRILLDOWN_VIEWPORT_HEIGHT:
        fixed = (controller.viewport_width, controller.viewport_height)

    host = TerminalHost(
        console=console,
        controller=controller,
        keymap=build_keymap(settings.DRILLDOWN_KEYMAP),
        fixed_size=fixed,
    )
    try:
        host.run()
    except KeyboardInterrupt:
        console.print("\n[dim]👋 Interrupted. Goodbye![/]")


@app.command("chain", help="Show the levels of the hierarchy in drill-down order")
def chain():
    levels = chain_levels(build_topic_chain())
    t = Table(title="[bold]Levels[/bold]")
    t.add_column("Depth", style="cyan", justify="right")
    t.add_column("Level", style="bold")
    t.add_column("Select", style="dim")
    for depth, name in enumerate(levels, start=1):
        t.add_row(str(depth), name, "→ " + levels[depth] if depth < len(levels) else "leaf")
    console.print(t)


@app.command("peek", help="Select KEYS in order and print the resulting page")
def peek(
    keys: Optional[List[str]] = typer.Argument(None, help="Row keys (or display text) to select, root first"),
    height: int = typer.Option(24, "--height", "-H", min=1, help="Viewport height"),
    topics: Optional[int] = typer.Option(None, "--topics", "-t", min=0, help="Number of mock topics"),
):
    """Drill down without the interactive UI."""
    settings = load_settings()
    controller = _start(settings, 80, height, topics)

    for key in keys or []:
        found = _find_row(controller, key)
        if found is None:
            header = controller.current_view().header
            console.print(f"[red]No row[/red] {escape(repr(key))} [red]on page[/red] {escape(repr(header))}")
            raise typer.Exit(code=1)

        sub, index = found
        while controller.stack.top().current_sub_page < sub:
            controller.handle_input(NavigationEvent.NEXT_SUB_PAGE)
        while controller.stack.top().current_sub_page > sub:
            controller.handle_input(NavigationEvent.PREV_SUB_PAGE)

        while controller.cursor > index:
            controller.handle_input(NavigationEvent.MOVE_UP)
        while controller.cursor < index:
            controller.handle_input(NavigationEvent.MOVE_DOWN)

        depth = controller.stack.depth()
        err = controller.handle_input(NavigationEvent.SELECT)
        if err is not None:
            render_error(console, "Fetch failed", str(err))
            raise typer.Exit(code=1)
        if controller.stack.depth() == depth:
            console.print(
                f"[yellow]{escape(repr(controller.current_view().header))} is a leaf page; stopped at[/yellow] {escape(repr(key))}"
            )
            break

    _print_view(controller)


def main():
    app()
