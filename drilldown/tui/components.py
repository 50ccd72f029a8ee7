"""Reusable rich renderers for the browser screen."""
from __future__ import annotations

from typing import TYPE_CHECKING

import questionary
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from .keymap import key_hints

if TYPE_CHECKING:
    from rich.console import Console

    from ..navigation.controller import View


# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

BRAND_STYLE = questionary.Style([
    ("qmark", "fg:#00b4d8 bold"),         # Cyan accent
    ("question", "bold"),
    ("answer", "fg:#90e0ef bold"),         # Light cyan for answers
    ("highlighted", "fg:#00b4d8 bold"),    # Highlighted item
    ("pointer", "fg:#00b4d8 bold"),        # Arrow pointer
    ("selected", "fg:#90e0ef"),            # Selected item
])

POINTER = "›"

_HINT_LABELS = {
    "move_down": "next",
    "move_up": "prev",
    "select": "open",
    "back": "back",
    "home": "home",
    "next_sub_page": "more",
    "prev_sub_page": "less",
    "jump": "jump",
    "quit": "quit",
}


# ═══════════════════════════════════════════════════════════════════════════════
# HEADER / BODY / FOOTER
# ═══════════════════════════════════════════════════════════════════════════════

def render_header(console: Console, view: View) -> None:
    """Render the page title above a rule."""
    console.print(Text(view.header, style="bold cyan"), overflow="ellipsis", no_wrap=True)
    console.print(Rule(style="dim"))


def render_body(console: Console, view: View, height: int) -> None:
    """Render the active rows with a pointer at the cursor.

    Rows below `height` are scrolled into view so the cursor stays visible.
    """
    height = max(1, height)
    if not view.rows:
        console.print(Text("(no rows)", style="dim italic"))
        for _ in range(height - 1):
            console.print()
        return

    start = 0
    if view.cursor >= height:
        start = view.cursor - height + 1
    shown = view.rows[start:start + height]

    table = Table.grid(padding=(0, 1))
    table.add_column(width=1, no_wrap=True)
    table.add_column(no_wrap=True, overflow="ellipsis")
    for i, row in enumerate(shown, start=start):
        if i == view.cursor:
            table.add_row(Text(POINTER, style="bold cyan"), Text(row.display, style="reverse"))
        else:
            table.add_row("", Text(row.display))
    console.print(table)
    for _ in range(height - len(shown)):
        console.print()


def render_footer(console: Console, view: View, keymap: dict[str, str]) -> None:
    """Render breadcrumbs, paging position, status and key hints."""
    console.print(Rule(style="dim"))
    line = Text()
    line.append(view.breadcrumbs, style="dim")
    if view.sub_page_count > 1:
        line.append(f"  [{view.sub_page + 1}/{view.sub_page_count}]", style="cyan")
    if view.status:
        line.append(f"  ✗ {view.status}", style="bold red")
    else:
        hints = "  ".join(f"{key} {_HINT_LABELS.get(action, action)}" for key, action in key_hints(keymap))
        line.append(f"  {hints}", style="dim")
    console.print(line, overflow="ellipsis", no_wrap=True)


def render_view(console: Console, view: View, keymap: dict[str, str], body_height: int) -> None:
    render_header(console, view)
    render_body(console, view, body_height)
    render_footer(console, view, keymap)


def render_error(
    console: Console,
    title: str,
    cause: str,
    action: str | None = None,
) -> None:
    """Render a friendly error panel with 3-part structure.

    Args:
        console: Rich Console for output
        title: Error title
        cause: What caused the error
        action: Suggested action to resolve
    """
    content = f"[bold red]✗ {escape(title)}[/bold red]\n\n"
    content += f"[yellow]Cause:[/yellow] {escape(cause)}\n"

    if action:
        content += f"\n[dim]→ {action}[/dim]"

    console.print(Panel.fit(content, border_style="red", title="Error"))
    console.print()
