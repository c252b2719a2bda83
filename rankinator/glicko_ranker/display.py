"""Rich UI components for the leaderboard."""

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rankinator.glicko_ranker.models import Pair, RankedItem

# Shared console instance
console = Console()


def _plural(count: int) -> str:
    return f"{count} match" if count == 1 else f"{count} matches"


def create_standings_table(
    items: Sequence[RankedItem],
    initial_rating: float = 1500.0,
    top_n: int = 10
) -> Table:
    """Create a Rich table of the current leaderboard."""
    table = Table(
        title="[bold cyan]Leaderboard[/bold cyan]",
        box=box.ROUNDED,
        show_lines=False,
        header_style="bold magenta",
        title_justify="left",
    )

    table.add_column("Rank", style="dim", width=5, justify="center")
    table.add_column("Rating", style="yellow", width=14, justify="right")
    table.add_column("RD", style="dim", width=6, justify="right")
    table.add_column("Matches", style="green", width=12, justify="right")
    table.add_column("Name", style="cyan", max_width=50, overflow="ellipsis")

    ranked = sorted(items, key=lambda x: x.rating, reverse=True)

    for i, item in enumerate(ranked[:top_n], 1):
        rank_style = f"[bold gold1]#{i}[/bold gold1]" if i == 1 else f"[dim]#{i}[/dim]"

        diff = item.rating - initial_rating
        if round(diff) > 0:
            rating_str = f"[green]{item.rating:.0f}[/green] [dim](+{diff:.0f})[/dim]"
        elif round(diff) < 0:
            rating_str = f"[red]{item.rating:.0f}[/red] [dim]({diff:.0f})[/dim]"
        else:
            rating_str = f"{item.rating:.0f}"

        table.add_row(
            rank_style,
            rating_str,
            f"{item.deviation:.0f}",
            _plural(item.match_count),
            item.name[:50],
        )

    if len(ranked) > top_n:
        table.add_row(
            "...",
            "",
            "",
            "",
            f"[dim]and {len(ranked) - top_n} more items[/dim]",
        )

    return table


def create_pair_panel(pair: Pair | None) -> Panel:
    """Create a panel showing the pending comparison."""
    if pair is None:
        return Panel(
            "[dim]Add at least two items to start comparing[/dim]",
            title="[bold]Next Comparison[/bold]",
            border_style="dim",
            box=box.ROUNDED,
        )

    first, second = pair
    content = Text()
    content.append(f"{first.name}\n", style="bold cyan")
    content.append(f"Rating {first.rating:.0f} · {_plural(first.match_count)}\n", style="dim")
    content.append("    vs\n", style="dim")
    content.append(f"{second.name}\n", style="bold magenta")
    content.append(f"Rating {second.rating:.0f} · {_plural(second.match_count)}", style="dim")

    return Panel(
        content,
        title="[bold]Next Comparison[/bold]",
        border_style="yellow",
        box=box.ROUNDED,
    )


def print_standings(
    items: Sequence[RankedItem],
    initial_rating: float = 1500.0,
    top_n: int = 10,
    output: Console | None = None,
) -> None:
    """Print the leaderboard table."""
    (output or console).print(create_standings_table(items, initial_rating, top_n))
