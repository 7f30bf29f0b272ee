"""
Rich-based terminal display for matches.

Provides clean, formatted output with:
- Board rendering with per-pit token counts and colors
- One status line per resolved step
- Match result, history and leaderboard tables
"""

import logging
from collections import Counter
from typing import Iterable, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core import P1_STORE, P2_STORE, PITS_PER_SIDE, Step, StepStatus, TokenKind
from ..core.board import PitSnapshot

console = Console()
logger = logging.getLogger(__name__)

TOKEN_STYLES = {
    TokenKind.WHITE: "white",
    TokenKind.YELLOW: "yellow",
    TokenKind.RED: "red",
    TokenKind.BLACK: "bright_black",
    TokenKind.BLUE: "blue",
}


def format_pit(tokens: Sequence[TokenKind], highlight: bool = False) -> Text:
    """Token count plus a colored dot per kind present."""
    text = Text(f"{len(tokens):>2}", style="bold reverse" if highlight else "bold")
    kinds = Counter(tokens)
    for kind in TokenKind:
        if kinds[kind]:
            text.append(" ●", style=TOKEN_STYLES[kind])
    return text


class GameDisplay:
    """
    Rich-based display for a Congkak match.

    Shows:
    - The board, with the last touched pit highlighted
    - Step-by-step sowing progress
    - Scores and the final result
    """

    def __init__(self, player_names: Optional[Sequence[str]] = None, show_steps: bool = True):
        """
        Initialize game display.

        Args:
            player_names: Display names for player 1 and player 2
            show_steps: Print a status line for every step
        """
        self.player_names = list(player_names or ("Player 1", "Player 2"))
        self.show_steps = show_steps

    def log(self, message: str, style: str = ""):
        """Log a message using rich console."""
        console.print(message, style=style)

    def log_info(self, message: str):
        """Log info message."""
        console.print(f"[blue]ℹ[/blue] {message}")

    def log_success(self, message: str):
        """Log success message."""
        console.print(f"[green]✓[/green] {message}")

    def log_warning(self, message: str):
        """Log warning message."""
        console.print(f"[yellow]⚠[/yellow]  {message}")

    def log_error(self, message: str):
        """Log error message."""
        console.print(f"[red]✗[/red] {message}")

    def show_header(self, title: str, difficulty: str, seed: Optional[int] = None):
        """Show match header."""
        console.rule(f"[bold blue]{title}[/bold blue]")
        console.print(f"Opponent: {difficulty}")
        if seed is not None:
            console.print(f"Seed: {seed}")
        console.print()

    def board_table(self, pits: PitSnapshot, highlight: Optional[int] = None) -> Table:
        """
        Create the board table.

        Player 2's pits run right to left on the top row, player 1's left to
        right on the bottom row, with player 2's store on the left.
        """
        table = Table(show_header=False, box=None, padding=(0, 1))
        for _ in range(PITS_PER_SIDE + 2):
            table.add_column(justify="center")

        top = [format_pit(pits[i], i == highlight) for i in range(2 * PITS_PER_SIDE - 1, PITS_PER_SIDE - 1, -1)]
        bottom = [format_pit(pits[i], i == highlight) for i in range(PITS_PER_SIDE)]
        labels_top = [Text(str(i), style="dim") for i in range(2 * PITS_PER_SIDE - 1, PITS_PER_SIDE - 1, -1)]
        labels_bottom = [Text(str(i), style="dim") for i in range(PITS_PER_SIDE)]

        table.add_row("", *labels_top, "")
        table.add_row("", *top, "")
        table.add_row(
            format_pit(pits[P2_STORE], P2_STORE == highlight),
            *([""] * PITS_PER_SIDE),
            format_pit(pits[P1_STORE], P1_STORE == highlight),
        )
        table.add_row("", *bottom, "")
        table.add_row("", *labels_bottom, "")
        return table

    def show_board(self, pits: PitSnapshot, highlight: Optional[int] = None, title: str = ""):
        """Print the board inside a panel."""
        console.print(Panel(self.board_table(pits, highlight), title=title or None, expand=False))

    def show_step(self, step: Step):
        """Print one line describing a step."""
        if not self.show_steps:
            return
        status = step.status
        if status is StepStatus.PICKUP:
            console.print(f"  [cyan]Pick up[/cyan] pit {step.position} ({step.hand_count} in hand)")
        elif status is StepStatus.DROPPING:
            console.print(f"  [dim]Sowing ({step.hand_count}) → {step.position}[/dim]")
        elif status is StepStatus.PICKUP_CONTINUE:
            console.print(
                f"  [cyan]Continue[/cyan] from pit {step.position} ({step.hand_count} in hand)"
            )
        elif status is StepStatus.STEAL:
            console.print(f"  [green]Stole {step.stolen_count} tokens![/green]")
        elif status is StepStatus.CAPTURE:
            console.print(
                f"  [magenta]Capture![/magenta] {step.captured_count} tokens from pit {step.position}"
            )
        elif status is StepStatus.EXTRA_TURN_BONUS:
            console.print("  [yellow]Extra turn![/yellow]")
        elif status is StepStatus.END:
            if step.game_over:
                console.print("  [bold]Game over[/bold]")
            else:
                console.print(f"  Next: {self.player_names[step.current_player - 1]}")

    def show_scores(self, scores: Sequence[int], weighted: Sequence[int]):
        """Print both players' scores on one line."""
        console.print(
            f"[dim]{self.player_names[0]}: {scores[0]} tokens ({weighted[0]} pts) | "
            f"{self.player_names[1]}: {scores[1]} tokens ({weighted[1]} pts)[/dim]"
        )

    def show_result(self, won: bool, player_score: int, opponent_score: int, coins: int, xp: int):
        """Print the end-of-match summary."""
        if won:
            self.log_success(f"[bold green]VICTORY![/bold green] {player_score} vs {opponent_score}")
        else:
            self.log_error(f"[bold red]DEFEATED![/bold red] {player_score} vs {opponent_score}")
        sign = "+" if coins >= 0 else ""
        console.print(f"Coins: {sign}{coins} | XP: +{xp}")

    def history_table(self, records: Iterable) -> Table:
        """Create match history table."""
        table = Table(title="Match History")
        table.add_column("Date", style="cyan")
        table.add_column("Difficulty")
        table.add_column("Score", justify="right")
        table.add_column("Result")
        table.add_column("Coins", justify="right")
        table.add_column("XP", justify="right")

        for record in records:
            result = "[green]WIN[/green]" if record.won else "[red]LOSS[/red]"
            played = record.played_at.strftime("%Y-%m-%d %H:%M") if record.played_at else "-"
            sign = "+" if record.coins_earned >= 0 else ""
            table.add_row(
                played,
                record.difficulty,
                f"{record.player_score} - {record.ai_score}",
                result,
                f"{sign}{record.coins_earned}",
                f"+{record.xp_earned}",
            )
        return table

    def leaderboard_table(self, entries: Iterable) -> Table:
        """Create leaderboard table."""
        table = Table(title="Leaderboard")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Profile", style="cyan")
        table.add_column("XP", justify="right", style="yellow")
        table.add_column("Coins", justify="right")
        table.add_column("Wins", justify="right")
        table.add_column("Matches", justify="right")

        for rank, entry in enumerate(entries, start=1):
            table.add_row(
                str(rank),
                entry.profile_id,
                str(entry.total_xp),
                str(entry.total_coins),
                str(entry.wins),
                str(entry.matches),
            )
        return table

    def show_table(self, table: Table):
        console.print(table)


def setup_rich_logging(level: str = "INFO"):
    """Configure logging to work nicely with rich console."""
    from rich.logging import RichHandler

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )
