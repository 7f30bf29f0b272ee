"""
Main CLI for the Congkak engine.
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Dict, Optional

from rich.prompt import Prompt
from tqdm import tqdm

from ..config import EngineConfig, ExtraTurnPolicy
from ..core import score, weighted_score, winner
from ..engine import CongkakEngine
from ..errors import CongkakError
from ..opponent import Difficulty
from ..session import Match
from ..storage import HistoryBackend, PostgreSQLBackend, SQLiteBackend
from ..utils.rich_display import GameDisplay, console, setup_rich_logging

DIFFICULTIES = [d.value for d in Difficulty]


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_inventory(text: str) -> Dict[str, int]:
    """
    Parse an inventory given as "white=10,yellow=5".

    Raises:
        argparse.ArgumentTypeError: On malformed entries
    """
    inventory: Dict[str, int] = {}
    for entry in filter(None, (part.strip() for part in text.split(","))):
        name, sep, count = entry.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"Expected kind=count, got {entry!r}")
        try:
            inventory[name.strip().lower()] = int(count)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid count in {entry!r}") from None
    return inventory


def build_engine(seed: Optional[int], extra_turns: str = "continuation") -> CongkakEngine:
    """Engine seeded for replay, with the chosen extra-turn policy."""
    config = EngineConfig(extra_turn_policy=ExtraTurnPolicy(extra_turns))
    return CongkakEngine(config=config, rng=random.Random(seed))


def open_storage(args) -> HistoryBackend:
    """Open the history backend selected on the command line."""
    if args.backend == "postgresql":
        return PostgreSQLBackend(
            host=args.pg_host,
            port=args.pg_port,
            database=args.pg_database,
            user=args.pg_user,
            password=args.pg_password,
        )
    db_path = Path(args.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return SQLiteBackend(str(db_path))


def describe_storage(args) -> str:
    if args.backend == "postgresql":
        return f"PostgreSQL ({args.pg_host}:{args.pg_port}/{args.pg_database})"
    return f"SQLite ({args.db_path})"


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags selecting where match history lives."""
    parser.add_argument(
        "--backend",
        choices=["sqlite", "postgresql"],
        default="sqlite",
        help="History backend",
    )
    parser.add_argument("--db-path", default=None, help="Path to SQLite database file")
    parser.add_argument("--pg-host", default="localhost", help="PostgreSQL host")
    parser.add_argument("--pg-port", type=int, default=5432, help="PostgreSQL port")
    parser.add_argument("--pg-database", default="congkak", help="PostgreSQL database name")
    parser.add_argument("--pg-user", default="postgres", help="PostgreSQL user")
    parser.add_argument("--pg-password", default="", help="PostgreSQL password")


def play_command(args):
    """Play a match against the computer in the terminal."""
    setup_rich_logging(args.log_level)
    logger = logging.getLogger(__name__)

    engine = build_engine(args.seed, args.extra_turns)
    match = Match.vs_computer(engine, args.difficulty)
    display = GameDisplay(player_names=("You", "Tok Aki"))

    display.show_header("Congkak", args.difficulty, args.seed)
    match.start(args.inventory)

    highlight = None
    while not engine.is_game_over():
        display.show_board(engine.snapshot(), highlight)
        display.show_scores(
            (engine.score(1), engine.score(2)),
            (engine.weighted_score(1), engine.weighted_score(2)),
        )

        if match.is_computer_turn():
            display.log_info("Tok Aki is thinking...")
            steps = match.play_computer_turn()
        else:
            legal = [str(pit) for pit in engine.legal_moves()]
            choice = Prompt.ask("Your pit (q to quit)", choices=legal + ["q"])
            if choice == "q":
                display.log_warning("Match abandoned")
                return
            try:
                steps = match.play_move(int(choice))
            except CongkakError as e:
                display.log_error(str(e))
                continue

        for step in steps:
            display.show_step(step)
            if step.position is not None:
                highlight = step.position

    display.show_board(engine.snapshot(), title="Final board")
    result = match.result()
    display.show_result(
        result.won, result.player_score, result.opponent_score, result.coins_earned, result.xp_earned
    )
    if result.inventory is not None:
        display.log_info(f"Inventory: {result.inventory}")

    if args.backend == "postgresql" or args.db_path:
        with open_storage(args) as storage:
            match_id = storage.save(result.to_record(args.profile))
        logger.info(f"Saved match {match_id} ({describe_storage(args)})")


def simulate_command(args):
    """Play computer-vs-computer matches and report totals."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    engine = build_engine(args.seed, args.extra_turns)
    wins = {1: 0, 2: 0}
    draws = 0
    totals = {1: 0, 2: 0}
    weighted_totals = {1: 0, 2: 0}

    logger.info(f"Simulating {args.games} games: P1 {args.p1} vs P2 {args.p2}")

    for _ in tqdm(range(args.games), desc="Simulating", unit=" game"):
        match = Match(engine, {1: args.p1, 2: args.p2})
        match.start()
        match.play_out()

        board = engine.board()
        result = winner(board)
        if result is None:
            draws += 1
        else:
            wins[result] += 1
        for player in (1, 2):
            totals[player] += score(board, player)
            weighted_totals[player] += weighted_score(board, player)

    games = max(args.games, 1)
    console.rule("[bold blue]Simulation results[/bold blue]")
    console.print(f"P1 ({args.p1}) wins: {wins[1]:,}")
    console.print(f"P2 ({args.p2}) wins: {wins[2]:,}")
    console.print(f"Draws: {draws:,}")
    console.print(
        f"Mean tokens: P1 {totals[1] / games:.1f} | P2 {totals[2] / games:.1f}"
    )
    console.print(
        f"Mean points: P1 {weighted_totals[1] / games:.1f} | P2 {weighted_totals[2] / games:.1f}"
    )
    return wins, draws


def history_command(args):
    """Show match history for a profile, or the leaderboard."""
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    if args.backend == "sqlite" and not args.db_path:
        logger.error("--db-path is required with the sqlite backend")
        sys.exit(1)

    display = GameDisplay()
    logger.info(f"Backend: {describe_storage(args)}")

    with open_storage(args) as storage:
        logger.info(f"Total matches: {storage.count_matches():,}")
        if args.profile:
            records = storage.get_history(args.profile, limit=args.limit)
            if not records:
                logger.warning(f"No matches found for profile {args.profile}")
            display.show_table(display.history_table(records))
        else:
            display.show_table(display.leaderboard_table(storage.get_leaderboard(limit=args.limit)))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(description="Congkak engine")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play against the computer")
    play_parser.add_argument(
        "--difficulty", choices=DIFFICULTIES, default="normal", help="Opponent difficulty"
    )
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed for replay")
    play_parser.add_argument(
        "--inventory",
        type=parse_inventory,
        default=None,
        help="Starting pool as kind=count pairs, e.g. white=10,yellow=5",
    )
    play_parser.add_argument(
        "--extra-turns",
        choices=[p.value for p in ExtraTurnPolicy],
        default=ExtraTurnPolicy.CONTINUATION.value,
        help="continuation=own-store landing keeps the turn, credit=also banks a later extra turn",
    )
    add_storage_arguments(play_parser)
    play_parser.add_argument("--profile", default="local", help="Profile id for the history")
    play_parser.set_defaults(func=play_command)

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Computer vs computer matches")
    simulate_parser.add_argument("--games", type=int, default=100, help="Number of games")
    simulate_parser.add_argument("--p1", choices=DIFFICULTIES, default="normal")
    simulate_parser.add_argument("--p2", choices=DIFFICULTIES, default="normal")
    simulate_parser.add_argument("--seed", type=int, default=None)
    simulate_parser.add_argument(
        "--extra-turns",
        choices=[p.value for p in ExtraTurnPolicy],
        default=ExtraTurnPolicy.CONTINUATION.value,
    )
    simulate_parser.set_defaults(func=simulate_command)

    # History command
    history_parser = subparsers.add_parser("history", help="Show match history or leaderboard")
    add_storage_arguments(history_parser)
    history_parser.add_argument("--profile", default=None, help="Profile id (omit for leaderboard)")
    history_parser.add_argument("--limit", type=int, default=20)
    history_parser.set_defaults(func=history_command)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
