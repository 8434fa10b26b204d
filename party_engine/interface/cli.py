"""
Command-line shell for party-engine.

Plays Truth or Dare at the terminal: one shared screen, players pass the
keyboard around. This is just another UI over SessionController; the
engine knows nothing about it.

Usage:
    party-engine play Alice Bob Carol --mode party --rounds 5
    party-engine modes
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path
from typing import Callable

from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..config import load_config
from ..state.actions import (
    AcknowledgePunishment,
    ChooseType,
    CompleteAction,
    RequestExit,
    RevealTask,
    SkipTask,
    Validate,
)
from ..state.schema import MODE_CATALOG, PromptType, SessionConfig
from ..systems.errors import GameError, RegistryError
from ..systems.session import SessionController
from ..systems.turns import TurnState
from .renderer import THEME, ConsoleView, console, show_mode, show_prompt, show_standings

logger = logging.getLogger(__name__)

Ask = Callable[..., str]
AskYesNo = Callable[..., bool]


def run_session(
    controller: SessionController,
    ask: Ask = Prompt.ask,
    confirm: AskYesNo = Confirm.ask,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Drive a started session until it reaches EXIT.

    `ask`, `confirm` and `sleep` are injectable so the loop can be scripted.
    """
    while controller.is_running:
        state = controller.state
        player = controller.current_player

        if state == TurnState.CHOOSE_TYPE:
            choice = ask(
                f"{player.name}, [bold {THEME['truth']}]t[/]ruth or [bold {THEME['dare']}]d[/]are? (q to quit)",
                choices=["t", "d", "q"],
            )
            if choice == "q":
                controller.dispatch(RequestExit())
            else:
                prompt_type = PromptType.TRUTH if choice == "t" else PromptType.DARE
                controller.dispatch(ChooseType(prompt_type=prompt_type))

        elif state == TurnState.SHOW_TASK:
            show_prompt(controller.current_prompt, player)
            choice = ask("Press Enter to start (q to quit)", default="", show_default=False)
            if choice.strip().lower() == "q":
                controller.dispatch(RequestExit())
            else:
                controller.dispatch(RevealTask())

        elif state == TurnState.ACTION_IN_PROGRESS:
            wait = controller.dwell_gate.remaining()
            if wait > 0:
                with console.status(f"[{THEME['dim']}]Give it a moment...[/{THEME['dim']}]"):
                    sleep(wait)
            choice = ask(r"\[d]one, \[s]kip, or \[q]uit", choices=["d", "s", "q"], default="d")
            if choice == "q":
                controller.dispatch(RequestExit())
            elif choice == "s":
                controller.dispatch(SkipTask())
            else:
                controller.dispatch(CompleteAction())

        elif state == TurnState.VALIDATION:
            completed = confirm(f"Did {player.name} really do it?", default=True)
            controller.dispatch(Validate(completed=completed))

        elif state == TurnState.PUNISHMENT:
            reward = controller.session.reward
            if reward:
                console.print(f"[{THEME['danger']}]Penalty:[/{THEME['danger']}] {reward}")
            ask("Press Enter once the punishment is served", default="", show_default=False)
            controller.dispatch(AcknowledgePunishment())

        else:
            # Routing states are passed through by the controller itself
            raise GameError(f"Shell has nothing to show for {state.value}")

    show_standings(controller.standings(), controller.session.reward)


def show_modes() -> None:
    table = Table(title="Modes")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Players", justify="right")
    table.add_column("Note", style=THEME["warning"])
    for mode in MODE_CATALOG.values():
        limit = f"{mode.min_players}+" if mode.max_players is None else f"{mode.min_players}-{mode.max_players}"
        table.add_row(mode.id, f"[{mode.accent_color}]{mode.name}[/]", limit, mode.warning or "")
    console.print(table)


def _find_player(controller: SessionController, player_id: str):
    return next((p for p in controller.players if p.id == player_id), None)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="party-engine", description="Party games at the terminal")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging and transition trace")
    sub = parser.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Play Truth or Dare")
    play.add_argument("players", nargs="+", help="Player names in join order")
    play.add_argument("--mode", "-m", default="original", help="Content mode (see `modes`)")
    play.add_argument("--rounds", "-r", type=_positive_int, default=None, help="Stop after this many turns")
    play.add_argument("--reward", default=None, help="Custom reward or forfeit text")
    play.add_argument("--seed", type=int, default=None, help="Seed for reproducible picks")
    play.add_argument("--config-dir", type=Path, default=Path("."), help="Where .party_engine.json lives")

    sub.add_parser("modes", help="List content modes")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "modes":
        show_modes()
        return 0

    config = load_config(args.config_dir)
    rng = random.Random(args.seed) if args.seed is not None else None
    controller = SessionController(config=config, rng=rng)
    view = ConsoleView(lookup=lambda pid: _find_player(controller, pid), verbose=args.verbose)
    controller.attach_view(view)

    session_config = SessionConfig.create(
        args.players, mode=args.mode, rounds=args.rounds, reward=args.reward,
    )
    show_mode(session_config.mode)

    try:
        controller.start(session_config)
    except RegistryError as e:
        logger.info("Start rejected: %s", e)
        console.print(f"[{THEME['danger']}]{e}[/{THEME['danger']}]")
        return 2

    try:
        run_session(controller)
    except (KeyboardInterrupt, EOFError):
        console.print()
        controller.exit()
        show_standings(controller.standings(), controller.session.reward)
    finally:
        controller.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
