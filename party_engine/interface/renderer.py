"""
Display and rendering helpers for the terminal shell.

ConsoleView turns session events into rich output. It only draws; input
is collected by the CLI loop.
"""

from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..state.event_bus import EventType, GameEvent
from ..state.schema import Mode, Player, Prompt, PromptType
from ..systems.turns import TurnState
from .view import GameView

# Shared console instance
console = Console()

THEME = {
    "primary": "magenta",
    "secondary": "grey70",
    "truth": "#4ECDC4",
    "dare": "#FF6B6B",
    "success": "green3",
    "danger": "red3",
    "warning": "dark_goldenrod",
    "dim": "dim",
}

STATE_TITLES = {
    TurnState.SELECT_VICTIM: "Selecting victim...",
    TurnState.CHOOSE_TYPE: "Truth or Dare?",
    TurnState.SHOW_TASK: "Your task",
    TurnState.ACTION_IN_PROGRESS: "Go!",
    TurnState.VALIDATION: "Did they do it?",
    TurnState.PUNISHMENT: "Punishment!",
    TurnState.EXIT: "Game over",
}


def player_badge(player: Player) -> Text:
    """Colored initial plus name."""
    badge = Text()
    badge.append(f" {player.initial} ", style=f"bold black on {player.avatar_color}")
    badge.append(f" {player.name}", style="bold")
    return badge


def show_mode(mode: Mode) -> None:
    title = f"[bold {mode.accent_color}]{mode.name}[/bold {mode.accent_color}]"
    if mode.warning:
        title += f"  [{THEME['warning']}]({mode.warning})[/{THEME['warning']}]"
    console.print(Panel(title, title="Mode", border_style=mode.accent_color, expand=False))


def show_prompt(prompt: Prompt, player: Player | None) -> None:
    color = THEME["truth"] if prompt.type == PromptType.TRUTH else THEME["dare"]
    header = prompt.type.value.upper()
    if player is not None:
        header = f"{player.name}: {header}"
    console.print(Panel(
        Text(prompt.text, style="bold"),
        title=f"[bold {color}]{header}[/bold {color}]",
        subtitle=f"[{THEME['dim']}]intensity {prompt.intensity}[/{THEME['dim']}]",
        border_style=color,
    ))


def show_standings(standings: list[Player], reward: str | None = None) -> None:
    table = Table(title=f"[bold {THEME['primary']}]Standings[/bold {THEME['primary']}]")
    table.add_column("#", style=THEME["dim"], justify="right")
    table.add_column("Player")
    table.add_column("Score", justify="right")

    for rank, player in enumerate(standings, start=1):
        table.add_row(str(rank), player_badge(player), str(player.score))

    console.print(table)
    if standings:
        console.print(Text.assemble("Winner: ", player_badge(standings[0])))
    if reward:
        console.print(f"[{THEME['success']}]Reward:[/{THEME['success']}] {reward}")


class ConsoleView(GameView):
    """Renders session events to the shared console."""

    def __init__(
        self,
        lookup: Callable[[str], Player | None] = lambda player_id: None,
        verbose: bool = False,
    ):
        self.lookup = lookup
        self.verbose = verbose

    def on_event(self, event: GameEvent) -> None:
        if event.type == EventType.STATE_CHANGED:
            self._on_state(event)
        elif event.type == EventType.SCORE_CHANGED:
            player = self.lookup(event.data["player"])
            name = player.name if player else event.data["player"]
            style = THEME["success"] if event.data["delta"] > 0 else THEME["danger"]
            console.print(
                f"[{style}]{name} {event.data['delta']:+d}[/{style}] "
                f"[{THEME['dim']}](now {event.data['score']})[/{THEME['dim']}]"
            )
        elif event.type == EventType.SESSION_STARTED:
            console.rule(f"[bold {THEME['primary']}]Truth or Dare[/bold {THEME['primary']}]")
        elif event.type == EventType.SESSION_ENDED:
            console.rule(f"[bold {THEME['primary']}]{STATE_TITLES[TurnState.EXIT]}[/bold {THEME['primary']}]")

    def _on_state(self, event: GameEvent) -> None:
        to_state = event.data["to"]
        if self.verbose:
            console.print(
                f"[{THEME['dim']}]{event.data['from'].value} -> {to_state.value}[/{THEME['dim']}]"
            )

        if to_state == TurnState.SELECT_VICTIM:
            player = self.lookup(event.data["player"])
            console.print()
            console.print(f"[{THEME['secondary']}]{STATE_TITLES[to_state]}[/{THEME['secondary']}]")
            if player is not None:
                console.print(Text.assemble("On trial: ", player_badge(player)))
        elif to_state in (TurnState.ACTION_IN_PROGRESS, TurnState.VALIDATION):
            console.print(f"[bold]{STATE_TITLES[to_state]}[/bold]")
        elif to_state == TurnState.PUNISHMENT:
            console.print(f"[bold {THEME['danger']}]{STATE_TITLES[to_state]}[/bold {THEME['danger']}]")
