"""UI-facing seams: the GameView contract and the terminal shell."""

from .view import GameView, RecordingView

__all__ = [
    "GameView",
    "RecordingView",
]
