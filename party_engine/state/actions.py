"""
UI input events accepted by SessionController.dispatch().

One model per button the player can press. Each maps to exactly one
transition out of the state where that button is shown:

    ChooseType            CHOOSE_TYPE        -> SHOW_TASK
    RevealTask            SHOW_TASK          -> ACTION_IN_PROGRESS
    CompleteAction        ACTION_IN_PROGRESS -> VALIDATION
    SkipTask              ACTION_IN_PROGRESS -> PUNISHMENT
    Validate(True/False)  VALIDATION         -> NEXT_TURN / PUNISHMENT
    AcknowledgePunishment PUNISHMENT         -> NEXT_TURN
    RequestExit           any non-terminal   -> EXIT
"""

from typing import ClassVar, Union

from pydantic import BaseModel

from .schema import PromptType


class UIAction(BaseModel):
    """Base for dispatchable events."""
    name: ClassVar[str] = "action"


class ChooseType(UIAction):
    name: ClassVar[str] = "choose_type"
    prompt_type: PromptType


class RevealTask(UIAction):
    name: ClassVar[str] = "reveal_task"


class CompleteAction(UIAction):
    name: ClassVar[str] = "complete_action"


class SkipTask(UIAction):
    name: ClassVar[str] = "skip_task"


class Validate(UIAction):
    name: ClassVar[str] = "validate"
    completed: bool


class AcknowledgePunishment(UIAction):
    name: ClassVar[str] = "acknowledge_punishment"


class RequestExit(UIAction):
    name: ClassVar[str] = "request_exit"


UIEvent = Union[
    ChooseType,
    RevealTask,
    CompleteAction,
    SkipTask,
    Validate,
    AcknowledgePunishment,
    RequestExit,
]
