"""
Core data models for the tsbridge system.
These are the universal types shared by the native layer and the
task sequence wrappers.
"""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


# ──────────────────────────────────────────────────────────────
#  Absent marker - "omit this value" for optional dialog fields
# ──────────────────────────────────────────────────────────────

class _Absent:
    """
    Singleton marker for an omitted optional argument.

    Distinct from ``None``, ``0`` and ``""``: a step count of 0 means
    "0 of N", while ABSENT means the field is unknown and the native
    engine should leave it out.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()

# Optional native arguments: a value, ABSENT, or None (normalized to ABSENT)
OptStr = Union[str, _Absent, None]
OptInt = Union[int, _Absent, None]


def is_absent(value: Any) -> bool:
    return value is ABSENT


def optional(value: Any) -> Any:
    """Normalize a caller-supplied optional value; None becomes ABSENT."""
    if value is None:
        return ABSENT
    return value


# ──────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────

class DialogButton(str, Enum):
    OK = "ok"
    CANCEL = "cancel"
    ABORT = "abort"
    RETRY = "retry"
    IGNORE = "ignore"
    YES = "yes"
    NO = "no"
    TRY_AGAIN = "try_again"
    CONTINUE = "continue"


class MessageType(IntEnum):
    """Button layout of a message box. Ordinals are fixed by the dialog engine."""
    OK = 0
    OK_CANCEL = 1
    ABORT_RETRY_IGNORE = 2
    YES_NO_CANCEL = 3
    YES_NO = 4
    RETRY_CANCEL = 5
    CANCEL_TRY_AGAIN_CONTINUE = 6

    @property
    def buttons(self) -> tuple[DialogButton, ...]:
        return _LAYOUT_BUTTONS[self]

    def allows(self, button: DialogButton) -> bool:
        return button in _LAYOUT_BUTTONS[self]


_LAYOUT_BUTTONS: dict[MessageType, tuple[DialogButton, ...]] = {
    MessageType.OK: (DialogButton.OK,),
    MessageType.OK_CANCEL: (DialogButton.OK, DialogButton.CANCEL),
    MessageType.ABORT_RETRY_IGNORE: (DialogButton.ABORT, DialogButton.RETRY, DialogButton.IGNORE),
    MessageType.YES_NO_CANCEL: (DialogButton.YES, DialogButton.NO, DialogButton.CANCEL),
    MessageType.YES_NO: (DialogButton.YES, DialogButton.NO),
    MessageType.RETRY_CANCEL: (DialogButton.RETRY, DialogButton.CANCEL),
    MessageType.CANCEL_TRY_AGAIN_CONTINUE: (
        DialogButton.CANCEL, DialogButton.TRY_AGAIN, DialogButton.CONTINUE,
    ),
}


# ──────────────────────────────────────────────────────────────
#  Variables and dialog results
# ──────────────────────────────────────────────────────────────

class VariableEntry(BaseModel):
    """A single task sequence variable."""
    model_config = ConfigDict(frozen=True)

    key: str
    value: str = ""

    def as_pair(self) -> tuple[str, str]:
        return self.key, self.value


class MessageboxResult(BaseModel):
    """Outcome of a result-bearing message box."""
    model_config = ConfigDict(frozen=True)

    button: DialogButton
    code: int                                 # raw value returned by the dialog engine
    message_type: MessageType = MessageType.OK


class NativeCall(BaseModel):
    """Record of one member invocation against an emulated native object."""
    member: str
    kind: str = "method"                      # method | get | set
    args: tuple[Any, ...] = Field(default_factory=tuple)
