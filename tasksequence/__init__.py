"""
Task sequence host objects.

  - TsEnvironment - named string variables
  - TsProgressUi  - progress, error, reboot and swap-media dialogs

Quick start:
  from tasksequence import TsEnvironment, TsProgressUi
  env = TsEnvironment()
  if env.is_available():
      name = env["OSDComputerName"]
"""
from models.errors import (
    NativeInvocationFailure,
    NotAvailable,
    TaskSequenceError,
    UnexpectedDialogResult,
)
from models.schemas import ABSENT, DialogButton, MessageType, MessageboxResult, VariableEntry
from tasksequence.environment import TsEnvironment
from tasksequence.progress import TsProgressUi

# Role aliases
VariableStore = TsEnvironment
ProgressReporter = TsProgressUi

__all__ = [
    "TsEnvironment", "TsProgressUi", "VariableStore", "ProgressReporter",
    "ABSENT", "DialogButton", "MessageType", "MessageboxResult", "VariableEntry",
    "TaskSequenceError", "NotAvailable", "NativeInvocationFailure", "UnexpectedDialogResult",
]
