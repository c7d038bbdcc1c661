"""Shared data models and errors."""
from models.errors import (
    NativeInvocationFailure,
    NotAvailable,
    TaskSequenceError,
    UnexpectedDialogResult,
)
from models.schemas import (
    ABSENT,
    DialogButton,
    MessageType,
    MessageboxResult,
    NativeCall,
    VariableEntry,
    is_absent,
    optional,
)

__all__ = [
    "ABSENT", "is_absent", "optional",
    "DialogButton", "MessageType", "MessageboxResult",
    "NativeCall", "VariableEntry",
    "TaskSequenceError", "NotAvailable", "NativeInvocationFailure", "UnexpectedDialogResult",
]
