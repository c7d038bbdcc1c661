"""
Error hierarchy for the task sequence wrappers.

NotAvailable             - the native object could not be resolved, constructed,
                           or has been released
NativeInvocationFailure  - opaque failure raised by the native object itself
UnexpectedDialogResult   - a message box returned a code its layout cannot produce
"""
from __future__ import annotations

from typing import Any, Optional


class TaskSequenceError(Exception):
    """Base exception for all task sequence operations."""

    def __init__(self, message: str, class_id: str = ""):
        self.class_id = class_id
        super().__init__(message)


class NotAvailable(TaskSequenceError):
    def __init__(self, class_id: str = "", reason: str = ""):
        self.reason = reason
        message = f"Native object {class_id or '<unknown>'} is not available"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, class_id)


class NativeInvocationFailure(TaskSequenceError):
    """The native object rejected a call. The payload is passed through untouched."""

    def __init__(self, class_id: str = "", member: str = "",
                 native_error: Optional[BaseException] = None, message: str = ""):
        self.member = member
        self.native_error = native_error
        if not message:
            message = f"{class_id}.{member} failed"
            if native_error is not None:
                message = f"{message}: {native_error}"
        super().__init__(message, class_id)


class UnexpectedDialogResult(NativeInvocationFailure):
    def __init__(self, class_id: str = "", code: Any = None, message_type: Any = None):
        self.code = code
        self.message_type = message_type
        super().__init__(
            class_id, "ShowMessageEx",
            message=f"Dialog result {code!r} is not valid for layout {message_type!r}",
        )
