"""
TsProgressUi - task sequence progress and dialog reporting.

Drives the host's progress UI automation object (Microsoft.SMS.TsProgressUI
by default):
  - close()                     → CloseProgressDialog
  - report_action_progress()    → ShowActionProgress
  - show_error()                → ShowErrorDialog
  - show_message()              → ShowMessage
  - show_message_with_result()  → ShowMessageEx
  - report_ts_progress()        → ShowTsProgress
  - show_reboot_prompt()        → ShowRebootDialog
  - show_swap_media_prompt()    → ShowSwapMediaDialog

Optional arguments left out are forwarded as ABSENT so the dialog engine
can tell "unknown" from 0 or "". Every operation raises NotAvailable when
the progress UI object cannot be bound; none of them is a silent no-op.
"""
from __future__ import annotations

import structlog
from typing import Any, Optional, Union

from config.settings import ProgressUiConfig
from models.errors import UnexpectedDialogResult
from models.schemas import (
    ABSENT, DialogButton, MessageType, MessageboxResult, OptInt, OptStr, optional,
)
from native.base import NativeBackend
from native.binder import NativeObjectBinder

logger = structlog.get_logger()


def _unsigned(name: str, value: Any) -> Any:
    """Numbers cross the boundary as unsigned integers; nothing is coerced."""
    value = optional(value)
    if value is ABSENT:
        return ABSENT
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _text(value: Any) -> Any:
    value = optional(value)
    return value if value is ABSENT else str(value)


class TsProgressUi:
    """Progress and dialog operations, bound lazily to the native progress UI object."""

    def __init__(
        self,
        class_id: Optional[str] = None,
        backend: Optional[NativeBackend] = None,
        config: Optional[ProgressUiConfig] = None,
    ):
        if class_id is None or backend is None or config is None:
            from config.settings import get_settings
            settings = get_settings()
            class_id = class_id or settings.native.progress_ui_class_id
            config = config or settings.progress_ui
            if backend is None:
                from native.factory import get_backend
                backend = get_backend()
        self.config = config
        self._result_codes: dict[int, DialogButton] = {
            int(code): DialogButton(button) for code, button in config.result_codes.items()
        }
        self._binder = NativeObjectBinder(class_id, backend)

    @property
    def class_id(self) -> str:
        return self._binder.class_id

    @property
    def state(self) -> str:
        return self._binder.state

    def is_available(self) -> bool:
        return self._binder.is_available()

    def _require(self) -> None:
        """Raise NotAvailable before any argument is looked at."""
        self._binder.instance()

    def _call(self, method: str, *args: Any) -> Any:
        logger.debug("ts_progress_call", method=method)
        return self._binder.invoke(method, *args)

    # ── Progress ──────────────────────────────────────────

    def close(self) -> None:
        """Dismiss any open progress dialog."""
        self._call("CloseProgressDialog")

    def report_action_progress(
        self,
        org: OptStr = ABSENT,
        sequence_name: OptStr = ABSENT,
        title: OptStr = ABSENT,
        action: OptStr = ABSENT,
        step: OptInt = ABSENT,
        max_step: OptInt = ABSENT,
        sub_action: OptStr = ABSENT,
        sub_step: OptInt = ABSENT,
        sub_max_step: OptInt = ABSENT,
    ) -> None:
        """Show progress of a custom action while it runs."""
        self._require()
        self._call(
            "ShowActionProgress",
            _text(org), _text(sequence_name), _text(title), _text(action),
            _unsigned("step", step), _unsigned("max_step", max_step),
            _text(sub_action),
            _unsigned("sub_step", sub_step), _unsigned("sub_max_step", sub_max_step),
        )

    def report_ts_progress(
        self,
        org: OptStr = ABSENT,
        sequence_name: OptStr = ABSENT,
        title: OptStr = ABSENT,
        action: OptStr = ABSENT,
        step: OptInt = ABSENT,
        max_step: OptInt = ABSENT,
    ) -> None:
        """Show sequence-level progress."""
        self._require()
        self._call(
            "ShowTsProgress",
            _text(org), _text(sequence_name), _text(title), _text(action),
            _unsigned("step", step), _unsigned("max_step", max_step),
        )

    # ── Dialogs ───────────────────────────────────────────

    def show_error(
        self,
        org: OptStr = ABSENT,
        sequence_name: OptStr = ABSENT,
        title: OptStr = ABSENT,
        message: OptStr = ABSENT,
        error_code: Optional[int] = None,
        timeout_seconds: Optional[int] = None,
        restart: bool = False,
    ) -> None:
        """
        Show the error dialog.

        error_code and timeout_seconds default to the configured values
        (1 and 900). restart tells the host to reboot when the dialog closes
        or times out.
        """
        self._require()
        if error_code is None:
            error_code = self.config.error_code
        if timeout_seconds is None:
            timeout_seconds = self.config.error_timeout_seconds
        self._call(
            "ShowErrorDialog",
            _text(org), _text(sequence_name), _text(title), _text(message),
            _unsigned("error_code", error_code), _unsigned("timeout_seconds", timeout_seconds),
            1 if restart else 0,
        )

    def show_message(self, text: str, caption: Optional[str] = None) -> None:
        self._require()
        caption = self.config.message_caption if caption is None else caption
        self._call("ShowMessage", text, caption, int(MessageType.OK))

    def show_message_with_result(
        self,
        text: str,
        caption: Optional[str] = None,
        message_type: Union[MessageType, int] = MessageType.OK,
    ) -> MessageboxResult:
        """
        Show a message box and return the button the user pressed.

        Raises UnexpectedDialogResult when the dialog engine answers with a
        code that is unmapped or names a button the layout does not show.
        """
        self._require()
        caption = self.config.message_caption if caption is None else caption
        message_type = MessageType(message_type)
        raw = self._call("ShowMessageEx", text, caption, int(message_type), 0)
        return self._decode_result(raw, message_type)

    def _decode_result(self, raw: Any, message_type: MessageType) -> MessageboxResult:
        # COM servers with out-parameters answer with a tuple; the result is last
        if isinstance(raw, (tuple, list)):
            raw = raw[-1] if raw else None
        try:
            code = int(raw)
        except (TypeError, ValueError):
            raise UnexpectedDialogResult(self.class_id, raw, message_type) from None

        button = self._result_codes.get(code)
        if button is None or not message_type.allows(button):
            logger.error("ts_dialog_unexpected_result", code=code,
                         message_type=message_type.name)
            raise UnexpectedDialogResult(self.class_id, code, message_type)
        logger.info("ts_dialog_result", button=button.value, message_type=message_type.name)
        return MessageboxResult(button=button, code=code, message_type=message_type)

    def show_reboot_prompt(
        self,
        org: OptStr = ABSENT,
        sequence_name: OptStr = ABSENT,
        title: OptStr = ABSENT,
        message: OptStr = ABSENT,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        self._require()
        if timeout_seconds is None:
            timeout_seconds = self.config.reboot_timeout_seconds
        self._call(
            "ShowRebootDialog",
            _text(org), _text(sequence_name), _text(title), _text(message),
            _unsigned("timeout_seconds", timeout_seconds),
        )

    def show_swap_media_prompt(self, sequence_name: str, media_number: int) -> None:
        """Prompt the user to insert the next media volume."""
        self._require()
        if sequence_name is None or media_number is None:
            raise ValueError("sequence_name and media_number are required")
        self._call(
            "ShowSwapMediaDialog",
            str(sequence_name), _unsigned("media_number", media_number),
        )

    # ── Lifecycle ─────────────────────────────────────────

    def release(self) -> None:
        self._binder.release()

    def __enter__(self) -> "TsProgressUi":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"TsProgressUi(class_id={self.class_id!r}, state={self.state!r})"
