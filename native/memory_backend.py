"""
InMemoryBackend - emulated task sequence host for development and testing.

Features:
  - Registers an environment object (variable dictionary) and a progress UI
    object (records every dialog call) under the configured class ids
  - Scripted message box results via queue_result()
  - Fault injection: construction faults per class id, invocation faults
    per member via fail_next()
  - Counts constructions per class id

All state is lost on process restart.
"""
from __future__ import annotations

import threading
import time
import structlog
from collections import defaultdict, deque
from typing import Any, Callable, Optional

from config.settings import DEFAULT_RESULT_CODES, NativeConfig
from models.schemas import DialogButton, MessageType, NativeCall
from native.errors import BackendResolutionError

logger = structlog.get_logger()


class EmulatedObject:
    """Base for emulated automation objects: call recording and fault injection."""

    def __init__(self):
        self.calls: list[NativeCall] = []
        self._faults: dict[str, deque[BaseException]] = defaultdict(deque)

    def fail_next(self, member: str, error: BaseException) -> None:
        """Make the next call to ``member`` raise ``error``."""
        self._faults[member].append(error)

    def _record(self, member: str, kind: str, args: tuple[Any, ...]) -> None:
        self.calls.append(NativeCall(member=member, kind=kind, args=args))
        if self._faults[member]:
            raise self._faults[member].popleft()

    def calls_to(self, member: str) -> list[NativeCall]:
        return [c for c in self.calls if c.member == member]

    def get_property(self, name: str, *args: Any) -> Any:
        raise AttributeError(name)

    def set_property(self, name: str, *args: Any) -> None:
        raise AttributeError(name)


class EmulatedEnvironment(EmulatedObject):
    """
    Stands in for the task sequence environment object.

    Unknown variables read as "" like the real host; pass strict_keys=True
    to have them raise KeyError instead.
    """

    def __init__(self, variables: Optional[dict[str, str]] = None, strict_keys: bool = False):
        super().__init__()
        self.variables: dict[str, str] = dict(variables or {})
        self.strict_keys = strict_keys

    def GetVariables(self) -> tuple[str, ...]:
        self._record("GetVariables", "method", ())
        return tuple(self.variables)

    def get_property(self, name: str, *args: Any) -> Any:
        self._record(name, "get", args)
        if name != "Value":
            raise AttributeError(name)
        (key,) = args
        if key not in self.variables:
            if self.strict_keys:
                raise KeyError(key)
            return ""
        return self.variables[key]

    def set_property(self, name: str, *args: Any) -> None:
        self._record(name, "set", args)
        if name != "Value":
            raise AttributeError(name)
        key, value = args
        self.variables[key] = value


class EmulatedProgressUi(EmulatedObject):
    """Stands in for the progress UI object. Dialogs are recorded, not shown."""

    def __init__(self, result_codes: Optional[dict[int, str]] = None):
        super().__init__()
        self.result_codes = dict(result_codes or DEFAULT_RESULT_CODES)
        self._results: deque[Any] = deque()
        self.open_dialog: Optional[str] = None

    def queue_result(self, result: Any) -> None:
        """Script the raw value returned by the next ShowMessageEx call."""
        self._results.append(result)

    def _show(self, member: str, args: tuple[Any, ...]) -> None:
        self._record(member, "method", args)
        self.open_dialog = member

    def CloseProgressDialog(self) -> None:
        self._record("CloseProgressDialog", "method", ())
        self.open_dialog = None

    def ShowActionProgress(self, *args: Any) -> None:
        self._show("ShowActionProgress", args)

    def ShowErrorDialog(self, *args: Any) -> None:
        self._show("ShowErrorDialog", args)

    def ShowMessage(self, *args: Any) -> None:
        self._show("ShowMessage", args)

    def ShowMessageEx(self, text: str, caption: str, message_type: int, result: Any) -> Any:
        self._show("ShowMessageEx", (text, caption, message_type, result))
        if self._results:
            return self._results.popleft()
        return self._default_code(MessageType(message_type))

    def ShowTsProgress(self, *args: Any) -> None:
        self._show("ShowTsProgress", args)

    def ShowRebootDialog(self, *args: Any) -> None:
        self._show("ShowRebootDialog", args)

    def ShowSwapMediaDialog(self, *args: Any) -> None:
        self._show("ShowSwapMediaDialog", args)

    def _default_code(self, message_type: MessageType) -> int:
        """Code of the first button in the layout, as if the user pressed it."""
        wanted = message_type.buttons[0]
        for code, button in self.result_codes.items():
            if DialogButton(button) == wanted:
                return code
        raise LookupError(f"No result code for {wanted.value}")


class InMemoryBackend:
    """Backend whose class registry lives in a dict."""

    name = "memory"

    def __init__(
        self,
        variables: Optional[dict[str, str]] = None,
        result_codes: Optional[dict[int, str]] = None,
        environment_class_id: str = NativeConfig.environment_class_id,
        progress_ui_class_id: str = NativeConfig.progress_ui_class_id,
        create_delay: float = 0.0,
    ):
        self.environment = EmulatedEnvironment(variables)
        self.progress_ui = EmulatedProgressUi(result_codes)
        self._registry: dict[str, Callable[[], Any]] = {
            environment_class_id: lambda: self.environment,
            progress_ui_class_id: lambda: self.progress_ui,
        }
        self.create_delay = create_delay
        self.construction_faults: set[str] = set()
        self.constructed: dict[str, int] = defaultdict(int)
        self.released: list[Any] = []
        self._lock = threading.Lock()
        logger.info("inmemory_backend_initialized", classes=list(self._registry))

    def register(self, class_id: str, factory: Callable[[], Any]) -> None:
        self._registry[class_id] = factory

    def unregister(self, class_id: str) -> None:
        self._registry.pop(class_id, None)

    # ── Binding ───────────────────────────────────────────

    def resolve(self, class_id: str) -> Any:
        if class_id not in self._registry:
            raise BackendResolutionError(class_id, "class is not registered")
        return class_id

    def create(self, descriptor: Any) -> Any:
        if self.create_delay:
            time.sleep(self.create_delay)
        if descriptor in self.construction_faults:
            raise BackendResolutionError(descriptor, "construction fault")
        with self._lock:
            self.constructed[descriptor] += 1
        return self._registry[descriptor]()

    def release(self, instance: Any) -> None:
        self.released.append(instance)

    # ── Invocation ────────────────────────────────────────

    def invoke(self, instance: Any, method: str, *args: Any) -> Any:
        return getattr(instance, method)(*args)

    def get_property(self, instance: Any, name: str, *args: Any) -> Any:
        return instance.get_property(name, *args)

    def set_property(self, instance: Any, name: str, *args: Any) -> None:
        instance.set_property(name, *args)
