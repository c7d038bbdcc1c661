"""
COM Backend - Windows automation objects via pywin32.

Resolution turns a ProgID (e.g. "Microsoft.SMS.TSEnvironment") or a
"{CLSID}" string into a CLSID through the registry; an unregistered class
raises com_error, which becomes BackendResolutionError. Construction goes
through win32com.client.Dispatch, so type information is used when the
server publishes it.

pywin32 is only importable on Windows. Off-host the import failure is
reported as a resolution failure, the same as an unregistered class.
"""
from __future__ import annotations

import structlog
from typing import Any

from models.schemas import ABSENT
from native.errors import BackendResolutionError

logger = structlog.get_logger()


class ComBackend:
    """Late-bound IDispatch invocation over pywin32."""

    name = "com"

    def __init__(self, initialize_thread: bool = True):
        self.initialize_thread = initialize_thread

    # ── Binding ───────────────────────────────────────────

    def resolve(self, class_id: str) -> Any:
        try:
            import pywintypes
        except ImportError as exc:
            raise BackendResolutionError(class_id, "pywin32 is not installed") from exc

        try:
            clsid = pywintypes.IID(class_id)
        except pywintypes.com_error as exc:
            raise BackendResolutionError(class_id, f"class is not registered ({exc})") from exc
        logger.debug("com_class_resolved", class_id=class_id, clsid=str(clsid))
        return clsid

    def create(self, descriptor: Any) -> Any:
        try:
            import pythoncom
            import pywintypes
            import win32com.client
        except ImportError as exc:
            raise BackendResolutionError(str(descriptor), "pywin32 is not installed") from exc

        if self.initialize_thread:
            # Harmless when the apartment is already initialized on this thread
            pythoncom.CoInitialize()
        try:
            return win32com.client.Dispatch(descriptor)
        except pywintypes.com_error as exc:
            raise BackendResolutionError(str(descriptor), f"construction failed ({exc})") from exc

    def release(self, instance: Any) -> None:
        # The COM reference is dropped with the last Python reference
        logger.debug("com_instance_released")

    # ── Invocation ────────────────────────────────────────

    def invoke(self, instance: Any, method: str, *args: Any) -> Any:
        return getattr(instance, method)(*self._marshal(args))

    def get_property(self, instance: Any, name: str, *args: Any) -> Any:
        import pythoncom
        return self._raw_invoke(instance, name, pythoncom.DISPATCH_PROPERTYGET, True, args)

    def set_property(self, instance: Any, name: str, *args: Any) -> None:
        import pythoncom
        self._raw_invoke(instance, name, pythoncom.DISPATCH_PROPERTYPUT, False, args)

    def _raw_invoke(self, instance: Any, name: str, flags: int, want_result: bool,
                    args: tuple[Any, ...]) -> Any:
        """Parameterized property access, which attribute syntax cannot express."""
        disp = instance._oleobj_
        dispid = disp.GetIDsOfNames(name)
        return disp.Invoke(dispid, 0, flags, want_result, *self._marshal(args))

    @staticmethod
    def _marshal(args: tuple[Any, ...]) -> list[Any]:
        import pythoncom
        return [pythoncom.Empty if arg is ABSENT else arg for arg in args]
