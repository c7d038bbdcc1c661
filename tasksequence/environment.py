"""
TsEnvironment - task sequence variable store.

Reads and writes named string variables through the host's environment
automation object (Microsoft.SMS.TSEnvironment by default). Both MDT and
ConfigMgr task sequence hosts expose the same object.

    with TsEnvironment() as env:
        if env.is_available():
            env["OSDComputerName"] = "PC01"
            snapshot = env.snapshot_to_map()

Construction never touches the native side. is_available() never raises;
get/set/iteration raise NotAvailable outside the host, so callers can tell
"not running in a task sequence" from a native failure.
"""
from __future__ import annotations

import structlog
from typing import Iterator, Optional

from models.schemas import VariableEntry
from native.base import NativeBackend
from native.binder import NativeObjectBinder

logger = structlog.get_logger()


class TsEnvironment:
    """Task sequence variables, bound lazily to the native environment object."""

    def __init__(self, class_id: Optional[str] = None, backend: Optional[NativeBackend] = None):
        if class_id is None or backend is None:
            from config.settings import get_settings
            from native.factory import get_backend
            class_id = class_id or get_settings().native.environment_class_id
            backend = backend or get_backend()
        self._binder = NativeObjectBinder(class_id, backend)

    @property
    def class_id(self) -> str:
        return self._binder.class_id

    @property
    def state(self) -> str:
        return self._binder.state

    def is_available(self) -> bool:
        return self._binder.is_available()

    # ── Variables ─────────────────────────────────────────

    def list_keys(self) -> list[str]:
        """Names of the currently defined variables; empty outside the host."""
        if not self.is_available():
            return []
        names = self._binder.invoke("GetVariables") or ()
        # dict keeps the first occurrence and drops repeats
        return list(dict.fromkeys(name for name in names if isinstance(name, str)))

    def get(self, key: str) -> str:
        value = self._binder.get_property("Value", key)
        return "" if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        """Write a variable. Only strings are accepted; nothing is converted."""
        self._binder.instance()
        if not isinstance(value, str):
            raise TypeError(f"Task sequence variable {key!r} must be a str, got {type(value).__name__}")
        self._binder.set_property("Value", key, value)
        logger.debug("ts_variable_set", key=key)

    def __getitem__(self, key: str) -> str:
        return self.get(key)

    def __setitem__(self, key: str, value: str) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self.list_keys()

    # ── Iteration ─────────────────────────────────────────

    def iterate(self) -> Iterator[tuple[str, str]]:
        """
        Yield (name, value) for a fresh listing of the variables.

        Every call lists again, so two iterations may see different
        contents if the host changes variables in between.
        """
        if not self.is_available():
            # Listing alone is best-effort; reading values is not
            self._binder.instance()
        for key in self.list_keys():
            yield key, self.get(key)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return self.iterate()

    def entries(self) -> Iterator[VariableEntry]:
        for key, value in self.iterate():
            yield VariableEntry(key=key, value=value)

    def snapshot_to_map(self) -> dict[str, str]:
        """Materialize the current variables into a plain dict."""
        return dict(self.iterate())

    # ── Lifecycle ─────────────────────────────────────────

    def release(self) -> None:
        self._binder.release()

    def __enter__(self) -> "TsEnvironment":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"TsEnvironment(class_id={self.class_id!r}, state={self.state!r})"
