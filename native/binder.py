"""
NativeObjectBinder - lazy, memoized binding of a class identifier.

Lifecycle:
    unbound ──(first use)──▶ bound ──release()──▶ released
        └────(resolution fails)──▶ unavailable

The first bind attempt runs at most once per binder, under a lock, so
concurrent first use constructs exactly one native instance. A failed
attempt is cached and never retried. Resolution and construction failures
never escape: they only make is_available() return False. Operations that
need the instance raise NotAvailable.
"""
from __future__ import annotations

import threading
import structlog
from dataclasses import dataclass
from typing import Any, Optional

from native.base import NativeBackend
from native.errors import BackendResolutionError
from models.errors import NativeInvocationFailure, NotAvailable

logger = structlog.get_logger()


@dataclass(frozen=True)
class NativeHandle:
    """A bound native object. Descriptor and instance always travel together."""
    class_id: str
    descriptor: Any
    instance: Any


class NativeObjectBinder:

    def __init__(self, class_id: str, backend: NativeBackend):
        self.class_id = class_id
        self.backend = backend
        self._handle: Optional[NativeHandle] = None
        self._attempted = False
        self._released = False
        self._failure_reason = ""
        self._lock = threading.Lock()

    # ── State ─────────────────────────────────────────────

    @property
    def state(self) -> str:
        if self._released:
            return "released"
        if not self._attempted:
            return "unbound"
        return "bound" if self._handle is not None else "unavailable"

    @property
    def handle(self) -> Optional[NativeHandle]:
        return self._handle

    def is_available(self) -> bool:
        """True when a native instance is bound. Never raises."""
        if not self._attempted:
            self._bind()
        return self._handle is not None

    def _bind(self) -> None:
        with self._lock:
            if self._attempted:
                return
            try:
                descriptor = self.backend.resolve(self.class_id)
                instance = self.backend.create(descriptor)
            except BackendResolutionError as exc:
                self._failure_reason = exc.reason or str(exc)
                logger.warning("native_unavailable", class_id=self.class_id,
                               backend=self.backend.name, reason=self._failure_reason)
            except Exception as exc:
                self._failure_reason = f"{type(exc).__name__}: {exc}"
                logger.warning("native_unavailable", class_id=self.class_id,
                               backend=self.backend.name, reason=self._failure_reason)
            else:
                self._handle = NativeHandle(self.class_id, descriptor, instance)
                logger.info("native_bound", class_id=self.class_id, backend=self.backend.name)
            finally:
                self._attempted = True

    def instance(self) -> Any:
        """Return the bound instance or raise NotAvailable."""
        if not self.is_available():
            reason = "released" if self._released else self._failure_reason
            raise NotAvailable(self.class_id, reason)
        return self._handle.instance

    # ── Forwarding ────────────────────────────────────────

    def invoke(self, method: str, *args: Any) -> Any:
        instance = self.instance()
        logger.debug("native_invoke", class_id=self.class_id, member=method)
        try:
            return self.backend.invoke(instance, method, *args)
        except Exception as exc:
            raise self._failure(method, exc) from exc

    def get_property(self, name: str, *args: Any) -> Any:
        instance = self.instance()
        logger.debug("native_get", class_id=self.class_id, member=name)
        try:
            return self.backend.get_property(instance, name, *args)
        except Exception as exc:
            raise self._failure(name, exc) from exc

    def set_property(self, name: str, *args: Any) -> None:
        instance = self.instance()
        logger.debug("native_set", class_id=self.class_id, member=name)
        try:
            self.backend.set_property(instance, name, *args)
        except Exception as exc:
            raise self._failure(name, exc) from exc

    def _failure(self, member: str, exc: Exception) -> NativeInvocationFailure:
        logger.error("native_invocation_failed", class_id=self.class_id,
                     member=member, error=str(exc))
        return NativeInvocationFailure(self.class_id, member, exc)

    # ── Teardown ──────────────────────────────────────────

    def release(self) -> None:
        """Drop the native instance. Idempotent; the binder never rebinds."""
        with self._lock:
            handle, self._handle = self._handle, None
            self._attempted = True
            self._released = True
        if handle is not None:
            self.backend.release(handle.instance)
            logger.info("native_released", class_id=self.class_id)
