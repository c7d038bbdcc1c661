"""
Backend Factory - create the native automation backend from configuration.

Configuration in settings.yaml:
    native:
      #   "auto"   - COM on Windows, null elsewhere
      #   "com"    - Windows COM automation (pywin32)
      #   "memory" - emulated host (development, testing)
      #   "null"   - nothing registered
      backend: auto

Usage:
    from native.factory import create_backend, get_backend
    backend = create_backend({"backend": "memory"})
    backend = get_backend()            # singleton from settings
"""
from __future__ import annotations

import sys
import threading
import structlog
from typing import Optional

from native.base import NativeBackend

logger = structlog.get_logger()

_instance: Optional[NativeBackend] = None
_lock = threading.Lock()

BACKENDS = ("auto", "com", "memory", "null")


def create_backend(config: dict = None) -> NativeBackend:
    """
    Factory: create the appropriate native backend.

    Args:
        config: dict with keys:
            backend: "auto" | "com" | "memory" | "null"  (default: "auto")
            variables: dict (for memory backend, initial variables)

    Raises:
        ValueError: If the backend name is not recognized.
    """
    config = config or {}
    backend = config.get("backend", "auto")

    if backend == "auto":
        backend = "com" if sys.platform == "win32" else "null"

    if backend == "com":
        from native.com_backend import ComBackend
        instance = ComBackend()

    elif backend == "memory":
        from native.memory_backend import InMemoryBackend
        instance = InMemoryBackend(
            variables=config.get("variables"),
            result_codes=config.get("result_codes"),
        )

    elif backend == "null":
        from native.null_backend import NullBackend
        instance = NullBackend()

    else:
        raise ValueError(
            f"Unsupported native backend: {backend}. Supported: {', '.join(BACKENDS)}"
        )

    logger.info("native_backend_created", backend=instance.name)
    return instance


def get_backend() -> NativeBackend:
    """Return the singleton backend, creating it from settings if none exists."""
    global _instance
    if _instance is None:
        with _lock:
            if _instance is None:
                from config.settings import get_settings
                settings = get_settings()
                _instance = create_backend({
                    "backend": settings.native.backend,
                    "result_codes": settings.progress_ui.result_codes,
                })
    return _instance


def set_backend(backend: NativeBackend) -> None:
    """Install a backend as the singleton."""
    global _instance
    with _lock:
        _instance = backend


def reset_backend() -> None:
    """Reset the singleton (for testing)."""
    global _instance
    with _lock:
        _instance = None
