"""
Native layer - late-bound automation objects.

Backends:
  - COM (Windows automation via pywin32)
  - In-memory (emulated task sequence host, for development/testing)
  - Null (no host present)

Quick start:
  from native import NativeObjectBinder, get_backend
  binder = NativeObjectBinder("Microsoft.SMS.TSEnvironment", get_backend())
  if binder.is_available():
      names = binder.invoke("GetVariables")
"""
from native.base import NativeBackend
from native.binder import NativeHandle, NativeObjectBinder
from native.com_backend import ComBackend
from native.errors import BackendResolutionError
from native.factory import create_backend, get_backend, reset_backend, set_backend
from native.memory_backend import (
    EmulatedEnvironment, EmulatedObject, EmulatedProgressUi, InMemoryBackend,
)
from native.null_backend import NullBackend

__all__ = [
    # Interface
    "NativeBackend", "BackendResolutionError",
    # Binding
    "NativeHandle", "NativeObjectBinder",
    # Backends
    "ComBackend", "InMemoryBackend", "NullBackend",
    "EmulatedObject", "EmulatedEnvironment", "EmulatedProgressUi",
    # Factory
    "create_backend", "get_backend", "set_backend", "reset_backend",
]
