"""
Native Backend Protocol - common interface for every automation mechanism.

A backend knows how to turn a class identifier into a live automation
object and how to invoke members on it late-bound:
  - resolve(class_id) → descriptor          (raises BackendResolutionError)
  - create(descriptor) → instance           (raises BackendResolutionError)
  - invoke(instance, method, *args) → result
  - get_property(instance, name, *args) → value
  - set_property(instance, name, *args) → None
  - release(instance) → None

Implementations:
  - ComBackend      (Windows COM automation via pywin32)
  - InMemoryBackend (emulated task sequence host for development/testing)
  - NullBackend     (nothing is ever registered; everything is unavailable)

Arguments may contain the ABSENT marker; each backend maps it onto its own
"missing value" representation.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NativeBackend(Protocol):
    """Interface all native automation backends implement."""

    name: str

    def resolve(self, class_id: str) -> Any:
        """Return a descriptor that can construct ``class_id``."""
        ...

    def create(self, descriptor: Any) -> Any:
        """Construct one instance from a descriptor returned by ``resolve``."""
        ...

    def invoke(self, instance: Any, method: str, *args: Any) -> Any:
        ...

    def get_property(self, instance: Any, name: str, *args: Any) -> Any:
        ...

    def set_property(self, instance: Any, name: str, *args: Any) -> None:
        ...

    def release(self, instance: Any) -> None:
        ...
