"""
NullBackend - a host where nothing is registered.

Selected outside Windows or when the task sequence host is known to be
absent. Every wrapper built on it constructs normally and reports
is_available() == False.
"""
from __future__ import annotations

from typing import Any

from native.errors import BackendResolutionError


class NullBackend:
    name = "null"

    def resolve(self, class_id: str) -> Any:
        raise BackendResolutionError(class_id, "no native automation backend in this environment")

    def create(self, descriptor: Any) -> Any:
        raise BackendResolutionError(str(descriptor), "no native automation backend in this environment")

    def invoke(self, instance: Any, method: str, *args: Any) -> Any:
        raise RuntimeError(f"NullBackend cannot invoke {method}")

    def get_property(self, instance: Any, name: str, *args: Any) -> Any:
        raise RuntimeError(f"NullBackend cannot read {name}")

    def set_property(self, instance: Any, name: str, *args: Any) -> None:
        raise RuntimeError(f"NullBackend cannot write {name}")

    def release(self, instance: Any) -> None:
        pass
