"""Errors raised by native backends while binding an automation object."""
from __future__ import annotations


class BackendResolutionError(Exception):
    """A class identifier could not be resolved or instantiated by a backend."""

    def __init__(self, class_id: str, reason: str = ""):
        self.class_id = class_id
        self.reason = reason
        super().__init__(f"Cannot bind {class_id}: {reason}" if reason else f"Cannot bind {class_id}")
