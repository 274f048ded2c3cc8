"""Exceptions raised inside scatterbrush operations."""

from __future__ import annotations

from typing import Any


class ScatterError(RuntimeError):
    """Base class for recoverable placement and editing failures."""


class SurfaceNotFoundError(ScatterError):
    """Raised when an operation needs a surface and none is configured."""

    def __init__(self, message: str = "Surface not found"):
        super().__init__(message)


class PrototypeNotFoundError(ScatterError):
    """Raised when a prototype is not registered in the surface catalog."""

    def __init__(self, prototype: Any):
        name = getattr(prototype, "name", prototype)
        super().__init__(f"Prototype not found: {name}")
        self.prototype = prototype


class ScriptError(ValueError):
    """Raised when a stroke script cannot be interpreted."""
