"""Error types raised by the orchestration pipeline."""
from __future__ import annotations


class OrchestratorError(Exception):
    """Base class for orchestrator failures."""


class InvalidInputError(OrchestratorError, ValueError):
    """The project description is missing, empty or too short to analyze."""

    def __init__(self, message: str, min_length: int | None = None) -> None:
        super().__init__(message)
        self.min_length = min_length


class RegistryError(OrchestratorError):
    """A registry definition or override document is invalid."""


__all__ = ["InvalidInputError", "OrchestratorError", "RegistryError"]
