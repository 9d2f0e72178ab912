"""FastAPI dependency helpers."""
from __future__ import annotations

from functools import lru_cache

from ..domain.orchestrator_service import Orchestrator


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    """Return a shared orchestrator; the registry is read-only so one instance serves all requests."""
    return Orchestrator()


__all__ = ["get_orchestrator"]
