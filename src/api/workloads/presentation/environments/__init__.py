"""Environment endpoints."""

from workloads.presentation.environments.routes import router

__all__ = ["router"]
