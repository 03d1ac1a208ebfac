"""Container group and secret endpoints."""

from workloads.presentation.container_groups.routes import router

__all__ = ["router"]
