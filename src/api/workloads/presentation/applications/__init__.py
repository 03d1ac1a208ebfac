"""Application and component endpoints."""

from workloads.presentation.applications.routes import router

__all__ = ["router"]
