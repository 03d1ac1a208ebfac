"""API key presentation: routes and request/response models."""

from iam.presentation.api_keys.routes import router

__all__ = ["router"]
