"""Sign-up, sign-in and second-factor endpoints."""

from iam.presentation.auth.routes import router

__all__ = ["router"]
