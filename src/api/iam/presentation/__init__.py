"""IAM presentation layer - aggregate-based organization.

Each aggregate package (auth, api_keys, organizations) contains its own
routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import api_keys, auth, organizations

# Auth is enforced per-endpoint (each handler declares its own Depends),
# not at the router level, so signup and sign-in stay reachable anonymously.
router = APIRouter(
    prefix="/iam",
    tags=["iam"],
)

router.include_router(auth.router)
router.include_router(api_keys.router)
router.include_router(organizations.router)

__all__ = ["router"]
