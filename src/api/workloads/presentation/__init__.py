"""Workloads presentation layer.

Routes are addressed by the resource they act on; the owning organization
is always derived from the loaded resource, except for creation directly
under an organization.
"""

from __future__ import annotations

from fastapi import APIRouter

from workloads.presentation import applications, container_groups, environments

router = APIRouter()

router.include_router(environments.router)
router.include_router(applications.router)
router.include_router(container_groups.router)

__all__ = ["router"]
