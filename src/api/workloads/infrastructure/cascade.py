"""Explicit cascading deletes down the resource hierarchy.

Each function removes the rows beneath a parent, leaves first, and returns
how many rows it removed. They run on the caller's session and so inside the
caller's transaction. Foreign keys also cascade, but these statements do not
rely on the backend enforcing them.
"""

from __future__ import annotations

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workloads.infrastructure.models import (
    ComponentModel,
    ContainerGroupModel,
    SecretModel,
)


async def _execute_delete(session: AsyncSession, stmt) -> int:
    result = await session.execute(
        stmt.execution_options(synchronize_session=False)
    )
    return result.rowcount


async def delete_container_group_rows(
    session: AsyncSession, container_group_ids: Select
) -> int:
    """Delete container groups selected by ``container_group_ids`` and their
    secrets."""
    secrets = await _execute_delete(
        session,
        delete(SecretModel).where(
            SecretModel.container_group_id.in_(container_group_ids)
        ),
    )
    groups = await _execute_delete(
        session,
        delete(ContainerGroupModel).where(
            ContainerGroupModel.id.in_(container_group_ids)
        ),
    )
    return secrets + groups


async def delete_component_descendants(
    session: AsyncSession, component_ids: Select
) -> int:
    """Delete every container group (and secret) of the selected components."""
    return await delete_container_group_rows(
        session,
        select(ContainerGroupModel.id).where(
            ContainerGroupModel.component_id.in_(component_ids)
        ),
    )


async def delete_application_descendants(
    session: AsyncSession, application_id: int
) -> int:
    """Delete every component of an application and everything beneath."""
    component_ids = select(ComponentModel.id).where(
        ComponentModel.application_id == application_id
    )
    rows = await delete_component_descendants(session, component_ids)
    rows += await _execute_delete(
        session,
        delete(ComponentModel).where(ComponentModel.application_id == application_id),
    )
    return rows
