"""Project access rules shared by the project/task tools.

These helpers mirror the checks made by the project and task API endpoints:

- read access: project owner, member of the project's organization, or an
  explicit collaborator (any permission);
- write access (reported to callers): owner, organization member, or a
  collaborator with ``write`` permission;
- task creation: see ``ensure_can_create_tasks``.

All helpers work on an open ``AsyncSession`` so a tool can run its checks and
its queries inside a single session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projectflow_ai.core.database.entities import (
    Organization,
    OrganizationMember,
    Project,
    ProjectCollaborator,
)

from ..errors import AccessDeniedError, ProjectNotFoundError


@dataclass(frozen=True)
class ProjectAccess:
    """Resolved relationship between one user and one project."""

    is_owner: bool
    membership: Optional[OrganizationMember]
    collaboration: Optional[ProjectCollaborator]

    @property
    def is_org_member(self) -> bool:
        return self.membership is not None

    @property
    def can_read(self) -> bool:
        return self.is_owner or self.is_org_member or self.collaboration is not None

    @property
    def can_write(self) -> bool:
        return (
            self.is_owner
            or self.is_org_member
            or (self.collaboration is not None and self.collaboration.permission == "write")
        )


async def load_project(session: AsyncSession, project_id: int) -> Project:
    """Fetch a project or raise ``ProjectNotFoundError``."""
    project = await session.get(Project, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


async def get_membership(session: AsyncSession, organization_id: int, user_id: str) -> Optional[OrganizationMember]:
    stmt = select(OrganizationMember).where(
        OrganizationMember.organization_id == organization_id,
        OrganizationMember.user_id == user_id,
    )
    return (await session.execute(stmt)).scalars().first()


async def get_collaboration(
    session: AsyncSession,
    project_id: int,
    user_id: str,
    *,
    permission: Optional[str] = None,
) -> Optional[ProjectCollaborator]:
    stmt = select(ProjectCollaborator).where(
        ProjectCollaborator.project_id == project_id,
        ProjectCollaborator.collaborator_id == user_id,
    )
    if permission is not None:
        stmt = stmt.where(ProjectCollaborator.permission == permission)
    return (await session.execute(stmt)).scalars().first()


async def resolve_access(session: AsyncSession, project: Project, user_id: str) -> ProjectAccess:
    """Compute how ``user_id`` relates to ``project``."""
    membership = None
    if project.organization_id:
        membership = await get_membership(session, project.organization_id, user_id)
    collaboration = await get_collaboration(session, project.id, user_id)
    return ProjectAccess(
        is_owner=project.created_by_id == user_id,
        membership=membership,
        collaboration=collaboration,
    )


async def ensure_can_read(session: AsyncSession, project: Project, user_id: str, *, denied_message: str) -> ProjectAccess:
    """Resolve access and raise ``AccessDeniedError`` unless the user can read."""
    access = await resolve_access(session, project, user_id)
    if not access.can_read:
        raise AccessDeniedError(denied_message)
    return access


async def ensure_can_create_tasks(session: AsyncSession, project: Project, user_id: str) -> None:
    """Apply the task-creation rules of the task API.

    For organization projects the caller must be the project owner, the
    organization owner, or a member allowed to assign tasks. Afterwards,
    callers who are neither the project owner nor an organization member need
    a ``write`` collaboration on the project.
    """
    is_owner = project.created_by_id == user_id
    is_org_member = False

    if project.organization_id:
        membership = await get_membership(session, project.organization_id, user_id)
        is_org_member = membership is not None
        can_assign_tasks = bool(membership and membership.can_assign_tasks)

        organization = await session.get(Organization, project.organization_id)
        is_org_owner = organization is not None and organization.created_by_id == user_id

        if not is_owner and not is_org_owner and not can_assign_tasks:
            raise AccessDeniedError("Only the organization owner or authorized members can create tasks")

    if not is_owner and not is_org_member:
        collaboration = await get_collaboration(session, project.id, user_id, permission="write")
        if collaboration is None:
            raise AccessDeniedError("You don't have permission to create tasks in this project")
