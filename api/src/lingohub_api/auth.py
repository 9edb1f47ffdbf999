"""Request identity and workspace membership dependencies.

Check order is fixed: backing store, bearer identity, selected workspace,
membership. Role checks happen in the endpoints that need them.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Cookie, Depends, Header
from sqlmodel import Session, select

from lingohub_api.db import get_session
from lingohub_api.errors import Forbidden, StructuralError, Unauthorized
from lingohub_models import MANAGER_ROLES, User, Workspace, WorkspaceMember

logger = logging.getLogger(__name__)

WORKSPACE_COOKIE = "ws"
LOCALE_COOKIE = "locale"
DEFAULT_LOCALE = "en"
ONE_YEAR_SECONDS = 60 * 60 * 24 * 365


@dataclass
class WorkspaceContext:
    session: Session
    user: User
    workspace_id: UUID
    locale: str


def get_current_user(
    authorization: Optional[str] = Header(None),
    session: Session = Depends(get_session),  # noqa: B008
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Unauthorized")
    token = authorization.split(" ", 1)[1].strip()
    user = session.exec(select(User).where(User.api_token == token)).first() if token else None
    if user is None:
        logger.warning("Unknown bearer token")
        raise Unauthorized("Unauthorized")
    return user


def validate_workspace_membership(session: Session, workspace_id: Optional[str], user_id: UUID) -> UUID:
    """Return the workspace id if ``user_id`` owns or belongs to it."""
    if not workspace_id:
        raise StructuralError("No workspace selected")
    try:
        ws_uuid = UUID(workspace_id)
    except ValueError:
        raise Forbidden("Workspace not found") from None

    workspace = session.get(Workspace, ws_uuid)
    if workspace is None:
        raise Forbidden("Workspace not found")
    if workspace.owner_id == user_id:
        return ws_uuid

    member = session.get(WorkspaceMember, (ws_uuid, user_id))
    if member is None:
        logger.warning("Workspace access denied", extra={"workspace_id": workspace_id, "user_id": str(user_id)})
        raise Forbidden("Not a member of this workspace")
    return ws_uuid


def has_owner_or_admin_role(session: Session, workspace_id: UUID, user_id: UUID) -> bool:
    workspace = session.get(Workspace, workspace_id)
    if workspace is not None and workspace.owner_id == user_id:
        return True
    member = session.get(WorkspaceMember, (workspace_id, user_id))
    return member is not None and member.role in MANAGER_ROLES


def get_workspace_context(
    user: User = Depends(get_current_user),  # noqa: B008
    session: Session = Depends(get_session),  # noqa: B008
    ws: Optional[str] = Cookie(None),
    x_workspace_id: Optional[str] = Header(None),
    locale: Optional[str] = Cookie(None),
) -> WorkspaceContext:
    workspace_id = validate_workspace_membership(session, ws or x_workspace_id, user.id)
    return WorkspaceContext(
        session=session,
        user=user,
        workspace_id=workspace_id,
        locale=(locale or "").strip() or DEFAULT_LOCALE,
    )


def cookie_secure() -> bool:
    return os.getenv("COOKIE_SECURE", "false").lower() in {"1", "true", "yes"}


def ensure_manager(ctx: WorkspaceContext, message: str) -> None:
    if not has_owner_or_admin_role(ctx.session, ctx.workspace_id, ctx.user.id):
        logger.warning(
            "Owner/admin role required",
            extra={"workspace_id": str(ctx.workspace_id), "user_id": str(ctx.user.id)},
        )
        raise Forbidden(message)
