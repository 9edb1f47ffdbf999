from uuid import UUID, uuid4

from sqlalchemy import String
from sqlmodel import Field

from .base import BaseModel
from .enums import MemberRole


class Workspace(BaseModel, table=True):
    """Tenant boundary: every language, key and translation belongs to one."""

    __tablename__ = "workspaces"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    owner_id: UUID = Field(foreign_key="users.id", index=True)


class WorkspaceMember(BaseModel, table=True):
    __tablename__ = "workspace_members"

    workspace_id: UUID = Field(foreign_key="workspaces.id", primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    role: str = Field(sa_type=String(), default=MemberRole.MEMBER.value)
