from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field

from .base import BaseModel


class User(BaseModel, table=True):
    """Account resolved from a bearer token issued by the identity provider."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: Optional[str] = Field(default=None, index=True)
    api_token: str = Field(unique=True, index=True)
