from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from .base import WorkspaceScopedModel


class I18nLanguage(WorkspaceScopedModel, table=True):
    """Locale enabled in a workspace.

    Uniqueness is enforced per (workspace_id, code). ``is_rtl`` is decided
    once at creation time.
    """

    __tablename__ = "i18n_languages"
    __table_args__ = (
        UniqueConstraint("workspace_id", "code", name="uq_i18n_language_code"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    code: str = Field(index=True)
    name: str
    is_rtl: bool = Field(default=False)
