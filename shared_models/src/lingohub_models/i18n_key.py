from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.dialects.postgresql import TEXT
from sqlmodel import Field

from .base import WorkspaceScopedModel

DEFAULT_MODULE = "common"
DEFAULT_TYPE = "text"


class I18nKey(WorkspaceScopedModel, table=True):
    """Localization key plus the metadata translators see next to it."""

    __tablename__ = "i18n_keys"
    __table_args__ = (
        UniqueConstraint("workspace_id", "key", name="uq_i18n_key_key"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    key: str = Field(index=True)
    module: str = Field(default=DEFAULT_MODULE, index=True)
    type: str = Field(default=DEFAULT_TYPE)

    screen: Optional[str] = Field(default=None)
    context: Optional[str] = Field(default=None, sa_type=TEXT)
    screenshot_ref: Optional[str] = Field(default=None)
    max_chars: Optional[int] = Field(default=None)
