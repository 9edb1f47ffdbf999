from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.dialects.postgresql import TEXT
from sqlmodel import Field

from .base import WorkspaceScopedModel
from .enums import TranslationStatus


class I18nTranslation(WorkspaceScopedModel, table=True):
    """Value of one key in one language.

    Uniqueness is enforced per (key_id, language_id); writers upsert on it.
    """

    __tablename__ = "i18n_translations"
    __table_args__ = (
        UniqueConstraint("key_id", "language_id", name="uq_i18n_translation_key_lang"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    key_id: int = Field(foreign_key="i18n_keys.id", index=True)
    language_id: int = Field(foreign_key="i18n_languages.id", index=True)

    value: Optional[str] = Field(default=None, sa_type=TEXT)
    status: str = Field(sa_type=String(), default=TranslationStatus.DRAFT.value)
