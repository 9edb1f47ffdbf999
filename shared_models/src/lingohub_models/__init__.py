"""Shared SQLModel models package.

Tables for workspaces, their members and the i18n data they own.
"""

from .base import BaseModel, WorkspaceScopedModel
from .enums import MANAGER_ROLES, RTL_LANGUAGE_CODES, MemberRole, TranslationStatus
from .i18n_key import DEFAULT_MODULE, DEFAULT_TYPE, I18nKey
from .i18n_language import I18nLanguage
from .i18n_translation import I18nTranslation
from .user import User
from .workspace import Workspace, WorkspaceMember

__all__ = [
    "BaseModel",
    "WorkspaceScopedModel",
    "User",
    "Workspace",
    "WorkspaceMember",
    "MemberRole",
    "MANAGER_ROLES",
    "RTL_LANGUAGE_CODES",
    "TranslationStatus",
    "I18nLanguage",
    "I18nKey",
    "I18nTranslation",
    "DEFAULT_MODULE",
    "DEFAULT_TYPE",
]
