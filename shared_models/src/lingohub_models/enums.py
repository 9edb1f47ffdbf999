from enum import Enum


class TranslationStatus(str, Enum):
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"


class MemberRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


# Roles allowed to change keys and translations in bulk
MANAGER_ROLES = frozenset({MemberRole.OWNER.value, MemberRole.ADMIN.value})

# Right-to-left scripts; consulted only when a language row is first created
RTL_LANGUAGE_CODES = frozenset({"ar", "he", "fa", "ur", "yi", "ji"})


__all__ = [
    "TranslationStatus",
    "MemberRole",
    "MANAGER_ROLES",
    "RTL_LANGUAGE_CODES",
]
