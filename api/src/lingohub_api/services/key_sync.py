"""Key sync: the developer-side push of the key catalogue.

Unlike CSV import, sync owns every key attribute it sends, so optional
fields are overwritten (including with nulls). English fallback values are
written only where no English value exists yet, unless ``overwrite_en``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID

from lingohub_api.errors import PersistenceError
from lingohub_api.importer.reconcile import MAX_CHARS_RANGE
from lingohub_api.importer.store import I18nStore
from lingohub_models import I18nLanguage

logger = logging.getLogger(__name__)

SOURCE_LANGUAGE = "en"


@dataclass
class IncomingKey:
    key: str
    module: str
    type: str
    screen: Optional[str] = None
    context: Optional[str] = None
    screenshot_ref: Optional[str] = None
    max_chars: Optional[int] = None
    fallback_en: Optional[str] = None

    def row(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "module": self.module,
            "type": self.type,
            "screen": self.screen,
            "context": self.context,
            "screenshot_ref": self.screenshot_ref,
            "max_chars": self.max_chars,
        }


@dataclass
class SyncResult:
    inserted_keys: int = 0
    updated_keys: int = 0
    en_values_written: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "inserted_keys": self.inserted_keys,
            "updated_keys": self.updated_keys,
            "en_values_written": self.en_values_written,
        }


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _max_chars(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value in MAX_CHARS_RANGE else None


def normalize_incoming(entries: List[Any]) -> List[IncomingKey]:
    """Drop malformed entries; a repeated key keeps its last occurrence."""
    by_key: Dict[str, IncomingKey] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        key, module, type_ = _text(entry.get("key")), _text(entry.get("module")), _text(entry.get("type"))
        if not (key and module and type_):
            continue
        by_key[key] = IncomingKey(
            key=key,
            module=module,
            type=type_,
            screen=_text(entry.get("screen")),
            context=_text(entry.get("context")),
            screenshot_ref=_text(entry.get("screenshot_ref")),
            max_chars=_max_chars(entry.get("max_chars")),
            fallback_en=_text(entry.get("fallback_en")),
        )
    return list(by_key.values())


def _ensure_source_language(store: I18nStore, workspace_id: UUID) -> I18nLanguage:
    language = store.find_language(workspace_id, SOURCE_LANGUAGE)
    if language is not None:
        return language
    try:
        return store.create_language(workspace_id, SOURCE_LANGUAGE, "English", False)
    except PersistenceError as exc:
        raise PersistenceError("Failed to ensure en language exists") from exc


def sync_keys(store: I18nStore, workspace_id: UUID, incoming: List[IncomingKey], overwrite_en: bool = False) -> SyncResult:
    result = SyncResult()
    if not incoming:
        return result

    en = _ensure_source_language(store, workspace_id)
    existing = {k.key: k for k in store.list_keys(workspace_id)}
    for item in incoming:
        prev = existing.get(item.key)
        if prev is None:
            result.inserted_keys += 1
        elif any(getattr(prev, name) != value for name, value in item.row().items()):
            result.updated_keys += 1

    store.upsert_keys(workspace_id, [item.row() for item in incoming])

    candidates = [item for item in incoming if item.fallback_en]
    if not candidates:
        return result

    key_ids = {k.key: k.id for k in store.list_keys(workspace_id, keys=[c.key for c in candidates])}
    current = {
        tr.key_id: (tr.value or "").strip()
        for tr in store.list_translations(workspace_id, key_ids.values(), language_id=en.id)
    }
    for item in candidates:
        key_id = key_ids.get(item.key)
        if key_id is None:
            continue
        if current.get(key_id) and not overwrite_en:
            continue
        try:
            store.upsert_translation(workspace_id, key_id, en.id, item.fallback_en)
        except PersistenceError as exc:
            raise PersistenceError("Failed to upsert en translations") from exc
        result.en_values_written += 1

    logger.info("Keys synced", extra={"workspace_id": str(workspace_id), **result.as_dict()})
    return result
