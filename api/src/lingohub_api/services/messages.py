from typing import Dict
from uuid import UUID

from lingohub_api.importer.store import I18nStore


def load_messages(store: I18nStore, workspace_id: UUID, locale: str) -> Dict[str, str]:
    """Map key -> value for one locale; blank values are left out.

    An unknown locale yields an empty mapping and the client falls back.
    """
    language = store.find_language(workspace_id, locale)
    if language is None:
        return {}
    keys = {k.id: k.key for k in store.list_keys(workspace_id)}
    messages: Dict[str, str] = {}
    for tr in store.list_translations(workspace_id, language_id=language.id):
        key = keys.get(tr.key_id)
        value = (tr.value or "").strip()
        if key and value:
            messages[key] = value
    return messages
