from datetime import date
from typing import Dict, Optional
from uuid import UUID

from lingohub_api.importer.csv_codec import write_csv
from lingohub_api.importer.mapping import LEGACY_HEADER
from lingohub_api.importer.store import I18nStore


def export_filename(workspace_id: UUID, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"i18n_{str(workspace_id)[:8]}_{today.isoformat()}.csv"


def export_csv(store: I18nStore, workspace_id: UUID) -> str:
    """Render the workspace in the legacy import layout.

    Languages are sorted by code and keys by module then key, so the output
    can be imported back unchanged.
    """
    languages = store.list_languages(workspace_id)
    keys = store.list_keys(workspace_id)
    values: Dict[int, Dict[int, str]] = {}
    for tr in store.list_translations(workspace_id, [k.id for k in keys]):
        values.setdefault(tr.key_id, {})[tr.language_id] = tr.value or ""

    rows = [[*LEGACY_HEADER, *(lang.code for lang in languages)]]
    for key in keys:
        key_values = values.get(key.id, {})
        rows.append(
            [
                key.key,
                key.module,
                key.type,
                key.screen or "",
                key.context or "",
                key.screenshot_ref or "",
                "" if key.max_chars is None else key.max_chars,
                *(key_values.get(lang.id, "") for lang in languages),
            ]
        )
    return write_csv(rows)
