"""Import orchestration: parse, resolve, plan, then preview or apply.

Apply writes in a fixed order: pending languages, the bulk key insert,
key updates, then translation upserts. Failing to create languages or
keys aborts the import. Updates and upserts are best-effort and each
failure is recorded in ``ImportResult.failures``.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from lingohub_api.errors import EmptyFile, PersistenceError
from lingohub_api.importer.csv_codec import parse_csv
from lingohub_api.importer.mapping import ExplicitMapping, resolve_mapping
from lingohub_api.importer.reconcile import (
    ApplyFailure,
    ConflictPolicy,
    ImportPlan,
    ImportResult,
    build_plan,
    load_context,
)
from lingohub_api.importer.store import I18nStore

logger = logging.getLogger(__name__)


def run_import(
    store: I18nStore,
    workspace_id: UUID,
    text: str,
    policy: ConflictPolicy,
    mapping: Optional[ExplicitMapping] = None,
    preview: bool = False,
) -> ImportResult:
    rows = parse_csv(text)
    if not rows:
        raise EmptyFile("CSV file is empty")
    resolved = resolve_mapping(rows[0], mapping)

    context = load_context(store, workspace_id, policy)
    plan = build_plan(context, resolved, rows[1:])
    if preview:
        return plan.result()
    return apply_plan(store, plan)


def _create_languages(store: I18nStore, plan: ImportPlan) -> None:
    for pending in plan.pending_languages:
        language = store.create_language(plan.workspace_id, pending.code, pending.name, pending.is_rtl)
        plan.language_ids[pending.code] = language.id


def _apply_updates(store: I18nStore, plan: ImportPlan) -> List[ApplyFailure]:
    failures = []
    for key, (key_id, values) in plan.updates.items():
        try:
            store.update_key(plan.workspace_id, key_id, values)
        except PersistenceError as exc:
            logger.error("Key update failed", extra={"key": key, "key_id": key_id, "error": exc.message})
            failures.append(ApplyFailure(stage="update_key", key=key, reason=exc.message))
    return failures


def _apply_writes(store: I18nStore, plan: ImportPlan, key_ids: Dict[str, int]) -> List[ApplyFailure]:
    failures = []
    for (key, code), value in plan.writes.items():
        key_id = key_ids.get(key)
        language_id = plan.language_ids.get(code)
        if key_id is None or language_id is None:
            logger.warning("Translation target not found", extra={"key": key, "language": code})
            failures.append(
                ApplyFailure(stage="resolve", key=key, language=code, reason="Key or language not found")
            )
            continue
        try:
            store.upsert_translation(plan.workspace_id, key_id, language_id, value)
        except PersistenceError as exc:
            logger.error("Translation upsert failed", extra={"key": key, "language": code, "error": exc.message})
            failures.append(ApplyFailure(stage="upsert", key=key, language=code, reason=exc.message))
    return failures


def apply_plan(store: I18nStore, plan: ImportPlan) -> ImportResult:
    _create_languages(store, plan)

    key_ids = dict(plan.key_ids)
    key_ids.update(store.insert_keys(plan.workspace_id, list(plan.creates.values())))

    failures = _apply_updates(store, plan)
    failures.extend(_apply_writes(store, plan, key_ids))

    result = plan.result()
    result.failures = failures
    logger.info(
        "Import applied",
        extra={
            "workspace_id": str(plan.workspace_id),
            "keys_created": result.keys_to_create,
            "keys_updated": result.keys_to_update,
            "translations": result.translations_to_upsert,
            "failures": len(failures),
        },
    )
    return result
