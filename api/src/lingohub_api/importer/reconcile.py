"""Reconciliation of parsed CSV rows against a workspace's current state.

State is read once into a :class:`ReconciliationContext`; planning itself
never touches the store. Duplicate rows for the same key merge into one
pending operation (later rows win), and existing keys are only updated
when a field actually changes.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from lingohub_api.errors import InvalidPolicy
from lingohub_api.importer.mapping import KEY_FIELD, ResolvedMapping, cell, extract_row
from lingohub_api.importer.store import I18nStore
from lingohub_models import DEFAULT_MODULE, DEFAULT_TYPE, RTL_LANGUAGE_CODES, I18nKey, I18nLanguage

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2  # header is row 1
_LEADING_INT = re.compile(r"^[+-]?\d+")
# max_chars is an INTEGER column
MAX_CHARS_RANGE = range(-(2**31), 2**31)


class ConflictPolicy(str, Enum):
    OVERWRITE = "overwrite"
    FILL_MISSING = "fill-missing"


def parse_policy(raw: Optional[str]) -> ConflictPolicy:
    if raw is None or raw == "":
        return ConflictPolicy.FILL_MISSING
    try:
        return ConflictPolicy(raw)
    except ValueError as exc:
        raise InvalidPolicy("Invalid conflict policy") from exc


def parse_max_chars(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    match = _LEADING_INT.match(raw.strip())
    if not match:
        return None
    digits = match.group(0)
    # longer than any value the column holds
    if len(digits.lstrip("+-").lstrip("0")) > 10:
        return None
    value = int(digits)
    return value if value in MAX_CHARS_RANGE else None


@dataclass(frozen=True)
class PendingLanguage:
    code: str
    name: str
    is_rtl: bool

    @classmethod
    def for_code(cls, code: str) -> "PendingLanguage":
        return cls(code=code, name=code.upper(), is_rtl=code.lower() in RTL_LANGUAGE_CODES)


@dataclass
class ReconciliationContext:
    workspace_id: UUID
    policy: ConflictPolicy
    languages: Dict[str, I18nLanguage] = field(default_factory=dict)
    keys: Dict[str, I18nKey] = field(default_factory=dict)
    # key_id -> language_id -> value; only filled under fill-missing
    existing_values: Dict[int, Dict[int, str]] = field(default_factory=dict)

    def has_value(self, key_id: int, language_id: int) -> bool:
        value = self.existing_values.get(key_id, {}).get(language_id)
        return bool(value and value.strip())


def load_context(store: I18nStore, workspace_id: UUID, policy: ConflictPolicy) -> ReconciliationContext:
    context = ReconciliationContext(workspace_id=workspace_id, policy=policy)
    context.languages = {lang.code: lang for lang in store.list_languages(workspace_id)}
    context.keys = {k.key: k for k in store.list_keys(workspace_id)}
    if policy is ConflictPolicy.FILL_MISSING and context.keys:
        key_ids = [k.id for k in context.keys.values()]
        for tr in store.list_translations(workspace_id, key_ids):
            context.existing_values.setdefault(tr.key_id, {})[tr.language_id] = tr.value or ""
    logger.info(
        "Import context loaded",
        extra={
            "workspace_id": str(workspace_id),
            "policy": policy.value,
            "languages": len(context.languages),
            "keys": len(context.keys),
        },
    )
    return context


@dataclass(frozen=True)
class SkippedRow:
    row: int
    reason: str

    def as_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "reason": self.reason}


@dataclass(frozen=True)
class ApplyFailure:
    stage: str  # update_key | resolve | upsert
    key: str
    reason: str
    language: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {"stage": self.stage, "key": self.key, "language": self.language, "reason": self.reason}


@dataclass
class ImportResult:
    keys_to_create: int = 0
    keys_to_update: int = 0
    translations_to_upsert: int = 0
    rows_skipped: int = 0
    skipped_reasons: List[SkippedRow] = field(default_factory=list)
    failures: List[ApplyFailure] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "keys_to_create": self.keys_to_create,
            "keys_to_update": self.keys_to_update,
            "translations_to_upsert": self.translations_to_upsert,
            "rows_skipped": self.rows_skipped,
            "skipped_reasons": [s.as_dict() for s in self.skipped_reasons],
            "failures": [f.as_dict() for f in self.failures],
        }


@dataclass
class ImportPlan:
    workspace_id: UUID
    # code -> language id, None while the language is still pending
    language_ids: Dict[str, Optional[int]] = field(default_factory=dict)
    pending_languages: List[PendingLanguage] = field(default_factory=list)
    # ids of pre-existing keys referenced by the file
    key_ids: Dict[str, int] = field(default_factory=dict)
    creates: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    updates: Dict[str, Tuple[int, Dict[str, Any]]] = field(default_factory=dict)
    writes: Dict[Tuple[str, str], str] = field(default_factory=dict)
    skipped: List[SkippedRow] = field(default_factory=list)

    def result(self) -> ImportResult:
        return ImportResult(
            keys_to_create=len(self.creates),
            keys_to_update=len(self.updates),
            translations_to_upsert=len(self.writes),
            rows_skipped=len(self.skipped),
            skipped_reasons=list(self.skipped),
        )


def _key_data(attributes: Dict[str, Optional[str]]) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "module": attributes.get("module") or DEFAULT_MODULE,
        "type": attributes.get("type") or DEFAULT_TYPE,
    }
    for name in ("screen", "context", "screenshot_ref"):
        if attributes.get(name):
            data[name] = attributes[name]
    max_chars = parse_max_chars(attributes.get("max_chars"))
    if max_chars is not None:
        data["max_chars"] = max_chars
    return data


def _changed_fields(existing: I18nKey, data: Dict[str, Any]) -> Dict[str, Any]:
    return {name: value for name, value in data.items() if getattr(existing, name) != value}


def _resolve_languages(context: ReconciliationContext, mapping: ResolvedMapping, plan: ImportPlan) -> None:
    for code in mapping.language_codes:
        existing = context.languages.get(code)
        if existing is not None:
            plan.language_ids[code] = existing.id
        else:
            plan.language_ids[code] = None
            plan.pending_languages.append(PendingLanguage.for_code(code))


def _missing_required(mapping: ResolvedMapping, key: Optional[str], attributes: Dict[str, Optional[str]]) -> Optional[str]:
    if not key:
        return "Key field is empty or missing"
    missing = [name for name in mapping.required if name != KEY_FIELD and not attributes.get(name)]
    if missing:
        return f"Missing required fields ({', '.join(missing)})"
    return None


def _write_eligible(context: ReconciliationContext, existing_key: Optional[I18nKey], language_id: Optional[int]) -> bool:
    if context.policy is ConflictPolicy.OVERWRITE:
        return True
    if existing_key is None or language_id is None:
        return True
    return not context.has_value(existing_key.id, language_id)


def build_plan(
    context: ReconciliationContext,
    mapping: ResolvedMapping,
    data_rows: Sequence[Sequence[str]],
) -> ImportPlan:
    plan = ImportPlan(workspace_id=context.workspace_id)
    _resolve_languages(context, mapping, plan)
    merged_updates: Dict[str, Dict[str, Any]] = {}

    for index, row in enumerate(data_rows):
        row_number = index + FIRST_DATA_ROW
        values = extract_row(mapping, row)

        reason = _missing_required(mapping, values.key, values.attributes)
        if reason is not None:
            plan.skipped.append(SkippedRow(row=row_number, reason=reason))
            logger.debug("Import row skipped", extra={"row": row_number, "reason": reason})
            continue

        key = values.key
        data = _key_data(values.attributes)
        existing_key = context.keys.get(key)
        if existing_key is None:
            plan.creates.setdefault(key, {"key": key}).update(data)
        else:
            plan.key_ids[key] = existing_key.id
            merged_updates.setdefault(key, {}).update(data)

        for code, column in mapping.languages:
            value = cell(row, column)
            if value is None:
                continue
            if _write_eligible(context, existing_key, plan.language_ids.get(code)):
                plan.writes[(key, code)] = value

    for key, data in merged_updates.items():
        existing_key = context.keys[key]
        changed = _changed_fields(existing_key, data)
        if changed:
            plan.updates[key] = (existing_key.id, changed)

    logger.info(
        "Import plan built",
        extra={
            "workspace_id": str(context.workspace_id),
            "rows": len(data_rows),
            "creates": len(plan.creates),
            "updates": len(plan.updates),
            "writes": len(plan.writes),
            "skipped": len(plan.skipped),
            "pending_languages": [p.code for p in plan.pending_languages],
        },
    )
    return plan
