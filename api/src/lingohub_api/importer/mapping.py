"""Column mapping resolution.

An import names its columns in one of two ways: an explicit JSON mapping
of field -> column index, or the legacy fixed header
``key,module,type,screen,context,screenshot_ref,max_chars,<lang>...``.
Both are validated here and normalized to :class:`ResolvedMapping`, the
only shape the reconciliation engine sees.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from lingohub_api.errors import InvalidHeader, InvalidMapping

KEY_FIELD = "key"
SINGULAR_FIELDS = ("key", "module", "type", "screen", "context", "screenshot_ref", "max_chars")
LEGACY_HEADER = SINGULAR_FIELDS


@dataclass(frozen=True)
class ExplicitMapping:
    fields: Dict[str, Optional[int]]
    languages: Dict[str, int]


@dataclass(frozen=True)
class LegacyHeader:
    header: Tuple[str, ...]


MappingSource = Union[ExplicitMapping, LegacyHeader]


@dataclass(frozen=True)
class ResolvedMapping:
    fields: Dict[str, Optional[int]]
    languages: Tuple[Tuple[str, int], ...]
    required: Tuple[str, ...] = (KEY_FIELD,)
    source: str = "explicit"

    @property
    def language_codes(self) -> List[str]:
        seen: Dict[str, None] = {}
        for code, _ in self.languages:
            seen.setdefault(code, None)
        return list(seen)


def _column_index(name: str, value: object) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; true/false are not column positions
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidMapping(f"Column index for '{name}' must be an integer")
    return value


def parse_explicit_mapping(raw: str) -> ExplicitMapping:
    try:
        doc = json.loads(raw)
    except ValueError as exc:
        raise InvalidMapping("Invalid column mapping JSON") from exc
    if not isinstance(doc, dict):
        raise InvalidMapping("Invalid column mapping JSON")

    if doc.get(KEY_FIELD) is None:
        raise InvalidMapping("Key column mapping is required")
    languages = doc.get("languages")
    if not isinstance(languages, dict) or not languages:
        raise InvalidMapping("At least one language column must be mapped")

    fields = {name: _column_index(name, doc.get(name)) for name in SINGULAR_FIELDS}
    language_columns = {}
    for code, index in languages.items():
        language_columns[str(code)] = _column_index(f"languages.{code}", index)
    return ExplicitMapping(fields=fields, languages=language_columns)


def _normalize_languages(pairs: Sequence[Tuple[str, Optional[int]]]) -> Tuple[Tuple[str, int], ...]:
    normalized = []
    for code, index in pairs:
        code = (code or "").strip()
        if not code or index is None:
            continue
        normalized.append((code, index))
    return tuple(normalized)


def resolve_mapping(header_row: Sequence[str], source: Optional[MappingSource]) -> ResolvedMapping:
    """Turn the header row plus optional explicit mapping into column indices."""
    if isinstance(source, ExplicitMapping):
        return ResolvedMapping(
            fields=dict(source.fields),
            languages=_normalize_languages(list(source.languages.items())),
            required=(KEY_FIELD,),
            source="explicit",
        )

    for position, expected in enumerate(LEGACY_HEADER):
        actual = header_row[position] if position < len(header_row) else None
        if actual is None or actual.strip().lower() != expected:
            raise InvalidHeader(f'Invalid CSV header. Expected "{expected}" at column {position + 1}')

    offset = len(LEGACY_HEADER)
    language_pairs = [(code, offset + i) for i, code in enumerate(header_row[offset:])]
    return ResolvedMapping(
        fields={name: position for position, name in enumerate(LEGACY_HEADER)},
        languages=_normalize_languages(language_pairs),
        required=(KEY_FIELD, "module", "type"),
        source="legacy",
    )


def cell(row: Sequence[str], index: Optional[int]) -> Optional[str]:
    if index is None or index < 0 or index >= len(row):
        return None
    value = row[index].strip()
    return value or None


@dataclass
class RowValues:
    key: Optional[str]
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)


def extract_row(mapping: ResolvedMapping, row: Sequence[str]) -> RowValues:
    return RowValues(
        key=cell(row, mapping.fields.get(KEY_FIELD)),
        attributes={
            name: cell(row, mapping.fields.get(name))
            for name in SINGULAR_FIELDS
            if name != KEY_FIELD
        },
    )
