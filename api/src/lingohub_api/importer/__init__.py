"""CSV import engine: parser, column mapping, reconciliation and apply."""

from .csv_codec import decode_upload, parse_csv, write_csv
from .executor import apply_plan, run_import
from .mapping import ExplicitMapping, ResolvedMapping, parse_explicit_mapping, resolve_mapping
from .reconcile import ConflictPolicy, ImportResult, build_plan, load_context, parse_policy
from .store import I18nStore

__all__ = [
    "ConflictPolicy",
    "ExplicitMapping",
    "I18nStore",
    "ImportResult",
    "ResolvedMapping",
    "apply_plan",
    "build_plan",
    "decode_upload",
    "load_context",
    "parse_csv",
    "parse_explicit_mapping",
    "parse_policy",
    "resolve_mapping",
    "run_import",
    "write_csv",
]
