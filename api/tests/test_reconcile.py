"""Planning behaviour of the reconciliation engine against in-memory state."""

import pytest

from factories import RecordingStore, legacy_csv
from lingohub_api.errors import InvalidPolicy
from lingohub_api.importer.csv_codec import parse_csv
from lingohub_api.importer.mapping import parse_explicit_mapping, resolve_mapping
from lingohub_api.importer.reconcile import (
    ConflictPolicy,
    build_plan,
    load_context,
    parse_max_chars,
    parse_policy,
)


def plan_for(store: RecordingStore, text: str, policy=ConflictPolicy.FILL_MISSING, mapping=None):
    rows = parse_csv(text)
    context = load_context(store, store.workspace_id, policy)
    return build_plan(context, resolve_mapping(rows[0], mapping), rows[1:])


def test_new_key_on_empty_workspace() -> None:
    store = RecordingStore()
    plan = plan_for(store, legacy_csv('greeting,common,text,,,,,"Bonjour"'))
    result = plan.result()
    assert (result.keys_to_create, result.keys_to_update, result.translations_to_upsert, result.rows_skipped) == (
        1,
        0,
        1,
        0,
    )
    assert plan.creates["greeting"] == {"key": "greeting", "module": "common", "type": "text"}
    assert plan.writes == {("greeting", "fr"): "Bonjour"}


def test_fill_missing_protects_existing_value_and_overwrite_replaces_it() -> None:
    store = RecordingStore()
    fr = store.add_language("fr")
    key = store.add_key("greeting")
    store.add_translation(key, fr, "Salut")
    text = legacy_csv('greeting,common,text,,,,,"Bonjour"')

    assert plan_for(store, text, ConflictPolicy.FILL_MISSING).result().translations_to_upsert == 0
    assert plan_for(store, text, ConflictPolicy.OVERWRITE).result().translations_to_upsert == 1


def test_fill_missing_treats_blank_existing_value_as_missing() -> None:
    store = RecordingStore()
    fr = store.add_language("fr")
    key = store.add_key("greeting")
    store.add_translation(key, fr, "   ")
    plan = plan_for(store, legacy_csv("greeting,common,text,,,,,Bonjour"))
    assert plan.writes == {("greeting", "fr"): "Bonjour"}


def test_fill_missing_loads_translations_only_when_needed() -> None:
    store = RecordingStore()
    store.add_key("greeting")
    load_context(store, store.workspace_id, ConflictPolicy.OVERWRITE)
    assert "list_translations" not in store.call_names
    load_context(store, store.workspace_id, ConflictPolicy.FILL_MISSING)
    assert "list_translations" in store.call_names


@pytest.mark.parametrize("policy", list(ConflictPolicy))
def test_empty_key_row_is_skipped(policy) -> None:
    store = RecordingStore()
    text = legacy_csv(",common,text,,,,,Bonjour", "ok,common,text,,,,,Salut")
    result = plan_for(store, text, policy).result()
    assert result.rows_skipped == 1
    assert result.skipped_reasons[0].row == 2
    assert "Key field is empty" in result.skipped_reasons[0].reason
    assert result.keys_to_create == 1
    assert result.keys_to_update == 0


def test_legacy_rows_require_module_and_type() -> None:
    store = RecordingStore()
    result = plan_for(store, legacy_csv("a,,text,,,,,x", "b,home,,,,,,y", "c,home,text,,,,,z")).result()
    assert [(s.row, s.reason) for s in result.skipped_reasons] == [
        (2, "Missing required fields (module)"),
        (3, "Missing required fields (type)"),
    ]
    assert result.keys_to_create == 1


def test_explicit_mapping_defaults_module_and_type() -> None:
    store = RecordingStore()
    mapping = parse_explicit_mapping('{"key": 0, "languages": {"de": 1}}')
    plan = plan_for(store, "id,german\nbtn.ok,OK\n", mapping=mapping)
    assert plan.creates["btn.ok"] == {"key": "btn.ok", "module": "common", "type": "text"}
    assert plan.skipped == []


def test_invalid_max_chars_is_dropped_without_skipping() -> None:
    store = RecordingStore()
    plan = plan_for(store, legacy_csv("a,common,text,,,,abc,x", "b,common,text,,,,12px,y"))
    assert plan.result().rows_skipped == 0
    assert "max_chars" not in plan.creates["a"]
    assert plan.creates["b"]["max_chars"] == 12


def test_out_of_range_max_chars_is_dropped_without_skipping() -> None:
    store = RecordingStore()
    plan = plan_for(
        store,
        legacy_csv(
            "huge,common,text,,,,99999999999999999999,x",
            "edge,common,text,,,,2147483647,y",
            "over,common,text,,,,2147483648,z",
        ),
    )
    assert plan.result().rows_skipped == 0
    assert "max_chars" not in plan.creates["huge"]
    assert "max_chars" not in plan.creates["over"]
    assert plan.creates["edge"]["max_chars"] == 2147483647


def test_parse_max_chars() -> None:
    assert parse_max_chars(" 40 ") == 40
    assert parse_max_chars("-3") == -3
    assert parse_max_chars("abc") is None
    assert parse_max_chars(None) is None
    assert parse_max_chars("-2147483648") == -2147483648
    assert parse_max_chars("-2147483649") is None
    assert parse_max_chars("0000000000042") == 42
    assert parse_max_chars("9" * 5000) is None


def test_optional_fields_only_set_when_present() -> None:
    store = RecordingStore()
    plan = plan_for(store, legacy_csv("a,home,label,Main,Shown on top,shot.png,30,x"))
    assert plan.creates["a"] == {
        "key": "a",
        "module": "home",
        "type": "label",
        "screen": "Main",
        "context": "Shown on top",
        "screenshot_ref": "shot.png",
        "max_chars": 30,
    }


def test_duplicate_new_key_rows_merge_with_last_row_winning() -> None:
    store = RecordingStore()
    plan = plan_for(
        store,
        legacy_csv("dup,home,text,Main,,,,First", "dup,home,button,,,,,Second"),
    )
    result = plan.result()
    assert result.keys_to_create == 1
    assert result.translations_to_upsert == 1
    assert plan.creates["dup"]["type"] == "button"
    # a blank cell in the later row does not clear the earlier value
    assert plan.creates["dup"]["screen"] == "Main"
    assert plan.writes[("dup", "fr")] == "Second"


def test_unchanged_existing_key_is_not_updated() -> None:
    store = RecordingStore()
    store.add_key("greeting", module="home", type="text", screen="Main")
    result = plan_for(store, legacy_csv("greeting,home,text,Main,,,,")).result()
    assert result.keys_to_update == 0
    assert result.keys_to_create == 0


def test_changed_existing_key_updates_only_changed_fields() -> None:
    store = RecordingStore()
    existing = store.add_key("greeting", module="home", type="text", screen="Main", context="old")
    plan = plan_for(store, legacy_csv("greeting,home,text,,new context,,25,"))
    assert plan.result().keys_to_update == 1
    key_id, values = plan.updates["greeting"]
    assert key_id == existing.id
    assert values == {"context": "new context", "max_chars": 25}


def test_new_languages_are_pending_with_derived_name_and_direction() -> None:
    store = RecordingStore()
    store.add_language("fr")
    plan = plan_for(store, legacy_csv("a,common,text,,,,,x,y,z", languages=("fr", "ar", "pt-br")))
    assert [(p.code, p.name, p.is_rtl) for p in plan.pending_languages] == [
        ("ar", "AR", True),
        ("pt-br", "PT-BR", False),
    ]
    assert plan.language_ids["ar"] is None
    assert plan.language_ids["fr"] is not None


def test_existing_key_in_new_language_is_always_eligible() -> None:
    store = RecordingStore()
    store.add_key("greeting")
    plan = plan_for(store, legacy_csv("greeting,common,text,,,,,Hola", languages=("es",)))
    assert plan.writes == {("greeting", "es"): "Hola"}


def test_empty_cells_contribute_nothing() -> None:
    store = RecordingStore()
    plan = plan_for(store, legacy_csv("a,common,text,,,,,,  ", languages=("fr", "de")))
    assert plan.writes == {}
    assert plan.result().rows_skipped == 0


def test_parse_policy() -> None:
    assert parse_policy(None) is ConflictPolicy.FILL_MISSING
    assert parse_policy("") is ConflictPolicy.FILL_MISSING
    assert parse_policy("overwrite") is ConflictPolicy.OVERWRITE
    with pytest.raises(InvalidPolicy, match="Invalid conflict policy"):
        parse_policy("merge")
