import pytest

from factories import RecordingStore, legacy_csv
from lingohub_api.errors import EmptyFile, InvalidHeader, PersistenceError
from lingohub_api.importer import ConflictPolicy, run_import
from lingohub_api.importer.mapping import ExplicitMapping


def test_preview_reports_counts_without_writing() -> None:
    store = RecordingStore()
    result = run_import(
        store,
        store.workspace_id,
        legacy_csv("a,common,text,,,,,x", "b,common,text,,,,,y", languages=("de",)),
        ConflictPolicy.FILL_MISSING,
        preview=True,
    )
    assert result.keys_to_create == 2
    assert result.translations_to_upsert == 2
    assert set(store.call_names) <= {"list_languages", "list_keys", "list_translations"}
    assert store.languages == []
    assert store.keys == []


@pytest.mark.parametrize(
    "text, error",
    [
        ("", EmptyFile),
        ("\n\n  \n", EmptyFile),
        ("key,module,kind,screen,context,screenshot_ref,max_chars,fr\na,b,c,,,,,x\n", InvalidHeader),
    ],
)
def test_structural_errors_touch_nothing(text, error) -> None:
    store = RecordingStore()
    with pytest.raises(error):
        run_import(store, store.workspace_id, text, ConflictPolicy.OVERWRITE)
    assert store.calls == []


def test_apply_runs_stages_in_order() -> None:
    store = RecordingStore()
    fr = store.add_language("fr")
    old = store.add_key("old", context="before")
    store.add_translation(old, fr, "Vieux")

    result = run_import(
        store,
        store.workspace_id,
        legacy_csv("old,common,text,,after,,,Ancien,Alt", "new,common,text,,,,,Nouveau,Neu", languages=("fr", "de")),
        ConflictPolicy.OVERWRITE,
    )

    writes = [name for name in store.call_names if not name.startswith(("list_", "find_"))]
    assert writes[:3] == ["create_language", "insert_keys", "update_key"]
    assert set(writes[3:]) == {"upsert_translation"}
    assert len(writes[3:]) == 4
    assert result.failures == []
    assert store.value_of("old", "fr") == "Ancien"
    assert store.value_of("new", "de") == "Neu"
    assert old.context == "after"


def test_unchanged_file_writes_nothing() -> None:
    store = RecordingStore()
    store.add_language("fr")
    store.add_key("same")
    result = run_import(store, store.workspace_id, legacy_csv("same,common,text,,,,,"), ConflictPolicy.OVERWRITE)
    assert result.as_dict() == {
        "keys_to_create": 0,
        "keys_to_update": 0,
        "translations_to_upsert": 0,
        "rows_skipped": 0,
        "skipped_reasons": [],
        "failures": [],
    }
    assert "update_key" not in store.call_names
    assert "upsert_translation" not in store.call_names


def test_failed_upsert_is_reported_and_others_persist() -> None:
    store = RecordingStore()
    fr = store.add_language("fr")
    a = store.add_key("a")
    store.add_key("b")
    store.fail_upserts.add((a.id, fr.id))

    result = run_import(
        store,
        store.workspace_id,
        legacy_csv("a,common,text,,,,,Un", "b,common,text,,,,,Deux"),
        ConflictPolicy.OVERWRITE,
    )

    assert result.translations_to_upsert == 2
    assert [f.as_dict()["stage"] for f in result.failures] == ["upsert"]
    assert result.failures[0].key == "a"
    assert result.failures[0].language == "fr"
    assert store.value_of("a", "fr") is None
    assert store.value_of("b", "fr") == "Deux"


def test_failed_key_update_does_not_stop_translations() -> None:
    store = RecordingStore()
    store.add_language("fr")
    a = store.add_key("a", screen="Old")
    store.fail_updates.add(a.id)

    result = run_import(
        store,
        store.workspace_id,
        legacy_csv("a,common,text,New,,,,Bonjour"),
        ConflictPolicy.FILL_MISSING,
    )

    assert [(f.stage, f.key) for f in result.failures] == [("update_key", "a")]
    assert a.screen == "Old"
    assert store.value_of("a", "fr") == "Bonjour"


def test_key_insert_failure_aborts_import() -> None:
    store = RecordingStore()
    store.fail_insert_keys = True
    with pytest.raises(PersistenceError, match="Failed to create keys"):
        run_import(store, store.workspace_id, legacy_csv("a,common,text,,,,,x"), ConflictPolicy.OVERWRITE)
    assert "upsert_translation" not in store.call_names


def test_language_creation_failure_aborts_before_keys() -> None:
    store = RecordingStore()
    store.fail_create_language.add("de")
    with pytest.raises(PersistenceError, match="Failed to create language: de"):
        run_import(
            store,
            store.workspace_id,
            legacy_csv("a,common,text,,,,,x,y", languages=("fr", "de")),
            ConflictPolicy.OVERWRITE,
        )
    assert store.call_names.count("create_language") == 2
    assert "insert_keys" not in store.call_names
    assert "upsert_translation" not in store.call_names
    assert store.keys == []


def test_unresolved_key_id_is_reported_and_others_persist() -> None:
    store = RecordingStore()
    store.add_language("fr")
    store.drop_inserted_ids.add("lost")

    result = run_import(
        store,
        store.workspace_id,
        legacy_csv("lost,common,text,,,,,Perdu", "kept,common,text,,,,,Garde"),
        ConflictPolicy.FILL_MISSING,
    )

    assert result.keys_to_create == 2
    assert [f.as_dict() for f in result.failures] == [
        {"stage": "resolve", "key": "lost", "language": "fr", "reason": "Key or language not found"}
    ]
    assert store.value_of("kept", "fr") == "Garde"
    assert store.value_of("lost", "fr") is None


def test_explicit_mapping_ignores_header_row_contents() -> None:
    store = RecordingStore()
    mapping = ExplicitMapping(fields={"key": 1, "screen": 0}, languages={"es": 2})
    result = run_import(
        store,
        store.workspace_id,
        "Screen,Identifier,Spanish\nHome,home.title,Inicio\n",
        ConflictPolicy.FILL_MISSING,
        mapping=mapping,
    )
    assert result.keys_to_create == 1
    assert store.keys[0].screen == "Home"
    assert store.value_of("home.title", "es") == "Inicio"
