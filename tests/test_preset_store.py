"""
Unit tests for PresetBundle and PresetStore.

Covers loading and merging with built-ins, switching, saving, deletion of
built-in and user presets, and single-preset export/import.
"""

import pytest
from datetime import datetime, timezone

from errors import (
    InvalidImportFormatError,
    NameConflictError,
    PresetNotFoundError,
    PresetProtectedError,
)
from presets.builtin import BUILTIN_PRESET_CONFIGS, BUILTIN_PRESET_NAMES, DEFAULT_PRESET_NAME
from presets.models import PresetBundle
from presets.store import PresetStore, export_filename, EXPORT_VERSION


@pytest.fixture
def store():
    return PresetStore.load()


@pytest.fixture
def custom_bundle():
    return PresetBundle(name="Noir", system_prompt="You are {{user}}, a tired detective.",
                        context_size=6, max_tokens=0, pov="third", response_style="long")


class TestPresetBundle:
    """Test bundle serialization and boundary clamping"""

    def test_round_trip_keys(self, custom_bundle):
        """to_dict uses the persisted camelCase keys and from_dict reads them back"""
        data = custom_bundle.to_dict()
        assert data["systemPrompt"] == custom_bundle.system_prompt
        assert data["includeCharCard"] is False
        assert PresetBundle.from_dict(data) == custom_bundle

    def test_negative_numbers_are_clamped(self):
        bundle = PresetBundle.from_dict({"name": "X", "contextSize": -5, "maxTokens": "-20"})
        assert bundle.context_size == 0
        assert bundle.max_tokens == 0

    def test_unparsable_numbers_use_defaults(self):
        bundle = PresetBundle.from_dict({"name": "X", "contextSize": "lots", "maxTokens": None})
        assert bundle.context_size == 10
        assert bundle.max_tokens == 200

    def test_unknown_choices_fall_back(self):
        bundle = PresetBundle.from_dict({"name": "X", "pov": "fourth", "responseStyle": "epic"})
        assert bundle.pov == "first"
        assert bundle.response_style == "medium"

    def test_long_aliases_accepted(self):
        bundle = PresetBundle.from_dict({
            "name": "X",
            "systemPromptTemplate": "Be {{user}}.",
            "includeCharacterCard": True,
            "pointOfView": "second",
        })
        assert bundle.system_prompt == "Be {{user}}."
        assert bundle.include_char_card is True
        assert bundle.pov == "second"

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            PresetBundle.from_dict({"name": "  "})


class TestPresetStoreLoad:
    """Test merging persisted state with built-ins"""

    def test_defaults_when_nothing_persisted(self, store):
        assert store.names() == list(BUILTIN_PRESET_CONFIGS)
        assert store.active_name == DEFAULT_PRESET_NAME

    def test_persisted_values_win_over_builtins(self):
        persisted = {"Default": {"name": "Default", "systemPrompt": "Custom", "contextSize": 3}}
        store = PresetStore.load(persisted, "Default")

        assert store.get("Default").system_prompt == "Custom"
        assert store.get("Default").context_size == 3
        # Missing built-ins are restored
        assert set(BUILTIN_PRESET_NAMES) <= set(store.names())

    def test_insertion_order_preserved(self, custom_bundle):
        persisted = {"Noir": custom_bundle.to_dict(), "Default": BUILTIN_PRESET_CONFIGS["Default"]}
        store = PresetStore.load(persisted, "Noir")
        assert store.names()[:2] == ["Noir", "Default"]
        assert store.active_name == "Noir"

    def test_unresolved_active_name_falls_back(self):
        store = PresetStore.load({}, "Deleted Preset")
        assert store.active_name == DEFAULT_PRESET_NAME

    def test_malformed_entries_skipped(self):
        store = PresetStore.load({"Broken": "not a dict", "": {"name": ""}}, None)
        assert "Broken" not in store
        assert store.active_name == DEFAULT_PRESET_NAME

    def test_non_mapping_presets_ignored(self):
        store = PresetStore.load(["garbage"], "Default")
        assert store.names() == list(BUILTIN_PRESET_CONFIGS)


class TestPresetStoreOperations:
    """Test switch, save, create and remove"""

    def test_switch_returns_copy(self, store):
        bundle = store.switch("Third Person")
        assert store.active_name == "Third Person"
        bundle.context_size = 99
        assert store.get("Third Person").context_size == 10

    def test_switch_unknown(self, store):
        with pytest.raises(PresetNotFoundError):
            store.switch("Nope")
        assert store.active_name == DEFAULT_PRESET_NAME

    def test_save_overwrites_builtin(self, store):
        bundle = store.get("Second Person")
        bundle.max_tokens = 999
        store.save("Second Person", bundle)
        assert store.get("Second Person").max_tokens == 999

    def test_save_forces_name_to_key(self, store, custom_bundle):
        store.save("Renamed", custom_bundle)
        assert store.get("Renamed").name == "Renamed"

    def test_create_conflict(self, store, custom_bundle):
        with pytest.raises(NameConflictError):
            store.create("Default", custom_bundle)

    def test_create_makes_active(self, store, custom_bundle):
        store.create("Mine", custom_bundle)
        assert store.active_name == "Mine"
        assert store.names()[-1] == "Mine"

    def test_remove_builtin_is_protected(self, store):
        before = store.to_dict()
        with pytest.raises(PresetProtectedError):
            store.remove("Default")
        assert store.to_dict() == before

    def test_remove_unknown(self, store):
        with pytest.raises(PresetNotFoundError):
            store.remove("Ghost")

    def test_remove_active_falls_back_to_default(self, store, custom_bundle):
        store.create("Mine", custom_bundle)
        store.remove("Mine")
        assert "Mine" not in store
        assert store.active_name == DEFAULT_PRESET_NAME


class TestExportImport:
    """Test single-preset export payloads and imports"""

    def test_export_payload(self, store):
        payload = store.export_one("Default", now=datetime(2024, 1, 15, tzinfo=timezone.utc))
        assert payload["version"] == EXPORT_VERSION
        assert payload["preset"]["name"] == "Default"
        assert payload["timestamp"] == "2024-01-15T00:00:00.000Z"

    def test_export_filename(self):
        name = export_filename("First Person  Short", datetime(2024, 1, 15, tzinfo=timezone.utc))
        assert name == "impersonator-first-person-short-1705276800000.json"

    def test_export_then_import_reproduces_fields(self, store, custom_bundle):
        store.save("Noir", custom_bundle)
        payload = store.export_one("Noir")

        other = PresetStore.load()
        name = other.import_one(payload)

        assert name == "Noir"
        assert other.get("Noir") == custom_bundle
        assert other.active_name == "Noir"

    def test_import_collision_requires_new_name(self, store):
        payload = store.export_one("Default")
        before = store.to_dict()
        calls = []

        def rename(existing, suggestion):
            calls.append((existing, suggestion))
            return suggestion

        name = store.import_one(payload, rename=rename)

        assert calls == [("Default", "Default (imported)")]
        assert name == "Default (imported)"
        assert len(store) == len(before) + 1
        assert store.get(name).name == name
        for existing, data in before.items():
            assert store.to_dict()[existing] == data

    def test_import_collision_without_resolver(self, store):
        payload = store.export_one("Default")
        size = len(store)
        with pytest.raises(NameConflictError):
            store.import_one(payload)
        assert len(store) == size

    def test_import_cancelled_rename(self, store):
        payload = store.export_one("Default")
        with pytest.raises(NameConflictError):
            store.import_one(payload, rename=lambda existing, suggestion: None)

    def test_import_rename_to_another_existing_name(self, store):
        payload = store.export_one("Default")
        with pytest.raises(NameConflictError):
            store.import_one(payload, rename=lambda existing, suggestion: "Third Person")
        assert store.get("Third Person").pov == "third"

    @pytest.mark.parametrize("payload", [
        None,
        "text",
        {},
        {"version": "1.0"},
        {"preset": {"systemPrompt": "no name"}},
        {"preset": {"name": ""}},
        {"preset": "Default"},
    ])
    def test_invalid_payloads(self, store, payload):
        with pytest.raises(InvalidImportFormatError):
            store.import_one(payload)

    def test_import_accepts_bundle_key(self, store):
        name = store.import_one({"version": "1.0", "bundle": {"name": "Fresh", "contextSize": 4}})
        assert store.get(name).context_size == 4
