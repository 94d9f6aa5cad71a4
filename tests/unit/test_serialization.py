"""
Test serialization.py: JSON payload shape, round-trips and structural checks.
"""

import json

import pytest

from simulator.examples import EXAMPLES
from simulator.serialization import (
    PayloadError,
    deserialize,
    export_spec,
    import_spec,
    serialize,
    spec_from_dict,
    spec_to_dict,
)
from simulator.spec import Invariant, ValidationError, build


class TestPayloadShape:
    def test_collections_are_lists(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        assert payload["states"] == ["q0", "q1", "qAccept", "qReject"]
        assert payload["inputAlphabet"] == ["0", "1"]
        assert payload["tapeAlphabet"] == ["0", "1", "□"]

    def test_scalars(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        assert payload["startState"] == "q0"
        assert payload["acceptState"] == "qAccept"
        assert payload["rejectState"] == "qReject"
        assert payload["blankSymbol"] == "□"

    def test_transitions_nested_by_state_then_symbol(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        assert set(payload["transitions"]) == {"q0", "q1"}
        assert payload["transitions"]["q0"]["□"] == {"nextState": "q1", "write": "□", "move": "L"}
        assert payload["transitions"]["q1"]["0"] == {"nextState": "qAccept", "write": "1", "move": "S"}
        assert payload["transitions"]["q0"]["1"]["move"] == "R"

    def test_serialize_is_json(self, binary_increment_spec):
        data = json.loads(serialize(binary_increment_spec))
        assert data == spec_to_dict(binary_increment_spec)

    def test_serialize_is_stable(self, binary_increment_spec):
        assert serialize(binary_increment_spec) == serialize(deserialize(serialize(binary_increment_spec)))


class TestRoundTrip:
    @pytest.mark.parametrize("name", sorted(EXAMPLES))
    def test_examples_round_trip(self, name):
        spec = EXAMPLES[name]()
        assert deserialize(serialize(spec)) == spec

    def test_partial_round_trip(self, partial_spec):
        assert deserialize(serialize(partial_spec)) == partial_spec

    def test_list_order_not_significant(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        payload["states"].reverse()
        payload["tapeAlphabet"].reverse()
        assert spec_from_dict(payload) == binary_increment_spec

    def test_metadata_ignored(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        payload["metadata"] = {"name": "inc", "description": "adds one", "exportedAt": "2024-01-01T00:00:00Z"}
        assert spec_from_dict(payload) == binary_increment_spec


def _numbered_spec(states=(0, 1, 2, 3), tape=("a", "_")):
    return build(
        states=states,
        input_alphabet=["a"],
        tape_alphabet=tape,
        transitions=[(0, "a", 1, "a", "R"), (1, "_", 2, "_", "S")],
        start_state=0,
        accept_state=2,
        reject_state=3,
        blank_symbol="_",
    )


class TestTokenTypes:
    def test_int_states_round_trip(self):
        spec = _numbered_spec()
        restored = deserialize(serialize(spec))
        assert restored == spec
        assert restored.start_state == 0
        assert restored.lookup(0, "a").next_state == 1

    def test_numeric_and_boolean_symbols_round_trip(self):
        spec = build(
            states=["q0", "qA", "qR"],
            input_alphabet=[1, 2.5],
            tape_alphabet=[1, 2.5, None],
            transitions=[("q0", 1, "q0", 2.5, "R"), ("q0", None, "qA", None, "S")],
            start_state="q0",
            accept_state="qA",
            reject_state="qR",
            blank_symbol=None,
        )
        assert deserialize(serialize(spec)) == spec

    def test_colliding_keys_refused(self):
        spec = _numbered_spec(states=(0, 1, 2, 3, "1"))
        with pytest.raises(PayloadError, match="'1'") as excinfo:
            serialize(spec)
        assert excinfo.value.invariant is Invariant.MALFORMED_PAYLOAD

    def test_unsaveable_token_refused(self):
        spec = _numbered_spec(states=(0, 1, 2, 3, ("pair", 4)))
        with pytest.raises(PayloadError) as excinfo:
            spec_to_dict(spec)
        assert excinfo.value.subject == ("pair", 4)

    def test_nested_values_in_payload_rejected(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        payload["states"].append(["q9"])
        with pytest.raises(PayloadError):
            spec_from_dict(payload)


class TestStructuralChecks:
    @pytest.mark.parametrize(
        "key",
        ["states", "inputAlphabet", "tapeAlphabet", "transitions", "startState", "acceptState", "rejectState", "blankSymbol"],
    )
    def test_missing_field(self, binary_increment_spec, key):
        payload = spec_to_dict(binary_increment_spec)
        del payload[key]
        with pytest.raises(PayloadError, match=key) as excinfo:
            spec_from_dict(payload)
        assert excinfo.value.invariant is Invariant.MALFORMED_PAYLOAD

    @pytest.mark.parametrize(
        "key, value",
        [("states", "q0,q1"), ("inputAlphabet", {"0": 1}), ("tapeAlphabet", None), ("transitions", [])],
    )
    def test_wrong_collection_type(self, binary_increment_spec, key, value):
        payload = spec_to_dict(binary_increment_spec)
        payload[key] = value
        with pytest.raises(PayloadError):
            spec_from_dict(payload)

    def test_not_an_object(self):
        with pytest.raises(PayloadError):
            spec_from_dict(["states"])

    def test_incomplete_transition(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        del payload["transitions"]["q0"]["0"]["move"]
        with pytest.raises(PayloadError):
            spec_from_dict(payload)

    def test_payload_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            spec_from_dict({})

    def test_invariants_checked_after_structure(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        payload["startState"] = "qNowhere"
        with pytest.raises(ValidationError) as excinfo:
            spec_from_dict(payload)
        assert excinfo.value.invariant is Invariant.START_STATE_UNKNOWN

    def test_unknown_move_tag(self, binary_increment_spec):
        payload = spec_to_dict(binary_increment_spec)
        payload["transitions"]["q0"]["0"]["move"] = "N"
        with pytest.raises(ValidationError) as excinfo:
            spec_from_dict(payload)
        assert excinfo.value.invariant is Invariant.DIRECTION_UNKNOWN


class TestExportImport:
    def test_export_writes_metadata(self, binary_increment_spec, tmp_path):
        path = tmp_path / "machines" / "inc.json"
        metadata = export_spec(binary_increment_spec, path, name="inc", description="adds one")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert data["metadata"]["name"] == "inc"
        assert data["metadata"]["description"] == "adds one"
        assert data["metadata"]["exportedAt"] == metadata["exportedAt"]

    def test_import_returns_spec_and_metadata(self, binary_increment_spec, tmp_path):
        path = tmp_path / "inc.json"
        export_spec(binary_increment_spec, path, name="inc")
        spec, metadata = import_spec(path)
        assert spec == binary_increment_spec
        assert metadata["name"] == "inc"

    def test_import_without_metadata(self, binary_increment_spec, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text(serialize(binary_increment_spec), encoding="utf-8")
        spec, metadata = import_spec(path)
        assert spec == binary_increment_spec
        assert metadata == {}

    def test_import_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            import_spec(tmp_path / "missing.json")
