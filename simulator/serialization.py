import json
import math
from datetime import datetime, timezone
from pathlib import Path

from simulator.spec import Direction, Invariant, ValidationError, build

REQUIRED_COLLECTIONS = {
    "states": list,
    "inputAlphabet": list,
    "tapeAlphabet": list,
    "transitions": dict,
}
REQUIRED_SCALARS = ("startState", "acceptState", "rejectState", "blankSymbol")

# States and symbols a JSON document can carry unchanged
TOKEN_TYPES = (str, int, float, bool, type(None))


class PayloadError(ValidationError):
    """A persisted machine is structurally incomplete and cannot be built."""

    def __init__(self, message, subject=None):
        super().__init__(Invariant.MALFORMED_PAYLOAD, subject, message)


def _sorted(values):
    return sorted(values, key=lambda v: (type(v).__name__, str(v)))


def _key_text(token):
    """The text json uses when the token is an object key."""
    if isinstance(token, str):
        return token
    return json.dumps(token)


def _is_token(value):
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return isinstance(value, TOKEN_TYPES)


def _key_table(tokens, kind):
    """Map key text back to tokens, refusing tokens that cannot survive a JSON round-trip."""
    table = {}
    for token in _sorted(tokens):
        if not _is_token(token):
            raise PayloadError(
                f"{kind} {token!r} cannot be saved: states and symbols must be strings, "
                "finite numbers, booleans or null.",
                token,
            )
        text = _key_text(token)
        if text in table:
            raise PayloadError(
                f"{kind}s {table[text]!r} and {token!r} would both be saved under the key {text!r}.",
                token,
            )
        table[text] = token
    return table


def spec_to_dict(spec):
    """Convert a Specification to its JSON-ready payload (sets become sorted lists)."""
    _key_table(spec.states, "State")
    _key_table(spec.tape_alphabet, "Symbol")

    transitions = {}
    for state, symbol, next_state, write_symbol, direction in spec.transition_rows():
        transitions.setdefault(_key_text(state), {})[_key_text(symbol)] = {
            "nextState": next_state,
            "write": write_symbol,
            "move": direction.value,
        }

    ordered = {}
    for state in sorted(transitions):
        row = transitions[state]
        ordered[state] = {symbol: row[symbol] for symbol in sorted(row)}

    return {
        "states": _sorted(spec.states),
        "inputAlphabet": _sorted(spec.input_alphabet),
        "tapeAlphabet": _sorted(spec.tape_alphabet),
        "transitions": ordered,
        "startState": spec.start_state,
        "acceptState": spec.accept_state,
        "rejectState": spec.reject_state,
        "blankSymbol": spec.blank_symbol,
    }


def validate_payload(data):
    if not isinstance(data, dict):
        raise PayloadError(f"Machine payload must be a JSON object, got {type(data).__name__}.")

    for key, expected_type in REQUIRED_COLLECTIONS.items():
        if key not in data:
            raise PayloadError(f"Missing required machine field: {key}", key)
        if not isinstance(data[key], expected_type):
            raise PayloadError(
                f"Machine field '{key}' expected {expected_type.__name__}, got {type(data[key]).__name__}.", key
            )

    for key in ("states", "inputAlphabet", "tapeAlphabet"):
        for value in data[key]:
            if not _is_token(value):
                raise PayloadError(f"Machine field '{key}' holds {value!r}, which is not a state or symbol.", key)

    for key in REQUIRED_SCALARS:
        if key not in data:
            raise PayloadError(f"Missing required machine field: {key}", key)
        if not _is_token(data[key]):
            raise PayloadError(f"Machine field '{key}' holds {data[key]!r}, which is not a state or symbol.", key)

    for state, row in data["transitions"].items():
        if not isinstance(row, dict):
            raise PayloadError(f"Transitions for state '{state}' must be an object.", state)
        for symbol, transition in row.items():
            if not isinstance(transition, dict) or not all(k in transition for k in ("nextState", "write", "move")):
                raise PayloadError(
                    f"Transition ({state}, {symbol}) must contain 'nextState', 'write' and 'move'.", (state, symbol)
                )
            if not (_is_token(transition["nextState"]) and _is_token(transition["write"])):
                raise PayloadError(
                    f"Transition ({state}, {symbol}) must name its next state and written symbol directly.",
                    (state, symbol),
                )


def spec_from_dict(data):
    """
    Rebuild a Specification from a payload; ``metadata`` is ignored.
    Transition keys are matched back to the listed states and symbols, so
    non-string tokens come back with their original types.
    """
    validate_payload(data)

    state_keys = {_key_text(state): state for state in data["states"]}
    symbol_keys = {_key_text(symbol): symbol for symbol in data["tapeAlphabet"]}

    rows = []
    for state, row in data["transitions"].items():
        for symbol, transition in row.items():
            rows.append(
                (
                    state_keys.get(state, state),
                    symbol_keys.get(symbol, symbol),
                    transition["nextState"],
                    transition["write"],
                    Direction.parse(transition["move"]),
                )
            )

    return build(
        states=data["states"],
        input_alphabet=data["inputAlphabet"],
        tape_alphabet=data["tapeAlphabet"],
        transitions=rows,
        start_state=data["startState"],
        accept_state=data["acceptState"],
        reject_state=data["rejectState"],
        blank_symbol=data["blankSymbol"],
    )


def serialize(spec, indent=None):
    return json.dumps(spec_to_dict(spec), ensure_ascii=False, indent=indent)


def deserialize(text):
    return spec_from_dict(json.loads(text))


def export_spec(spec, path, name="", description=""):
    """Write a machine file with a metadata block and return the metadata."""
    metadata = {
        "name": name,
        "description": description,
        "exportedAt": datetime.now(timezone.utc).isoformat(),
    }
    payload = spec_to_dict(spec)
    payload["metadata"] = metadata

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return metadata


def import_spec(path):
    """Load a machine file, returning ``(spec, metadata)``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Machine file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    spec = spec_from_dict(data)
    metadata = data.get("metadata") or {}
    return spec, metadata
