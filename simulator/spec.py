from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Hashable, Iterable, Mapping, Optional

State = Hashable
Symbol = Hashable


class Direction(Enum):
    LEFT = "L"
    RIGHT = "R"
    STAY = "S"

    @classmethod
    def parse(cls, value) -> "Direction":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                Invariant.DIRECTION_UNKNOWN,
                value,
                f"direction must be one of 'L', 'R', 'S', got {value!r}",
            ) from None


class Invariant(Enum):
    """Names of the well-formedness rules a machine definition must satisfy."""

    START_STATE_UNKNOWN = "start state must be a member of states"
    ACCEPT_STATE_UNKNOWN = "accept state must be a member of states"
    REJECT_STATE_UNKNOWN = "reject state must be a member of states"
    BLANK_NOT_IN_TAPE_ALPHABET = "blank symbol must be a member of the tape alphabet"
    BLANK_IN_INPUT_ALPHABET = "blank symbol must not be a member of the input alphabet"
    INPUT_NOT_IN_TAPE_ALPHABET = "input alphabet must be a subset of the tape alphabet"
    TRANSITION_SYMBOL_UNKNOWN = "transition symbols must be members of the tape alphabet"
    TRANSITION_STATE_UNKNOWN = "transition states must be members of states"
    DIRECTION_UNKNOWN = "direction must be L, R or S"
    SYMBOL_NOT_IN_INPUT_ALPHABET = "input symbols must be members of the input alphabet"
    MALFORMED_PAYLOAD = "payload is missing a field or has a field of the wrong type"


class ValidationError(ValueError):
    """A machine definition or an input string broke one of the rules in ``Invariant``."""

    def __init__(self, invariant: Invariant, subject=None, message: Optional[str] = None):
        self.invariant = invariant
        self.subject = subject
        if message is None:
            message = f"{invariant.value}: {subject!r}"
        super().__init__(message)


@dataclass(frozen=True)
class Transition:
    next_state: State
    write_symbol: Symbol
    direction: Direction


@dataclass(frozen=True)
class Specification:
    """Immutable machine definition.

    ``transitions`` is a partial table; a missing ``(state, symbol)`` entry is
    a defined absence that the engine treats as an implicit reject.
    """

    states: frozenset
    input_alphabet: frozenset
    tape_alphabet: frozenset
    transitions: Mapping[tuple, Transition] = field(compare=False)
    start_state: State
    accept_state: State
    reject_state: State
    blank_symbol: Symbol
    _table_key: frozenset = field(init=False, repr=False, compare=True)

    def __post_init__(self) -> None:
        # Normalize collections so equality and hashing never depend on the
        # container types the caller handed in.
        object.__setattr__(self, "states", frozenset(self.states))
        object.__setattr__(self, "input_alphabet", frozenset(self.input_alphabet))
        object.__setattr__(self, "tape_alphabet", frozenset(self.tape_alphabet))
        table = dict(self.transitions)
        object.__setattr__(self, "transitions", MappingProxyType(table))
        object.__setattr__(self, "_table_key", frozenset(table.items()))
        self._validate()

    def _validate(self) -> None:
        if self.start_state not in self.states:
            raise ValidationError(Invariant.START_STATE_UNKNOWN, self.start_state)
        if self.accept_state not in self.states:
            raise ValidationError(Invariant.ACCEPT_STATE_UNKNOWN, self.accept_state)
        if self.reject_state not in self.states:
            raise ValidationError(Invariant.REJECT_STATE_UNKNOWN, self.reject_state)
        if self.blank_symbol not in self.tape_alphabet:
            raise ValidationError(Invariant.BLANK_NOT_IN_TAPE_ALPHABET, self.blank_symbol)
        if self.blank_symbol in self.input_alphabet:
            raise ValidationError(Invariant.BLANK_IN_INPUT_ALPHABET, self.blank_symbol)

        missing = self.input_alphabet - self.tape_alphabet
        if missing:
            raise ValidationError(Invariant.INPUT_NOT_IN_TAPE_ALPHABET, sorted(missing, key=repr)[0])

        for (state, symbol), transition in self.transitions.items():
            if not isinstance(transition, Transition):
                raise TypeError(f"transition for ({state!r}, {symbol!r}) must be a Transition")
            if not isinstance(transition.direction, Direction):
                raise ValidationError(Invariant.DIRECTION_UNKNOWN, transition.direction)
            if symbol not in self.tape_alphabet:
                raise ValidationError(
                    Invariant.TRANSITION_SYMBOL_UNKNOWN,
                    symbol,
                    f"transition from ({state!r}, {symbol!r}) reads unknown symbol {symbol!r}",
                )
            if transition.write_symbol not in self.tape_alphabet:
                raise ValidationError(
                    Invariant.TRANSITION_SYMBOL_UNKNOWN,
                    transition.write_symbol,
                    f"transition from ({state!r}, {symbol!r}) writes unknown symbol {transition.write_symbol!r}",
                )
            if state not in self.states:
                raise ValidationError(
                    Invariant.TRANSITION_STATE_UNKNOWN,
                    state,
                    f"transition from ({state!r}, {symbol!r}) starts in unknown state {state!r}",
                )
            if transition.next_state not in self.states:
                raise ValidationError(
                    Invariant.TRANSITION_STATE_UNKNOWN,
                    transition.next_state,
                    f"transition from ({state!r}, {symbol!r}) goes to unknown state {transition.next_state!r}",
                )

    def lookup(self, state: State, symbol: Symbol) -> Optional[Transition]:
        return self.transitions.get((state, symbol))

    def is_terminal(self, state: State) -> bool:
        return state == self.accept_state or state == self.reject_state

    def transition_rows(self):
        """Yield the table as flat ``(from, read, to, write, direction)`` rows."""
        for (state, symbol), transition in self.transitions.items():
            yield (state, symbol, transition.next_state, transition.write_symbol, transition.direction)


def build(
    states: Iterable[State],
    input_alphabet: Iterable[Symbol],
    tape_alphabet: Iterable[Symbol],
    transitions: Iterable[tuple],
    start_state: State,
    accept_state: State,
    reject_state: State,
    blank_symbol: Symbol,
) -> Specification:
    """Build a validated ``Specification`` from the editor's flat fields.

    ``transitions`` holds ``(from_state, read_symbol, to_state, write_symbol,
    direction)`` rows. A later row for the same ``(from_state, read_symbol)``
    replaces an earlier one. Raises ``ValidationError`` on the first broken rule.
    """
    table = {}
    for row in transitions:
        from_state, read_symbol, to_state, write_symbol, direction = row
        table[(from_state, read_symbol)] = Transition(to_state, write_symbol, Direction.parse(direction))

    return Specification(
        states=frozenset(states),
        input_alphabet=frozenset(input_alphabet),
        tape_alphabet=frozenset(tape_alphabet),
        transitions=table,
        start_state=start_state,
        accept_state=accept_state,
        reject_state=reject_state,
        blank_symbol=blank_symbol,
    )
