import argparse

from simulator.examples import EXAMPLES
from simulator.serialization import import_spec


def _ordered(values):
    return sorted(values, key=str)


def format_transition(spec, state, symbol):
    transition = spec.lookup(state, symbol)
    if transition is None:
        return "REJECT"
    return f"{transition.write_symbol}{transition.direction.value}{transition.next_state}"


def transition_grid(spec):
    """Rows of the state x symbol table, terminal states last."""
    symbols = _ordered(spec.tape_alphabet)
    terminal = [spec.accept_state, spec.reject_state]
    states = [s for s in _ordered(spec.states) if s not in terminal]
    # Keep the start state on top
    states.sort(key=lambda s: s != spec.start_state)

    rows = []
    for state in states:
        rows.append([str(state)] + [format_transition(spec, state, symbol) for symbol in symbols])
    return symbols, rows


def latex_table(spec):
    symbols, rows = transition_grid(spec)
    lines = [r"\begin{array}{c|" + "c" * len(symbols) + "}"]
    lines.append("State/Symbol & " + " & ".join([f"\\text{{{s}}}" for s in symbols]) + r" \\ \hline")
    for row in rows:
        lines.append(" & ".join(row) + r" \\")
    lines.append(r"\end{array}")
    return "\n".join(lines)


def pretty_print_spec(spec, metadata=None):
    """Pretty print the machine as a state x symbol table and as LaTeX."""
    if metadata:
        print(f"[INFO] {metadata.get('name') or 'Unnamed machine'}")
        if metadata.get("description"):
            print(f"  {metadata['description']}")
        if metadata.get("exportedAt"):
            print(f"  Exported: {metadata['exportedAt']}")

    print(f"  States: {', '.join(map(str, _ordered(spec.states)))}")
    print(f"  Input alphabet: {', '.join(map(str, _ordered(spec.input_alphabet)))}")
    print(f"  Tape alphabet: {', '.join(map(str, _ordered(spec.tape_alphabet)))}")
    print(f"  Start: {spec.start_state}  Accept: {spec.accept_state}  Reject: {spec.reject_state}")
    print(f"  Blank: {spec.blank_symbol}")

    # === Terminal Human-Readable Table ===
    symbols, rows = transition_grid(spec)
    print("\n=== Transition Table ===")
    print("\t".join([" "] + [str(s) for s in symbols]))
    for row in rows:
        print("\t".join(row))

    # === LaTeX Table Output ===
    print("\n=== LaTeX Table ===")
    print(latex_table(spec))


def main():
    parser = argparse.ArgumentParser(description="Turing Machine Inspector")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--spec", help="Path to a machine JSON file")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Built-in example machine")
    args = parser.parse_args()

    if args.example:
        pretty_print_spec(EXAMPLES[args.example](), {"name": args.example})
    else:
        spec, metadata = import_spec(args.spec)
        pretty_print_spec(spec, metadata)


if __name__ == "__main__":
    main()
