# tools/sample_inputs.py

import argparse

import numpy as np

from simulator.examples import EXAMPLES
from simulator.serialization import import_spec


def generate_sample_inputs(spec, count=5, min_length=1, max_length=8, seed=None):
    """Draw random strings over the input alphabet; the same seed gives the same strings."""
    if min_length < 0 or max_length < min_length:
        raise ValueError("Sample lengths must satisfy 0 <= min_length <= max_length.")

    alphabet = sorted(spec.input_alphabet, key=str)
    if not alphabet:
        # Only the empty string can be written over an empty alphabet
        return [""] * count

    rng = np.random.default_rng(seed)
    lengths = rng.integers(min_length, max_length, size=count, endpoint=True)

    samples = []
    for length in lengths:
        picks = rng.integers(0, len(alphabet), size=int(length))
        samples.append("".join(str(alphabet[i]) for i in picks))
    return samples


def write_input_pool(samples, output_path):
    with open(output_path, "w", encoding="utf-8") as f:
        for sample in samples:
            f.write(sample + "\n")


def main():
    parser = argparse.ArgumentParser(description="Generate random sample inputs for a Turing machine")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--spec", help="Path to a machine JSON file")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Built-in example machine")
    parser.add_argument("--count", type=int, default=5, help="Number of inputs to generate")
    parser.add_argument("--min_length", type=int, default=1)
    parser.add_argument("--max_length", type=int, default=8)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible samples")
    parser.add_argument("--output", help="Write the inputs to this pool file instead of printing them")
    args = parser.parse_args()

    spec = EXAMPLES[args.example]() if args.example else import_spec(args.spec)[0]
    samples = generate_sample_inputs(spec, args.count, args.min_length, args.max_length, args.seed)

    if args.output:
        write_input_pool(samples, args.output)
        print(f"[INFO] Wrote {len(samples):,} inputs to {args.output}")
    else:
        for sample in samples:
            print(sample)


if __name__ == "__main__":
    main()
