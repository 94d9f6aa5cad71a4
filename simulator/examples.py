from simulator.spec import build

BLANK = "□"


def binary_increment():
    """Adds one to a binary number: scan right to the end, then carry leftward."""
    return build(
        states=["q0", "q1", "qAccept", "qReject"],
        input_alphabet=["0", "1"],
        tape_alphabet=["0", "1", BLANK],
        transitions=[
            # Move to the rightmost digit
            ("q0", "0", "q0", "0", "R"),
            ("q0", "1", "q0", "1", "R"),
            ("q0", BLANK, "q1", BLANK, "L"),
            # Increment: 0 becomes 1, 1 becomes 0 and carry
            ("q1", "0", "qAccept", "1", "S"),
            ("q1", "1", "q1", "0", "L"),
            ("q1", BLANK, "qAccept", "1", "S"),
        ],
        start_state="q0",
        accept_state="qAccept",
        reject_state="qReject",
        blank_symbol=BLANK,
    )


def infinite_loop():
    """Bounces between the last input cell and the blank after it forever."""
    return build(
        states=["q0", "qAccept", "qReject"],
        input_alphabet=["0"],
        tape_alphabet=["0", BLANK],
        transitions=[
            ("q0", "0", "q0", "0", "R"),
            ("q0", BLANK, "q0", BLANK, "L"),
        ],
        start_state="q0",
        accept_state="qAccept",
        reject_state="qReject",
        blank_symbol=BLANK,
    )


EXAMPLES = {
    "binary-increment": binary_increment,
    "infinite-loop": infinite_loop,
}
