"""Generate the assembly for the 256 trap vector entry points and their table."""

import sys

__all__ = ["VECTOR_COUNT", "generate_vectors", "main"]

VECTOR_COUNT = 256


def _pushes_error_code(number):
    return 8 <= number <= 14 or number == 17


def _lines():
    yield "# handler"
    yield ".text"
    yield ".globl __alltraps"
    for number in range(VECTOR_COUNT):
        yield f".globl vector{number}"
        yield f"vector{number}:"
        if not _pushes_error_code(number):
            yield "  pushl $0"
        yield f"  pushl ${number}"
        yield "  jmp __alltraps"
    yield ""
    yield "# vector table"
    yield ".data"
    yield ".globl __vectors"
    yield "__vectors:"
    for number in range(VECTOR_COUNT):
        yield f"  .long vector{number}"


def generate_vectors():
    """Return the generated assembly text."""
    return "".join(f"{line}\n" for line in _lines())


def main(argv=None):
    """Write the generated assembly to standard output."""
    sys.stdout.write(generate_vectors())
    return 0