"""Build a 512-byte boot sector carrying the 0x55 0xAA signature."""

import os
import sys

__all__ = ["SECTOR_SIZE", "MAX_CODE_SIZE", "SignError", "make_boot_sector", "sign_file", "main"]

SECTOR_SIZE = 512
MAX_CODE_SIZE = 510
_SIGNATURE = b"\x55\xaa"


class SignError(Exception):
    """Raised when a boot sector cannot be built."""


def make_boot_sector(data):
    """Pad ``data`` to a sector and append the boot signature."""
    data = bytes(data)
    if len(data) > MAX_CODE_SIZE:
        raise SignError(f"{len(data)} >> {MAX_CODE_SIZE}!!")
    return data.ljust(MAX_CODE_SIZE, b"\0") + _SIGNATURE


def sign_file(src, dst):
    """Write the boot sector built from file ``src`` to ``dst``; return the input size."""
    try:
        with open(src, "rb") as source:
            data = source.read()
    except OSError as exc:
        raise SignError(f"Error opening file '{os.fsdecode(src)}': {exc.strerror}") from exc
    sector = make_boot_sector(data)
    try:
        with open(dst, "wb") as target:
            target.write(sector)
    except OSError as exc:
        raise SignError(f"write '{os.fsdecode(dst)}' error: {exc.strerror}") from exc
    return len(data)


def main(argv=None):
    """Command line entry: ``<input filename> <output filename>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Usage: <input filename> <output filename>", file=sys.stderr)
        return -1
    src, dst = args
    try:
        size = os.stat(src).st_size
    except OSError as exc:
        print(f"Error opening file '{src}': {exc.strerror}", file=sys.stderr)
        return -1
    print(f"'{src}' size: {size} bytes")
    try:
        sign_file(src, dst)
    except SignError as exc:
        print(exc, file=sys.stderr)
        return -1
    print(f"build 512 bytes boot sector: '{dst}' success!")
    return 0