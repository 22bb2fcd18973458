"""Kernel support helpers and tools for building SFS images, boot sectors and trap vectors."""

__version__ = "0.1.0"

__all__ = [
    "bitops",
    "cstring",
    "defs",
    "elf",
    "errors",
    "fsdefs",
    "mksfs",
    "printfmt",
    "randgen",
    "sign",
    "skew_heap",
    "vector",
]