"""ELF file header and program header records."""

import struct
from dataclasses import dataclass

__all__ = [
    "ELF_MAGIC",
    "ELF_PT_LOAD",
    "ELF_PF_X",
    "ELF_PF_W",
    "ELF_PF_R",
    "ElfFormatError",
    "ElfHeader",
    "ProgramHeader",
    "program_headers",
]

ELF_MAGIC = 0x464C457F

ELF_PT_LOAD = 1

ELF_PF_X = 1
ELF_PF_W = 2
ELF_PF_R = 4

_ELFHDR = struct.Struct("<I12sHHIQQQIHHHHHH")
_PROGHDR = struct.Struct("<IIQQQQQQ")


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a valid ELF structure."""


@dataclass
class ElfHeader:
    """The ELF file header."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    SIZE = _ELFHDR.size

    @classmethod
    def from_bytes(cls, data):
        """Parse a header from the start of ``data``; the magic must match."""
        if len(data) < _ELFHDR.size:
            raise ElfFormatError(
                f"ELF header needs {_ELFHDR.size} bytes, got {len(data)}"
            )
        header = cls(*_ELFHDR.unpack_from(bytes(data[:_ELFHDR.size])))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#010x}")
        return header

    def to_bytes(self):
        """Encode the header in little-endian layout."""
        if len(self.elf) > 12:
            raise ElfFormatError("e_elf holds at most 12 bytes")
        try:
            return _ELFHDR.pack(
                self.magic, bytes(self.elf), self.type, self.machine,
                self.version, self.entry, self.phoff, self.shoff, self.flags,
                self.ehsize, self.phentsize, self.phnum, self.shentsize,
                self.shnum, self.shstrndx,
            )
        except struct.error as exc:
            raise ElfFormatError(str(exc)) from exc


@dataclass
class ProgramHeader:
    """One program (segment) header."""

    type: int = 0
    flags: int = 0
    offset: int = 0
    va: int = 0
    pa: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    SIZE = _PROGHDR.size

    @classmethod
    def from_bytes(cls, data):
        """Parse a program header from the start of ``data``."""
        if len(data) < _PROGHDR.size:
            raise ElfFormatError(
                f"program header needs {_PROGHDR.size} bytes, got {len(data)}"
            )
        return cls(*_PROGHDR.unpack_from(bytes(data[:_PROGHDR.size])))

    def to_bytes(self):
        """Encode the program header in little-endian layout."""
        try:
            return _PROGHDR.pack(
                self.type, self.flags, self.offset, self.va, self.pa,
                self.filesz, self.memsz, self.align,
            )
        except struct.error as exc:
            raise ElfFormatError(str(exc)) from exc

    @property
    def is_load(self):
        """True for a loadable segment."""
        return self.type == ELF_PT_LOAD


def program_headers(data):
    """Return the program headers of the ELF image ``data``."""
    header = ElfHeader.from_bytes(data)
    stride = header.phentsize or _PROGHDR.size
    if stride < _PROGHDR.size:
        raise ElfFormatError(f"program header entry size {stride} is too small")
    end = header.phoff + header.phnum * stride
    if end > len(data):
        raise ElfFormatError("program header table runs past the end of the data")
    return [
        ProgramHeader.from_bytes(data[offset:offset + _PROGHDR.size])
        for offset in range(header.phoff, end, stride)
    ]