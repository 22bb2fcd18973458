# kernlib

Building blocks for a small teaching kernel and the tools that prepare its
disk images, usable from plain Python. It has no dependencies beyond the
standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command-line tools

### `kernlib-mksfs`

Writes a simple file system (SFS) into an existing file whose name ends in
`.img`, built from the contents of a directory:

```
kernlib-mksfs disk.img disk0
```

The file's size decides how many 4 KiB blocks the file system has (at most
524288 blocks; a larger file is only partly used and a warning is logged).
Create the file zero-filled beforehand: only the blocks the file system uses
are written. Regular files, directories and symbolic links are copied in
sorted name order; hidden entries (names starting with `.`) are skipped, and
other file kinds are logged as unsupported and left out. A regular file that
appears under several names (hard links) is stored once. On failure the
command prints the reason and exits with a non-zero status.

### `kernlib-sign`

Turns a raw boot loader of at most 510 bytes into a 512-byte boot sector
ending with the `0x55 0xAA` signature:

```
kernlib-sign bootblock.bin bootblock.out
```

### `kernlib-vector`

Writes the assembly source of the 256 trap entry vectors and their table to
standard output:

```
kernlib-vector > vectors.S
```

## Library

| Module | What it offers |
| --- | --- |
| `kernlib.errors` | `ErrorCode` enumeration, `error_string()` and the `KernelError` exception |
| `kernlib.printfmt` | `format_string()`, `vformat()` and `snprintf()` with the kernel's printf rules, including `%e` for error codes |
| `kernlib.defs` | `round_down()`, `round_up()` and `roundup_div()` |
| `kernlib.cstring` | C string semantics on `str` or `bytes`: `strnlen()`, `strncpy()`, `strcmp()`, `strncmp()`, `strchr()`, `strfind()`, `strtol()`, `memmove()`, `memcmp()` |
| `kernlib.randgen` | the 48-bit linear congruential `Rand` generator, `rand()`, `srand()` and `hash32()` |
| `kernlib.skew_heap` | `SkewHeap` priority queue with removable `SkewHeapNode` entries |
| `kernlib.fsdefs` | `FileType`, `OpenFlags`, `Whence`, `Stat`, `DirEntry`, `file_type()` and the `s_isreg()` family |
| `kernlib.mksfs` | `SfsBuilder`, `SfsError` and `make_image()` behind `kernlib-mksfs` |
| `kernlib.elf` | `ElfHeader`, `ProgramHeader` and `program_headers()` for little-endian 64-bit ELF data |
| `kernlib.bitops` | `set_bit()`, `clear_bit()`, `change_bit()`, `test_bit()`, `test_and_set_bit()`, `test_and_clear_bit()` on lists of 64-bit words |
| `kernlib.sign` | `make_boot_sector()`, `sign_file()` and `SignError` behind `kernlib-sign` |
| `kernlib.vector` | `generate_vectors()` behind `kernlib-vector` |

### Notes on behaviour

- `snprintf(size, fmt, *args)` returns `(text, count)`: the text that fits
  in a buffer of `size` bytes (one byte is kept for the terminating NUL) and
  the length of the full result. A `size` below 1 raises `KernelError` with
  `ErrorCode.E_INVAL`.
- In formats, the `-` flag pads strings on the right; for numbers it uses
  `-` as the padding character, as the kernel's formatter does.
- `error_string()` treats negative and positive codes alike and returns
  `"error N"` for codes without a description.
- `strtol(s, base)` returns `(value, end)`, where `end` is the index just past
  the parsed number; `strchr()` returns an index or `None`.

### Examples

```python
from kernlib.printfmt import format_string, snprintf
from kernlib.errors import ErrorCode

format_string("%05d|%-4s|%x", 42, "ab", 255)   # "00042|ab  |ff"
format_string("%e", -ErrorCode.E_NO_MEM)       # "out of memory"
snprintf(4, "%s", "hello")                     # ("hel", 5)
```

```python
from kernlib.skew_heap import SkewHeap

heap = SkewHeap()
for value in (5, 1, 3):
    heap.insert(value)
heap.pop()   # 1
```

```python
from kernlib.mksfs import make_image

make_image("disk.img", "disk0")
```

## What this package does not do

It is a set of building blocks and image tools, not a kernel: nothing here
boots, schedules processes or drives devices. The formatter returns strings
rather than writing to a console. `kernlib-mksfs` only creates SFS images;
there is no tool here to read, list or mount an existing image.