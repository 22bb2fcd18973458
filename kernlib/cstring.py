"""NUL-terminated string and raw memory helpers.

Strings may be ``str`` or ``bytes``; a NUL character ends a string early,
exactly as the terminating byte would. Positions are returned as indices.
"""

__all__ = [
    "strnlen",
    "strncpy",
    "strcmp",
    "strncmp",
    "strchr",
    "strfind",
    "strtol",
    "memmove",
    "memcmp",
]

_LONG_BITS = 64


def _codes(s):
    """Character codes of ``s`` up to (not including) the first NUL."""
    if isinstance(s, (bytes, bytearray, memoryview)):
        values = list(bytes(s))
    else:
        values = [ord(ch) for ch in s]
    try:
        return values[:values.index(0)]
    except ValueError:
        return values


def _code(c):
    if isinstance(c, (bytes, bytearray)):
        if len(c) != 1:
            raise ValueError("expected a single byte")
        return c[0]
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError("expected a single character")
        return ord(c)
    return int(c)


def strnlen(s, length):
    """Length of ``s`` up to its first NUL, but at most ``length``."""
    return min(len(_codes(s)), max(length, 0))


def strncpy(src, length):
    """Copy at most ``length`` characters of ``src``, padding with NULs to ``length``."""
    binary = isinstance(src, (bytes, bytearray))
    end = len(_codes(src))
    text = src[:min(end, length)]
    pad = max(length - len(text), 0)
    if binary:
        return bytes(text) + b"\0" * pad
    return text + "\0" * pad


def _compare(c1, c2, limit):
    for index in range(limit):
        a = c1[index] if index < len(c1) else 0
        b = c2[index] if index < len(c2) else 0
        if a != b or a == 0:
            return (a & 0xFF) - (b & 0xFF)
    return 0


def strcmp(s1, s2):
    """Compare two strings; the sign of the result orders them."""
    c1, c2 = _codes(s1), _codes(s2)
    return _compare(c1, c2, max(len(c1), len(c2)) + 1)


def strncmp(s1, s2, n):
    """Compare at most ``n`` characters of two strings."""
    return _compare(_codes(s1), _codes(s2), max(n, 0))


def strchr(s, c):
    """Index of the first ``c`` in ``s``, or ``None`` if it does not occur."""
    target = _code(c)
    for index, code in enumerate(_codes(s)):
        if code == target:
            return index
    return None


def strfind(s, c):
    """Index of the first ``c`` in ``s``, or the index of the string's end."""
    index = strchr(s, c)
    return len(_codes(s)) if index is None else index


def _wrap_long(value):
    value &= (1 << _LONG_BITS) - 1
    if value >> (_LONG_BITS - 1):
        value -= 1 << _LONG_BITS
    return value


def _digit(code):
    if ord("0") <= code <= ord("9"):
        return code - ord("0")
    if ord("a") <= code <= ord("z"):
        return code - ord("a") + 10
    if ord("A") <= code <= ord("Z"):
        return code - ord("A") + 10
    return None


def strtol(s, base):
    """Parse a long integer from the start of ``s``.

    Returns ``(value, end)`` where ``end`` is the index just past the number.
    Base 0 picks hexadecimal for a ``0x`` prefix, octal for a leading ``0``
    and decimal otherwise. Overflow wraps as a 64-bit long.
    """
    codes = _codes(s)

    def at(index):
        return codes[index] if index < len(codes) else 0

    pos = 0
    while at(pos) in (ord(" "), ord("\t")):
        pos += 1

    negative = False
    if at(pos) == ord("+"):
        pos += 1
    elif at(pos) == ord("-"):
        pos += 1
        negative = True

    if base in (0, 16) and at(pos) == ord("0") and at(pos + 1) == ord("x"):
        pos += 2
        base = 16
    elif base == 0 and at(pos) == ord("0"):
        pos += 1
        base = 8
    elif base == 0:
        base = 10

    value = 0
    while True:
        dig = _digit(at(pos))
        if dig is None or dig >= base:
            break
        pos += 1
        value = _wrap_long(value * base + dig)

    return _wrap_long(-value if negative else value), pos


def memmove(buf, dst, src, n):
    """Copy ``n`` bytes inside ``buf`` from offset ``src`` to ``dst``; regions may overlap."""
    if n < 0 or min(dst, src) < 0 or max(dst, src) + n > len(buf):
        raise IndexError("memmove range out of bounds")
    buf[dst:dst + n] = bytes(buf[src:src + n])
    return buf


def memcmp(v1, v2, n):
    """Compare the first ``n`` bytes of two buffers as unsigned values."""
    if n < 0 or n > len(v1) or n > len(v2):
        raise IndexError("memcmp length exceeds buffer")
    for a, b in zip(bytes(v1[:n]), bytes(v2[:n])):
        if a != b:
            return a - b
    return 0