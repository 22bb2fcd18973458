import pytest

from kernlib.cstring import (
    memcmp,
    memmove,
    strchr,
    strcmp,
    strfind,
    strncmp,
    strncpy,
    strnlen,
    strtol,
)


def test_strnlen_limits():
    assert strnlen("hello", 10) == len("hello")
    assert strnlen("hello", 3) == 3
    assert strnlen("ab\0cd", 10) == "ab\0cd".index("\0")
    assert strnlen(b"bytes", 100) == len(b"bytes")


def test_strncpy_pads_and_truncates():
    padded = strncpy("abc", 5)
    assert len(padded) == 5
    assert padded.startswith("abc")
    assert set(padded[3:]) == {"\0"}
    assert strncpy("abcdef", 3) == "abc"
    assert strncpy(b"ab\0zz", 4) == b"ab\0\0"


def test_strcmp_ordering():
    assert strcmp("abc", "abc") == 0
    assert strcmp("abc", "abd") < 0
    assert strcmp("abd", "abc") > 0
    assert strcmp("ab", "abc") < 0
    assert strcmp("abc", "ab") > 0
    assert strcmp("ab\0x", "ab\0y") == 0
    assert strcmp(b"\xff", b"\x01") > 0


def test_strcmp_is_antisymmetric():
    words = ["", "a", "ab", "b", "abc", "zz"]
    for x in words:
        for y in words:
            assert (strcmp(x, y) > 0) == (strcmp(y, x) < 0)


def test_strncmp_respects_limit():
    assert strncmp("abcX", "abcY", 3) == 0
    assert strncmp("abcX", "abcY", 4) < 0
    assert strncmp("anything", "other", 0) == 0


def test_strchr_and_strfind():
    assert strchr("hello", "l") == "hello".index("l")
    assert strchr("hello", "z") is None
    assert strchr("he\0llo", "l") is None
    assert strfind("hello", "o") == "hello".index("o")
    assert strfind("hello", "z") == len("hello")
    assert strfind(b"path/name", "/") == b"path/name".index(b"/")


@pytest.mark.parametrize(
    "text, base, expected",
    [
        ("0x1f", 0, (0x1f, 4)),
        ("017", 0, (0o17, 3)),
        ("42", 0, (42, 2)),
        ("12abc", 10, (12, 2)),
        ("zz", 36, (int("zz", 36), 2)),
        ("  -99", 10, (-99, 5)),
        ("\t+7", 10, (7, 3)),
        ("0x10", 16, (0x10, 4)),
        ("102", 2, (0b10, 2)),
        ("", 10, (0, 0)),
    ],
)
def test_strtol(text, base, expected):
    assert strtol(text, base) == expected


def test_strtol_uppercase_x_is_not_a_prefix():
    assert strtol("0X10", 0) == (0, 1)


def test_memmove_overlapping_forward():
    buf = bytearray(b"abcdef")
    assert memmove(buf, 2, 0, 3) == bytearray(b"ababcf")


def test_memmove_overlapping_backward():
    buf = bytearray(b"abcdef")
    memmove(buf, 0, 2, 4)
    assert buf == bytearray(b"cdefef")


def test_memmove_out_of_range():
    with pytest.raises(IndexError):
        memmove(bytearray(4), 2, 0, 3)


def test_memcmp():
    assert memcmp(b"abc", b"abc", 3) == 0
    assert memcmp(b"abc", b"abd", 3) < 0
    assert memcmp(b"abc", b"abd", 2) == 0
    assert memcmp(b"\x80", b"\x01", 1) > 0
    with pytest.raises(IndexError):
        memcmp(b"ab", b"abc", 3)