"""Bit operations over a list of 64-bit words."""

__all__ = [
    "BITS_PER_LONG",
    "set_bit",
    "clear_bit",
    "change_bit",
    "test_bit",
    "test_and_set_bit",
    "test_and_clear_bit",
]

BITS_PER_LONG = 64
_WORD_MASK = (1 << BITS_PER_LONG) - 1


def _locate(nr):
    if nr < 0:
        raise ValueError(f"bit number must not be negative, got {nr}")
    return nr // BITS_PER_LONG, 1 << (nr % BITS_PER_LONG)


def set_bit(nr, words):
    """Set bit ``nr`` in ``words``."""
    index, mask = _locate(nr)
    words[index] = (words[index] | mask) & _WORD_MASK


def clear_bit(nr, words):
    """Clear bit ``nr`` in ``words``."""
    index, mask = _locate(nr)
    words[index] = words[index] & ~mask & _WORD_MASK


def change_bit(nr, words):
    """Toggle bit ``nr`` in ``words``."""
    index, mask = _locate(nr)
    words[index] = (words[index] ^ mask) & _WORD_MASK


def test_bit(nr, words):
    """Return whether bit ``nr`` is set."""
    index, mask = _locate(nr)
    return bool(words[index] & mask)


def test_and_set_bit(nr, words):
    """Set bit ``nr`` and return its previous value."""
    old = test_bit(nr, words)
    set_bit(nr, words)
    return old


def test_and_clear_bit(nr, words):
    """Clear bit ``nr`` and return its previous value."""
    old = test_bit(nr, words)
    clear_bit(nr, words)
    return old