"""A 48-bit linear congruential generator and a multiplicative hash."""

__all__ = ["RAND_MAX", "Rand", "rand", "srand", "hash32"]

RAND_MAX = 2147483647
GOLDEN_RATIO_PRIME_32 = 0x9E370001

_MULTIPLIER = 0x5DEECE66D
_INCREMENT = 0xB
_STATE_MASK = (1 << 48) - 1


class Rand:
    """Pseudo-random generator returning integers in ``[0, RAND_MAX]``."""

    def __init__(self, seed=1):
        self._state = 0
        self.seed(seed)

    def seed(self, seed):
        """Restart the sequence from ``seed`` (taken as an unsigned 32-bit value)."""
        self._state = int(seed) & 0xFFFFFFFF

    def rand(self):
        """Advance the generator and return the next value."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _STATE_MASK
        return (self._state >> 12) % (RAND_MAX + 1)


_default = Rand()


def rand():
    """Next value of the shared generator."""
    return _default.rand()


def srand(seed):
    """Seed the shared generator."""
    _default.seed(seed)


def hash32(val, bits):
    """Hash ``val`` into the range ``[0, 2**bits - 1]`` using its high bits."""
    if not 0 <= bits <= 32:
        raise ValueError(f"bits must be between 0 and 32, got {bits}")
    hashed = (int(val) * GOLDEN_RATIO_PRIME_32) & 0xFFFFFFFF
    return hashed >> (32 - bits)