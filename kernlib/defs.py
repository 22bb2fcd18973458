"""Rounding helpers for sizes, addresses and block counts."""

__all__ = ["round_down", "round_up", "roundup_div"]


def _check_divisor(n):
    if n <= 0:
        raise ValueError(f"rounding unit must be positive, got {n}")


def round_down(a, n):
    """Round ``a`` down to the nearest multiple of ``n``."""
    _check_divisor(n)
    return a - a % n


def round_up(a, n):
    """Round ``a`` up to the nearest multiple of ``n``."""
    _check_divisor(n)
    return round_down(a + n - 1, n)


def roundup_div(a, n):
    """Divide ``a`` by ``n``, rounding the quotient up."""
    _check_divisor(n)
    return (a + n - 1) // n