"""A small printf-style formatter with the kernel's own conversion rules.

Supported conversions: ``%c %s %d %u %o %x %p %e %%`` with the flags
``-``, ``0``, ``#``, ``l`` (``ll``), a field width (digits or ``*``) and a
precision introduced by ``.``. Padding and width apply to numbers and
strings. Unknown conversions are copied literally.
"""

from kernlib.errors import ErrorCode, KernelError, error_string

__all__ = ["vformat", "format_string", "snprintf"]

_DIGITS = "0123456789abcdef"
_MASK64 = (1 << 64) - 1


def _int_arg(value, lflag, signed):
    bits = 32 if lflag == 0 else 64
    value = int(value) & ((1 << bits) - 1)
    if signed and value >> (bits - 1):
        value -= 1 << bits
    return value


def _number(num, base, width, padc):
    digits = ""
    while True:
        num, mod = divmod(num, base)
        digits = _DIGITS[mod] + digits
        if num == 0:
            break
    return padc * max(width - len(digits), 0) + digits


def _char(value):
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError("%c requires a single character")
        return value
    return chr(int(value) & 0xFF)


def _string(value, width, precision, padc, altflag):
    if value is None:
        text = "(null)"
    elif isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("latin-1")
    else:
        text = str(value)
    nul = text.find("\0")
    if nul >= 0:
        text = text[:nul]
    if precision >= 0:
        text = text[:precision]
    if altflag:
        text = "".join(c if " " <= c <= "~" else "?" for c in text)
    if width > 0 and padc != "-":
        return padc * max(width - len(text), 0) + text
    return text + " " * max(width - len(text), 0)


def vformat(fmt, args):
    """Format ``fmt`` with the values of the sequence ``args``."""
    supply = iter(args)

    def next_arg():
        try:
            return next(supply)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    nul = fmt.find("\0")
    if nul >= 0:
        fmt = fmt[:nul]
    length = len(fmt)

    def char_at(index):
        return fmt[index] if index < length else "\0"

    out = []
    pos = 0
    while True:
        pct = fmt.find("%", pos)
        if pct < 0:
            out.append(fmt[pos:])
            return "".join(out)
        out.append(fmt[pos:pct])
        pos = start = pct + 1

        padc = " "
        width = precision = -1
        lflag = 0
        altflag = False
        while True:
            ch = char_at(pos)
            pos += 1
            if ch == "-":
                padc = "-"
            elif ch == "0":
                padc = "0"
            elif "1" <= ch <= "9" or ch == "*":
                if ch == "*":
                    precision = int(next_arg())
                else:
                    end = pos
                    while "0" <= char_at(end) <= "9":
                        end += 1
                    precision = int(fmt[pos - 1:end])
                    pos = end
                if width < 0:
                    width, precision = precision, -1
            elif ch == ".":
                if width < 0:
                    width = 0
            elif ch == "#":
                altflag = True
            elif ch == "l":
                lflag += 1
            else:
                break

        if ch == "c":
            out.append(_char(next_arg()))
        elif ch == "e":
            out.append(error_string(int(next_arg())))
        elif ch == "s":
            out.append(_string(next_arg(), width, precision, padc, altflag))
        elif ch == "d":
            num = _int_arg(next_arg(), lflag, signed=True)
            if num < 0:
                out.append("-")
                num = -num
            out.append(_number(num, 10, width, padc))
        elif ch in "uox":
            base = {"u": 10, "o": 8, "x": 16}[ch]
            out.append(_number(_int_arg(next_arg(), lflag, signed=False), base, width, padc))
        elif ch == "p":
            out.append("0x")
            out.append(_number(int(next_arg()) & _MASK64, 16, width, padc))
        elif ch == "%":
            out.append("%")
        else:
            out.append("%")
            pos = start


def format_string(fmt, *args):
    """Format ``fmt`` with ``args`` and return the text."""
    return vformat(fmt, args)


def snprintf(size, fmt, *args):
    """Format into a buffer of ``size`` bytes, counting the terminating NUL.

    Returns ``(text, count)``: the text that fits in the buffer and the
    length the full result would have had.
    """
    if size < 1:
        raise KernelError(ErrorCode.E_INVAL)
    text = vformat(fmt, args)
    return text[:size - 1], len(text)