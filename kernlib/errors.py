"""Kernel error codes, their descriptions and the exception that carries them."""

from enum import IntEnum

__all__ = ["ErrorCode", "KernelError", "MAXERROR", "error_string"]


class ErrorCode(IntEnum):
    """Kernel error numbers."""

    E_UNSPECIFIED = 1
    E_BAD_PROC = 2
    E_INVAL = 3
    E_NO_MEM = 4
    E_NO_FREE_PROC = 5
    E_FAULT = 6
    E_SWAP_FAULT = 7
    E_INVAL_ELF = 8
    E_KILLED = 9
    E_PANIC = 10
    E_TIMEOUT = 11
    E_TOO_BIG = 12
    E_NO_DEV = 13
    E_NA_DEV = 14
    E_BUSY = 15
    E_NOENT = 16
    E_ISDIR = 17
    E_NOTDIR = 18
    E_XDEV = 19
    E_UNIMP = 20
    E_SEEK = 21
    E_MAX_OPEN = 22
    E_EXISTS = 23
    E_NOTEMPTY = 24


MAXERROR = 24

_ERROR_STRINGS = {
    ErrorCode.E_UNSPECIFIED: "unspecified error",
    ErrorCode.E_BAD_PROC: "bad process",
    ErrorCode.E_INVAL: "invalid parameter",
    ErrorCode.E_NO_MEM: "out of memory",
    ErrorCode.E_NO_FREE_PROC: "out of processes",
    ErrorCode.E_FAULT: "segmentation fault",
    ErrorCode.E_INVAL_ELF: "invalid elf file",
    ErrorCode.E_KILLED: "process is killed",
    ErrorCode.E_PANIC: "panic failure",
    ErrorCode.E_NO_DEV: "no such device",
    ErrorCode.E_NA_DEV: "device not available",
    ErrorCode.E_BUSY: "device/file is busy",
    ErrorCode.E_NOENT: "no such file or directory",
    ErrorCode.E_ISDIR: "is a directory",
    ErrorCode.E_NOTDIR: "not a directory",
    ErrorCode.E_XDEV: "cross device link",
    ErrorCode.E_UNIMP: "unimplemented feature",
    ErrorCode.E_SEEK: "illegal seek",
    ErrorCode.E_MAX_OPEN: "too many files are open",
    ErrorCode.E_EXISTS: "file or directory already exists",
    ErrorCode.E_NOTEMPTY: "directory is not empty",
}


def error_string(code):
    """Describe an error code; negative and positive codes are equivalent.

    Codes without a description give ``"error N"``.
    """
    number = abs(int(code))
    text = _ERROR_STRINGS.get(number)
    if text is None:
        return f"error {number}"
    return text


class KernelError(Exception):
    """An error carrying a kernel error code."""

    def __init__(self, code, message=None):
        number = abs(int(code))
        try:
            self.code = ErrorCode(number)
        except ValueError:
            self.code = number
        self.message = message if message is not None else error_string(number)
        super().__init__(self.message)