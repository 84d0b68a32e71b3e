"""libhxa.errors

Exceptions raised while decoding HxA data.

Every decode failure is terminal for that parse: the reader stops at the
first bad field and no partial tree is returned.
"""

from __future__ import annotations

from typing import Optional


class HxaError(RuntimeError):
    pass


class InvalidMagicNumber(HxaError):
    def __init__(self, value: int):
        super().__init__(f"Not an HxA file (magic number 0x{value:08X})")
        self.value = value


class UnexpectedEndOfData(HxaError):
    def __init__(self, offset: int, needed: int, available: int):
        super().__init__(
            f"Unexpected end of data at {offset}, need {needed} bytes, {available} left"
        )
        self.offset = offset
        self.needed = needed
        self.available = available


class TrailingData(HxaError):
    def __init__(self, offset: int, remaining: int):
        super().__init__(f"{remaining} trailing bytes after the last node at {offset}")
        self.offset = offset
        self.remaining = remaining


class _UnexpectedCode(HxaError):
    what = "code"

    def __init__(self, code: int, offset: Optional[int] = None):
        where = f" at {offset}" if offset is not None else ""
        super().__init__(f"Unexpected {self.what} {code}{where}")
        self.code = code
        self.offset = offset


class UnexpectedNodeKind(_UnexpectedCode):
    what = "node kind"


class UnexpectedElementType(_UnexpectedCode):
    what = "layer element type"


class UnexpectedImageKind(_UnexpectedCode):
    what = "image kind"


class UnexpectedMetaKind(_UnexpectedCode):
    what = "metadata kind"


class InvalidUtf8(HxaError):
    def __init__(self, cause: UnicodeDecodeError, offset: Optional[int] = None):
        where = f" at {offset}" if offset is not None else ""
        super().__init__(f"Invalid UTF-8{where}: {cause}")
        self.cause = cause
        self.offset = offset


class InternalError(HxaError):
    """A fixed-size conversion failed after the cursor handed out the bytes.

    This cannot happen unless the reader miscounts its own widths.
    """

    def __init__(self, cause: Exception):
        super().__init__(f"Internal parser error: {cause}")
        self.cause = cause


class HxaConventionError(HxaError):
    """Raised by consumers (mesh building, OBJ export) when a node breaks
    the hard layer conventions. The reader itself never raises this."""
