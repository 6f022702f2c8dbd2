"""Low-level helpers for the XML reader and writer.

Error codes, byte-order marks, character references, entity decoding,
whitespace collapsing and the text conversions used for attribute and
element values.
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "XMLErrorCode",
    "XMLError",
    "error_id_to_name",
    "read_bom",
    "convert_utf32_to_utf8",
    "character_reference",
    "unescape",
    "collapse_whitespace",
    "set_bool_serialization",
    "to_str",
    "to_int",
    "to_unsigned",
    "to_int64",
    "to_unsigned64",
    "to_bool",
    "to_float",
    "to_double",
]

WHITESPACE = " \t\n\v\f\r"
BOM_TEXT = "\ufeff"
BOM_BYTES = b"\xef\xbb\xbf"

# Predefined entities, in the order they are matched and printed.
ENTITIES: tuple[tuple[str, str], ...] = (
    ("quot", '"'),
    ("amp", "&"),
    ("apos", "'"),
    ("lt", "<"),
    ("gt", ">"),
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")

_WS = f"[{re.escape(WHITESPACE)}]*"
_DEC_INT = re.compile(_WS + r"([+-]?\d+)")
_HEX_PREFIX = re.compile(_WS + r"0[xX]")
_HEX_INT = re.compile(_WS + r"0[xX]([0-9a-fA-F]+)")
_FLOAT = re.compile(
    _WS
    + r"([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_WS_RUN = re.compile(f"[{re.escape(WHITESPACE)}]+")

_FLOAT32_MAX = struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]


class XMLErrorCode(IntEnum):
    """Result and error codes of the XML reader."""

    XML_SUCCESS = 0
    XML_NO_ATTRIBUTE = 1
    XML_WRONG_ATTRIBUTE_TYPE = 2
    XML_ERROR_FILE_NOT_FOUND = 3
    XML_ERROR_FILE_COULD_NOT_BE_OPENED = 4
    XML_ERROR_FILE_READ_ERROR = 5
    XML_ERROR_PARSING_ELEMENT = 6
    XML_ERROR_PARSING_ATTRIBUTE = 7
    XML_ERROR_PARSING_TEXT = 8
    XML_ERROR_PARSING_CDATA = 9
    XML_ERROR_PARSING_COMMENT = 10
    XML_ERROR_PARSING_DECLARATION = 11
    XML_ERROR_PARSING_UNKNOWN = 12
    XML_ERROR_EMPTY_DOCUMENT = 13
    XML_ERROR_MISMATCHED_ELEMENT = 14
    XML_ERROR_PARSING = 15
    XML_CAN_NOT_CONVERT_TEXT = 16
    XML_NO_TEXT_NODE = 17
    XML_ELEMENT_DEPTH_EXCEEDED = 18


def error_id_to_name(code: int) -> str:
    """Return the symbolic name of an error code."""
    return XMLErrorCode(code).name


class XMLError(Exception):
    """An error raised while reading, parsing or converting XML."""

    def __init__(self, code: int, line: int = 0, detail: str | None = None) -> None:
        self.code = XMLErrorCode(code)
        self.line = line
        self.detail = detail
        message = (
            f"Error={self.code.name} ErrorID={int(self.code)} "
            f"(0x{int(self.code):x}) Line number={line}"
        )
        if detail is not None:
            message += f": {detail}"
        super().__init__(message)


def read_bom(text: str | bytes) -> tuple[str | bytes, bool]:
    """Strip a leading UTF-8 byte-order mark; report whether there was one."""
    bom = BOM_BYTES if isinstance(text, (bytes, bytearray)) else BOM_TEXT
    if text.startswith(bom):
        return text[len(bom):], True
    return text, False


def convert_utf32_to_utf8(codepoint: int) -> bytes:
    """Encode a code point as UTF-8 bytes.

    Values of 0x200000 and above cannot be encoded and give empty bytes.
    """
    if codepoint < 0:
        raise ValueError("code point must not be negative")
    if codepoint < 0x80:
        return bytes([codepoint])
    if codepoint < 0x800:
        length, lead = 2, 0xC0
    elif codepoint < 0x10000:
        length, lead = 3, 0xE0
    elif codepoint < 0x200000:
        length, lead = 4, 0xF0
    else:
        return b""
    tail = [((codepoint >> (6 * shift)) & 0x3F) | 0x80 for shift in range(length - 1)]
    first = (codepoint >> (6 * (length - 1))) | lead
    return bytes([first, *reversed(tail)])


def character_reference(text: str, pos: int) -> tuple[str, int] | None:
    """Decode a numeric character reference starting at the ``&`` at ``pos``.

    Returns the decoded text and the position just past the reference, or
    ``None`` when the reference is malformed. Without a ``#`` and a following
    character, nothing is decoded and only the ``&`` is consumed.
    """
    if not text.startswith("#", pos + 1) or pos + 2 >= len(text):
        return "", pos + 1
    is_hex = text[pos + 2] == "x"
    start = pos + 3 if is_hex else pos + 2
    if start >= len(text):
        return None
    semicolon = text.find(";", start)
    if semicolon < 0:
        return None
    body = text[pos + 1:semicolon]
    marker, allowed, base = ("x", _HEX_DIGITS, 16) if is_hex else ("#", _DEC_DIGITS, 10)
    digits = body[body.rfind(marker) + 1:]
    if not set(digits) <= allowed:
        return None
    value = int(digits, base) if digits else 0
    decoded = convert_utf32_to_utf8(value).decode("utf-8", errors="replace")
    return decoded, semicolon + 1


def collapse_whitespace(text: str) -> str:
    """Trim the text and turn every run of whitespace into one space."""
    return _WS_RUN.sub(" ", text).strip(WHITESPACE)


def unescape(
    text: str,
    normalize_newlines: bool = True,
    process_entities: bool = True,
    collapse: bool = False,
) -> str:
    """Decode raw text as read from a document.

    Newline pairs and lone CRs become LF, the predefined entities and numeric
    character references are decoded, and whitespace is optionally collapsed.
    Unknown or malformed entities are kept as written.
    """
    out: list[str] = []
    pos = 0
    end = len(text)
    while pos < end:
        ch = text[pos]
        if normalize_newlines and ch in "\r\n":
            pos += 2 if text[pos:pos + 2] in ("\r\n", "\n\r") else 1
            out.append("\n")
        elif process_entities and ch == "&":
            if text.startswith("#", pos + 1):
                reference = character_reference(text, pos)
                if reference is None:
                    out.append("&")
                    pos += 1
                else:
                    decoded, pos = reference
                    out.append(decoded)
            else:
                for name, value in ENTITIES:
                    if text.startswith(f"{name};", pos + 1):
                        out.append(value)
                        pos += len(name) + 2
                        break
                else:
                    out.append("&")
                    pos += 1
        else:
            out.append(ch)
            pos += 1
    result = "".join(out)
    return collapse_whitespace(result) if collapse else result


@dataclass
class _BoolText:
    true: str = "true"
    false: str = "false"


_bool_text = _BoolText()


def set_bool_serialization(true_text: str | None = None, false_text: str | None = None) -> None:
    """Choose the words written for booleans; ``None`` restores the default."""
    defaults = _BoolText()
    _bool_text.true = true_text if true_text is not None else defaults.true
    _bool_text.false = false_text if false_text is not None else defaults.false


def to_str(value: bool | int | float) -> str:
    """Format a boolean, integer or floating-point value as attribute text."""
    if isinstance(value, bool):
        return _bool_text.true if value else _bool_text.false
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return "%.17g" % value
    raise TypeError(f"cannot format {type(value).__name__}")


def _wrap_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    return value - (1 << bits) if value >= 1 << (bits - 1) else value


def _parse_hex(text: str, bits: int) -> int:
    match = _HEX_INT.match(text)
    if match is None:
        raise ValueError(f"not a hexadecimal number: {text!r}")
    value = int(match.group(1), 16)
    if value >= 1 << bits:
        raise ValueError(f"number out of range: {text!r}")
    return value


def _parse_decimal(text: str) -> int:
    match = _DEC_INT.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return int(match.group(1))


def _to_signed(text: str, bits: int) -> int:
    if _HEX_PREFIX.match(text):
        return _wrap_signed(_parse_hex(text, bits), bits)
    value = _parse_decimal(text)
    if not -(1 << (bits - 1)) <= value < 1 << (bits - 1):
        raise ValueError(f"number out of range: {text!r}")
    return value


def _to_unsigned(text: str, bits: int) -> int:
    if _HEX_PREFIX.match(text):
        return _parse_hex(text, bits)
    value = _parse_decimal(text)
    if abs(value) >= 1 << bits:
        raise ValueError(f"number out of range: {text!r}")
    return value % (1 << bits)


def to_int(text: str) -> int:
    """Read a 32-bit signed integer; ``0x`` introduces hexadecimal."""
    return _to_signed(text, 32)


def to_unsigned(text: str) -> int:
    """Read a 32-bit unsigned integer; negative input wraps around."""
    return _to_unsigned(text, 32)


def to_int64(text: str) -> int:
    """Read a 64-bit signed integer; ``0x`` introduces hexadecimal."""
    return _to_signed(text, 64)


def to_unsigned64(text: str) -> int:
    """Read a 64-bit unsigned integer; negative input wraps around."""
    return _to_unsigned(text, 64)


def to_bool(text: str) -> bool:
    """Read a boolean given as a number or as true/false in one of three spellings."""
    try:
        return to_int(text) != 0
    except ValueError:
        pass
    if text in ("true", "True", "TRUE"):
        return True
    if text in ("false", "False", "FALSE"):
        return False
    raise ValueError(f"not a boolean: {text!r}")


def to_double(text: str) -> float:
    """Read a double-precision number from the start of the text."""
    match = _FLOAT.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def to_float(text: str) -> float:
    """Read a number and round it to single precision."""
    value = to_double(text)
    if math.isfinite(value) and abs(value) > _FLOAT32_MAX:
        return math.copysign(math.inf, value)
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)