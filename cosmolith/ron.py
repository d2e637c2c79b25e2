"""Read the RON values stored by cosmic-config.

Only the subset written by the COSMIC settings daemon is supported: structs
(anonymous or named), tuples, lists, maps, `Some(...)`/`None`, enum
identifiers, strings, numbers and booleans. Comments are skipped.

`loads` returns plain Python values (structs become dicts, enum identifiers
become strings, `Some(x)` becomes `x`); `decode` then builds a typed domain
value out of them.
"""

import dataclasses
import re
import types
import typing
from enum import Enum
from typing import Any, TypeVar

from .errors import EventConversionError

__all__ = ["RonError", "decode", "loads"]

T = TypeVar("T")

_WHITESPACE = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)+", re.DOTALL)
_NUMBER = re.compile(r"[+-]?(?:0x[0-9a-fA-F_]+|(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][+-]?\d+)?)")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


class RonError(ValueError):
    """Malformed RON text."""

    def __init__(self, msg: str, pos: int) -> None:
        self.pos = pos
        super().__init__(f"{msg} at offset {pos}")


class _Parser:
    """Recursive descent parser over a RON document."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip(self) -> None:
        match = _WHITESPACE.match(self.text, self.pos)
        if match:
            self.pos = match.end()

    def peek(self) -> str:
        self.skip()
        return self.text[self.pos : self.pos + 1]

    def expect(self, char: str) -> None:
        if self.peek() != char:
            msg = f"expected {char!r}"
            raise RonError(msg, self.pos)
        self.pos += 1

    def parse_document(self) -> Any:  # noqa: ANN401
        value = self.parse_value()
        if self.peek():
            msg = "trailing characters"
            raise RonError(msg, self.pos)
        return value

    def parse_value(self) -> Any:  # noqa: ANN401
        char = self.peek()
        if not char:
            msg = "unexpected end of input"
            raise RonError(msg, self.pos)
        if char == "(":
            return self.parse_parens()
        if char == "[":
            return self.parse_sequence("[", "]")
        if char == "{":
            return self.parse_map()
        if char == '"':
            return self.parse_string()
        if char == "'":
            return self.parse_char()
        if char.isdigit() or char in "+-.":
            return self.parse_number()
        return self.parse_identifier()

    def parse_identifier(self) -> Any:  # noqa: ANN401
        match = _IDENT.match(self.text, self.pos)
        if not match:
            msg = f"unexpected character {self.text[self.pos]!r}"
            raise RonError(msg, self.pos)
        self.pos = match.end()
        name = match.group()
        if name == "true":
            return True
        if name == "false":
            return False
        if name == "None":
            return None
        if self.peek() == "(":
            inner = self.parse_parens()
            if name == "Some":
                if isinstance(inner, tuple) and len(inner) == 1:
                    return inner[0]
                msg = "Some() takes exactly one value"
                raise RonError(msg, self.pos)
            # named struct or tuple struct, the name carries no information here
            return inner
        return name

    def parse_parens(self) -> Any:  # noqa: ANN401
        """Parse `( ... )`: a struct if it starts with `ident:`, a tuple otherwise."""
        start = self.pos
        self.expect("(")
        self.skip()
        match = _IDENT.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            is_struct = self.peek() == ":"
            self.pos = start + 1
            if is_struct:
                return self.parse_struct_body()
        self.pos = start
        return tuple(self.parse_sequence("(", ")"))

    def parse_struct_body(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        while self.peek() != ")":
            self.skip()
            match = _IDENT.match(self.text, self.pos)
            if not match:
                msg = "expected field name"
                raise RonError(msg, self.pos)
            self.pos = match.end()
            self.expect(":")
            result[match.group()] = self.parse_value()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != ")":
                msg = "expected ',' or ')'"
                raise RonError(msg, self.pos)
        self.pos += 1
        return result

    def parse_sequence(self, opening: str, closing: str) -> list[Any]:
        self.expect(opening)
        items = []
        while self.peek() != closing:
            items.append(self.parse_value())
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != closing:
                msg = f"expected ',' or {closing!r}"
                raise RonError(msg, self.pos)
        self.pos += 1
        return items

    def parse_map(self) -> dict[Any, Any]:
        self.expect("{")
        result = {}
        while self.peek() != "}":
            key = self.parse_value()
            self.expect(":")
            result[key] = self.parse_value()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                msg = "expected ',' or '}'"
                raise RonError(msg, self.pos)
        self.pos += 1
        return result

    def _read_quoted(self, quote: str) -> str:
        self.expect(quote)
        chars = []
        while True:
            if self.pos >= len(self.text):
                msg = "unterminated string"
                raise RonError(msg, self.pos)
            char = self.text[self.pos]
            self.pos += 1
            if char == quote:
                return "".join(chars)
            if char != "\\":
                chars.append(char)
                continue
            escape = self.text[self.pos : self.pos + 1]
            self.pos += 1
            if escape in _STRING_ESCAPES:
                chars.append(_STRING_ESCAPES[escape])
            elif escape == "u":
                end = self.text.find("}", self.pos)
                if self.text[self.pos : self.pos + 1] != "{" or end < 0:
                    msg = "invalid unicode escape"
                    raise RonError(msg, self.pos)
                try:
                    chars.append(chr(int(self.text[self.pos + 1 : end], 16)))
                except (ValueError, OverflowError) as e:
                    msg = "invalid unicode escape"
                    raise RonError(msg, self.pos) from e
                self.pos = end + 1
            else:
                msg = f"invalid escape {escape!r}"
                raise RonError(msg, self.pos)

    def parse_string(self) -> str:
        return self._read_quoted('"')

    def parse_char(self) -> str:
        value = self._read_quoted("'")
        if len(value) != 1:
            msg = "invalid character literal"
            raise RonError(msg, self.pos)
        return value

    def parse_number(self) -> int | float:
        match = _NUMBER.match(self.text, self.pos)
        if not match or not match.group().lstrip("+-"):
            msg = "invalid number"
            raise RonError(msg, self.pos)
        self.pos = match.end()
        literal = match.group().replace("_", "")
        if "0x" in literal:
            return int(literal, 16)
        if any(c in literal for c in ".eE"):
            return float(literal)
        return int(literal)


def loads(text: str) -> Any:  # noqa: ANN401
    """Parse a RON document into plain Python values.

    Raises:
        RonError: on malformed input
    """
    return _Parser(text).parse_document()


# Typed decoding {{{


def _decode_value(hint: Any, value: Any, path: str, domain: str) -> Any:  # noqa: ANN401, C901, PLR0911
    origin = typing.get_origin(hint)
    if origin in (types.UnionType, typing.Union):
        args = typing.get_args(hint)
        if value is None and type(None) in args:
            return None
        (inner,) = [arg for arg in args if arg is not type(None)]
        return _decode_value(inner, value, path, domain)
    if origin is tuple:
        args = typing.get_args(hint)
        if not isinstance(value, tuple | list) or len(value) != len(args):
            raise EventConversionError(domain, f"{path}: expected a {len(args)}-tuple, got {value!r}")
        return tuple(_decode_value(arg, item, f"{path}[{i}]", domain) for i, (arg, item) in enumerate(zip(args, value, strict=True)))
    if dataclasses.is_dataclass(hint):
        return _decode_struct(hint, value, path, domain)  # type: ignore[arg-type]
    if isinstance(hint, type) and issubclass(hint, Enum):
        try:
            return hint(value)
        except ValueError as e:
            raise EventConversionError(domain, f"{path}: unknown {hint.__name__} {value!r}") from e
    if hint is bool:
        if not isinstance(value, bool):
            raise EventConversionError(domain, f"{path}: expected a boolean, got {value!r}")
        return value
    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EventConversionError(domain, f"{path}: expected an integer, got {value!r}")
        return value
    if hint is float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise EventConversionError(domain, f"{path}: expected a number, got {value!r}")
        return float(value)
    if hint is str:
        if not isinstance(value, str):
            raise EventConversionError(domain, f"{path}: expected a string, got {value!r}")
        return value
    raise EventConversionError(domain, f"{path}: unsupported type {hint!r}")


def _decode_struct(cls: type[T], value: Any, path: str, domain: str) -> T:  # noqa: ANN401
    if not isinstance(value, dict):
        raise EventConversionError(domain, f"{path or cls.__name__}: expected a struct, got {value!r}")
    hints = typing.get_type_hints(cls)
    kwargs = {}
    for field in dataclasses.fields(cls):  # type: ignore[arg-type]
        # missing fields keep their default, unknown ones are ignored
        if field.name in value:
            kwargs[field.name] = _decode_value(hints[field.name], value[field.name], f"{path}.{field.name}".lstrip("."), domain)
    return cls(**kwargs)


def decode(cls: type[T], value: Any, domain: str = "") -> T:  # noqa: ANN401
    """Build a `cls` dataclass from a parsed RON struct.

    Args:
        cls: target dataclass
        value: output of `loads`
        domain: name used in error messages

    Raises:
        EventConversionError: if `value` does not have the expected shape
    """
    return _decode_struct(cls, value, "", domain or cls.__name__)


# }}}
