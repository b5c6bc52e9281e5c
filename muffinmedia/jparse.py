"""A small, forgiving JSON reader and writer that tolerates comments."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterator, Optional, Union

_NUMBER_CHARS = frozenset("0123456789.")
_ALWAYS_SKIPPED = frozenset("\t\v\f\r")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


class JType(Enum):
    """Kind of a scalar value."""

    STRING = 0
    INT = 1
    FLOAT = 2
    NULL = 3


class JMode(IntEnum):
    """Whether a structure is an object or an array."""

    OBJ = 0
    ARR = 1


class JParseError(ValueError):
    """Raised when a document cannot be parsed."""


@dataclass
class JToken:
    """One member of an object or element of an array.

    Scalars keep their text in ``raw_value``; nested objects and arrays are
    held in ``body``. ``ty`` is ``NULL`` for nested values and for bare
    literals such as ``true`` that are written back verbatim.
    """

    label: str = ""
    raw_value: str = ""
    ty: JType = JType.NULL
    body: Optional["JStruct"] = None


def _infer_type(text: str) -> JType:
    kind = JType.INT
    for ch in text:
        if ch not in _NUMBER_CHARS:
            return JType.STRING
        if ch == ".":
            kind = JType.FLOAT
    return kind


@dataclass
class JValue:
    """A scalar looked up from a structure, with its inferred type."""

    raw_value: str = ""
    type: JType = JType.STRING

    @staticmethod
    def from_token(token: JToken) -> "JValue":
        """Build a value from a token, inferring its type from the raw text."""
        raw = token.raw_value
        return JValue(raw, _infer_type(raw) if raw else JType.STRING)


@dataclass
class JStruct:
    """A parsed object or array."""

    body: list[JToken] = field(default_factory=list)
    mode: JMode = JMode.OBJ

    def find_token(self, label: str) -> Optional[JToken]:
        """Return the first token with ``label``, or None."""
        return next((tok for tok in self.body if tok.label == label), None)

    def __getitem__(self, key: Union[str, int]) -> JValue:
        if isinstance(key, str):
            token = self.find_token(key)
            return JValue.from_token(token) if token is not None else JValue()
        if isinstance(key, int):
            if self.mode is JMode.ARR and 0 <= key < len(self.body):
                return JValue.from_token(self.body[key])
            return JValue()
        raise TypeError(f"keys must be str or int, not {type(key).__name__}")

    def format(self, tab: str = "") -> str:
        """Return an indented, human-readable rendering of the structure."""
        is_obj = self.mode is JMode.OBJ
        opener, closer = ("{", "}") if is_obj else ("[", "]")
        inner = tab + "\t"
        parts = [f"{tab}{opener}\n"]
        for tok in self.body:
            prefix = f"{inner}{tok.label}: " if is_obj else inner
            if tok.body is None:
                parts.append(f"{prefix}{tok.raw_value},\n")
            else:
                if is_obj:
                    parts.append(prefix)
                parts.append(tok.body.format(inner))
        parts.append(f"\n{tab}{closer}\n")
        return "".join(parts)

    def __str__(self) -> str:
        return self.format()


def unescape(text: str) -> str:
    """Resolve backslash escapes; a trailing lone backslash leaves ``text`` as is."""
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        esc = next(chars, None)
        if esc is None:
            return text
        if esc == "u":
            warnings.warn("unicode escapes are not supported", stacklevel=2)
            continue
        out.append(_SIMPLE_ESCAPES.get(esc, esc))
    return "".join(out)


def _is_escaped(code: str, idx: int) -> bool:
    count = 0
    j = idx - 1
    while j >= 0 and code[j] == "\\":
        count += 1
        j -= 1
    return count % 2 == 1


def remove_junk(code: str) -> str:
    """Strip whitespace outside strings and ``//`` and ``/* */`` comments."""
    out: list[str] = []
    in_comment = in_line = in_str = False
    i = 0
    n = len(code)
    while i < n:
        ch = code[i]
        if ch in _ALWAYS_SKIPPED or (ch == " " and not in_str):
            i += 1
            continue
        if ch == "\n":
            in_line = False
            i += 1
            continue
        if ch == '"' and not in_comment and not in_line and not _is_escaped(code, i):
            in_str = not in_str
        if not in_str:
            pair = code[i:i + 2]
            if pair == "/*" and not in_line:
                in_comment = True
                i += 2
                continue
            if pair == "//" and not in_comment:
                in_line = True
                i += 2
                continue
            if pair == "*/" and not in_line:
                if not in_comment:
                    raise JParseError("comment end without a matching start")
                in_comment = False
                i += 2
                continue
        if not in_comment and not in_line:
            out.append(ch)
        i += 1
    if in_comment:
        raise JParseError("unterminated block comment")
    return "".join(out)


def _with_escapes(text: str) -> Iterator[tuple[str, bool]]:
    run = 0
    for ch in text:
        yield ch, run % 2 == 1
        run = run + 1 if ch == "\\" else 0


def _split_chunks(data: str) -> list[str]:
    chunks: list[str] = []
    current: list[str] = []
    braces = brackets = 0
    in_str = False
    for ch, escaped in _with_escapes(data[1:]):
        if ch == "," and not braces and not brackets and not in_str:
            chunks.append("".join(current))
            current = []
            continue
        if not in_str:
            if ch == "{":
                braces += 1
            elif ch == "[":
                brackets += 1
            elif ch == "}":
                braces -= 1
                if braces < 0:
                    break
            elif ch == "]":
                brackets -= 1
                if brackets < 0:
                    break
        if ch == '"' and not escaped:
            in_str = not in_str
        current.append(ch)
    chunks.append("".join(current))
    return chunks


def _split_label(chunk: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    braces = brackets = 0
    in_str = False
    for ch, escaped in _with_escapes(chunk):
        if not in_str:
            if ch == "{":
                braces += 1
            elif ch == "}":
                braces -= 1
            elif ch == "[":
                brackets += 1
            elif ch == "]":
                brackets -= 1
        if ch == '"' and not escaped:
            in_str = not in_str
        if ch == ":" and braces <= 0 and brackets <= 0 and not in_str:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _make_token(label: str, raw: str) -> JToken:
    if not raw:
        raise JParseError("missing value")
    if raw[0] in "{[":
        return JToken(label=label, body=parse(raw, clean=False))
    if raw[0] == '"':
        if len(raw) < 2 or raw[-1] != '"':
            raise JParseError(f"unterminated string value: {raw}")
        return JToken(label, unescape(raw[1:-1]), JType.STRING)
    kind = _infer_type(raw)
    return JToken(label, raw, JType.NULL if kind is JType.STRING else kind)


def _object_entry(chunk: str) -> JToken:
    parts = _split_label(chunk)
    if len(parts) != 2:
        raise JParseError(f"expected one label and one value in: {chunk}")
    label, value = parts
    if len(label) < 2 or label[0] != '"' or label[-1] != '"':
        raise JParseError(f"label must be a quoted string: {label}")
    return _make_token(label[1:-1], value)


def parse(text: str, clean: bool = True) -> JStruct:
    """Parse an object or array; ``clean`` first strips comments and whitespace."""
    data = remove_junk(text) if clean else text
    if not data:
        raise JParseError("empty document")
    mode = {"{": JMode.OBJ, "[": JMode.ARR}.get(data[0])
    if mode is None:
        raise JParseError("document must start with '{' or '['")
    result = JStruct(mode=mode)
    chunks = _split_chunks(data)
    if chunks == [""]:
        return result
    for chunk in chunks:
        if mode is JMode.OBJ:
            result.body.append(_object_entry(chunk))
        else:
            result.body.append(_make_token("", chunk))
    return result


def _render_token(tok: JToken, with_label: bool) -> str:
    if tok.body is not None:
        value = generate_string(tok.body)
    elif tok.ty is JType.STRING:
        value = f'"{tok.raw_value}"'
    else:
        value = tok.raw_value
    return f'"{tok.label}":{value}' if with_label else value


def generate_string(json: JStruct) -> str:
    """Render a structure as compact text."""
    is_obj = json.mode is JMode.OBJ
    inner = ",".join(_render_token(tok, is_obj) for tok in json.body)
    return f"{{{inner}}}" if is_obj else f"[{inner}]"