"""Reader for Java-style ``.properties`` key/value files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator
import re


_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class PropertiesError(ValueError):
    """Raised when a properties document cannot be parsed."""


def load_properties(path: Path, encoding: str = "utf-8") -> dict[str, str]:
    with path.open("r", encoding=encoding) as handle:
        return parse_properties(handle.read())


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``text`` using the rules of ``java.util.Properties.load``.

    Later duplicates replace earlier ones. Keys and values are unescaped;
    ``\\uXXXX`` sequences are decoded.
    """

    properties: dict[str, str] = {}
    for line_number, logical_line in _logical_lines(text):
        key, value = _split_entry(logical_line)
        properties[_unescape(key, line_number)] = _unescape(value, line_number)
    return properties


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    pending: list[str] = []
    start_line = 0

    for index, raw in enumerate(_LINE_BREAK.split(text), start=1):
        line = raw.lstrip(_WHITESPACE)
        if not pending:
            if not line or line[0] in "#!":
                continue
            start_line = index

        if _ends_with_continuation(line):
            pending.append(line[:-1])
            continue

        pending.append(line)
        yield start_line, "".join(pending)
        pending = []

    if pending:
        yield start_line, "".join(pending)


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def _unescape(text: str, line_number: int) -> str:
    if "\\" not in text:
        return text

    out: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != "\\" or index + 1 >= length:
            out.append(char)
            index += 1
            continue

        marker = text[index + 1]
        if marker == "u":
            digits = text[index + 2 : index + 6]
            if len(digits) != 4:
                raise PropertiesError(f"Malformed \\uXXXX escape on line {line_number}.")
            try:
                out.append(chr(int(digits, 16)))
            except ValueError as exc:
                raise PropertiesError(
                    f"Malformed \\uXXXX escape on line {line_number}."
                ) from exc
            index += 6
            continue

        out.append(_ESCAPES.get(marker, marker))
        index += 2

    return "".join(out)
