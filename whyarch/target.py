"""Parsing of query targets such as ``file:line``, ``file:symbol`` and line ranges."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

__all__ = ["QueryKind", "QueryTarget", "TargetError", "parse_target"]

TARGET_USAGE = "target must use <file>:<line>, <file>:<symbol>, or <file> --lines <start:end>"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_QUALIFIED_SEPARATOR = re.compile(r"::|\.")


class TargetError(ValueError):
    """Raised when a query target or line range cannot be parsed."""


class QueryKind(Enum):
    """What part of a file a query points at."""

    LINE = "line"
    RANGE = "range"
    SYMBOL = "symbol"
    QUALIFIED_SYMBOL = "qualified_symbol"

    @property
    def is_symbol(self) -> bool:
        return self in (QueryKind.SYMBOL, QueryKind.QUALIFIED_SYMBOL)


@dataclass(frozen=True)
class QueryTarget:
    """A file together with the line, range or symbol being asked about."""

    path: Path
    start_line: int | None
    end_line: int | None
    symbol: str | None
    query_kind: QueryKind


def _parse_line_number(text: str, what: str) -> int:
    text = text.strip()
    if not text.isdigit():
        raise TargetError(f"{what} must be a positive integer, got {text!r}")
    value = int(text)
    if value < 1:
        raise TargetError(f"{what} must be 1-based and greater than zero")
    return value


def _parse_range(lines: str) -> tuple[int, int]:
    start_text, separator, end_text = lines.partition(":")
    if not separator:
        raise TargetError("--lines must use START:END form")
    start = _parse_line_number(start_text, "range start")
    end = _parse_line_number(end_text, "range end")
    if end < start:
        raise TargetError(f"range end {end} is before range start {start}")
    return start, end


def _symbol_kind(symbol: str) -> QueryKind:
    parts = _QUALIFIED_SEPARATOR.split(symbol)
    if not all(_IDENTIFIER.fullmatch(part) for part in parts):
        raise TargetError(f"invalid symbol {symbol!r}; {TARGET_USAGE}")
    return QueryKind.QUALIFIED_SYMBOL if len(parts) > 1 else QueryKind.SYMBOL


def parse_target(target: str, lines: str | None = None) -> QueryTarget:
    """Parse a positional target, optionally combined with an explicit ``START:END`` range."""
    target = target.strip()
    if not target:
        raise TargetError(TARGET_USAGE)

    if lines is not None:
        if ":" in target:
            raise TargetError("--lines cannot be combined with a <file>:<line> or <file>:<symbol> target")
        start, end = _parse_range(lines)
        return QueryTarget(Path(target), start, end, None, QueryKind.RANGE)

    path_text, separator, suffix = target.partition(":")
    suffix = suffix.strip()
    if not separator or not path_text or not suffix:
        raise TargetError(TARGET_USAGE)

    path = Path(path_text)
    if suffix.isdigit():
        line = _parse_line_number(suffix, "line")
        return QueryTarget(path, line, line, None, QueryKind.LINE)

    return QueryTarget(path, None, None, suffix, _symbol_kind(suffix))